import sys
import logging
from enum import Enum

# Summary of logging levels used in this package:
# DEBUG    = useful for finding bugs
# INFO     = item uploaded/created/deleted, or skipped as expected
# WARNING  = problem encountered but the item completed
# ERROR    = problem encountered and the item failed
# CRITICAL = Exception raised which halted the run entirely

def _exc_summary(e) -> str:
	'''
	Get a one-line summary of an `Exception`.

	>>> _exc_summary(FileNotFoundError(2, "No such file", "/www/a.txt"))
	'FileNotFoundError: /www/a.txt'
	>>> _exc_summary(PermissionError(13, "Permission denied"))
	'PermissionError: Permission denied'
	>>> _exc_summary(TimeoutError())
	'TimeoutError'
	'''

	error_type = type(e).__name__
	affected_file = getattr(e, "filename", None)
	error_message = getattr(e, "strerror", None)
	if isinstance(e, OSError) and affected_file:
		msg = f"{error_type}: {affected_file}"
	elif error_message:
		msg = f"{error_type}: {error_message}"
	else:
		msg = f"{error_type}: {e}" if str(e) else error_type
	return msg

class _RecordTag(Enum):
	HEADER = 1
	FOOTER = 2
	SYNC_OP = 3

	def dict(self):
		return {self.name: True}

class _DebugInfoFilter(logging.Filter):
	'''Logging filter that only allows DEBUG and INFO records to pass.'''
	def filter(self, record):
		return logging.DEBUG <= record.levelno <= logging.INFO

class _NonEmptyFilter(logging.Filter):
	'''Logging filter that only allows non-empty messages.'''
	def filter(self, record):
		return bool(str(record.msg).strip())

class _TagFilter(logging.Filter):
	'''Logging filter that does not allow messages with certain tags supplied in `extras`.'''
	def __init__(self, enabled:bool = True):
		super().__init__()
		self.enabled : bool = enabled
		self.hidden  : dict[_RecordTag, bool] = {}
	def __getitem__(self, k:_RecordTag) -> bool:
		return k in self.hidden and self.hidden[k]
	def __setitem__(self, k:_RecordTag, v) -> None:
		self.hidden[k] = v
	def filter(self, record) -> bool:
		if not self.enabled:
			return False
		return not any(self.hidden[k] and bool(getattr(record, k.name, False)) for k in self.hidden)

class _ConsoleFormatter(logging.Formatter):
	BASE_FORMAT = "%(message)s"

	def __init__(self, fmt=BASE_FORMAT, datefmt=None, style="%"):
		super().__init__(fmt, datefmt, style)

	def format(self, record):
		msg = super().format(record)
		extra_indent = "" if getattr(record, _RecordTag.SYNC_OP.name, False) else "  "
		if record.levelno == logging.DEBUG:
			body = msg.replace("\n", f"\n  {extra_indent}").rstrip(" ")
			msg = f"  {extra_indent}{body}"
		else:
			body = msg.replace("\n", f"\n{extra_indent}").rstrip(" ")
			msg = f"{extra_indent}{body}"
		return msg

class _LogFileFormatter(logging.Formatter):
	BASE_FORMAT = "%(asctime)s %(message)s"

	def __init__(self, fmt=BASE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", style="%"):
		super().__init__(fmt, datefmt, style)

	def format(self, record):
		msg = super().format(record)
		if record.levelno == logging.WARNING:
			msg = f"WARNING: {msg}"
		elif record.levelno == logging.ERROR:
			msg = f"ERROR: {msg}"
		elif record.levelno == logging.CRITICAL:
			msg = f"*** CRITICAL ***: {msg}"
		return msg

logger = logging.getLogger("upsync")

def setup_logger():
	'''Attach the console handlers to the package logger, once.'''

	if not logger.handlers:
		logger.setLevel(logging.INFO)
		handler_stdout = logging.StreamHandler(sys.stdout)
		handler_stderr = logging.StreamHandler(sys.stderr)
		handler_stdout.addFilter(_DebugInfoFilter())
		handler_stdout.setLevel(logging.DEBUG)
		handler_stderr.setLevel(logging.WARNING)
		handler_stdout.setFormatter(_ConsoleFormatter())
		handler_stderr.setFormatter(_ConsoleFormatter())
		logger.addHandler(handler_stdout)
		logger.addHandler(handler_stderr)

def add_file_handler(path, level:int = logging.DEBUG) -> logging.FileHandler:
	'''Also write the package log to `path`. The caller is responsible for closing the returned handler.'''

	handler = logging.FileHandler(path, encoding="utf-8")
	handler.setLevel(level)
	handler.setFormatter(_LogFileFormatter())
	handler.addFilter(_NonEmptyFilter())
	logger.addHandler(handler)
	return handler

def _console_handlers() -> list[logging.StreamHandler]:
	return [h for h in logger.handlers if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)]

def set_print_level(level:int) -> None:
	'''Set the level of the console handlers. The stderr handler never drops below WARNING, since DEBUG and INFO go to stdout.'''

	for handler in _console_handlers():
		if any(isinstance(f, _DebugInfoFilter) for f in handler.filters):
			handler.setLevel(level)
		else:
			handler.setLevel(max(logging.WARNING, level))

def tag_filter(*tags:_RecordTag) -> _TagFilter:
	'''Hide records carrying any of `tags` on every console handler of the package logger, replacing any tags hidden before.'''

	f = _TagFilter()
	for tag in tags:
		f[tag] = True
	for handler in _console_handlers():
		for old in [old for old in handler.filters if isinstance(old, _TagFilter)]:
			handler.removeFilter(old)
		handler.addFilter(f)
	return f

setup_logger()
