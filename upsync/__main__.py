# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import sys
import logging
import argparse

from .core import sync_directory
from .rules import Rule, ExtensionRule, FolderNameRule, GlobRule, SizeRule
from .results import summarize
from .sftp import SFTPClient
from .local import LocalClient
from .types import SyncMode, RemoteExists, Verify
from .log import logger, add_file_handler, set_print_level, tag_filter, _RecordTag

class _ArgParser:
	'''Argument parser for when this package is run with arguments instead of imported.'''

	exists_modes = {
		"skip"            : RemoteExists.SKIP,
		"overwrite"       : RemoteExists.OVERWRITE,
		"resume"          : RemoteExists.RESUME,
		"no-check"        : RemoteExists.NO_CHECK,
		"resume-no-check" : RemoteExists.RESUME_NO_CHECK,
	}

	verify_flags = {
		"retry"       : Verify.RETRY,
		"delete"      : Verify.DELETE,
		"throw"       : Verify.THROW,
		"only-verify" : Verify.ONLY_VERIFY,
	}

	parser = argparse.ArgumentParser(
		prog="upsync",
		description="Upload a local directory to an SFTP server or a mounted directory.",
		fromfile_prefix_chars="!",
	)

	parser.add_argument("local", help="The local directory to upload.")
	parser.add_argument("remote", help="The directory to upload into. Either an SFTP address, user[:password]@host[:port]/path, or a local path (e.g., a mounted network share).")

	parser.add_argument("-m", "--mirror", action="store_true", default=False, help="Delete remote files that are not present locally. Remote directories are never deleted.")
	parser.add_argument("-e", "--exists", choices=list(exists_modes), default="skip", help="What to do with files that already exist on the remote. (Defaults to \"skip\".)")
	parser.add_argument("-v", "--verify", choices=list(verify_flags), nargs="+", default=None, help="Check the size of each file after the upload, and what to do if it does not match. Options can be combined.")

	parser.add_argument("--include-ext", metavar="ext", nargs="+", default=None, help="Only upload files with these extensions.")
	parser.add_argument("--exclude-ext", metavar="ext", nargs="+", default=None, help="Do not upload files with these extensions.")
	parser.add_argument("--exclude-dir", metavar="name", nargs="+", default=None, help="Do not upload directories with these names, or anything inside them. Only folders below the remote directory are checked.")
	parser.add_argument("--include", metavar="pattern", nargs="+", default=None, help="Only upload files matching these glob patterns. Paths are relative to the remote directory, so \"/build/\" is its build folder. Patterns ending with \"/\" apply to directories.")
	parser.add_argument("--exclude", metavar="pattern", nargs="+", default=None, help="Do not upload files matching these glob patterns. Paths are relative to the remote directory, so \"/build/\" is its build folder. Patterns ending with \"/\" apply to directories.")
	parser.add_argument("-ic", "--ignore-case", action="store_true", default=False, help="Ignore case when matching --include and --exclude patterns.")
	parser.add_argument("--max-size", metavar="bytes", type=int, default=None, help="Do not upload files larger than this.")

	parser.add_argument("--timeout", metavar="seconds", type=float, default=10, help="Connection timeout. (Defaults to 10.)")

	parser.add_argument("--log", metavar="path", type=str, default=None, help="Also write the log to this file.")
	print_level = parser.add_mutually_exclusive_group()
	print_level.add_argument("-q", action="count", default=None, help="Shorthand for --print-level WARNING (-q) and --print-level CRITICAL (-qq).")
	print_level.add_argument("-p", "--print-level", type=str, default=None, help="Log level for printing to console.")
	parser.add_argument("--debug", action="store_true", default=False, help="Shorthand for --print-level DEBUG.")
	parser.add_argument("-nh", "--no-header", action="store_true", default=False, help="Skip logging header information.")
	parser.add_argument("-nf", "--no-footer", action="store_true", default=False, help="Skip logging footer information.")

	@staticmethod
	def parse(args:list[str]) -> argparse.Namespace:
		'''Convert command line flags into `sync_directory()` arguments.'''

		log_levels = {"DEBUG": logging.DEBUG, "INFO":logging.INFO, "WARNING":logging.WARNING, "WARN":logging.WARNING, "ERROR":logging.ERROR, "ERR":logging.ERROR, "CRITICAL":logging.CRITICAL, "CRIT":logging.CRITICAL}

		parsed_args = _ArgParser.parser.parse_args(args)

		if parsed_args.debug:
			parsed_args.print_level = logging.DEBUG
		elif parsed_args.q:
			if parsed_args.q == 1:
				parsed_args.print_level = logging.WARNING
			elif parsed_args.q == 2:
				parsed_args.print_level = logging.CRITICAL
			else:
				parsed_args.print_level = logging.CRITICAL+1
		elif parsed_args.print_level:
			try:
				parsed_args.print_level = log_levels[parsed_args.print_level.upper()]
			except KeyError:
				_ArgParser.parser.error(f"invalid log level: {parsed_args.print_level}")
		else:
			parsed_args.print_level = logging.INFO
		del parsed_args.q

		parsed_args.mode = SyncMode.MIRROR if parsed_args.mirror else SyncMode.UPDATE
		del parsed_args.mirror

		parsed_args.exists_mode = _ArgParser.exists_modes[parsed_args.exists]
		del parsed_args.exists

		verify = Verify.NONE
		for name in parsed_args.verify or []:
			verify |= _ArgParser.verify_flags[name]
		parsed_args.verify = verify

		rules : list[Rule] = []
		if parsed_args.include_ext:
			rules.append(ExtensionRule(True, parsed_args.include_ext))
		if parsed_args.exclude_ext:
			rules.append(ExtensionRule(False, parsed_args.exclude_ext))
		if parsed_args.exclude_dir:
			rules.append(FolderNameRule(False, parsed_args.exclude_dir))
		if parsed_args.include:
			rules.append(GlobRule(True, *parsed_args.include, ignore_case=parsed_args.ignore_case))
		if parsed_args.exclude:
			rules.append(GlobRule(False, *parsed_args.exclude, ignore_case=parsed_args.ignore_case))
		if parsed_args.max_size is not None:
			rules.append(SizeRule(SizeRule.Operator.LESS_THAN_OR_EQUAL, parsed_args.max_size))
		parsed_args.rules = rules
		for key in ("include_ext", "exclude_ext", "exclude_dir", "include", "exclude", "ignore_case", "max_size"):
			delattr(parsed_args, key)

		return parsed_args

def _connect(remote:str, timeout:float) -> tuple[SFTPClient|LocalClient, str]:
	'''
	Returns a client for `remote` and the remote root to upload into.

	An "sftp://" address, or one with a "@" before its first "/", is an SFTP server. Anything else is a local path, such as a mounted share.
	'''

	if remote.startswith("sftp://") or "@" in remote.split("/", 1)[0]:
		client = SFTPClient.create(remote, timeout=timeout)
		return client, client.path
	return LocalClient(remote), "/"

def main(args:list[str]|None = None) -> None:
	'''Parse the command line, run `sync_directory()` and exit with 0 if no item failed.'''

	client = None
	handler_file = None
	try:
		parsed_args = _ArgParser.parse(sys.argv[1:] if args is None else args)

		logger.setLevel(parsed_args.print_level if parsed_args.log is None else logging.DEBUG)
		set_print_level(parsed_args.print_level)
		hidden = []
		if parsed_args.no_header:
			hidden.append(_RecordTag.HEADER)
		if parsed_args.no_footer:
			hidden.append(_RecordTag.FOOTER)
		tag_filter(*hidden)
		if parsed_args.log:
			handler_file = add_file_handler(parsed_args.log)

		logger.debug(f"{parsed_args=}")

		client, remote_root = _connect(parsed_args.remote, parsed_args.timeout)

		results = sync_directory(
			client,
			parsed_args.local,
			remote_root,
			mode        = parsed_args.mode,
			exists_mode = parsed_args.exists_mode,
			verify      = parsed_args.verify,
			rules       = parsed_args.rules,
		)

		FOOTER = _RecordTag.FOOTER.dict()
		logger.info("-------", extra=FOOTER)
		for line in summarize(results):
			logger.info(line, extra=FOOTER)
		logger.info("", extra=FOOTER)

		sys.exit(1 if any(r.failed for r in results) else 0)

	except KeyboardInterrupt:
		sys.exit(1)
	except ConnectionError as e:
		logger.critical(e)
		sys.exit(1)
	except ValueError as e:
		logger.critical(e)
		sys.exit(1)
	except OSError as e:
		logger.critical(f"Could not access the remote root: {e}")
		sys.exit(1)
	except Exception:
		logger.critical("An unexpected error occurred.", exc_info=True)
		sys.exit(1)
	finally:
		if isinstance(client, SFTPClient):
			client.close()
		if handler_file is not None:
			logger.removeHandler(handler_file)
			handler_file.close()

if __name__ == "__main__":
	main(sys.argv[1:])
