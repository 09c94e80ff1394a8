# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import re
import glob
import posixpath
from enum import Enum
from typing import Iterable

from .types import ListItem, ObjectType
from .helpers import _ensure_postfix

def is_all_allowed(rules:Iterable["Rule"]|None, item:ListItem) -> bool:
	'''
	Returns `True` if every rule allows `item`. No rules means everything is allowed.

	>>> item = ListItem("/www/a.tmp", "a.tmp", ObjectType.FILE, 3)
	>>> is_all_allowed(None, item)
	True
	>>> is_all_allowed([ExtensionRule(False, ["tmp"])], item)
	False
	'''

	if not rules:
		return True
	return all(rule.is_allowed(item) for rule in rules)

class Rule:
	'''Abstract base class for all rules supplied to `sync_directory()`.'''

	def is_allowed(self, item:ListItem) -> bool:
		'''(Abstract method) Returns `True` if `item` should be synchronized.'''

		raise NotImplementedError()

class ExtensionRule(Rule):
	'''Allows or rejects files by extension. Directories always pass.'''

	def __init__(self, whitelist:bool, extensions:Iterable[str]):
		'''
		Args
			whitelist           (bool) : If `True`, only files with one of `extensions` pass. If `False`, files with one of `extensions` are rejected.
			extensions (iterable[str]) : Extensions with or without the leading dot. Compared case-insensitively.
		'''

		self.whitelist  = whitelist
		self.extensions = {e.lstrip(".").lower() for e in extensions}

	def is_allowed(self, item:ListItem) -> bool:
		if item.type != ObjectType.FILE:
			return True
		ext = posixpath.splitext(item.name)[1].lstrip(".").lower()
		return (ext in self.extensions) == self.whitelist

class NameRule(Rule):
	'''Allows or rejects files by exact name. Directories always pass.'''

	def __init__(self, whitelist:bool, names:Iterable[str]):
		self.whitelist = whitelist
		self.names     = set(names)

	def is_allowed(self, item:ListItem) -> bool:
		if item.type != ObjectType.FILE:
			return True
		return (item.name in self.names) == self.whitelist

class FolderNameRule(Rule):
	'''
	Allows or rejects entries by the names of the folders in their path. For a file, its parent folders are checked. For a directory, the directory itself and its parents are checked.

	>>> rule = FolderNameRule(False, [".git"])
	>>> rule.is_allowed(ListItem("/www/.git/", ".git", ObjectType.DIRECTORY))
	False
	>>> rule.is_allowed(ListItem("/www/.git/HEAD", "HEAD", ObjectType.FILE, 1))
	False
	>>> rule.is_allowed(ListItem("/www/index.html", "index.html", ObjectType.FILE, 1))
	True
	'''

	def __init__(self, whitelist:bool, names:Iterable[str]):
		self.whitelist = whitelist
		self.names     = set(names)

	def is_allowed(self, item:ListItem) -> bool:
		path = item.full_name.rstrip("/")
		if item.type == ObjectType.FILE:
			path = posixpath.dirname(path)
		elif item.type != ObjectType.DIRECTORY:
			return True
		segments = [s for s in path.split("/") if s]
		if any(s in self.names for s in segments):
			return self.whitelist
		return not self.whitelist

class RegexRule(Rule):
	'''Allows or rejects files whose name (or full path) matches a regular expression. Directories always pass.'''

	def __init__(self, whitelist:bool, pattern:str|re.Pattern, *, whole_path:bool = False):
		self.whitelist  = whitelist
		self.matcher    = re.compile(pattern)
		self.whole_path = whole_path

	def is_allowed(self, item:ListItem) -> bool:
		if item.type != ObjectType.FILE:
			return True
		subject = item.full_name if self.whole_path else item.name
		return bool(self.matcher.search(subject)) == self.whitelist

class SizeRule(Rule):
	'''
	Allows files whose size satisfies a comparison. Directories always pass.

	>>> rule = SizeRule(SizeRule.Operator.WITHIN_RANGE, 10, 20)
	>>> rule.is_allowed(ListItem("/a", "a", ObjectType.FILE, 15)), rule.is_allowed(ListItem("/b", "b", ObjectType.FILE, 25))
	(True, False)
	'''

	class Operator(Enum):
		LESS_THAN             = 0
		LESS_THAN_OR_EQUAL    = 1
		GREATER_THAN          = 2
		GREATER_THAN_OR_EQUAL = 3
		EQUAL_TO              = 4
		NOT_EQUAL_TO          = 5
		WITHIN_RANGE          = 6
		OUTSIDE_RANGE         = 7

	def __init__(self, operator:"SizeRule.Operator", x:int, y:int|None = None):
		if operator in (SizeRule.Operator.WITHIN_RANGE, SizeRule.Operator.OUTSIDE_RANGE):
			if y is None:
				raise ValueError(f"Operator {operator.name} needs a second size")
			if y < x:
				raise ValueError(f"Size range is reversed: {x} > {y}")
		self.operator = operator
		self.x        = x
		self.y        = y

	def is_allowed(self, item:ListItem) -> bool:
		if item.type != ObjectType.FILE:
			return True
		size = item.size
		Op = SizeRule.Operator
		match self.operator:
			case Op.LESS_THAN:
				return size < self.x
			case Op.LESS_THAN_OR_EQUAL:
				return size <= self.x
			case Op.GREATER_THAN:
				return size > self.x
			case Op.GREATER_THAN_OR_EQUAL:
				return size >= self.x
			case Op.EQUAL_TO:
				return size == self.x
			case Op.NOT_EQUAL_TO:
				return size != self.x
			case Op.WITHIN_RANGE:
				return self.x <= size <= self.y
			case Op.OUTSIDE_RANGE:
				return size < self.x or size > self.y
		raise ValueError(f"Unknown operator: {self.operator}")

class GlobRule(Rule):
	'''
	Allows or rejects entries by matching their path against glob patterns. During a sync the path is relative to the remote root, e.g. "/css/main.css".

	Patterns ending with "/" apply to directories only; other patterns apply to files only. An entry of a kind no pattern applies to always passes. Patterns starting with "/" are anchored to the start of the path. Other patterns may match at any depth, so "*.tmp" is equivalent to "**/*.tmp".

	>>> rule = GlobRule(False, "*.tmp", "cache/", "/build/")
	>>> rule.is_allowed(ListItem("/a/b.tmp", "b.tmp", ObjectType.FILE, 1)), rule.is_allowed(ListItem("/b.tmp", "b.tmp", ObjectType.FILE, 1))
	(False, False)
	>>> rule.is_allowed(ListItem("/x/cache/", "cache", ObjectType.DIRECTORY))
	False
	>>> rule.is_allowed(ListItem("/build/", "build", ObjectType.DIRECTORY)), rule.is_allowed(ListItem("/src/build/", "build", ObjectType.DIRECTORY))
	(False, True)
	>>> rule.is_allowed(ListItem("/b.txt", "b.txt", ObjectType.FILE, 1))
	True
	'''

	def __init__(self, whitelist:bool, *patterns:str, ignore_case:bool = False):
		if not patterns:
			raise ValueError("Missing required argument: patterns")
		self.whitelist     = whitelist
		self.ignore_case   = ignore_case
		self._dir_matchers  : list[re.Pattern] = []
		self._file_matchers : list[re.Pattern] = []
		for pattern in patterns:
			self._add(pattern)

	def _add(self, pattern:str) -> None:
		if not pattern.strip("/"):
			raise ValueError(f"Pattern matches nothing: {pattern!r}")
		glob_pattern = re.sub(r"/+", "/", pattern.replace("\\", "/"))
		if glob_pattern.startswith("/"):
			glob_pattern = glob_pattern[1:]
		elif not glob_pattern.startswith("**"):
			glob_pattern = "**/" + glob_pattern
		regex = glob.translate(glob_pattern, recursive=True, include_hidden=True)
		matcher = re.compile(regex, flags=re.IGNORECASE if self.ignore_case else 0)
		if glob_pattern.endswith("/"):
			self._dir_matchers.append(matcher)
		else:
			self._file_matchers.append(matcher)

	def is_allowed(self, item:ListItem) -> bool:
		# matched without the leading "/", which the compiled patterns do not expect
		path = item.full_name.lstrip("/")
		if item.type == ObjectType.DIRECTORY:
			matchers = self._dir_matchers
			path = _ensure_postfix(path, "/")
		elif item.type == ObjectType.FILE:
			matchers = self._file_matchers
		else:
			return True
		if not matchers:
			return True
		return any(m.match(path) for m in matchers) == self.whitelist
