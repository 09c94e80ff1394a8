# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

from .core import sync_directory
from .results import SyncResult, summarize
from .rules import Rule, ExtensionRule, NameRule, FolderNameRule, RegexRule, SizeRule, GlobRule, is_all_allowed
from .types import SyncMode, ObjectType, RemoteExists, Verify, ListItem, Progress
from .sftp import SFTPClient
from .local import LocalClient
from .errors import BlankArgumentError, VerificationError

__all__ = [
	"sync_directory",
	"SyncResult",
	"summarize",
	"Rule",
	"ExtensionRule",
	"NameRule",
	"FolderNameRule",
	"RegexRule",
	"SizeRule",
	"GlobRule",
	"is_all_allowed",
	"SyncMode",
	"ObjectType",
	"RemoteExists",
	"Verify",
	"ListItem",
	"Progress",
	"SFTPClient",
	"LocalClient",
	"BlankArgumentError",
	"VerificationError",
]
