# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

from enum import Enum, Flag
from dataclasses import dataclass
from typing import Protocol, Callable, runtime_checkable

class SyncMode(Enum):
	'''How `sync_directory()` treats remote files that are not present locally.'''

	MIRROR = 1 # delete remote-only files
	UPDATE = 2 # keep remote-only files

class ObjectType(Enum):
	FILE      = 0
	DIRECTORY = 1
	LINK      = 2

class RemoteExists(Enum):
	'''What a transfer client should do when the destination file already exists.'''

	NO_CHECK        = 0 # do not check, just upload (fastest)
	SKIP            = 1 # skip the file
	OVERWRITE       = 2 # replace the remote file
	RESUME          = 3 # append the missing tail of the local file
	RESUME_NO_CHECK = 4 # append without checking what the remote already has

class Verify(Flag):
	'''Post-transfer verification options. Flags may be combined, e.g. `Verify.RETRY|Verify.THROW`.'''

	NONE        = 0
	RETRY       = 1 # upload again if verification fails
	DELETE      = 2 # delete the remote file if verification fails
	THROW       = 4 # raise `VerificationError` if verification fails
	ONLY_VERIFY = 8 # report a transfer as successful only if it verified

@dataclass(frozen=True)
class ListItem:
	'''A remote filesystem entry, as reported by a listing and as presented to `Rule`s.'''

	full_name : str
	name      : str
	type      : ObjectType
	size      : int = 0

@dataclass(frozen=True)
class Progress:
	'''Progress of a single file transfer.'''

	progress          : float # percent complete, or -1 if unknown
	transferred_bytes : int
	total_bytes       : int
	local_path        : str
	remote_path       : str

ProgressCallback = Callable[[Progress], None]

@runtime_checkable
class _TransferClient(Protocol):
	'''Protocol class representing the remote operations `sync_directory()` needs.'''

	def directory_exists(self, path:str) -> bool:
		...

	def create_directory(self, path:str) -> None:
		...

	def upload_file(self, local_path:str, remote_path:str, exists_mode:RemoteExists = RemoteExists.SKIP, create_remote_dir:bool = False, verify:Verify = Verify.NONE, progress:ProgressCallback|None = None) -> bool:
		...

	def get_listing(self, path:str, recursive:bool = False) -> list[ListItem]:
		...

	def delete_file(self, path:str) -> None:
		...
