# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

from dataclasses import dataclass
from logging import Logger
from typing import Sequence

from .rules import Rule
from .types import _TransferClient, SyncMode, RemoteExists, Verify, ProgressCallback

@dataclass(frozen=True)
class _SyncConfig:
	'''Pass the normalized arguments of `sync_directory()` to its passes as a read-only data structure.'''

	client      : _TransferClient
	local_root  : str # ends with os.sep
	remote_root : str # canonical, ends with "/"
	mode        : SyncMode
	exists_mode : RemoteExists
	verify      : Verify
	rules       : Sequence[Rule]
	progress    : ProgressCallback|None

	logger      : Logger

	@property
	def mirror(self) -> bool:
		return self.mode == SyncMode.MIRROR
