# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
from typing import Sequence

from .config import _SyncConfig
from .errors import BlankArgumentError
from .helpers import _is_blank, _ensure_postfix, _ftp_path, _remote_path, _casefold
from .results import SyncResult
from .rules import Rule, is_all_allowed
from .types import _TransferClient, SyncMode, ObjectType, RemoteExists, Verify, ProgressCallback
from .log import logger, _RecordTag, _exc_summary

HEADER  = _RecordTag.HEADER.dict()
SYNC_OP = _RecordTag.SYNC_OP.dict()

def sync_directory(
	client      : _TransferClient,
	local_root  : str|os.PathLike,
	remote_root : str,
	mode        : SyncMode = SyncMode.UPDATE,
	exists_mode : RemoteExists = RemoteExists.SKIP,
	verify      : Verify = Verify.NONE,
	rules       : Sequence[Rule]|None = None,
	progress    : ProgressCallback|None = None,
) -> list[SyncResult]:
	'''
	Uploads the local directory `local_root` into `remote_root`.

	In `SyncMode.UPDATE`, missing directories are created and files are uploaded, and any extra files on the remote are preserved. In `SyncMode.MIRROR`, remote files that are not present locally are deleted afterwards, so the remote becomes a copy of the local directory. Remote directories are never deleted, even if they end up empty.

	Only files and directories allowed by every rule are synchronized. Rules see each item's remote path relative to `remote_root`, starting with "/". Rejected directories are not created, but their contents are still walked and judged on their own.

	All exceptions raised while creating a directory or uploading a file are caught and stored in the `SyncResult` of that item, and the walk continues. Failures while deleting extra remote files in `SyncMode.MIRROR` are ignored.

	Args
		client     (_TransferClient) : The connection to the remote filesystem, e.g., an `SFTPClient`.
		local_root (str or PathLike) : The local directory to upload. If it does not exist, an empty list is returned and the remote is not touched.
		remote_root            (str) : The remote directory to upload into. It is created if it does not exist.
		mode              (SyncMode) : Mirror or update, as explained above. (Defaults to `SyncMode.UPDATE`.)
		exists_mode   (RemoteExists) : What the client should do with files that already exist on the remote. (Defaults to `RemoteExists.SKIP`.)
		verify              (Verify) : Post-transfer verification options passed on to the client. (Defaults to `Verify.NONE`.)
		rules       (sequence[Rule]) : Only files and directories passing all these rules are synchronized. (Defaults to `None`.)
		progress          (callable) : Called with a `Progress` object while each file is transferred. (Defaults to `None`.)

	Returns
		A list with one `SyncResult` per local directory and file found, directories first. Never `None`.

	Raises
		BlankArgumentError : `local_root` or `remote_root` is missing or blank.
	'''

	if _is_blank(local_root):
		raise BlankArgumentError("local_root")
	if _is_blank(remote_root):
		raise BlankArgumentError("remote_root")

	logger.debug(f"sync_directory({local_root!r}, {remote_root!r}, {mode.name}, {exists_mode.name}, {verify!r}, {len(rules) if rules else 0} rules)")

	results : list[SyncResult] = []

	local_root  = _ensure_postfix(os.fspath(local_root), os.sep)
	remote_root = _ensure_postfix(_ftp_path(remote_root), "/")

	if not os.path.isdir(local_root):
		logger.debug(f"Local directory does not exist: {local_root}")
		return results

	config = _SyncConfig(
		client      = client,
		local_root  = local_root,
		remote_root = remote_root,
		mode        = mode,
		exists_mode = exists_mode,
		verify      = verify,
		rules       = list(rules) if rules else [],
		progress    = progress,
		logger      = logger,
	)

	config.logger.info("   " + config.local_root, extra=HEADER)
	config.logger.info("-> " + config.remote_root, extra=HEADER)
	config.logger.info("-" * (max(len(config.local_root), len(config.remote_root)) + 3), extra=HEADER)

	if not client.directory_exists(remote_root):
		client.create_directory(remote_root)

	local_dirs, local_files = _scan(config.local_root)
	should_exist = _ExistenceIndex()

	_reconcile_dirs(config, local_dirs, results)
	_reconcile_files(config, local_files, results, should_exist)

	if config.mirror:
		_mirror_cleanup(config, should_exist)

	return results

class _ExistenceIndex:
	'''The remote files a run means to keep, compared case-insensitively.'''

	def __init__(self):
		self._paths : dict[str, bool] = {}

	def add(self, remote_path:str) -> None:
		self._paths[_casefold(remote_path)] = True

	def __contains__(self, remote_path:object) -> bool:
		return isinstance(remote_path, str) and _casefold(remote_path) in self._paths

	def __len__(self) -> int:
		return len(self._paths)

def _scan(local_root:str) -> tuple[list[str], list[str]]:
	'''
	Lists every directory and file under `local_root`, recursively. Parents are listed before their children; the order of siblings is whatever the OS returns.
	'''

	dirs  : list[str] = []
	files : list[str] = []

	def onerror(e:OSError) -> None:
		logger.warning(f"Could not read directory: {_exc_summary(e)}")

	for dirpath, dirnames, filenames in os.walk(local_root, onerror=onerror):
		dirs.extend(os.path.join(dirpath, name) for name in dirnames)
		files.extend(os.path.join(dirpath, name) for name in filenames)
	return dirs, files

def _rejected(config:_SyncConfig, result:SyncResult) -> bool:
	'''Marks `result` as skipped if a rule rejects it. Rules are given paths relative to the remote root.'''

	if config.rules and not is_all_allowed(config.rules, result.to_list_item(config.remote_root)):
		result.skipped = True
		result.skipped_by_rule = True
		config.logger.debug(result.summary)
		return True
	return False

def _reconcile_dirs(config:_SyncConfig, local_dirs:list[str], results:list[SyncResult]) -> None:
	'''Creates every remote directory that is missing, so empty local directories are uploaded too.'''

	client = config.client
	for local_dir in local_dirs:
		result = SyncResult(
			type        = ObjectType.DIRECTORY,
			name        = os.path.basename(local_dir),
			local_path  = local_dir,
			remote_path = _remote_path(local_dir, config.local_root, config.remote_root, is_dir=True),
			size        = 0,
		)
		results.append(result)

		if _rejected(config, result):
			continue

		try:
			if not client.directory_exists(result.remote_path):
				client.create_directory(result.remote_path)
				result.success = True
				config.logger.info(result.summary, extra=SYNC_OP)
			else:
				result.skipped = True
				config.logger.debug(result.summary)
		except Exception as e:
			result.failed = True
			result.exception = e
			config.logger.error(result.summary, extra=SYNC_OP)

def _reconcile_files(config:_SyncConfig, local_files:list[str], results:list[SyncResult], should_exist:_ExistenceIndex) -> None:
	'''Uploads every file allowed by the rules. Parent directories must already exist on the remote.'''

	client = config.client
	for local_file in local_files:
		result = SyncResult(
			type        = ObjectType.FILE,
			name        = os.path.basename(local_file),
			local_path  = local_file,
			remote_path = _remote_path(local_file, config.local_root, config.remote_root, is_dir=False),
		)
		results.append(result)

		try:
			result.size = os.path.getsize(local_file)
		except OSError as e:
			# e.g., a broken symlink or a file deleted since the scan
			result.failed = True
			result.exception = e
			config.logger.error(result.summary, extra=SYNC_OP)
			continue

		if _rejected(config, result):
			continue

		# Registered before the upload so that a failed upload does not get its remote copy deleted in mirror mode.
		should_exist.add(result.remote_path)

		try:
			transferred = client.upload_file(
				result.local_path,
				result.remote_path,
				config.exists_mode,
				create_remote_dir = False,
				verify            = config.verify,
				progress          = config.progress,
			)
			result.success = True
			result.skipped = not transferred
			if transferred:
				config.logger.info(result.summary, extra=SYNC_OP)
			else:
				config.logger.debug(result.summary)
		except Exception as e:
			result.failed = True
			result.exception = e
			config.logger.error(result.summary, extra=SYNC_OP)

def _mirror_cleanup(config:_SyncConfig, should_exist:_ExistenceIndex) -> None:
	'''
	Deletes remote files under the remote root that are not in `should_exist`. Directories are left in place.

	This is best-effort: errors are logged at DEBUG level and otherwise dropped. They are not added to the results.
	'''

	client = config.client
	try:
		listing = client.get_listing(config.remote_root, recursive=True)
	except Exception as e:
		config.logger.debug(f"Cleanup skipped, could not list {config.remote_root}: {_exc_summary(e)}")
		return

	for entry in listing:
		if entry.type != ObjectType.FILE or entry.full_name in should_exist:
			continue
		try:
			client.delete_file(entry.full_name)
		except Exception as e:
			config.logger.debug(f"Ignored failure to delete {entry.full_name}: {_exc_summary(e)}")
			continue
		config.logger.info(f"- {entry.full_name}", extra=SYNC_OP)
