# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
import shutil
import posixpath
from pathlib import Path

from .log import logger
from .errors import VerificationError
from .helpers import _ftp_path
from .types import ObjectType, ListItem, Progress, ProgressCallback, RemoteExists, Verify

class LocalClient:
	'''
	Implements the remote operations `sync_directory()` needs on a locally mounted filesystem, such as a network share or removable drive.

	Remote paths are "/"-separated and resolved against `root`, so "/" is `root` itself.
	'''

	CHUNK_SIZE = 1024 * 1024

	def __init__(self, root:str|os.PathLike, *, retry_attempts:int = 3):
		if retry_attempts < 1:
			raise ValueError("'retry_attempts' must be positive.")
		self.root           : Path = Path(root)
		self.retry_attempts : int = retry_attempts

	def _local(self, path:str) -> Path:
		parts = [p for p in _ftp_path(path).split("/") if p and p != "."]
		if ".." in parts:
			raise ValueError(f"Path escapes the root directory: {path}")
		return self.root.joinpath(*parts)

	def directory_exists(self, path:str) -> bool:
		return self._local(path).is_dir()

	def create_directory(self, path:str) -> None:
		self._local(path).mkdir(parents=True, exist_ok=True)

	def delete_file(self, path:str) -> None:
		self._local(path).unlink()

	def get_listing(self, path:str, recursive:bool = False) -> list[ListItem]:
		top = _ftp_path(path)
		items : list[ListItem] = []
		stack : list[tuple[str, Path]] = [(top, self._local(top))]
		while stack:
			remote_dir, local_dir = stack.pop()
			with os.scandir(local_dir) as entries:
				for entry in entries:
					full_name = posixpath.join(remote_dir, entry.name)
					if entry.is_symlink():
						kind = ObjectType.LINK
					elif entry.is_dir(follow_symlinks=False):
						kind = ObjectType.DIRECTORY
					else:
						kind = ObjectType.FILE
					size = entry.stat(follow_symlinks=False).st_size if kind == ObjectType.FILE else 0
					items.append(ListItem(full_name=full_name, name=entry.name, type=kind, size=size))
					if recursive and kind == ObjectType.DIRECTORY:
						stack.append((full_name, Path(entry.path)))
		return items

	def upload_file(self, local_path:str, remote_path:str, exists_mode:RemoteExists = RemoteExists.SKIP, create_remote_dir:bool = False, verify:Verify = Verify.NONE, progress:ProgressCallback|None = None) -> bool:
		'''Copy `local_path` to `remote_path`. See `SFTPClient.upload_file()` for the meaning of the arguments and return value.'''

		dst = self._local(remote_path)
		local_size = os.path.getsize(local_path)

		if create_remote_dir:
			dst.parent.mkdir(parents=True, exist_ok=True)
		elif not dst.parent.is_dir():
			raise FileNotFoundError(2, "Remote directory does not exist", str(dst.parent))

		offset = 0
		append = exists_mode in (RemoteExists.RESUME, RemoteExists.RESUME_NO_CHECK)
		if exists_mode in (RemoteExists.SKIP, RemoteExists.OVERWRITE, RemoteExists.RESUME) and dst.is_file():
			remote_size = dst.stat().st_size
			if exists_mode == RemoteExists.SKIP:
				logger.debug(f"Remote file exists, skipping: {remote_path}")
				return False
			if exists_mode == RemoteExists.RESUME:
				if remote_size == local_size:
					return False
				if remote_size < local_size:
					offset = remote_size
				else:
					append = False

		attempts = self.retry_attempts if verify & Verify.RETRY else 1
		verified = True
		for attempt in range(1, attempts + 1):
			self._copy(local_path, dst, remote_path, offset, append, local_size, progress)
			if verify == Verify.NONE:
				break
			verified = dst.stat().st_size == local_size
			if verified:
				break
			logger.warning(f"Verification failed ({attempt}/{attempts}): {remote_path}")
			append = False
			offset = 0

		if not verified:
			if verify & Verify.DELETE:
				dst.unlink()
			if verify & Verify.THROW:
				raise VerificationError("Uploaded file failed verification", remote_path)
			if verify & Verify.ONLY_VERIFY:
				return False
		return True

	def _copy(self, local_path:str, dst:Path, remote_path:str, offset:int, append:bool, total:int, progress:ProgressCallback|None) -> None:
		with open(local_path, "rb") as fsrc, open(dst, "ab" if append else "wb") as fdst:
			fsrc.seek(offset)
			if progress is None:
				shutil.copyfileobj(fsrc, fdst, self.CHUNK_SIZE)
			else:
				done = offset
				while chunk := fsrc.read(self.CHUNK_SIZE):
					fdst.write(chunk)
					done += len(chunk)
					progress(Progress(done * 100 / total if total else 100.0, done, total, local_path, remote_path))
		shutil.copystat(local_path, dst)
