# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
import posixpath
from pathlib import Path

from upsync import ListItem, ObjectType, RemoteExists, Verify

def create_file_structure(root:Path, structure:dict):
	'''Recursively creates a directory structure with files. A `dict` is a directory, a `str` is file content and `None` is an empty file.'''
	root.mkdir(parents=True, exist_ok=True)
	for name, content in structure.items():
		file_path = root / name
		if isinstance(content, dict):
			create_file_structure(file_path, content)
		elif content is None:
			file_path.touch()
		else:
			file_path.write_text(content)

def list_tree(root:Path) -> dict:
	'''Inverse of `create_file_structure()`.'''
	tree = {}
	for entry in sorted(os.scandir(root), key=lambda e: e.name):
		if entry.is_dir():
			tree[entry.name] = list_tree(Path(entry.path))
		else:
			tree[entry.name] = Path(entry.path).read_text() or None
	return tree

class FakeClient:
	'''
	In-memory remote filesystem that records every call made to it.

	`calls` holds `(method_name, path)` tuples in call order. Paths listed in `fail_upload`, `fail_mkdir` or `fail_delete` raise `OSError` from the matching method.
	'''

	def __init__(self, dirs=(), files=None):
		self.dirs  : set[str] = {"/"} | {self._norm(d) for d in dirs}
		self.files : dict[str, bytes] = {self._norm(k): v for k, v in (files or {}).items()}
		self.calls : list[tuple[str, str]] = []
		self.upload_args : list[dict] = []
		self.fail_upload : set[str] = set()
		self.fail_mkdir  : set[str] = set()
		self.fail_delete : set[str] = set()
		self.fail_listing : bool = False

	@staticmethod
	def _norm(path:str) -> str:
		return path.rstrip("/") or "/"

	@property
	def mutations(self) -> list[tuple[str, str]]:
		return [c for c in self.calls if c[0] in ("create_directory", "upload_file", "delete_file")]

	def directory_exists(self, path:str) -> bool:
		self.calls.append(("directory_exists", path))
		return self._norm(path) in self.dirs

	def create_directory(self, path:str) -> None:
		self.calls.append(("create_directory", path))
		if path in self.fail_mkdir:
			raise PermissionError(13, "Permission denied", path)
		path = self._norm(path)
		while path not in self.dirs:
			self.dirs.add(path)
			path = posixpath.dirname(path) or "/"

	def upload_file(self, local_path, remote_path, exists_mode=RemoteExists.SKIP, create_remote_dir=False, verify=Verify.NONE, progress=None) -> bool:
		self.calls.append(("upload_file", remote_path))
		self.upload_args.append(dict(
			local_path        = local_path,
			remote_path       = remote_path,
			exists_mode       = exists_mode,
			create_remote_dir = create_remote_dir,
			verify            = verify,
			progress          = progress,
		))
		if remote_path in self.fail_upload:
			raise ConnectionResetError(104, "Connection reset by peer", remote_path)
		if posixpath.dirname(remote_path) not in self.dirs and not create_remote_dir:
			raise FileNotFoundError(2, "No such directory", posixpath.dirname(remote_path))
		if exists_mode == RemoteExists.SKIP and remote_path in self.files:
			return False
		with open(local_path, "rb") as f:
			self.files[remote_path] = f.read()
		return True

	def get_listing(self, path:str, recursive:bool = False) -> list[ListItem]:
		self.calls.append(("get_listing", path))
		if self.fail_listing:
			raise ConnectionAbortedError(103, "Software caused connection abort", path)
		top = self._norm(path)
		prefix = top if top.endswith("/") else top + "/"
		items = []
		for d in sorted(self.dirs):
			if d.startswith(prefix) and (recursive or "/" not in d[len(prefix):]):
				items.append(ListItem(posixpath.join(path, d[len(prefix):]), posixpath.basename(d), ObjectType.DIRECTORY))
		for f, data in sorted(self.files.items()):
			if f.startswith(prefix) and (recursive or "/" not in f[len(prefix):]):
				items.append(ListItem(posixpath.join(path, f[len(prefix):]), posixpath.basename(f), ObjectType.FILE, len(data)))
		return items

	def delete_file(self, path:str) -> None:
		self.calls.append(("delete_file", path))
		if path in self.fail_delete:
			raise PermissionError(13, "Permission denied", path)
		del self.files[path]
