# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

from dataclasses import dataclass
from typing import Iterable, Iterator

from .types import ListItem, ObjectType
from .helpers import _human_readable_size
from .log import _exc_summary

@dataclass(eq=False)
class SyncResult:
	'''
	The outcome of one local file or directory walked by `sync_directory()`.

	A `SyncResult` is added to the results list as soon as its item is found, then updated as the item is processed. The flags combine as follows:

		success                     : the directory was created, or the file upload call returned normally
		success and skipped         : the file upload call returned normally but nothing was transferred (e.g., `RemoteExists.SKIP`)
		skipped                     : the directory already existed
		skipped and skipped_by_rule : the item was rejected by a `Rule` and left alone
		failed                      : an exception was raised, which is stored in `exception`
	'''

	type            : ObjectType
	name            : str
	local_path      : str
	remote_path     : str
	size            : int = 0
	success         : bool = False
	skipped         : bool = False
	skipped_by_rule : bool = False
	failed          : bool = False
	exception       : Exception|None = None

	def to_list_item(self, remote_root:str|None = None) -> ListItem:
		'''
		Describe the remote side of this item, for evaluating `Rule`s. If `remote_root` is given, `full_name` is made relative to it, keeping a leading "/", so rules never see the segments of the root itself.

		>>> r = SyncResult(ObjectType.DIRECTORY, "css", "/src/css", "/var/www/css/")
		>>> r.to_list_item().full_name
		'/var/www/css/'
		>>> r.to_list_item("/var/www/").full_name
		'/css/'
		'''

		full_name = self.remote_path
		if remote_root is not None and full_name.startswith(remote_root):
			full_name = "/" + full_name[len(remote_root):].lstrip("/")
		return ListItem(full_name=full_name, name=self.name, type=self.type, size=self.size)

	@property
	def summary(self) -> str:
		'''
		One-line description of the outcome.

		>>> r = SyncResult(ObjectType.FILE, "a.txt", "/src/a.txt", "/dst/a.txt", 5, success=True)
		>>> r.summary
		'+ /dst/a.txt'
		>>> r.skipped = True
		>>> r.summary
		'= /dst/a.txt'
		'''

		if self.failed:
			return f"! {self.remote_path} ({_exc_summary(self.exception)})"
		if self.skipped_by_rule:
			return f"x {self.remote_path}"
		if self.skipped:
			return f"= {self.remote_path}"
		if self.success:
			return f"+ {self.remote_path}"
		return f"? {self.remote_path}"

def summarize(results:Iterable[SyncResult]) -> Iterator[str]:
	'''
	Yields right-aligned summary lines for a finished run.

	>>> rows = [
	...     SyncResult(ObjectType.DIRECTORY, "d", "/s/d", "/r/d/", success=True),
	...     SyncResult(ObjectType.FILE, "f", "/s/d/f", "/r/d/f", 2048, success=True),
	...     SyncResult(ObjectType.FILE, "g", "/s/d/g", "/r/d/g", 1, failed=True, exception=OSError("x")),
	... ]
	>>> for line in summarize(rows):
	...     print(line)
	Directories Created: 1
	     Files Uploaded: 1
	            Skipped: 0
	             Failed: 1
	        Transferred: 2 KB
	'''

	results = list(results)
	created     = sum(1 for r in results if r.type == ObjectType.DIRECTORY and r.success)
	uploaded    = [r for r in results if r.type == ObjectType.FILE and r.success and not r.skipped]
	skipped     = sum(1 for r in results if r.skipped)
	failed      = sum(1 for r in results if r.failed)
	transferred = sum(r.size for r in uploaded)

	lines = [
		f"Directories Created: {created}",
		f"Files Uploaded: {len(uploaded)}",
		f"Skipped: {skipped}",
		f"Failed: {failed}",
		f"Transferred: {_human_readable_size(transferred)}",
	]

	key_length = max(line.find(":") for line in lines)
	for line in lines:
		yield f"{line:>{len(line) + key_length - line.find(':')}}"
