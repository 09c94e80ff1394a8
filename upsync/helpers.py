import os
import re
import posixpath

def _is_blank(value:str|None) -> bool:
	'''
	Returns `True` if `value` is `None`, empty, or only whitespace.

	>>> _is_blank(None), _is_blank(" \\t"), _is_blank("a")
	(True, True, False)
	'''

	return value is None or not str(value).strip()

def _ensure_postfix(value:str, postfix:str) -> str:
	'''
	Appends `postfix` to `value` unless it already ends with it.

	>>> _ensure_postfix("a/b", "/")
	'a/b/'
	>>> _ensure_postfix("a/b/", "/")
	'a/b/'
	'''

	return value if value.endswith(postfix) else value + postfix

def _ftp_path(path:str) -> str:
	r'''
	Canonicalizes a remote path: backslashes become slashes, repeated slashes are collapsed, "." segments are dropped and trailing slashes are removed.

	>>> _ftp_path("\\srv\\\\www//site/")
	'/srv/www/site'
	>>> _ftp_path("./site/./a")
	'site/a'
	>>> _ftp_path("/")
	'/'
	>>> _ftp_path("")
	'./'
	'''

	if not path or not path.strip():
		return "./"
	path = re.sub(r"/+", "/", path.replace("\\", "/"))
	parts = [p for p in path.split("/") if p != "."]
	path = "/".join(parts)
	if path == "":
		# the path was only "." segments
		return "./"
	if path != "/":
		path = path.rstrip("/") or "/"
	return path

def _remote_path(local_path:str, local_root:str, remote_root:str, *, is_dir:bool) -> str:
	r'''
	Maps `local_path`, which must be under `local_root`, onto `remote_root`. Both roots must already end with their separators. Directories get a trailing slash.

	>>> _remote_path("/home/me/site/img/a.png", "/home/me/site/", "/www/", is_dir=False)
	'/www/img/a.png'
	>>> _remote_path("/home/me/site/img", "/home/me/site/", "/www/", is_dir=True)
	'/www/img/'
	'''

	relpath = os.path.relpath(local_path, local_root)
	relpath = relpath.replace(os.sep, "/")
	if os.altsep:
		relpath = relpath.replace(os.altsep, "/")
	remote = posixpath.join(remote_root, relpath)
	if is_dir:
		remote = _ensure_postfix(remote, "/")
	return remote

def _casefold(path:str) -> str:
	'''
	The case-insensitive key of a remote path.

	>>> _casefold("/WWW/Index.HTML") == _casefold("/www/index.html")
	True
	'''

	return path.casefold()

def _human_readable_size(n:int) -> str:
	'''
	Translates `n` bytes into a human-readable size.

	>>> _human_readable_size(1023)
	'1023 bytes'
	>>> _human_readable_size(2.1 * 1024 * 1024)
	'2 MB'
	'''

	n = abs(n)
	units = ["bytes", "KB", "MB", "GB", "TB", "PB"]
	i = 0
	while n >= 1024 and i < len(units) - 1:
		n //= 1024
		i += 1
	return f"{round(n)} {units[i]}"
