import os
import re
from typing import Tuple

from iphoneorganizer import FolderNameError, InvalidEncoding

# YYYYMM followed by exactly two filler characters, e.g. 202211__
DATE_FOLDER_PATTERN = re.compile(r"^(\d{4})(0[1-9]|1[0-2])(.{2})$", re.DOTALL)


def _ensure_text(path) -> str:
    """Return 'path' as str, raising InvalidEncoding if it is not representable as text."""
    path = os.fspath(path)
    if isinstance(path, bytes):
        try:
            return path.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncoding(f"Path is not valid UTF-8: {path!r}") from e
    try:
        path.encode("utf-8")
    except UnicodeEncodeError as e:
        # undecodable bytes smuggled in through surrogateescape
        raise InvalidEncoding(f"Path is not valid UTF-8: {path!r}") from e
    return path


def split_extension(name: str) -> Tuple[str, str]:
    """
    Split a file name at its last dot: 'IMG_0001.JPG' -> ('IMG_0001', 'JPG').
    Names without a dot, names whose only dot leads ('.DS_Store') and names
    ending in a dot have no extension.
    """
    idx = name.rfind(".")
    if idx <= 0 or idx == len(name) - 1:
        return name, ""
    return name[:idx], name[idx + 1:]


def parse_date_folder(name: str) -> Tuple[str, str]:
    """'202211__' -> ('2022', '11'). Raises FolderNameError for anything else."""
    match = DATE_FOLDER_PATTERN.match(name)
    if not match:
        raise FolderNameError(f"Folder name does not follow the YYYYMM__ convention: {name!r}")
    return match.group(1), match.group(2)


def _relative_to(entry: str, source: str) -> str:
    if entry == source:
        return ""
    prefix = source if source.endswith(os.sep) else source + os.sep
    if not entry.startswith(prefix):
        raise ValueError(f"{entry!r} is not inside {source!r}")
    return entry[len(prefix):]


def transform_path(entry, source: str, destination: str) -> Tuple[str, bool]:
    """
    Compute the destination of a source tree entry.

    SOURCE/202211__/IMG_0001.JPG becomes DESTINATION/2022/11/IMG_0001.jpg: the
    source root is swapped for the destination root, the top-level YYYYMM__
    folder is split into YYYY/MM and only the extension is lowercased.

    Returns (destination path, file_like) where file_like tells whether the
    final component carries an extension.
    """
    entry = _ensure_text(entry)
    rel = _relative_to(entry, source)
    if not rel:
        return destination, False

    parts = rel.split(os.sep)
    try:
        year, month = parse_date_folder(parts[0])
    except FolderNameError as e:
        raise FolderNameError(f"{e} (in {entry})") from None

    ext = ""
    if len(parts) > 1:
        stem, ext = split_extension(parts[-1])
        if ext:
            parts[-1] = f"{stem}.{ext.lower()}"

    return os.path.join(destination, year, month, *parts[1:]), bool(ext)
