import os
import logging
from typing import Iterable, List, Tuple

from iphoneorganizer import StructureReadFailure, short_name

# ------------------------------------------------------------
# helpers
# ------------------------------------------------------------

def _read_dir(folder: str) -> List[Tuple[str, bool]]:
    """
    Read the immediate entries of 'folder' in directory-read order.
    Returns (path, descend) pairs; symlinked directories are not descended into.
    """
    try:
        with os.scandir(folder) as it:
            return [(entry.path, entry.is_dir(follow_symlinks=False)) for entry in it]
    except OSError as e:
        raise StructureReadFailure(f"Could not read directory structure of {folder}: {e}") from e


# ------------------------------------------------------------
# FileList
# ------------------------------------------------------------

class FileList(list):
    """
    Ordered paths of one tree, the root itself first.

    Entries follow depth-first directory-read order: a directory's children come
    right after it and before the subtrees of its later siblings. The list is
    rewritten in place by organize(); 'root' tracks the first entry.
    """

    def __init__(self, root: str, entries: Iterable[str] = ()):
        super().__init__(entries)
        self.root = root

    @classmethod
    def build(cls, root: str) -> "FileList":
        if not os.path.isdir(root):
            raise StructureReadFailure(f"Not a readable directory: {root}")

        file_list = cls(root, [root])
        # one pending listing per open directory, innermost last
        pending = [iter(_read_dir(root))]
        while pending:
            item = next(pending[-1], None)
            if item is None:
                pending.pop()
                continue
            path, descend = item
            file_list.append(path)
            if descend:
                pending.append(iter(_read_dir(path)))

        logging.debug("Listed %d entries", len(file_list), extra={"target": short_name(root)})
        return file_list

    def file_indexes(self) -> List[int]:
        """Indexes of entries that are regular files right now."""
        return [i for i, path in enumerate(self) if os.path.isfile(path)]

    def subset(self, indexes: Iterable[int]) -> "FileList":
        return FileList(self.root, [self[i] for i in indexes])

    def files(self) -> "FileList":
        return self.subset(self.file_indexes())
