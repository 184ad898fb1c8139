import os
import logging

from iphoneorganizer import IOFailure, RunSummary
from iphoneorganizer.filelist import FileList

# ------------------------------------------------------------
# helpers
# ------------------------------------------------------------

def _key(path: str, root: str) -> str:
    return os.path.normpath(os.path.relpath(path, root)).casefold()


def _delete_file(path: str, *, dry_run: bool, verbose: bool, summary: RunSummary | None) -> None:
    name = os.path.basename(path)
    try:
        size = os.path.getsize(path)
        if verbose:
            logging.debug("%s %s", "Would delete" if dry_run else "Deleting", path, extra={"target": name})
        if not dry_run:
            os.remove(path)
    except OSError as e:
        raise IOFailure(f"Could not delete {path}: {e}") from e
    logging.info("%s stale file", "Would remove" if dry_run else "Removed", extra={"target": name})
    if summary:
        summary.inc("deleted")
        summary.add_bytes("freed_bytes", size)


# ------------------------------------------------------------
# core logic
# ------------------------------------------------------------

def lean(
    destination_list: FileList,
    source_list: FileList,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    summary: RunSummary | None = None,
) -> None:
    """
    Delete destination files that have no counterpart in the organized source list.

    Both lists hold files only and the source list must already be rewritten
    into destination form by organize(). Entries are matched by their path
    relative to the list root, case-insensitively.
    """
    if os.path.normcase(os.path.normpath(destination_list.root)) != os.path.normcase(os.path.normpath(source_list.root)):
        raise ValueError(
            f"Source list is rooted at {source_list.root!r}, not at the destination {destination_list.root!r}; "
            "organize it first."
        )

    keep = {_key(path, source_list.root) for path in source_list}
    for path in destination_list:
        if _key(path, destination_list.root) in keep or not os.path.isfile(path):
            continue
        _delete_file(path, dry_run=dry_run, verbose=verbose, summary=summary)


def lean_positional(
    destination_list: FileList,
    source_list: FileList,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    summary: RunSummary | None = None,
) -> None:
    """
    Walk both file lists side by side and delete destination files whose name
    differs from the source entry at the aligned position.

    Every deletion shifts the alignment by one, so a single missing source file
    is absorbed. Names are compared without their folders, case-insensitively.
    Only isolated gaps realign: a destination missing something the source has
    throws every later comparison off.
    """
    offset = 0
    for i, path in enumerate(destination_list):
        j = i - offset
        if j < len(source_list):
            matched = os.path.basename(source_list[j]).casefold() == os.path.basename(path).casefold()
        else:
            matched = False
        if matched or not os.path.isfile(path):
            continue
        _delete_file(path, dry_run=dry_run, verbose=verbose, summary=summary)
        offset += 1
