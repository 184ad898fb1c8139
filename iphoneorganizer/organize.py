import os
import shutil
import logging

from iphoneorganizer import (
    EDIT_SIDECAR_MARKER,
    IOFailure,
    RunSummary,
    file_kind,
    short_name,
)
from iphoneorganizer.filelist import FileList
from iphoneorganizer.transform import split_extension, transform_path

# ------------------------------------------------------------
# helpers
# ------------------------------------------------------------

def _create_folder(dest: str, *, dry_run: bool, verbose: bool, summary: RunSummary | None) -> None:
    if os.path.isdir(dest):
        return
    if verbose:
        logging.debug("%s folder: %s", "Would create" if dry_run else "Creating", dest, extra={"target": short_name(dest)})
    if not dry_run:
        try:
            os.makedirs(dest, exist_ok=True)
        except OSError as e:
            raise IOFailure(f"Could not create folder {dest}: {e}") from e
    if summary:
        summary.inc("folders_created")


def _copy_file(
    src: str,
    dest: str,
    *,
    override_present: bool,
    dry_run: bool,
    verbose: bool,
    summary: RunSummary | None,
) -> None:
    name = os.path.basename(dest)

    if summary:
        summary.inc("found")
        summary.inc(file_kind(split_extension(name)[1]))

    if EDIT_SIDECAR_MARKER in dest.lower():
        logging.warning("Edit sidecar: %s", dest, extra={"target": name})
        if summary:
            summary.inc("sidecars_flagged")

    present = os.path.exists(dest)
    if present and not override_present:
        if verbose:
            logging.debug("Skipping, already present at destination.", extra={"target": name})
        if summary:
            summary.inc("skipped_existing")
        return

    try:
        size = os.path.getsize(src)
        if not dry_run:
            os.makedirs(os.path.dirname(dest) or ".", exist_ok=True)
            shutil.copy(src, dest)
    except OSError as e:
        raise IOFailure(f"Could not copy {src} to {dest}: {e}") from e

    if dry_run:
        action = "Would replace in" if present else "Would copy to"
    else:
        action = "Replaced in" if present else "Copied to"
    logging.info("%s %s", action, os.path.dirname(dest), extra={"target": name})
    if summary:
        summary.inc("overwritten" if present else "copied")
        summary.add_bytes("copied_bytes", size)


# ------------------------------------------------------------
# core logic
# ------------------------------------------------------------

def organize(
    file_list: FileList,
    override_present: bool,
    source: str,
    destination: str,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    summary: RunSummary | None = None,
) -> None:
    """
    Copy every entry of a source FileList into the YYYY/MM layout under 'destination'.

    The list is rewritten in place to hold destination paths. Every destination
    is computed before anything touches the disk, so a badly named folder fails
    the run up front. Existing destination files are skipped unless
    'override_present' is set. Any I/O error aborts the run as IOFailure; copies
    already made are kept.
    """
    plan = []
    for entry in file_list:
        dest, file_like = transform_path(entry, source, destination)
        plan.append((entry, dest, file_like))

    for i, (_, dest, _) in enumerate(plan):
        file_list[i] = dest
    if isinstance(file_list, FileList):
        file_list.root = destination

    for entry, dest, file_like in plan:
        if os.path.isdir(entry):
            _create_folder(dest, dry_run=dry_run, verbose=verbose, summary=summary)
            continue
        if not file_like and verbose:
            logging.debug("No extension, copying as a file.", extra={"target": short_name(entry)})
        _copy_file(
            entry,
            dest,
            override_present=override_present,
            dry_run=dry_run,
            verbose=verbose,
            summary=summary,
        )
