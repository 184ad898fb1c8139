import os
import sys
import argparse
import logging
from typing import NamedTuple, Optional, Sequence

from iphoneorganizer import (
    __version__,
    configure_logging,
    ConfigurationError,
    OrganizerError,
    RunSummary,
    SourceNotFound,
)
from iphoneorganizer.filelist import FileList
from iphoneorganizer.lean import lean, lean_positional
from iphoneorganizer.organize import organize

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_RUNTIME = 2


class Config(NamedTuple):
    source: str
    destination: str
    override_present: bool = False
    lean: bool = False
    positional_lean: bool = False
    dry_run: bool = False
    verbose: bool = False


# ------------------------------------------------------------
# CLI
# ------------------------------------------------------------

class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise ConfigurationError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="iphoneorganizer",
        description=(
            "Copy a phone backup whose folders are named YYYYMM__ into a "
            "DESTINATION/YYYY/MM tree, lowercasing file extensions. "
            "Files already present at DESTINATION are skipped unless --override is given."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("source", metavar="SOURCE", help="Backup folder containing YYYYMM__ subfolders")
    parser.add_argument("destination", metavar="DESTINATION", help="Root of the organized YYYY/MM tree")
    parser.add_argument("-o", "--override", dest="override_present", action="store_true", default=False,
                        help="Replace files already present at DESTINATION with the version from SOURCE")
    parser.add_argument("-s", "--skip", dest="override_present", action="store_false",
                        help="Skip files already present at DESTINATION (the default)")
    parser.add_argument("-l", "--lean", action="store_true", help="Remove files present at DESTINATION but not in SOURCE")
    parser.add_argument("--positional", dest="positional_lean", action="store_true",
                        help="Lean by comparing file names position by position instead of by relative path")
    parser.add_argument("--dry-run", action="store_true", help="Show what would change without touching any file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every entry")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config(argv: Optional[Sequence[str]] = None) -> Config:
    args = _build_parser().parse_args(argv)
    return Config(
        source=args.source,
        destination=args.destination,
        override_present=args.override_present,
        lean=args.lean,
        positional_lean=args.positional_lean,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )


def run(config: Config, summary: RunSummary | None = None) -> None:
    """Organize SOURCE into DESTINATION, then lean DESTINATION when asked to."""
    if not os.path.isdir(config.source):
        raise SourceNotFound(config.source)

    source_list = FileList.build(config.source)
    # file status has to be taken before the list is rewritten to destination paths
    file_indexes = source_list.file_indexes()

    organize(
        source_list,
        config.override_present,
        config.source,
        config.destination,
        dry_run=config.dry_run,
        verbose=config.verbose,
        summary=summary,
    )

    if not config.lean:
        return
    if not os.path.isdir(config.destination):
        logging.info("Nothing to lean, destination does not exist yet.", extra={"target": config.destination})
        return

    destination_files = FileList.build(config.destination).files()
    source_files = source_list.subset(file_indexes)
    leaner = lean_positional if config.positional_lean else lean
    leaner(
        destination_files,
        source_files,
        dry_run=config.dry_run,
        verbose=config.verbose,
        summary=summary,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        config = build_config(argv)
    except ConfigurationError as e:
        configure_logging(False)
        logging.error("Configuration error: %s", e, extra={"target": "CONFIG"})
        _build_parser().print_usage(sys.stderr)
        return EXIT_CONFIG

    configure_logging(config.verbose)

    s = RunSummary()
    s.set("override", config.override_present)
    s.set("lean", config.lean)
    s.set("positional_lean", config.positional_lean)
    s.set("dry_run", config.dry_run)

    if config.verbose:
        logging.debug(
            "Organizing %s into %s: override=%s, lean=%s, positional=%s, dry_run=%s",
            config.source,
            config.destination,
            config.override_present,
            config.lean,
            config.positional_lean,
            config.dry_run,
            extra={"target": "CONFIG"},
        )

    try:
        run(config, summary=s)
    except OrganizerError as e:
        logging.error("Application error: %s", e, extra={"target": type(e).__name__})
        return EXIT_RUNTIME

    found = s.get("found", 0)
    copied = s.get("copied", 0)
    overwritten = s.get("overwritten", 0)
    skipped_existing = s.get("skipped_existing", 0)
    folders_created = s.get("folders_created", 0)
    sidecars_flagged = s.get("sidecars_flagged", 0)
    deleted = s.get("deleted", 0)

    line1 = (
        f"Copied {copied + overwritten}/{found} files ({overwritten} replaced, "
        f"{skipped_existing} already present). Created {folders_created} folders in {s.duration_hms}."
    )
    line2 = (
        f"Images: {s.get('image', 0)}. Videos: {s.get('video', 0)}. Sidecars: {s.get('sidecar', 0)} "
        f"({sidecars_flagged} edit sidecars flagged). Other: {s.get('other', 0)}. Size: {s.hbytes('copied_bytes')}."
    )
    lines = [line1, line2]
    if config.lean:
        lines.append(f"Lean removed {deleted} stale files, freeing {s.hbytes('freed_bytes')}. Dry-run: {config.dry_run}.")

    s.emit_lines(
        lines,
        json_extra={
            "found": found,
            "copied": copied,
            "overwritten": overwritten,
            "skipped_existing": skipped_existing,
            "folders_created": folders_created,
            "sidecars_flagged": sidecars_flagged,
            "deleted": deleted,
            "source": config.source,
            "destination": config.destination,
        },
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
