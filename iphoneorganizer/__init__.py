from .__version__ import __version__

import os
import datetime
import logging
from collections import defaultdict
from datetime import timedelta
from colorama import Fore, Style, init





# ========================================
# logs with color
# ========================================
init(autoreset=True)
class ColoredFormatter(logging.Formatter):
    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA
    }

    def format(self, record):
        if not hasattr(record, 'target'):
            record.target = '-'
        log_color = self.COLORS.get(record.levelname, '')
        log_format = (
            f"{log_color}[%(levelname)s]\t%(target)s:\t%(message)s{Style.RESET_ALL}"
        )
        formatter = logging.Formatter(log_format)
        return formatter.format(record)


def configure_logging(verbose: bool = False) -> None:
    """Install the colored handler on the root logger (DEBUG when verbose)."""
    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter())
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, handlers=[handler], force=True)




# ========================================
# definitions
# ========================================
EDIT_SIDECAR_MARKER = '.aae'
SIDECAR_EXTENSIONS = ['.aae', '.xmp', '.json']
IMAGE_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.heic', '.heif', '.gif', '.tiff', '.tif', '.dng', '.webp']
VIDEO_EXTENSIONS = ['.mov', '.mp4', '.m4v', '.3gp', '.avi']


def file_kind(ext: str) -> str:
    """Return 'image', 'video', 'sidecar' or 'other' for an extension (with or without dot)."""
    ext = ext.lower()
    if ext and not ext.startswith('.'):
        ext = '.' + ext
    if ext in IMAGE_EXTENSIONS:
        return 'image'
    if ext in VIDEO_EXTENSIONS:
        return 'video'
    if ext in SIDECAR_EXTENSIONS:
        return 'sidecar'
    return 'other'





# ========================================
# errors
# ========================================
class OrganizerError(Exception):
    """Base class for every error surfaced to the command line."""


class StructureReadFailure(OrganizerError):
    """A directory of the tree could not be enumerated."""


class InvalidEncoding(OrganizerError):
    """A path cannot be represented as text."""


class IOFailure(OrganizerError):
    """Copying, creating or deleting something on disk failed."""


class FolderNameError(OrganizerError):
    """A top-level source folder does not follow the YYYYMM + 2 filler convention."""


class SourceNotFound(OrganizerError):
    def __init__(self, path):
        super().__init__(f"Source doesn't exist or is not a directory: {path}")
        self.path = path


class ConfigurationError(OrganizerError):
    """Missing arguments or an unrecognized option."""





# ========================================
# summary helpers (end-of-run reporting)
# ========================================
def human_bytes(num_bytes: int) -> str:
    """Return human friendly size (e.g., '31.7 GB')."""
    try:
        num = float(num_bytes)
    except (TypeError, ValueError):
        return str(num_bytes)
    units = ['B', 'KB', 'MB', 'GB', 'TB', 'PB']
    for unit in units:
        if num < 1024.0 or unit == units[-1]:
            return f"{num:.1f} {unit}" if unit != 'B' else f"{int(num)} {unit}"
        num /= 1024.0


def format_duration(seconds: float) -> str:
    """Return HH:MM:SS for a duration in seconds."""
    if seconds is None:
        return "00:00:00"
    td = timedelta(seconds=int(round(seconds)))
    total_seconds = int(td.total_seconds())
    h = total_seconds // 3600
    m = (total_seconds % 3600) // 60
    s = total_seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


class RunSummary:
    """
    Lightweight tracker for end-of-run summaries.

    Usage:
        s = RunSummary()
        s.inc('copied')
        s.add_bytes('copied_bytes', os.path.getsize(path))
        s.emit_lines([f"Copied {s['copied']} files in {s.duration_hms}."])
    """
    def __init__(self):
        self._t0 = datetime.datetime.now()
        self._t1 = None
        self.counters = defaultdict(int)
        self.metrics = {}

    # timing
    @property
    def duration_s(self) -> float:
        end = self._t1 or datetime.datetime.now()
        return (end - self._t0).total_seconds()

    @property
    def duration_hms(self) -> str:
        return format_duration(self.duration_s)

    def stop(self):
        self._t1 = datetime.datetime.now()

    # counters & metrics
    def inc(self, key: str, n: int = 1):
        self.counters[key] += n

    def add_bytes(self, key: str, n: int):
        self.counters[key] += int(n)

    def set(self, key: str, value):
        self.metrics[key] = value

    def get(self, key: str, default=None):
        if key in self.counters:
            return self.counters[key]
        return self.metrics.get(key, default)

    def __getitem__(self, key: str):
        # convenience for counters/metrics
        if key in self.counters:
            return self.counters[key]
        return self.metrics.get(key)

    def hbytes(self, key: str) -> str:
        """human-readable bytes for a counter/metric name."""
        val = self[key]
        return human_bytes(int(val or 0))

    # emission
    def emit_lines(self, lines, level=logging.INFO, json_extra=None):
        """Log one or more human lines, then a compact payload line at DEBUG."""
        self.stop()
        for line in lines:
            logging.log(level, line, extra={'target': 'SUMMARY'})
        payload = {
            'duration_s': int(round(self.duration_s)),
            'counters': dict(self.counters),
            'metrics': self.metrics,
        }
        if json_extra:
            payload.update(json_extra)
        logging.debug("%s", payload, extra={'target': 'SUMMARY'})


def short_name(path: str) -> str:
    """Log target for a path: its base name, or the path itself for a root."""
    return os.path.basename(os.path.normpath(path)) or path
