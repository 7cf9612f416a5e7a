"""
Helper utility functions for reposcanner.

Path filtering, comment detection, file reading and rounding helpers shared
by the collectors, analyzers and reporters.
"""

import fnmatch
import os
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from .reposcan_constants import COMMENT_PREFIXES_BY_EXTENSION


_TWO_PLACES = Decimal('0.01')


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round a float half-up (not banker's rounding) to the given decimal places.

    Args:
        value: Value to round
        places: Number of decimal places

    Returns:
        Rounded value as float
    """
    quantum = _TWO_PLACES if places == 2 else Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> float:
    """
    Compute ``100 * part / whole`` rounded half-up to 2 decimals.

    Division happens in Decimal so values such as 3.125 are not skewed
    by binary floating point before rounding. Returns 0.0 when whole is 0.
    """
    if whole <= 0:
        return 0.0
    value = Decimal(part * 100) / Decimal(whole)
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def average(values: Iterable[float]) -> float:
    """Mean of values rounded half-up to 2 decimals, 0.0 for no values."""
    values = list(values)
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values))


def get_extension(filename: str) -> str:
    """
    Get the lower-cased extension of a filename without the leading dot.

    Example:
        get_extension('src/App.TSX') -> 'tsx'
    """
    basename = os.path.basename(filename)
    if '.' not in basename:
        return ''
    return basename.rsplit('.', 1)[1].lower()


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Strip whitespace and leading dots, lower-case, drop empties."""
    normalized = []
    for ext in extensions:
        ext = ext.strip().lstrip('.').lower()
        if ext:
            normalized.append(ext)
    return normalized


def split_csv_option(value: str) -> List[str]:
    """Split a comma-separated command-line value into trimmed items."""
    return [item.strip() for item in value.split(',') if item.strip()]


def is_excluded_path(relative_path: str, exclude_paths: Iterable[str]) -> bool:
    """
    Check if any component of a relative path matches an exclude entry.

    Entries match a component exactly or as an fnmatch glob, so both
    ``node_modules`` and ``*.min`` style entries work.

    Args:
        relative_path: '/'-separated path relative to the repository root
        exclude_paths: Exclude entries

    Returns:
        True if the path should be skipped
    """
    parts = [p for p in relative_path.replace(os.sep, '/').split('/') if p]
    for pattern in exclude_paths:
        for part in parts:
            if part == pattern or fnmatch.fnmatch(part, pattern):
                return True
    return False


def should_include_file(relative_path: str, extensions: Iterable[str], exclude_paths: Iterable[str]) -> bool:
    """
    Check if a file should be included in the analysis.

    Args:
        relative_path: Path relative to the repository root
        extensions: Allowed extensions without dots
        exclude_paths: Exclude entries (see is_excluded_path)

    Returns:
        True if the file should be included, False otherwise
    """
    if get_extension(relative_path) not in normalize_extensions(extensions):
        return False
    return not is_excluded_path(relative_path, exclude_paths)


def is_comment_line(stripped_line: str, file_path: str) -> bool:
    """Check if an already stripped line is a comment for the file's language."""
    prefixes = COMMENT_PREFIXES_BY_EXTENSION.get(get_extension(file_path))
    if not prefixes:
        return False
    return stripped_line.startswith(prefixes)


def read_text(file_path: str) -> Optional[str]:
    """
    Read a file as UTF-8 text, dropping a leading byte order mark.

    Returns:
        File content, or None if the file is missing, unreadable or not UTF-8
    """
    try:
        with open(file_path, 'r', encoding='utf-8-sig', newline='') as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        return None


def format_duration(seconds: float) -> str:
    """
    Format a duration in seconds to a human-readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "1m 23s")
    """
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = seconds % 60
        return f"{hours}h {minutes}m {secs:.0f}s"
