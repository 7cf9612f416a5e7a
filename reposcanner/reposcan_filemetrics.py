"""
Line-count metrics for reposcanner.

Classifies each line of a file as blank, comment or code. Comment detection
is prefix based: ``//``, ``/*`` and ``*`` for C-style languages, ``#`` for
Python.
"""

from typing import Dict

from .reposcan_config import conf
from .reposcan_helpers import is_comment_line, read_text


def empty_file_metrics() -> Dict[str, int]:
    return {
        'lines': 0,
        'blankLines': 0,
        'commentLines': 0,
        'codeLines': 0,
    }


def calculate_line_metrics(content: str, file_path: str) -> Dict[str, int]:
    """
    Calculate line metrics for file content.

    Args:
        content: File content as string
        file_path: Path used to pick the comment syntax

    Returns:
        Dictionary with lines, blankLines, commentLines, codeLines counts
    """
    lines = content.split('\n')
    blank_lines = 0
    comment_lines = 0

    for line in lines:
        stripped = line.strip()
        if not stripped:
            blank_lines += 1
        elif is_comment_line(stripped, file_path):
            comment_lines += 1

    return {
        'lines': len(lines),
        'blankLines': blank_lines,
        'commentLines': comment_lines,
        'codeLines': len(lines) - blank_lines - comment_lines,
    }


def calculate_file_metrics(file_path: str) -> Dict[str, int]:
    """
    Calculate line metrics for a file on disk.

    Returns:
        Line metrics, all zero if the file cannot be read
    """
    content = read_text(file_path)
    if content is None:
        if conf.get('debug'):
            print(f'Warning: Could not read {file_path} for line metrics')
        return empty_file_metrics()
    return calculate_line_metrics(content, file_path)
