"""
Heuristic cyclomatic complexity for reposcanner.

Counts decision points in raw source text: branch and loop keywords plus
the ternary, logical AND and logical OR operators. The text is not parsed,
so the score is only a rough, language-naive indicator.

    complexity = 1 + #if + #else-if + #while + #for + #case + #catch
                   + #ternary + #&& + #||
"""

import re
from typing import Dict, Iterable, List, Pattern

from .reposcan_config import conf
from .reposcan_constants import COMPLEXITY_KEYWORD_PATTERNS, COMPLEXITY_OPERATOR_PATTERNS
from .reposcan_helpers import read_text


def _keyword_pattern(keyword: str) -> Pattern:
    # Keywords must not touch identifier characters on either side
    return re.compile(r'(?<![\w$])' + keyword + r'(?![\w$])')


DECISION_PATTERNS: List[Pattern] = (
    [_keyword_pattern(k) for k in COMPLEXITY_KEYWORD_PATTERNS]
    + [re.compile(op) for op in COMPLEXITY_OPERATOR_PATTERNS]
)


def count_decision_points(content: str) -> int:
    """Count non-overlapping matches of every decision pattern in content."""
    return sum(len(pattern.findall(content)) for pattern in DECISION_PATTERNS)


def score_complexity(content: str) -> int:
    """
    Score the complexity of source text.

    Args:
        content: Raw file content

    Returns:
        1 plus the number of decision points
    """
    return 1 + count_decision_points(content)


def calculate_cyclomatic_complexity(file_path: str) -> int:
    """
    Score the complexity of a file.

    Args:
        file_path: Path of the file to read

    Returns:
        Complexity score, or 0 if the file cannot be read
    """
    content = read_text(file_path)
    if content is None:
        if conf.get('debug'):
            print(f'Warning: Could not read {file_path} for complexity analysis')
        return 0
    return score_complexity(content)


def calculate_complexities(file_paths: Iterable[str]) -> Dict[str, int]:
    """Score every file, keyed by path."""
    return {path: calculate_cyclomatic_complexity(path) for path in file_paths}
