"""
Constants for reposcanner.

Centralizes file extension defaults, exclude lists, bug-fix keywords and the
parameters of the duplication and complexity heuristics.
"""

from typing import Dict, List, Tuple


# ============================================================================
# FILE DISCOVERY DEFAULTS
# ============================================================================
# Extensions are stored without the leading dot, matching the `-e` option.

DEFAULT_FILE_EXTENSIONS: List[str] = [
    'js', 'ts', 'jsx', 'tsx', 'py', 'java', 'cpp', 'c', 'go', 'rs',
]

DEFAULT_EXCLUDE_PATHS: List[str] = [
    'node_modules', '.git', 'dist', 'build', '.cache',
]

DEFAULT_BUG_KEYWORDS: List[str] = [
    'fix', 'bug', 'patch', 'issue', 'error', 'correct', 'resolve',
]


# ============================================================================
# DUPLICATION DETECTION
# ============================================================================

# Lines per sliding window
BLOCK_WINDOW_SIZE: int = 3

# A block is indexed only if its blank-filtered text is strictly longer than this
MIN_BLOCK_LENGTH: int = 20


# ============================================================================
# COMMENT DETECTION
# ============================================================================

C_STYLE_COMMENT_PREFIXES: Tuple[str, ...] = ('//', '/*', '*')
HASH_COMMENT_PREFIXES: Tuple[str, ...] = ('#',)

COMMENT_PREFIXES_BY_EXTENSION: Dict[str, Tuple[str, ...]] = {
    'js': C_STYLE_COMMENT_PREFIXES,
    'ts': C_STYLE_COMMENT_PREFIXES,
    'jsx': C_STYLE_COMMENT_PREFIXES,
    'tsx': C_STYLE_COMMENT_PREFIXES,
    'java': C_STYLE_COMMENT_PREFIXES,
    'c': C_STYLE_COMMENT_PREFIXES,
    'cpp': C_STYLE_COMMENT_PREFIXES,
    'go': C_STYLE_COMMENT_PREFIXES,
    'rs': C_STYLE_COMMENT_PREFIXES,
    'py': HASH_COMMENT_PREFIXES,
}


# ============================================================================
# COMPLEXITY HEURISTIC
# ============================================================================
# Keywords are matched on identifier boundaries, operators as literal text.

COMPLEXITY_KEYWORD_PATTERNS: List[str] = [
    r'if',
    r'else\s+if',
    r'while',
    r'for',
    r'case',
    r'catch',
]

COMPLEXITY_OPERATOR_PATTERNS: List[str] = [
    r'\?\s*:',   # "?:" token
    r'&&',
    r'\|\|',
]


# ============================================================================
# REPORTING
# ============================================================================

REPORT_FORMATS: Tuple[str, ...] = ('json', 'csv', 'html', 'yaml')

CSV_HEADERS: List[str] = [
    'File Path',
    'Modification Frequency',
    'Bug Fix Count',
    'Total Lines',
    'Code Lines',
    'Comment Lines',
    'Blank Lines',
    'Duplicate Lines',
    'Duplicate Blocks',
    'Duplication %',
    'Cyclomatic Complexity',
    'Authors',
    'First Commit',
    'Last Modified',
]
