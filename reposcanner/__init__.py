"""
reposcanner - Git repository file metrics and duplication analysis.

Scans a git repository and reports per-file modification frequency, bug-fix
association, line metrics, heuristic complexity and cross-file duplication
as JSON, CSV, YAML or HTML.
"""

# Configuration
from .reposcan_config import (
    ScannerConfig,
    get_config,
    set_config,
    conf,
    update_conf_from_config,
)

# Utilities
from .reposcan_helpers import (
    round_half_up,
    percentage,
    average,
    get_extension,
    is_excluded_path,
    should_include_file,
    is_comment_line,
    read_text,
    format_duration,
)

# Git commands
from .reposcan_gitcommands import (
    GitCommandError,
    getpipeoutput_list,
    run_git,
    is_git_repository,
    get_total_commits,
    getgitversion,
    get_exectime_external,
    reset_exectime_external,
)

# Duplication detection
from .reposcan_duplication import (
    DuplicationInfo,
    ZERO_DUPLICATION,
    ScanPhaseError,
    OccurrenceIndex,
    BlockHasher,
    DuplicationAggregator,
    DuplicationScan,
    analyze_code_duplication,
    normalize_block,
    fingerprint_block,
)

# Metrics
from .reposcan_complexity import (
    score_complexity,
    calculate_cyclomatic_complexity,
    calculate_complexities,
)
from .reposcan_filemetrics import calculate_line_metrics, calculate_file_metrics

# Collectors
from .reposcan_basecollector import BaseCollector
from .reposcan_history import (
    CommitInfo,
    FileHistory,
    GitHistoryCollector,
    aggregate_commit_history,
    discover_files,
    get_commit_log,
    is_bug_fix_commit,
    parse_commit_log,
)

# Reports
from .reposcan_export import MetricsExporter, export_to_json, export_to_csv, export_to_yaml
from .reposcan_htmlreport import HTMLReportCreator

# Scanning
from .reposcan_scanner import RepoAnalysis, RepoScanner

# CLI
from .reposcan_cli import usage, RepoScan, main


__all__ = [
    # Config
    "ScannerConfig",
    "get_config",
    "set_config",
    "conf",
    "update_conf_from_config",

    # Helpers
    "round_half_up",
    "percentage",
    "average",
    "get_extension",
    "is_excluded_path",
    "should_include_file",
    "is_comment_line",
    "read_text",
    "format_duration",

    # Git commands
    "GitCommandError",
    "getpipeoutput_list",
    "run_git",
    "is_git_repository",
    "get_total_commits",
    "getgitversion",
    "get_exectime_external",
    "reset_exectime_external",

    # Duplication
    "DuplicationInfo",
    "ZERO_DUPLICATION",
    "ScanPhaseError",
    "OccurrenceIndex",
    "BlockHasher",
    "DuplicationAggregator",
    "DuplicationScan",
    "analyze_code_duplication",
    "normalize_block",
    "fingerprint_block",

    # Metrics
    "score_complexity",
    "calculate_cyclomatic_complexity",
    "calculate_complexities",
    "calculate_line_metrics",
    "calculate_file_metrics",

    # Collectors
    "BaseCollector",
    "CommitInfo",
    "FileHistory",
    "GitHistoryCollector",
    "aggregate_commit_history",
    "discover_files",
    "get_commit_log",
    "is_bug_fix_commit",
    "parse_commit_log",

    # Reports
    "MetricsExporter",
    "export_to_json",
    "export_to_csv",
    "export_to_yaml",
    "HTMLReportCreator",

    # Scanning
    "RepoAnalysis",
    "RepoScanner",

    # CLI
    "usage",
    "RepoScan",
    "main",
]
