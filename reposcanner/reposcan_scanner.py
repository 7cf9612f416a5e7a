"""
Repository scan orchestration for reposcanner.

Runs history collection, duplication detection and complexity scoring over
one repository and hands the combined results to a report writer.
"""

import datetime
import os
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .reposcan_complexity import calculate_complexities
from .reposcan_config import ScannerConfig, get_config
from .reposcan_duplication import DuplicationInfo, DuplicationScan, ZERO_DUPLICATION
from .reposcan_export import MetricsExporter
from .reposcan_helpers import format_duration
from .reposcan_htmlreport import HTMLReportCreator
from .reposcan_history import FileHistory, GitHistoryCollector


@dataclass
class RepoAnalysis:
    """Everything a report needs about one scanned repository."""

    repository_path: str
    analyzed_at: datetime.datetime
    total_commits: int
    total_files: int
    files: List[FileHistory] = field(default_factory=list)
    duplication: Dict[str, DuplicationInfo] = field(default_factory=dict)
    complexity: Dict[str, int] = field(default_factory=dict)

    def duplication_for(self, path: str) -> DuplicationInfo:
        return self.duplication.get(path, ZERO_DUPLICATION)

    def complexity_for(self, path: str) -> int:
        return self.complexity.get(path, 0)

    def file_records(self) -> List[Dict]:
        """Per-file dicts with duplication and complexity merged in."""
        records = []
        for history in self.files:
            record = history.to_dict()
            record['duplication'] = self.duplication_for(history.path).to_dict()
            record['cyclomaticComplexity'] = self.complexity_for(history.path)
            records.append(record)
        return records


class RepoScanner:
    """
    Scans one git repository.

    Example:
        scanner = RepoScanner('/path/to/repo')
        analysis = scanner.scan()
        print(scanner.generate_report(analysis, 'csv'))
    """

    def __init__(self, repo_path: str, config: Optional[ScannerConfig] = None):
        self.repo_path = os.path.abspath(repo_path)
        self.config = config or get_config()

    def scan(self) -> RepoAnalysis:
        """
        Analyze the repository.

        Returns:
            RepoAnalysis keyed by repository-relative paths

        Raises:
            GitCommandError: If git history cannot be read
        """
        start = time.time()
        if self.config.verbose:
            print(f'Analyzing git history of {self.repo_path}...')
        collector = GitHistoryCollector(self.repo_path, self.config)
        collector.collect()
        collector.refine()
        history = collector.get_data()

        if self.config.verbose:
            print('Analyzing code complexity and duplication...')
        relative_paths = [h.path for h in history['files']]
        path_map = {os.path.join(self.repo_path, path): path for path in relative_paths}

        scan = DuplicationScan(self.config.block_size, self.config.min_block_length)
        full_duplication = scan.run(path_map.keys())
        full_complexity = calculate_complexities(path_map.keys())

        duplication = {path_map.get(p, p): info for p, info in full_duplication.items()}
        complexity = {path_map.get(p, p): score for p, score in full_complexity.items()}

        if self.config.verbose:
            print(f'Analysis completed in {format_duration(time.time() - start)}')

        return RepoAnalysis(
            repository_path=self.repo_path,
            analyzed_at=datetime.datetime.now(),
            total_commits=history['total_commits'],
            total_files=history['total_files'],
            files=history['files'],
            duplication=duplication,
            complexity=complexity,
        )

    def generate_report(self, analysis: RepoAnalysis, fmt: Optional[str] = None, output_path: Optional[str] = None) -> str:
        """
        Render a report and optionally write it to a file.

        Args:
            analysis: Result of scan()
            fmt: 'json', 'csv', 'yaml' or 'html' (defaults to the configured format)
            output_path: File to write; the report is only returned when empty

        Returns:
            Report text

        Raises:
            ValueError: If the format is unknown
        """
        fmt = (fmt or self.config.output_format).lower()
        if fmt == 'html':
            report = HTMLReportCreator(self.config).create(analysis)
        else:
            report = MetricsExporter(analysis, self.config).render(fmt)

        if output_path:
            with open(output_path, 'w', encoding='utf-8', newline='') as f:
                f.write(report)
            print(f'Report saved to: {output_path}')

        return report
