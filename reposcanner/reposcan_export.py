"""
Export module for reposcanner.

Provides JSON, CSV and YAML rendering of a repository analysis.
"""

import csv
import io
import json
from typing import Any, Dict, List, Optional

import yaml

from .reposcan_config import ScannerConfig, get_config
from .reposcan_constants import CSV_HEADERS
from .reposcan_helpers import average


def top_files(records: List[Dict[str, Any]], sort_key, label: str, limit: int) -> List[Dict[str, Any]]:
    """
    Get the top records by a numeric value, highest first.

    Ties keep their original order.

    Args:
        records: Per-file records
        sort_key: Callable extracting the value from a record
        label: Key the value is reported under
        limit: Maximum number of entries

    Returns:
        List of {'path': ..., label: value} dicts
    """
    ranked = sorted(records, key=sort_key, reverse=True)[:limit]
    return [{'path': r['path'], label: sort_key(r)} for r in ranked]


class MetricsExporter:
    """
    Renders a RepoAnalysis as JSON, CSV or YAML text.
    """

    def __init__(self, analysis, config: Optional[ScannerConfig] = None):
        """
        Initialize the exporter.

        Args:
            analysis: A RepoAnalysis produced by RepoScanner.scan()
            config: Scanner configuration (top_n is used for summaries)
        """
        self.analysis = analysis
        self.config = config or get_config()

    def render(self, fmt: str) -> str:
        """
        Render the analysis in the given format.

        Raises:
            ValueError: If the format is not json, csv or yaml
        """
        renderers = {
            'json': self.to_json,
            'csv': self.to_csv,
            'yaml': self.to_yaml,
        }
        renderer = renderers.get(fmt)
        if renderer is None:
            raise ValueError(f'Unsupported report format: {fmt}')
        return renderer()

    def to_json(self, pretty: bool = True) -> str:
        metrics = self.get_metrics_dict()
        if pretty:
            return json.dumps(metrics, indent=2, ensure_ascii=False)
        return json.dumps(metrics, ensure_ascii=False)

    def to_yaml(self) -> str:
        metrics = self.get_metrics_dict()
        return yaml.dump(metrics, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def to_csv(self) -> str:
        """
        Render one row per file.

        Text columns (path, authors, dates) are quoted, numeric ones are not.
        """
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator='\n').writerow(CSV_HEADERS)
        writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator='\n')

        for history in self.analysis.files:
            duplication = self.analysis.duplication_for(history.path)
            metrics = history.metrics
            writer.writerow([
                history.path,
                history.modification_frequency,
                history.bug_fix_count,
                metrics.get('lines', 0),
                metrics.get('codeLines', 0),
                metrics.get('commentLines', 0),
                metrics.get('blankLines', 0),
                duplication.duplicate_lines,
                duplication.duplicate_blocks,
                duplication.duplicate_percentage,
                self.analysis.complexity_for(history.path),
                '; '.join(history.authors),
                history.first_commit.isoformat() if history.first_commit else '',
                history.last_modified.isoformat() if history.last_modified else '',
            ])

        if self.config.verbose:
            print(f'Rendered CSV rows for {len(self.analysis.files)} files')
        return buffer.getvalue().rstrip('\n')

    def get_metrics_dict(self) -> Dict[str, Any]:
        """
        Get all metrics as a dictionary (for programmatic access).

        Returns:
            Dictionary with repository fields, files and summary
        """
        records = self.analysis.file_records()
        return {
            'repositoryPath': self.analysis.repository_path,
            'analyzedAt': self.analysis.analyzed_at.isoformat(),
            'totalCommits': self.analysis.total_commits,
            'totalFiles': self.analysis.total_files,
            'files': records,
            'summary': self.generate_summary(records),
        }

    def generate_summary(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Totals, averages and top-N lists over the per-file records."""
        limit = self.config.top_n

        return {
            'totalFiles': len(records),
            'totalModifications': sum(r['modificationFrequency'] for r in records),
            'totalBugFixes': sum(r['bugFixCount'] for r in records),
            'totalLines': sum(r['metrics'].get('lines', 0) for r in records),
            'totalCodeLines': sum(r['metrics'].get('codeLines', 0) for r in records),
            'averageDuplicationPercentage': average(r['duplication']['duplicatePercentage'] for r in records),
            'averageComplexity': average(r['cyclomaticComplexity'] for r in records),
            'topLists': {
                'mostModified': top_files(records, lambda r: r['modificationFrequency'], 'modifications', limit),
                'mostBugFixes': top_files(records, lambda r: r['bugFixCount'], 'bugFixes', limit),
                'highestDuplication': top_files(
                    records, lambda r: r['duplication']['duplicatePercentage'], 'duplicationPercentage', limit),
                'mostComplex': top_files(records, lambda r: r['cyclomaticComplexity'], 'complexity', limit),
            },
        }


def export_to_json(analysis, config: Optional[ScannerConfig] = None) -> str:
    """
    Convenience function to render an analysis as JSON.

    Args:
        analysis: A RepoAnalysis
        config: Optional scanner configuration

    Returns:
        JSON text
    """
    return MetricsExporter(analysis, config).to_json()


def export_to_csv(analysis, config: Optional[ScannerConfig] = None) -> str:
    return MetricsExporter(analysis, config).to_csv()


def export_to_yaml(analysis, config: Optional[ScannerConfig] = None) -> str:
    return MetricsExporter(analysis, config).to_yaml()
