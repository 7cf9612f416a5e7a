"""
HTML report generator module for reposcanner.

Produces a single self-contained page with summary statistics and a
sortable, searchable per-file table. Each row embeds its file record as
JSON so the page script can sort on any metric.
"""

import html
import json
from typing import Optional

from .reposcan_config import ScannerConfig, get_config
from .reposcan_helpers import average


def html_linkify(text):
	return text.lower().replace(' ', '_')


def html_header(level, text):
	name = html_linkify(text)
	return '\n<h%d id="%s">%s</h%d>\n' % (level, name, html.escape(text), level)


def value_class(value, high, medium):
	"""CSS class for a metric: 'high', 'medium' or 'low'."""
	if value >= high:
		return 'high'
	if value >= medium:
		return 'medium'
	return 'low'


REPORT_CSS = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font-family: -apple-system, 'Segoe UI', Arial, sans-serif; font-size: 12px; color: #1a1a1a; background: #f0f2f5; padding: 10px; }
.header { background: #fff; border: 1px solid #ddd; padding: 15px 20px; margin-bottom: 10px; display: flex; justify-content: space-between; }
h1 { font-size: 18px; font-weight: 600; }
h2 { font-size: 14px; font-weight: 600; }
.meta { color: #666; font-size: 11px; text-align: right; }
.stats { display: flex; gap: 20px; background: #fff; border: 1px solid #ddd; padding: 10px 20px; margin-bottom: 10px; font-size: 11px; }
.stat-label { color: #666; }
.stat-value { font-weight: 600; color: #2563eb; }
.table-container { background: #fff; border: 1px solid #ddd; }
.table-header, .search-container { padding: 10px 15px; border-bottom: 1px solid #e0e0e0; background: #f8f9fa; }
.search-input { width: 100%; max-width: 400px; padding: 6px 12px; border: 1px solid #ddd; border-radius: 4px; }
.search-info { font-size: 11px; color: #666; margin-top: 5px; }
table { width: 100%; border-collapse: collapse; font-size: 11px; }
th { background: #f8f9fa; padding: 6px 8px; text-align: left; border-bottom: 2px solid #e0e0e0; cursor: pointer; white-space: nowrap; position: sticky; top: 0; }
th.sorted-asc:after { content: ' \\2191'; }
th.sorted-desc:after { content: ' \\2193'; }
td { padding: 4px 8px; border-bottom: 1px solid #f0f0f0; white-space: nowrap; }
.path-cell { font-family: Consolas, Monaco, monospace; font-size: 10px; }
.number-cell { text-align: right; font-family: Consolas, monospace; font-size: 10px; }
.center-cell { text-align: center; }
.high { color: #dc2626; font-weight: 600; }
.medium { color: #d97706; }
.low { color: #059669; }
.zero { color: #999; }
.date-cell { font-size: 10px; color: #666; }
"""

REPORT_JS = """
(function() {
	var tbody = document.querySelector('#dataTable tbody');
	var rows = Array.prototype.slice.call(tbody.querySelectorAll('tr'));
	var current = { column: 'modificationFrequency', order: 'desc' };

	function valueOf(row, column) {
		var data = JSON.parse(row.dataset.file);
		var value = column.split('.').reduce(function(obj, key) { return obj == null ? null : obj[key]; }, data);
		if (column === 'firstCommit' || column === 'lastModified') {
			return value ? new Date(value).getTime() : 0;
		}
		return value;
	}

	document.querySelectorAll('th[data-sort]').forEach(function(th) {
		th.addEventListener('click', function() {
			var column = th.dataset.sort;
			var order = (current.column === column && current.order === 'desc') ? 'asc' : 'desc';
			document.querySelectorAll('th').forEach(function(h) { h.classList.remove('sorted-asc', 'sorted-desc'); });
			th.classList.add(order === 'asc' ? 'sorted-asc' : 'sorted-desc');
			current = { column: column, order: order };
			rows.sort(function(a, b) {
				var av = valueOf(a, column), bv = valueOf(b, column);
				if (typeof av === 'string') {
					return order === 'asc' ? av.localeCompare(bv) : bv.localeCompare(av);
				}
				return order === 'asc' ? av - bv : bv - av;
			});
			rows.forEach(function(row) { tbody.appendChild(row); });
		});
	});

	var input = document.getElementById('searchInput');
	var info = document.getElementById('searchInfo');
	input.addEventListener('input', function() {
		var needle = input.value.trim().toLowerCase();
		var shown = 0;
		rows.forEach(function(row) {
			var match = !needle || row.dataset.path.toLowerCase().indexOf(needle) !== -1;
			row.style.display = match ? '' : 'none';
			if (match) { shown++; }
		});
		info.textContent = needle ? shown + ' of ' + rows.length + ' files match' : 'Type to filter files by substring match (case-insensitive)';
	});
})();
"""


class HTMLReportCreator:
	"""Creates the HTML report text for a RepoAnalysis."""

	def __init__(self, config: Optional[ScannerConfig] = None):
		self.config = config or get_config()

	def create(self, analysis) -> str:
		records = analysis.file_records()
		records.sort(key=lambda r: r['modificationFrequency'], reverse=True)

		total_bug_fixes = sum(r['bugFixCount'] for r in records)
		total_code_lines = sum(r['metrics'].get('codeLines', 0) for r in records)
		total_modifications = sum(r['modificationFrequency'] for r in records)
		avg_duplication = average(r['duplication']['duplicatePercentage'] for r in records)
		avg_complexity = average(r['cyclomaticComplexity'] for r in records)

		parts = []
		parts.append('<!DOCTYPE html>\n<html lang="en">\n<head>\n<meta charset="UTF-8">\n')
		parts.append('<meta name="viewport" content="width=device-width, initial-scale=1.0">\n')
		parts.append('<title>Repository Analysis Report</title>\n')
		parts.append('<style>%s</style>\n</head>\n<body>\n' % REPORT_CSS)

		# Header
		parts.append('<div class="header"><div>')
		parts.append('<h1>Repository Analysis Report</h1>')
		parts.append('<div class="meta" style="text-align: left">%s</div>' % html.escape(analysis.repository_path))
		parts.append('</div><div class="meta">Generated: %s<br>%d files &bull; %d commits</div></div>\n' % (
			analysis.analyzed_at.strftime('%Y-%m-%d %H:%M:%S'), analysis.total_files, analysis.total_commits))

		# Stats bar
		parts.append('<div class="stats">')
		for label, value in (
			('Total Lines', '{:,}'.format(total_code_lines)),
			('Total Changes', '{:,}'.format(total_modifications)),
			('Total Bug Fixes', '{:,}'.format(total_bug_fixes)),
			('Avg Duplication', '%.2f%%' % avg_duplication),
			('Avg Complexity', '%.1f' % avg_complexity),
		):
			parts.append('<div class="stat"><span class="stat-label">%s:</span> <span class="stat-value">%s</span></div>' % (label, value))
		parts.append('</div>\n')

		# Table
		parts.append('<div class="table-container">')
		parts.append('<div class="table-header">%s<div class="search-info">Click column headers to sort</div></div>' % html_header(2, 'File Analysis Details'))
		parts.append('<div class="search-container">')
		parts.append('<input type="text" class="search-input" id="searchInput" placeholder="Search files... (substring search)" autocomplete="off">')
		parts.append('<div class="search-info" id="searchInfo">Type to filter files by substring match (case-insensitive)</div>')
		parts.append('</div>\n')
		parts.append('<table id="dataTable">\n<thead><tr>')
		for column, title, align in (
			('path', 'File Path', ''),
			('modificationFrequency', 'Changes', 'right'),
			('bugFixCount', 'Bugs', 'right'),
			('metrics.lines', 'Lines', 'right'),
			('metrics.codeLines', 'Code', 'right'),
			('metrics.commentLines', 'Comments', 'right'),
			('duplication.duplicatePercentage', 'Dup%', 'right'),
			('duplication.duplicateLines', 'Dup Lines', 'right'),
			('cyclomaticComplexity', 'Complex', 'right'),
			('authors.length', 'Authors', 'center'),
			('firstCommit', 'First Commit', ''),
			('lastModified', 'Last Modified', ''),
		):
			sorted_class = ' class="sorted-desc"' if column == 'modificationFrequency' else ''
			style = ' style="text-align: %s"' % align if align else ''
			parts.append('<th data-sort="%s"%s%s>%s</th>' % (column, sorted_class, style, title))
		parts.append('</tr></thead>\n<tbody>\n')

		for record in records:
			parts.append(self._render_row(record))

		parts.append('</tbody>\n</table>\n</div>\n')
		parts.append('<script>%s</script>\n</body>\n</html>\n' % REPORT_JS)

		if self.config.verbose:
			print(f'Rendered HTML report with {len(records)} files')
		return ''.join(parts)

	def _render_row(self, record) -> str:
		dup = record['duplication']
		metrics = record['metrics']
		authors = record['authors']
		bug_fixes = record['bugFixCount']

		if len(authors) > 3:
			authors_class = 'high'
		elif len(authors) > 1:
			authors_class = 'medium'
		else:
			authors_class = ''

		cells = [
			'<td class="path-cell" title="%s">%s</td>' % (html.escape(record['path']), html.escape(record['path'])),
			'<td class="number-cell %s">%d</td>' % (value_class(record['modificationFrequency'], 50, 20), record['modificationFrequency']),
			'<td class="number-cell %s">%d</td>' % (value_class(bug_fixes, 10, 5) if bug_fixes > 0 else 'zero', bug_fixes),
			'<td class="number-cell">{:,}</td>'.format(metrics.get('lines', 0)),
			'<td class="number-cell">{:,}</td>'.format(metrics.get('codeLines', 0)),
			'<td class="number-cell %s">%d</td>' % ('zero' if metrics.get('commentLines', 0) == 0 else '', metrics.get('commentLines', 0)),
			'<td class="number-cell %s">%s%%</td>' % (
				value_class(dup['duplicatePercentage'], 30, 10) if dup['duplicatePercentage'] > 0 else 'zero', dup['duplicatePercentage']),
			'<td class="number-cell %s">%d</td>' % ('zero' if dup['duplicateLines'] == 0 else '', dup['duplicateLines']),
			'<td class="number-cell %s">%d</td>' % (value_class(record['cyclomaticComplexity'], 20, 10), record['cyclomaticComplexity']),
			'<td class="center-cell %s">%d</td>' % (authors_class, len(authors)),
			'<td class="date-cell">%s</td>' % (record['firstCommit'] or '')[:10],
			'<td class="date-cell">%s</td>' % (record['lastModified'] or '')[:10],
		]
		return '<tr data-path="%s" data-file="%s">%s</tr>\n' % (
			html.escape(record['path']),
			html.escape(json.dumps(record, ensure_ascii=False)),
			''.join(cells),
		)
