"""
Git history collector for reposcanner.

Discovers the files to analyze, measures their line metrics and walks the
commit history to count modifications, bug-fix commits and authors per file.
"""

import datetime
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .reposcan_basecollector import BaseCollector
from .reposcan_config import conf, ScannerConfig
from .reposcan_filemetrics import calculate_file_metrics
from .reposcan_gitcommands import run_git, get_total_commits
from .reposcan_helpers import is_excluded_path, should_include_file


# Record separator before each commit, unit separator between fields.
# Changed file names follow the last separator, one per line.
RECORD_SEP = '\x1e'
FIELD_SEP = '\x1f'
LOG_FORMAT = '%x1e%H%x1f%aN%x1f%aI%x1f%B%x1f'


@dataclass
class CommitInfo:
	hash: str
	author: str
	date: datetime.datetime
	message: str
	files: List[str] = field(default_factory=list)


@dataclass
class FileHistory:
	"""History and size metrics of one tracked file."""
	path: str
	metrics: Dict[str, int] = field(default_factory=dict)
	modification_frequency: int = 0
	bug_fix_count: int = 0
	first_commit: Optional[datetime.datetime] = None
	last_modified: Optional[datetime.datetime] = None
	authors: List[str] = field(default_factory=list)

	def record_commit(self, commit: CommitInfo, is_bug_fix: bool) -> None:
		self.modification_frequency += 1
		if is_bug_fix:
			self.bug_fix_count += 1
		if self.last_modified is None or commit.date > self.last_modified:
			self.last_modified = commit.date
		if self.first_commit is None or commit.date < self.first_commit:
			self.first_commit = commit.date
		if commit.author not in self.authors:
			self.authors.append(commit.author)

	def to_dict(self) -> Dict:
		return {
			'path': self.path,
			'modificationFrequency': self.modification_frequency,
			'bugFixCount': self.bug_fix_count,
			'lastModified': self.last_modified.isoformat() if self.last_modified else None,
			'firstCommit': self.first_commit.isoformat() if self.first_commit else None,
			'metrics': dict(self.metrics),
			'authors': list(self.authors),
		}


def is_bug_fix_commit(message: str, keywords: Iterable[str]) -> bool:
	"""Check if a commit message contains any bug-fix keyword (case-insensitive substring)."""
	lower_message = message.lower()
	return any(keyword.lower() in lower_message for keyword in keywords if keyword)


def parse_commit_log(output: str) -> List[CommitInfo]:
	"""
	Parse ``git log --name-only`` output produced with LOG_FORMAT.

	Args:
		output: Raw git log output

	Returns:
		List of CommitInfo, newest first as git prints them
	"""
	commits = []
	for record in output.split(RECORD_SEP):
		if not record.strip():
			continue
		parts = record.split(FIELD_SEP, 4)
		if len(parts) < 5:
			if conf['debug']:
				print(f'Warning: Skipping malformed log record: {record[:80]!r}')
			continue
		commit_hash, author, date_str, message, file_block = parts
		try:
			date = datetime.datetime.fromisoformat(date_str.strip())
		except ValueError:
			if conf['debug']:
				print(f'Warning: Unparseable date {date_str!r} for commit {commit_hash}')
			continue
		files = [line.strip() for line in file_block.split('\n') if line.strip()]
		commits.append(CommitInfo(commit_hash.strip(), author, date, message.strip(), files))
	return commits


def get_commit_log(repo_path: str) -> List[CommitInfo]:
	"""Read every commit reachable from any ref together with the files it changed."""
	# paths must come back verbatim to match discovered file names
	output = run_git(repo_path, ['-c', 'core.quotepath=off', 'log', '--all', '--name-only', '--no-renames', f'--pretty=format:{LOG_FORMAT}'])
	return parse_commit_log(output)


def discover_files(repo_path: str, extensions: Iterable[str], exclude_paths: Iterable[str]) -> List[str]:
	"""
	Find the files to analyze in a working tree.

	Args:
		repo_path: Repository root
		extensions: Extensions to include, without dots
		exclude_paths: Path components or globs to skip

	Returns:
		Sorted list of '/'-separated paths relative to repo_path
	"""
	extensions = list(extensions)
	exclude_paths = list(exclude_paths)
	found = []
	for dirpath, dirnames, filenames in os.walk(repo_path):
		rel_dir = os.path.relpath(dirpath, repo_path)
		rel_dir = '' if rel_dir == '.' else rel_dir.replace(os.sep, '/')
		# prune excluded directories in place
		dirnames[:] = [d for d in dirnames if not is_excluded_path(d, exclude_paths)]
		for filename in filenames:
			rel_path = f'{rel_dir}/{filename}' if rel_dir else filename
			if should_include_file(rel_path, extensions, exclude_paths):
				found.append(rel_path)
	return sorted(found)


def aggregate_commit_history(commits: Iterable[CommitInfo], file_map: Dict[str, FileHistory], bug_keywords: Iterable[str]) -> None:
	"""
	Fold commit records into per-file histories.

	Changed files that are not in file_map are ignored.

	Args:
		commits: Commit records
		file_map: Relative path -> FileHistory, updated in place
		bug_keywords: Keywords marking a bug-fix commit
	"""
	bug_keywords = list(bug_keywords)
	for commit in commits:
		is_bug_fix = is_bug_fix_commit(commit.message, bug_keywords)
		for path in commit.files:
			history = file_map.get(path)
			if history is not None:
				history.record_commit(commit, is_bug_fix)


class GitHistoryCollector(BaseCollector):
	"""Collects per-file history and line metrics for one repository."""

	def __init__(self, repo_path: str, config: Optional[ScannerConfig] = None):
		BaseCollector.__init__(self, config)
		self.repo_path = os.path.abspath(repo_path)
		self.files: Dict[str, FileHistory] = {}
		self.total_commits = 0

	def collect(self) -> None:
		config = self._config
		paths = discover_files(self.repo_path, config.file_extensions, config.exclude_paths)
		if config.verbose:
			print(f'Found {len(paths)} files with extensions: {", ".join(config.file_extensions)}')

		for path in paths:
			self.files[path] = FileHistory(path, calculate_file_metrics(os.path.join(self.repo_path, path)))

		commits = get_commit_log(self.repo_path)
		if config.verbose:
			print(f'Processing {len(commits)} commits')
		aggregate_commit_history(commits, self.files, config.bug_keywords)

		self.total_commits = get_total_commits(self.repo_path)

	def refine(self) -> None:
		self._data = {
			'repository_path': self.repo_path,
			'total_commits': self.total_commits,
			'total_files': len(self.files),
			'files': list(self.files.values()),
		}
