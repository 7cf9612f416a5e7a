"""
Command-line interface module for reposcanner.

Contains the RepoScan CLI class and usage function.
"""

import getopt
import os
import sys
import time

from .reposcan_config import ScannerConfig, conf, get_config, set_config
from .reposcan_constants import REPORT_FORMATS
from .reposcan_gitcommands import getgitversion, get_exectime_external, is_git_repository, reset_exectime_external
from .reposcan_helpers import format_duration, normalize_extensions, split_csv_option
from .reposcan_scanner import RepoScanner


def usage():
	print("""
Usage: reposcan [options] [repo-path]

Analyze a git repository for modification frequency, bug fixes, code
metrics, complexity and cross-file duplication. repo-path defaults to the
current directory.

Options:
-o, --output <path>          Output file path (report printed to stdout if omitted)
-f, --format <format>        Output format: json, csv, html, yaml (default: json)
-e, --extensions <list>      File extensions to analyze (comma-separated)
-x, --exclude <list>         Paths to exclude (comma-separated names or globs)
-k, --bug-keywords <list>    Bug fix keywords (comma-separated)
-c key=value                 Override configuration value
--debug                      Enable debug output
--verbose                    Enable verbose output
-h, --help                   Show this help message

Examples:
  reposcan .                                   # JSON report on stdout
  reposcan -f html -o report.html repo         # HTML report
  reposcan -e py,go -x vendor,tests repo       # Only Python and Go, skip vendor/ and tests/
  reposcan -c min_block_length=40 -f csv repo

Default config values:
%s
""" % conf)


class RepoScan:
	def run(self, args_orig):
		time_start = time.time()
		reset_exectime_external()
		config = ScannerConfig.from_dict(get_config().to_dict())

		optlist, args = getopt.getopt(args_orig, 'ho:f:e:x:k:c:',
			["help", "output=", "format=", "extensions=", "exclude=", "bug-keywords=", "debug", "verbose"])
		for o, v in optlist:
			if o in ('-o', '--output'):
				config.output_path = v
			elif o in ('-f', '--format'):
				config.output_format = v.strip().lower()
			elif o in ('-e', '--extensions'):
				config.file_extensions = normalize_extensions(split_csv_option(v))
			elif o in ('-x', '--exclude'):
				config.exclude_paths = split_csv_option(v)
			elif o in ('-k', '--bug-keywords'):
				config.bug_keywords = split_csv_option(v)
			elif o == '-c':
				self._apply_override(config, v)
			elif o == '--debug':
				config.debug = True
				config.verbose = True  # Debug implies verbose
			elif o == '--verbose':
				config.verbose = True
			elif o in ('-h', '--help'):
				usage()
				sys.exit()

		if config.output_format not in REPORT_FORMATS:
			print(f'FATAL: Unknown format "{config.output_format}", expected one of: {", ".join(REPORT_FORMATS)}')
			sys.exit(1)

		if len(args) > 1:
			print('FATAL: Expected at most one repository path')
			usage()
			sys.exit(1)

		repo_path = os.path.abspath(args[0] if args else '.')
		if not is_git_repository(repo_path):
			print(f'FATAL: Not a git repository: {repo_path}')
			sys.exit(1)

		set_config(config)
		# the report itself goes to stdout when no output file is given
		status = sys.stdout if config.output_path else sys.stderr
		print(f'Scanning repository: {repo_path}', file=status)
		if config.verbose:
			print(f'Using {getgitversion()}', file=status)

		scanner = RepoScanner(repo_path, config)
		analysis = scanner.scan()
		report = scanner.generate_report(analysis, config.output_format, config.output_path or None)

		if not config.output_path:
			print(report)

		print('Analysis complete!', file=status)
		print(f'Total files analyzed: {analysis.total_files}', file=status)
		print(f'Total commits: {analysis.total_commits}', file=status)
		if config.verbose:
			print(f'Execution time {format_duration(time.time() - time_start)}, '
				f'{format_duration(get_exectime_external())} in external commands', file=status)
		return analysis

	def _apply_override(self, config, option):
		if '=' not in option:
			print(f'FATAL: Invalid configuration format. Use key=value: {option}')
			sys.exit(1)
		key, value = option.split('=', 1)
		if not hasattr(config, key):
			raise KeyError('no such key "%s" in config' % key)

		current = getattr(config, key)
		try:
			if isinstance(current, bool):
				setattr(config, key, value.lower() in ('true', '1', 'yes', 'on'))
			elif isinstance(current, int):
				new_value = int(value)
				if key in ('block_size', 'top_n') and new_value < 1:
					print(f'FATAL: {key} must be at least 1, got: {new_value}')
					sys.exit(1)
				setattr(config, key, new_value)
			elif isinstance(current, list):
				items = split_csv_option(value)
				setattr(config, key, normalize_extensions(items) if key == 'file_extensions' else items)
			else:
				setattr(config, key, value)
		except ValueError as e:
			print(f'FATAL: Invalid value for {key}: {value} ({e})')
			sys.exit(1)


def main(argv=None):
	try:
		RepoScan().run(sys.argv[1:] if argv is None else argv)
	except KeyboardInterrupt:
		print('\nInterrupted by user')
		sys.exit(1)
	except getopt.GetoptError as e:
		print(f'FATAL: {e}')
		usage()
		sys.exit(1)
	except KeyError as e:
		print(f'FATAL: Configuration error: {e}')
		sys.exit(1)
	except Exception as e:
		print(f'FATAL: Unexpected error: {e}')
		if conf.get('debug', False):
			import traceback
			traceback.print_exc()
		sys.exit(1)
