#!/usr/bin/env python3
"""
reposcan - git repository file metrics and duplication report generator.

Entry point script; the implementation lives in the reposcanner package.
"""

import sys

if sys.version_info < (3, 8):
	print("Python 3.8 or higher is required for reposcan", file=sys.stderr)
	sys.exit(1)

from reposcanner.reposcan_cli import main


if __name__ == '__main__':
	main()
