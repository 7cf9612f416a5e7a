"""
Git command execution utilities for reposcanner.

Provides wrappers for executing git commands via subprocess.
"""

import os
import subprocess
import sys
import threading
import time
from typing import List

from .reposcan_config import get_config


class GitCommandError(RuntimeError):
    """Raised when a git command cannot be run or exits with an error."""


# Thread-safe tracking of external execution time
_exectime_external = 0.0
_exectime_lock = threading.Lock()


def get_exectime_external() -> float:
    """Get the total external command execution time."""
    return _exectime_external


def reset_exectime_external() -> None:
    """Reset the external execution time counter."""
    global _exectime_external
    with _exectime_lock:
        _exectime_external = 0.0


def getpipeoutput_list(cmd_list: List[str], cwd: str = None) -> str:
    """
    Execute a command without shell interpretation and return its output.

    Args:
        cmd_list: Command as list of arguments
        cwd: Working directory for the command

    Returns:
        Command output as string (decoded UTF-8), trailing newlines removed

    Raises:
        GitCommandError: If the command cannot be started or exits non-zero
    """
    global _exectime_external
    config = get_config()
    start = time.time()

    if config.verbose:
        print('>> ' + ' '.join(cmd_list), end='')
        sys.stdout.flush()

    try:
        p = subprocess.Popen(cmd_list, stdout=subprocess.PIPE, stderr=subprocess.PIPE, cwd=cwd)
        output, error = p.communicate()
    except OSError as e:
        if config.verbose:
            print()
        raise GitCommandError(f'Command execution failed: {" ".join(cmd_list)}: {e}') from e

    end = time.time()
    if config.verbose:
        print('\r[%.5f] >> %s' % (end - start, ' '.join(cmd_list)))

    with _exectime_lock:
        _exectime_external += (end - start)

    if p.returncode != 0:
        raise GitCommandError('Command failed: %s\nError: %s' % (
            ' '.join(cmd_list), error.decode('utf-8', errors='replace').strip()))

    if config.debug:
        print(f'DEBUG: Command output ({len(output)} bytes): {output[:200].decode("utf-8", errors="replace")}...')

    return output.decode('utf-8', errors='replace').rstrip('\n')


def run_git(repo_path: str, args: List[str]) -> str:
    """Run ``git <args>`` inside repo_path."""
    return getpipeoutput_list(['git'] + list(args), cwd=repo_path)


def is_git_repository(path: str) -> bool:
    """
    Check if the given path is a valid Git repository.

    Args:
        path: Path to check

    Returns:
        True if the path is a valid Git repository
    """
    if not os.path.exists(path) or not os.path.isdir(path):
        return False

    # .git is a directory for regular repositories and a file for worktrees
    git_dir = os.path.join(path, '.git')
    if os.path.isdir(git_dir) or os.path.isfile(git_dir):
        return True

    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--git-dir'],
            capture_output=True, text=True, timeout=5, cwd=path
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, subprocess.SubprocessError, OSError):
        return False


def get_total_commits(repo_path: str) -> int:
    """
    Count the commits reachable from any ref.

    Returns:
        Commit count, 0 for a repository without commits
    """
    output = run_git(repo_path, ['rev-list', '--all', '--count'])
    try:
        return int(output.strip() or 0)
    except ValueError as e:
        raise GitCommandError(f'Unexpected rev-list output: {output!r}') from e


def getgitversion() -> str:
    """Get the installed git version."""
    return getpipeoutput_list(['git', '--version']).split('\n')[0]
