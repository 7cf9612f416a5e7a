"""
Cross-file code duplication detection for reposcanner.

Finds near-duplicate blocks of lines across files in two passes:
- Block hashing: slide a fixed-size window over every file, normalize and
  fingerprint each window and record where each fingerprint occurs
- Aggregation: re-derive each file's windows and count the ones whose
  fingerprint also occurs in another file

The occurrence index and line cache belong to a single scan. Hashing has to
finish for every file before any file is aggregated, otherwise files hashed
late are invisible to files aggregated early.
"""

import hashlib
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .reposcan_config import conf, get_config
from .reposcan_helpers import percentage


class ScanPhaseError(RuntimeError):
    """Raised when the hashing and aggregation passes are run out of order."""


@dataclass(frozen=True)
class DuplicationInfo:
    """Duplication summary for one file."""

    duplicate_lines: int = 0
    duplicate_blocks: int = 0
    duplicate_percentage: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'duplicateLines': self.duplicate_lines,
            'duplicateBlocks': self.duplicate_blocks,
            'duplicatePercentage': self.duplicate_percentage,
        }


# Result recorded for files that could not be read
ZERO_DUPLICATION = DuplicationInfo()


def filtered_block_text(block: List[str]) -> str:
    """Join the non-blank lines of a block without trimming them."""
    return '\n'.join(line for line in block if line.strip())


def normalize_block(block: List[str]) -> str:
    """Drop blank lines, trim the rest and join them with newlines."""
    return '\n'.join(line.strip() for line in block if line.strip())


def fingerprint_block(block: List[str]) -> str:
    """MD5 hex digest of the normalized block text."""
    return hashlib.md5(normalize_block(block).encode('utf-8')).hexdigest()


def iter_block_fingerprints(lines: List[str], block_size: int, min_block_length: int) -> Iterator[Tuple[int, str]]:
    """
    Yield (offset, fingerprint) for every window worth comparing.

    A window starts at each offset from 0 to ``len(lines) - block_size``.
    Windows whose blank-filtered, untrimmed text is not longer than
    ``min_block_length`` are skipped. Both passes go through this function
    so they always consider the same windows.

    Args:
        lines: Raw lines of one file
        block_size: Lines per window
        min_block_length: Length the filtered text must exceed

    Yields:
        Tuples of (zero-based line offset, fingerprint)
    """
    for offset in range(len(lines) - block_size + 1):
        block = lines[offset:offset + block_size]
        if len(filtered_block_text(block)) > min_block_length:
            yield offset, fingerprint_block(block)


class OccurrenceIndex:
    """
    Maps block fingerprints to the (file path, line offset) pairs where they occur.

    Occurrence lists keep insertion order. Once sealed the index is read-only.
    """

    def __init__(self):
        self._occurrences: Dict[str, List[Tuple[str, int]]] = {}
        self.sealed = False

    def add(self, fingerprint: str, file_path: str, offset: int) -> None:
        """Record one occurrence of a fingerprint."""
        if self.sealed:
            raise ScanPhaseError('occurrence index is sealed, no more blocks can be added')
        self._occurrences.setdefault(fingerprint, []).append((file_path, offset))

    def get(self, fingerprint: str) -> List[Tuple[str, int]]:
        """Get the occurrences of a fingerprint (empty list if never seen)."""
        return list(self._occurrences.get(fingerprint, ()))

    def occurs_outside(self, fingerprint: str, file_path: str) -> bool:
        """Check if a fingerprint occurs in any file other than file_path."""
        return any(path != file_path for path, _ in self._occurrences.get(fingerprint, ()))

    def seal(self) -> None:
        self.sealed = True

    def __len__(self) -> int:
        return len(self._occurrences)

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._occurrences


class BlockHasher:
    """
    First pass: reads files, caches their lines and fills the occurrence index.

    Files that cannot be read get a zero DuplicationInfo in ``failed`` and are
    neither cached nor indexed.
    """

    def __init__(self, index: OccurrenceIndex, line_cache: Dict[str, List[str]],
                 block_size: int, min_block_length: int):
        self.index = index
        self.line_cache = line_cache
        self.block_size = block_size
        self.min_block_length = min_block_length
        self.failed: Dict[str, DuplicationInfo] = {}

    def hash_file(self, file_path: str) -> bool:
        """
        Hash one file into the index.

        Args:
            file_path: Path of the file to read

        Returns:
            True if the file was read and indexed, False if reading failed
        """
        try:
            with open(file_path, 'r', encoding='utf-8-sig', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            if conf.get('debug'):
                print(f'Warning: Skipping duplication analysis for {file_path}: {e}')
            self.failed[file_path] = ZERO_DUPLICATION
            return False

        lines = content.split('\n')
        self.line_cache[file_path] = lines
        for offset, fingerprint in iter_block_fingerprints(lines, self.block_size, self.min_block_length):
            self.index.add(fingerprint, file_path, offset)
        return True

    def hash_files(self, file_paths: Iterable[str]) -> None:
        for file_path in file_paths:
            self.hash_file(file_path)


class DuplicationAggregator:
    """
    Second pass: classifies each cached file's windows against the index.

    A window is a duplicate only when its fingerprint also occurs in a
    different file; repeats inside the same file do not count.
    """

    def __init__(self, index: OccurrenceIndex, line_cache: Dict[str, List[str]],
                 block_size: int, min_block_length: int):
        self.index = index
        self.line_cache = line_cache
        self.block_size = block_size
        self.min_block_length = min_block_length

    def analyze_file(self, file_path: str, lines: List[str]) -> DuplicationInfo:
        """
        Compute the duplication summary of one file.

        Args:
            file_path: Path the file was indexed under
            lines: Its cached lines

        Returns:
            DuplicationInfo for the file
        """
        duplicate_offsets = set()
        duplicate_blocks = 0

        for offset, fingerprint in iter_block_fingerprints(lines, self.block_size, self.min_block_length):
            if self.index.occurs_outside(fingerprint, file_path):
                duplicate_blocks += 1
                duplicate_offsets.update(range(offset, offset + self.block_size))

        code_lines = sum(1 for line in lines if line.strip())
        return DuplicationInfo(
            duplicate_lines=len(duplicate_offsets),
            duplicate_blocks=duplicate_blocks,
            duplicate_percentage=percentage(len(duplicate_offsets), code_lines),
        )

    def aggregate(self) -> Dict[str, DuplicationInfo]:
        """Analyze every cached file."""
        return {path: self.analyze_file(path, lines) for path, lines in self.line_cache.items()}


class DuplicationScan:
    """
    One duplication scan: owns the occurrence index and the line cache.

    Usage:
        scan = DuplicationScan()
        scan.hash_files(paths)
        scan.seal()
        results = scan.aggregate()

    ``run(paths)`` performs the three steps in order.
    """

    def __init__(self, block_size: Optional[int] = None, min_block_length: Optional[int] = None):
        config = get_config()
        self.block_size = block_size if block_size is not None else config.block_size
        self.min_block_length = min_block_length if min_block_length is not None else config.min_block_length
        if self.block_size < 1:
            raise ValueError(f'block_size must be at least 1, got: {self.block_size}')

        self.index = OccurrenceIndex()
        self.line_cache: Dict[str, List[str]] = {}
        self.hasher = BlockHasher(self.index, self.line_cache, self.block_size, self.min_block_length)
        self.aggregator = DuplicationAggregator(self.index, self.line_cache, self.block_size, self.min_block_length)
        self._paths: List[str] = []

    def hash_files(self, file_paths: Iterable[str]) -> None:
        """Run the hashing pass over file_paths (may be called several times before seal)."""
        file_paths = list(file_paths)
        self._paths.extend(file_paths)
        self.hasher.hash_files(file_paths)

    def seal(self) -> None:
        """Mark the hashing pass as complete."""
        self.index.seal()
        if conf.get('verbose'):
            print(f'Indexed {len(self.index)} distinct blocks from {len(self.line_cache)} files '
                  f'({len(self.hasher.failed)} unreadable)')

    def aggregate(self) -> Dict[str, DuplicationInfo]:
        """
        Run the aggregation pass.

        Returns:
            One DuplicationInfo per input path, in input order

        Raises:
            ScanPhaseError: If the hashing pass has not been sealed
        """
        if not self.index.sealed:
            raise ScanPhaseError('hashing pass must be sealed before aggregation')

        computed = self.aggregator.aggregate()
        results: Dict[str, DuplicationInfo] = {}
        for path in self._paths:
            if path in results:
                continue
            results[path] = computed.get(path, self.hasher.failed.get(path, ZERO_DUPLICATION))
        return results

    def run(self, file_paths: Iterable[str]) -> Dict[str, DuplicationInfo]:
        self.hash_files(file_paths)
        self.seal()
        return self.aggregate()


def analyze_code_duplication(file_paths: Iterable[str], block_size: Optional[int] = None,
                             min_block_length: Optional[int] = None) -> Dict[str, DuplicationInfo]:
    """
    Convenience function to run a complete duplication scan.

    Args:
        file_paths: Files to compare against each other
        block_size: Lines per window (defaults to the configured value)
        min_block_length: Minimum filtered block length (defaults to the configured value)

    Returns:
        Dictionary mapping each input path to its DuplicationInfo
    """
    return DuplicationScan(block_size, min_block_length).run(file_paths)
