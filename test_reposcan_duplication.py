"""
Test suite for reposcan_duplication module.
Tests block hashing, cross-file aggregation and the scan phase ordering.
"""

import os
import shutil
import sys
import tempfile
import unittest

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from reposcanner.reposcan_config import ScannerConfig, set_config
from reposcanner.reposcan_duplication import (
    BlockHasher, DuplicationAggregator, DuplicationInfo, DuplicationScan,
    OccurrenceIndex, ScanPhaseError, ZERO_DUPLICATION,
    analyze_code_duplication, fingerprint_block, normalize_block,
)
from reposcanner.reposcan_helpers import percentage, round_half_up


SHARED_FUNCTION = ['function foo() {', '  return 1;', '}']


class FileFixture(unittest.TestCase):
    """Creates files in a temporary directory."""

    def setUp(self):
        set_config(ScannerConfig())
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def write(self, name, lines, trailing_newline=True):
        path = os.path.join(self.tmpdir, name)
        content = '\n'.join(lines) + ('\n' if trailing_newline else '')
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        return path


class TestBlockNormalization(unittest.TestCase):
    """Test block text normalization and fingerprints."""

    def test_blank_lines_dropped_and_lines_trimmed(self):
        self.assertEqual(normalize_block(['  a = 1;  ', '   ', '\tb = 2;']), 'a = 1;\nb = 2;')

    def test_indentation_does_not_change_fingerprint(self):
        self.assertEqual(
            fingerprint_block(['    if (x) {', '        y();', '    }']),
            fingerprint_block(['if (x) {', '\ty();', '}']),
        )

    def test_different_content_different_fingerprint(self):
        self.assertNotEqual(
            fingerprint_block(['return alpha + beta;', 'x', 'y']),
            fingerprint_block(['return alpha - beta;', 'x', 'y']),
        )

    def test_fingerprint_is_md5_hex(self):
        self.assertEqual(len(fingerprint_block(SHARED_FUNCTION)), 32)


class TestCrossFileDuplication(FileFixture):
    """Test duplication results for groups of files."""

    def test_shared_block_in_two_files(self):
        a = self.write('a.js', SHARED_FUNCTION + ["const a = 'only in file a';"])
        b = self.write('b.js', SHARED_FUNCTION + ["const b = 'only in file b';"])
        c = self.write('c.py', ['def bar():', '    return compute_other_value()', 'print(bar())'])

        results = analyze_code_duplication([a, b, c])

        self.assertEqual(results[a].duplicate_blocks, 1)
        self.assertEqual(results[a].duplicate_lines, 3)
        self.assertEqual(results[a].duplicate_percentage, 75.0)
        self.assertEqual(results[b], results[a])
        self.assertEqual(results[c], DuplicationInfo(0, 0, 0.0))

    def test_self_repetition_is_not_duplication(self):
        path = self.write('repeat.js', SHARED_FUNCTION + ['// separator line'] + SHARED_FUNCTION)
        other = self.write('other.js', ['let unrelated = computeSomething();', 'unrelated += 1;', 'done(unrelated);'])

        results = analyze_code_duplication([path, other])

        self.assertEqual(results[path].duplicate_blocks, 0)
        self.assertEqual(results[path].duplicate_lines, 0)
        self.assertEqual(results[path].duplicate_percentage, 0.0)

    def test_block_of_exactly_twenty_characters_ignored(self):
        lines = ['abcdef', 'ghijkl', 'mnopqr']  # 6 + 1 + 6 + 1 + 6 == 20
        a = self.write('a.txt', lines, trailing_newline=False)
        b = self.write('b.txt', lines, trailing_newline=False)

        results = analyze_code_duplication([a, b])

        self.assertEqual(results[a], ZERO_DUPLICATION)
        self.assertEqual(results[b], ZERO_DUPLICATION)

    def test_block_of_twenty_one_characters_counted(self):
        lines = ['abcdefg', 'ghijkl', 'mnopqr']
        a = self.write('a.txt', lines, trailing_newline=False)
        b = self.write('b.txt', lines, trailing_newline=False)

        results = analyze_code_duplication([a, b])

        self.assertEqual(results[a].duplicate_blocks, 1)
        self.assertEqual(results[a].duplicate_percentage, 100.0)

    def test_single_character_lines_never_duplicate(self):
        lines = ['{', '}', ';', '{', '}', ';']
        a = self.write('a.c', lines)
        b = self.write('b.c', lines)

        results = analyze_code_duplication([a, b])

        self.assertEqual(results[a].duplicate_blocks, 0)
        self.assertEqual(results[b].duplicate_blocks, 0)

    def test_threshold_uses_untrimmed_text(self):
        # 20 characters once trimmed, longer with indentation
        a = self.write('a.py', ['      abcdef', 'ghijkl', 'mnopqr'], trailing_newline=False)
        b = self.write('b.py', ['\t\t\tabcdef', 'ghijkl', 'mnopqr'], trailing_newline=False)
        c = self.write('c.py', ['abcdef', 'ghijkl', 'mnopqr'], trailing_newline=False)

        results = analyze_code_duplication([a, b, c])

        self.assertEqual(results[a].duplicate_blocks, 1)
        self.assertEqual(results[b].duplicate_blocks, 1)
        self.assertEqual(results[c].duplicate_blocks, 0)

    def test_overlapping_windows_count_lines_once(self):
        shared = [
            'int alpha = compute(1);',
            'int beta = compute(2);',
            'int gamma = compute(3);',
            'int delta = compute(4);',
        ]
        a = self.write('a.c', shared + ['int only_a = 0;'], trailing_newline=False)
        b = self.write('b.c', shared + ['int only_b = 0;'], trailing_newline=False)

        results = analyze_code_duplication([a, b])

        self.assertEqual(results[a].duplicate_blocks, 2)
        self.assertEqual(results[a].duplicate_lines, 4)
        self.assertEqual(results[a].duplicate_percentage, 80.0)

    def test_percentage_uses_non_blank_lines_of_whole_file(self):
        a = self.write('a.js', SHARED_FUNCTION + ['', '', "const a = 'only in file a';", ''])
        b = self.write('b.js', SHARED_FUNCTION)

        results = analyze_code_duplication([a, b])

        # 3 duplicate lines out of 4 non-blank lines
        self.assertEqual(results[a].duplicate_percentage, 75.0)

    def test_percentage_rounds_half_up(self):
        unique = ['unique_value_%02d = compute(%d)' % (i, i) for i in range(93)]
        a = self.write('a.py', SHARED_FUNCTION + unique)
        b = self.write('b.py', SHARED_FUNCTION)

        results = analyze_code_duplication([a, b])

        # 3 / 96 = 3.125%
        self.assertEqual(results[a].duplicate_lines, 3)
        self.assertEqual(results[a].duplicate_percentage, 3.13)

    def test_files_shorter_than_window(self):
        a = self.write('a.js', ['only one long line of code here'], trailing_newline=False)
        b = self.write('b.js', ['only one long line of code here'], trailing_newline=False)

        results = analyze_code_duplication([a, b])

        self.assertEqual(results[a], ZERO_DUPLICATION)

    def test_repeated_scans_are_deterministic(self):
        a = self.write('a.js', SHARED_FUNCTION + ['a();'])
        b = self.write('b.js', ['b();'] + SHARED_FUNCTION)
        paths = [a, b]

        self.assertEqual(analyze_code_duplication(paths), analyze_code_duplication(paths))

    def test_path_listed_twice_is_one_file(self):
        a = self.write('a.js', SHARED_FUNCTION + ["const a = 'only in file a';"])
        b = self.write('b.js', SHARED_FUNCTION + ["const b = 'only in file b';"])

        self.assertEqual(analyze_code_duplication([a, a]), {a: ZERO_DUPLICATION})

        results = analyze_code_duplication([a, a, b])

        self.assertEqual(list(results.keys()), [a, b])
        self.assertEqual(results[a], DuplicationInfo(3, 1, 75.0))
        self.assertEqual(results[b], DuplicationInfo(3, 1, 75.0))

    def test_byte_order_mark_does_not_hide_block(self):
        a = os.path.join(self.tmpdir, 'a.js')
        with open(a, 'w', encoding='utf-8-sig', newline='') as f:
            f.write('\n'.join(SHARED_FUNCTION + ['a();']) + '\n')
        b = self.write('b.js', SHARED_FUNCTION + ['b();'])

        scan = DuplicationScan()
        results = scan.run([a, b])

        self.assertEqual(scan.line_cache[a][0], 'function foo() {')
        self.assertEqual(results[a].duplicate_blocks, 1)
        self.assertEqual(results[b].duplicate_blocks, 1)


class TestUnreadableFiles(FileFixture):
    """Test that read failures produce zero results without raising."""

    def test_missing_file(self):
        missing = os.path.join(self.tmpdir, 'does_not_exist.js')

        results = analyze_code_duplication([missing])

        self.assertEqual(results[missing].to_dict(),
                         {'duplicateLines': 0, 'duplicateBlocks': 0, 'duplicatePercentage': 0})

    def test_undecodable_file(self):
        path = os.path.join(self.tmpdir, 'binary.js')
        with open(path, 'wb') as f:
            f.write(b'\xff\xfe\xfa not utf-8 \x80\x81\n' * 5)

        results = analyze_code_duplication([path])

        self.assertEqual(results[path], ZERO_DUPLICATION)

    def test_missing_file_does_not_affect_others(self):
        a = self.write('a.js', SHARED_FUNCTION)
        b = self.write('b.js', SHARED_FUNCTION)
        missing = os.path.join(self.tmpdir, 'gone.js')

        results = analyze_code_duplication([a, missing, b])

        self.assertEqual(list(results.keys()), [a, missing, b])
        self.assertEqual(results[missing], ZERO_DUPLICATION)
        self.assertEqual(results[a].duplicate_blocks, 1)

    def test_unreadable_file_not_indexed(self):
        missing = os.path.join(self.tmpdir, 'gone.js')
        scan = DuplicationScan()
        scan.hash_files([missing])

        self.assertEqual(len(scan.index), 0)
        self.assertNotIn(missing, scan.line_cache)
        self.assertIn(missing, scan.hasher.failed)

    def test_empty_input(self):
        self.assertEqual(analyze_code_duplication([]), {})


class TestScanPhases(FileFixture):
    """Test the hashing/aggregation barrier."""

    def test_aggregate_before_seal_raises(self):
        scan = DuplicationScan()
        scan.hash_files([self.write('a.js', SHARED_FUNCTION)])
        with self.assertRaises(ScanPhaseError):
            scan.aggregate()

    def test_index_rejects_additions_after_seal(self):
        index = OccurrenceIndex()
        index.add('abc', 'a.js', 0)
        index.seal()
        with self.assertRaises(ScanPhaseError):
            index.add('abc', 'b.js', 0)

    def test_partial_index_under_counts(self):
        a = self.write('a.js', SHARED_FUNCTION + ['a();'])
        b = self.write('b.js', SHARED_FUNCTION + ['b();'])

        index = OccurrenceIndex()
        cache = {}
        hasher = BlockHasher(index, cache, 3, 20)
        aggregator = DuplicationAggregator(index, cache, 3, 20)

        hasher.hash_file(a)
        early = aggregator.analyze_file(a, cache[a])
        hasher.hash_file(b)
        late = aggregator.analyze_file(a, cache[a])

        self.assertEqual(early.duplicate_blocks, 0)
        self.assertEqual(late.duplicate_blocks, 1)

    def test_hash_files_can_be_called_in_batches(self):
        a = self.write('a.js', SHARED_FUNCTION)
        b = self.write('b.js', SHARED_FUNCTION)

        scan = DuplicationScan()
        scan.hash_files([a])
        scan.hash_files([b])
        scan.seal()
        results = scan.aggregate()

        self.assertEqual(results[a].duplicate_blocks, 1)
        self.assertEqual(results[b].duplicate_blocks, 1)

    def test_trailing_newline_kept_in_line_cache(self):
        a = self.write('a.js', ['x', 'y'])
        scan = DuplicationScan()
        scan.hash_files([a])
        self.assertEqual(scan.line_cache[a], ['x', 'y', ''])

    def test_occurrences_keep_insertion_order(self):
        a = self.write('a.js', SHARED_FUNCTION)
        b = self.write('b.js', ['// header comment line'] + SHARED_FUNCTION)

        scan = DuplicationScan()
        scan.hash_files([a, b])

        self.assertEqual(scan.index.get(fingerprint_block(SHARED_FUNCTION)), [(a, 0), (b, 1)])

    def test_custom_window_size(self):
        shared = ['first shared line of code', 'second shared line of code']
        a = self.write('a.js', shared + ['unique to a'], trailing_newline=False)
        b = self.write('b.js', shared + ['unique to b'], trailing_newline=False)

        results = DuplicationScan(block_size=2, min_block_length=20).run([a, b])

        self.assertEqual(results[a].duplicate_blocks, 1)
        self.assertEqual(results[a].duplicate_lines, 2)

    def test_invalid_window_size(self):
        with self.assertRaises(ValueError):
            DuplicationScan(block_size=0)


class TestRounding(unittest.TestCase):
    """Test half-up rounding helpers."""

    def test_percentage(self):
        self.assertEqual(percentage(1, 3), 33.33)
        self.assertEqual(percentage(2, 3), 66.67)
        self.assertEqual(percentage(1, 8), 12.5)
        self.assertEqual(percentage(1, 32), 3.13)
        self.assertEqual(percentage(5, 0), 0.0)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(3.125), 3.13)
        self.assertEqual(round_half_up(2.675), 2.68)
        self.assertEqual(round_half_up(0.0), 0.0)
        self.assertEqual(round_half_up(1.005, 1), 1.0)


if __name__ == '__main__':
    unittest.main()
