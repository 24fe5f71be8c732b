import unittest

from dprview.block_locator import BlockLocator
from dprview.errors import NoDataBlockFoundError, TooFewRecordsError


def _data_row(width=24):
    return [str(i) for i in range(width)]


def _noise_row():
    return ['Comment', 'text only']


def _records(*segments):
    """Build records from ('data', n) / ('noise', n) segments"""
    records = []
    for kind, count in segments:
        make = _data_row if kind == 'data' else _noise_row
        records.extend(make() for _ in range(count))
    return records


class DataRowTests(unittest.TestCase):
    def setUp(self):
        self.locator = BlockLocator()

    def test_row_needs_min_columns(self):
        self.assertFalse(self.locator.is_data_row(_data_row(19)))
        self.assertTrue(self.locator.is_data_row(_data_row(20)))

    def test_numeric_ratio_threshold_is_inclusive(self):
        row = _data_row(20)
        row[0] = 'a'
        row[1] = 'b'
        self.assertTrue(self.locator.is_data_row(row))  # 18 / 20 = 0.9
        row[2] = 'c'
        self.assertFalse(self.locator.is_data_row(row))

    def test_empty_fields_are_not_counted(self):
        self.assertFalse(self.locator.is_data_row([''] * 25))
        sparse = ['1'] * 9 + [''] * 15
        self.assertFalse(self.locator.is_data_row(sparse))
        sparse[9] = '2'
        self.assertTrue(self.locator.is_data_row(sparse))

    def test_marker_tokens_count_as_numeric(self):
        row = ['#TRUE#', '#FALSE#', '-', '+'] * 5
        self.assertTrue(self.locator.is_data_row(row))


class LocateTests(unittest.TestCase):
    def setUp(self):
        self.locator = BlockLocator()

    def test_short_file_is_rejected_before_block_search(self):
        with self.assertRaises(TooFewRecordsError) as ctx:
            self.locator.locate(_records(('data', 41)))
        self.assertEqual(41, ctx.exception.record_count)

    def test_short_file_of_noise_is_too_short_not_missing_block(self):
        with self.assertRaises(TooFewRecordsError):
            self.locator.locate(_records(('noise', 10)))

    def test_block_below_minimum_length_is_rejected(self):
        with self.assertRaises(NoDataBlockFoundError) as ctx:
            self.locator.locate(_records(('noise', 8), ('data', 49), ('noise', 2)))
        self.assertEqual(49, ctx.exception.best_length)

    def test_block_at_minimum_length_is_accepted(self):
        block = self.locator.locate(_records(('noise', 8), ('data', 50), ('noise', 2)))
        self.assertEqual((8, 57), (block.start, block.end))
        self.assertEqual(50, block.num_rows)

    def test_block_running_to_end_of_file(self):
        block = self.locator.locate(_records(('noise', 3), ('data', 55)))
        self.assertEqual((3, 57), (block.start, block.end))

    def test_longer_block_wins_regardless_of_position(self):
        block = self.locator.locate(_records(('noise', 5), ('data', 55), ('noise', 1), ('data', 60), ('noise', 1)))
        self.assertEqual(61, block.start)
        self.assertEqual(60, block.num_rows)

    def test_first_block_wins_a_tie(self):
        block = self.locator.locate(_records(('noise', 5), ('data', 55), ('noise', 1), ('data', 55)))
        self.assertEqual((5, 59), (block.start, block.end))

    def test_width_is_widest_row_capped_at_catalog_size(self):
        records = _records(('noise', 5), ('data', 50))
        records[10] = _data_row(30)
        self.assertEqual(30, self.locator.locate(records).width)
        records[11] = _data_row(45)
        self.assertEqual(41, self.locator.locate(records).width)

    def test_thresholds_are_tunable(self):
        locator = BlockLocator(min_records=1, min_block_rows=3)
        block = locator.locate(_records(('noise', 1), ('data', 3)))
        self.assertEqual((1, 3), (block.start, block.end))
