"""
Data block detection for tokenized .Dpr records
"""

from dataclasses import dataclass
from typing import List, Sequence

from .channels import NUM_CHANNELS
from .constants import DprConstants
from .errors import NoDataBlockFoundError, TooFewRecordsError
from .fields import is_numeric


@dataclass(frozen=True)
class DataBlock:
    """Inclusive row range of the sample table and its column width"""
    start: int
    end: int
    width: int

    @property
    def num_rows(self) -> int:
        return self.end - self.start + 1


class BlockLocator:
    """Finds the longest contiguous run of numeric rows in a record list"""

    def __init__(self,
                 min_cols: int = DprConstants.DATA_ROW_MIN_COLS,
                 min_numeric: int = DprConstants.DATA_ROW_MIN_NUMERIC,
                 ratio: float = DprConstants.DATA_ROW_NUMERIC_RATIO,
                 min_records: int = DprConstants.MIN_RECORDS,
                 min_block_rows: int = DprConstants.MIN_BLOCK_ROWS,
                 max_width: int = NUM_CHANNELS,
                 verbose: bool = False):
        self.min_cols = min_cols
        self.min_numeric = min_numeric
        self.ratio = ratio
        self.min_records = min_records
        self.min_block_rows = min_block_rows
        self.max_width = max_width
        self.verbose = verbose

    def is_data_row(self, row: Sequence[str]) -> bool:
        """
        Decide whether a record looks like a row of the sample table

        Args:
            row: Fields of one record

        Returns:
            True if the row is wide enough and mostly numeric
        """
        if len(row) < self.min_cols:
            return False

        non_empty = 0
        numeric = 0
        for field in row:
            if field:
                non_empty += 1
                if is_numeric(field):
                    numeric += 1

        return non_empty > 0 and numeric >= self.min_numeric and numeric / non_empty >= self.ratio

    def locate(self, records: List[List[str]]) -> DataBlock:
        """
        Find the data block in a tokenized file

        Runs of consecutive data rows are compared by length and the first
        of the longest wins.

        Args:
            records: All records of the file

        Returns:
            DataBlock with inclusive start/end row indices

        Raises:
            TooFewRecordsError: If the file cannot hold a preamble and a block
            NoDataBlockFoundError: If the longest run is below min_block_rows
        """
        if len(records) < self.min_records:
            raise TooFewRecordsError(len(records))

        best_start = -1
        best_end = -1
        best_len = 0
        run_start = None

        for i, row in enumerate(records):
            if self.is_data_row(row):
                if run_start is None:
                    run_start = i
            elif run_start is not None:
                if i - run_start > best_len:
                    best_start, best_end, best_len = run_start, i - 1, i - run_start
                run_start = None

        # Handle a block that runs to the end of the file
        if run_start is not None and len(records) - run_start > best_len:
            best_start, best_end, best_len = run_start, len(records) - 1, len(records) - run_start

        if best_len == 0 or best_len < self.min_block_rows:
            raise NoDataBlockFoundError(best_len)

        width = max(len(records[i]) for i in range(best_start, best_end + 1))
        width = min(width, self.max_width)

        if self.verbose:
            print(f"Data block found at rows {best_start}-{best_end} ({best_len} rows, {width} columns)")

        return DataBlock(start=best_start, end=best_end, width=width)
