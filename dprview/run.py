"""
Run record and assembly of the data block into channel arrays
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .block_locator import DataBlock
from .channels import CHANNELS, ChannelDef, NUM_CHANNELS, channel_index
from .fields import to_float
from .header import DprHeader


# Lazy imports for heavy dependencies
def _import_pandas():
    import pandas as pd
    return pd


@dataclass(frozen=True, eq=False)
class DprRun:
    """Header plus samples addressed as data[channel][row]"""
    header: DprHeader
    data: np.ndarray  # shape (num_columns, num_rows)
    num_rows: int
    num_columns: int
    source_path: str = ''

    def __post_init__(self):
        # Private read-only copy, the caller's array stays writable
        data = np.array(self.data, dtype=float)
        data.flags.writeable = False
        object.__setattr__(self, 'data', data)

    @property
    def channel_defs(self) -> List[ChannelDef]:
        """Catalog entries for the populated columns"""
        return CHANNELS[:self.num_columns]

    def has_channel(self, slot: int) -> bool:
        return 0 <= slot < self.num_columns and self.num_rows > 0

    def channel(self, slot: int) -> np.ndarray:
        """Samples of one catalog slot"""
        if not 0 <= slot < self.num_columns:
            raise IndexError(f"Channel slot {slot} not present (run has {self.num_columns} columns)")
        return self.data[slot]

    def channel_by_name(self, name: str) -> np.ndarray:
        return self.channel(channel_index(name))

    def to_dataframe(self) -> 'pd.DataFrame':
        """Samples as a DataFrame with one column per populated channel"""
        pd = _import_pandas()
        columns = [channel.name for channel in self.channel_defs]
        return pd.DataFrame(self.data.T.copy(), columns=columns)


class RunAssembler:
    """Transposes the data block rows into column-major channel arrays"""

    def __init__(self, max_columns: int = NUM_CHANNELS):
        self.max_columns = max_columns

    def assemble(self, records: List[List[str]], block: DataBlock, header: DprHeader,
                 source_path: str = '') -> DprRun:
        """
        Build a run from the located block

        Cells missing from short rows and unparseable text become 0.0.

        Args:
            records: All records of the file
            block: Located data block
            header: Header extracted from the preamble
            source_path: File the records were read from

        Returns:
            DprRun with num_rows x num_columns samples
        """
        num_rows = block.end - block.start + 1
        num_columns = min(block.width, self.max_columns)

        data = np.zeros((num_columns, num_rows), dtype=float)
        for r in range(num_rows):
            row = records[block.start + r]
            for c in range(min(len(row), num_columns)):
                data[c, r] = to_float(row[c])

        return DprRun(header=header, data=data, num_rows=num_rows,
                      num_columns=num_columns, source_path=source_path)
