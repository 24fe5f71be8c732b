"""
Loading of .Dpr dynamometer log files into run records
"""

from pathlib import Path
from typing import Optional, Union

from .block_locator import BlockLocator
from .constants import DprConstants
from .errors import UnreadableSourceError
from .header import HeaderExtractor
from .run import DprRun, RunAssembler
from .tokenizer import read_records


class DataLoader:
    """Reads a .Dpr file and builds a DprRun from it"""

    def __init__(self, block_locator: Optional[BlockLocator] = None,
                 header_extractor: Optional[HeaderExtractor] = None,
                 verbose: bool = False):
        self.verbose = verbose
        self.block_locator = block_locator or BlockLocator(verbose=verbose)
        self.header_extractor = header_extractor or HeaderExtractor()
        self.run_assembler = RunAssembler(self.block_locator.max_width)

    def load_data(self, path: Union[str, Path]) -> DprRun:
        """
        Parse a .Dpr file

        Args:
            path: Path to the log file

        Returns:
            DprRun with the header and channel samples

        Raises:
            UnreadableSourceError: If the file cannot be read
            TooFewRecordsError: If the file is too short to hold a data block
            NoDataBlockFoundError: If no long enough numeric block exists
        """
        path = str(path)
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise UnreadableSourceError(path, e.strerror) from e

        return self.parse_text(raw.decode(DprConstants.SOURCE_ENCODING), source_path=path)

    def parse_text(self, content: str, source_path: str = '') -> DprRun:
        """Parse already decoded file content"""
        records = read_records(content)
        block = self.block_locator.locate(records)

        header = self.header_extractor.extract(records[:block.start])
        run = self.run_assembler.assemble(records, block, header, source_path)

        if self.verbose:
            print(f"Loaded {run.num_rows} data rows x {run.num_columns} channels from {source_path or '<text>'}")

        return run


def parse_dpr_file(path: Union[str, Path], verbose: bool = False) -> DprRun:
    """Parse a .Dpr file with the default detection thresholds"""
    return DataLoader(verbose=verbose).load_data(path)
