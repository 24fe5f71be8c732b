"""
Parse failures raised while loading .Dpr files
"""

from typing import Optional


class DprParseError(ValueError):
    """Base class for structural failures that prevent building a run"""


class UnreadableSourceError(DprParseError):
    """The input path cannot be opened or read"""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        message = f"cannot open: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class TooFewRecordsError(DprParseError):
    """The file has fewer records than a preamble plus data block needs"""

    def __init__(self, record_count: int):
        self.record_count = record_count
        super().__init__(f"file too short ({record_count} rows)")


class NoDataBlockFoundError(DprParseError):
    """No contiguous run of data rows reaches the minimum block length"""

    def __init__(self, best_length: int):
        self.best_length = best_length
        super().__init__(f"no data block found ({best_length} rows)")
