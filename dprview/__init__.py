"""
dprview - Chassis Dynamometer Log Viewer

Parses .Dpr dynamometer log files into a run header plus channel samples
and derives torque and power curves from roller acceleration.
"""

from .analyzer import DynoAnalyzer
from .block_locator import BlockLocator, DataBlock
from .channels import CHANNELS, ChannelDef, NUM_CHANNELS
from .constants import DprConstants
from .data_loader import DataLoader, parse_dpr_file
from .data_processing import DataProcessor
from .errors import DprParseError, NoDataBlockFoundError, TooFewRecordsError, UnreadableSourceError
from .header import DprHeader, HeaderExtractor
from .plotting import Plotter
from .run import DprRun, RunAssembler
from .torque_calculator import TorqueCalculator, TorqueCurve, compute_torque

__version__ = "1.0.0"

# Main exports for easy importing
__all__ = [
    'DynoAnalyzer',
    'BlockLocator',
    'DataBlock',
    'CHANNELS',
    'ChannelDef',
    'NUM_CHANNELS',
    'DprConstants',
    'DataLoader',
    'parse_dpr_file',
    'DataProcessor',
    'DprParseError',
    'NoDataBlockFoundError',
    'TooFewRecordsError',
    'UnreadableSourceError',
    'DprHeader',
    'HeaderExtractor',
    'Plotter',
    'DprRun',
    'RunAssembler',
    'TorqueCalculator',
    'TorqueCurve',
    'compute_torque',
]
