"""
Constants and parsing parameters for dynamometer log analysis
"""


class DprConstants:
    """Constants used throughout the parser and torque derivation"""

    # Physics constants
    NM_TO_FTLB = 0.7375621
    RPM_NM_TO_KW = 9549.2968
    HP_TO_KW = 0.7457

    # File layout
    SOURCE_ENCODING = 'latin-1'
    NUMERIC_MARKERS = ('#TRUE#', '#FALSE#', '-', '+')

    # Data block detection
    MIN_RECORDS = 42
    MIN_BLOCK_ROWS = 50
    DATA_ROW_MIN_COLS = 20
    DATA_ROW_MIN_NUMERIC = 10
    DATA_ROW_NUMERIC_RATIO = 0.9

    # Torque derivation defaults
    DEFAULT_WINDOW_SIZE = 51

    # Report defaults
    DEFAULT_RPM_INCREMENT = 250
    DEFAULT_SMOOTHING_FACTOR = 0.0
