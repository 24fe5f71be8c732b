"""
Run header attributes and their fixed positions in the .Dpr preamble
"""

from dataclasses import dataclass, fields
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .constants import DprConstants
from .fields import hex_decode, to_float, to_int


@dataclass(frozen=True)
class DprHeader:
    """Run identification, ambient conditions and machine description"""
    # Run identification
    date: str = ''
    time: str = ''
    filename: str = ''
    run_number: int = 0
    run_name: str = ''

    # Ambient conditions
    ambient_temp_c: float = 0.0
    ambient_press_mb: float = 0.0
    ambient_humid_pct: float = 0.0
    correction_factor: float = 0.0

    # Machine geometry
    roller_circ_ft: float = 0.0
    roller_diam_in: float = 0.0
    wheel_circ_m: float = 0.0
    gear_ratio: float = 0.0
    machine_sub: str = ''  # opaque sub-model code
    friction_poly: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)  # c0*v^3 + c1*v^2 + c2*v + c3

    # Machine identity
    manufacturer: str = ''
    model: str = ''
    machine_type: str = ''
    opto_slots: int = 0
    software_version: str = ''

    # Rated peaks
    peak_power_hp: float = 0.0
    peak_power_rpm: float = 0.0
    peak_torque_ftlb: float = 0.0
    peak_torque_rpm: float = 0.0

    roller_inertia: float = 0.0  # kg.m2

    @property
    def peak_power_kw(self) -> float:
        """Rated peak power in kW"""
        return self.peak_power_hp * DprConstants.HP_TO_KW

    @property
    def peak_torque_nm(self) -> float:
        """Rated peak torque in Nm"""
        return self.peak_torque_ftlb / DprConstants.NM_TO_FTLB


class HeaderField(NamedTuple):
    """Position of one header attribute within the rows before the data block"""
    row: int
    col: int
    attr: str
    mode: str = 'float'  # 'text', 'int', 'float' or 'hex' (hex-encoded float)
    index: Optional[int] = None  # element of a tuple attribute


HEADER_LAYOUT: List[HeaderField] = [
    HeaderField(1, 0, 'date', 'text'),
    HeaderField(1, 1, 'time', 'text'),
    HeaderField(1, 2, 'filename', 'text'),
    HeaderField(1, 3, 'run_number', 'int'),
    HeaderField(1, 5, 'run_name', 'text'),

    HeaderField(2, 0, 'ambient_temp_c'),
    HeaderField(2, 1, 'ambient_press_mb'),
    HeaderField(2, 2, 'ambient_humid_pct'),
    HeaderField(2, 3, 'correction_factor'),

    HeaderField(4, 0, 'roller_circ_ft', 'hex'),
    HeaderField(4, 1, 'roller_diam_in', 'hex'),
    HeaderField(4, 4, 'wheel_circ_m', 'hex'),
    HeaderField(4, 6, 'gear_ratio'),
    HeaderField(4, 7, 'machine_sub', 'text'),
    HeaderField(4, 10, 'friction_poly', 'float', 0),
    HeaderField(4, 11, 'friction_poly', 'float', 1),
    HeaderField(4, 12, 'friction_poly', 'float', 2),
    HeaderField(4, 13, 'friction_poly', 'float', 3),

    HeaderField(5, 0, 'manufacturer', 'text'),
    HeaderField(5, 1, 'model', 'text'),
    HeaderField(5, 2, 'machine_type', 'text'),
    HeaderField(5, 3, 'opto_slots', 'int'),
    HeaderField(5, 6, 'software_version', 'text'),

    HeaderField(6, 0, 'peak_power_hp'),
    HeaderField(6, 1, 'peak_power_rpm'),
    HeaderField(6, 2, 'peak_torque_ftlb'),
    HeaderField(6, 3, 'peak_torque_rpm'),

    HeaderField(7, 7, 'roller_inertia'),
]


class HeaderExtractor:
    """Builds a DprHeader from the preamble rows by positional lookup"""

    def __init__(self, layout: Sequence[HeaderField] = HEADER_LAYOUT):
        self.layout = layout

    def extract(self, rows: Sequence[Sequence[str]]) -> DprHeader:
        """
        Populate a header from the records that precede the data block

        Missing rows or columns leave the attribute at its default.

        Args:
            rows: Records before the data block, in file order

        Returns:
            DprHeader with every located attribute converted
        """
        values: Dict[str, object] = {}
        tuples: Dict[str, List[float]] = {}
        defaults = {f.name: f.default for f in fields(DprHeader)}

        for spec in self.layout:
            if spec.row >= len(rows) or spec.col >= len(rows[spec.row]):
                continue
            value = self._convert(rows[spec.row][spec.col], spec.mode)

            if spec.index is None:
                values[spec.attr] = value
            else:
                current = tuples.setdefault(spec.attr, list(defaults[spec.attr]))
                current[spec.index] = value

        for attr, items in tuples.items():
            values[attr] = tuple(items)

        return DprHeader(**values)

    @staticmethod
    def _convert(text: str, mode: str):
        if mode == 'text':
            return text
        if mode == 'int':
            return to_int(text)
        if mode == 'hex':
            return to_float(hex_decode(text))
        return to_float(text)
