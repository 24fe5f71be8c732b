"""
Builders for synthetic .Dpr files used by the tests
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

DATA_WIDTH = 34


def hex_encode(text: str) -> str:
    return text.encode('ascii').hex().upper()


def csv_line(fields: Sequence[str]) -> str:
    """Join fields, quoting any that contain a comma, quote or newline"""
    out = []
    for field in fields:
        if any(c in field for c in ',"\n'):
            field = '"' + field.replace('"', '""') + '"'
        out.append(field)
    return ','.join(out)


def preamble_rows(friction=('0', '0', '0', '0'), inertia: str = '1.234') -> List[List[str]]:
    """Header rows in the positions the extractor reads"""
    return [
        ['DynaRun Data File', 'v4'],
        ['03/14/2024', '10:22:05', 'RUN0001.Dpr', '7', '', 'Baseline, pull'],
        ['21.5', '1013', '45', '1.012'],
        ['Settings'],
        [hex_encode('12.566'), hex_encode('48.0'), '', '', hex_encode('1.987'), '', '1.0', 'S2', '', '',
         *friction],
        ['DynaCorp', 'DC-500', '2WD', '60', '', '', '4.2.1'],
        ['150.5', '6500', '120.0', '4800'],
        ['', '', '', '', '', '', '', inertia],
    ]


def ramp_row(i: int, width: int = DATA_WIDTH) -> List[str]:
    """Sample row with linear RPM and a constant roller acceleration of 2 rad/s2"""
    t = i * 0.1
    row = ['0'] * width
    row[0] = str(1000 + i)
    row[2] = f'{t:.3f}'
    row[5] = f'{2000 + 50 * i:.1f}'
    row[7] = f'{i * 0.25:.3f}'
    row[8] = f'{10 + 2 * t:.4f}'
    row[9] = f'{30 + 0.5 * i:.2f}'
    row[width - 1] = '#TRUE#'
    return row


def build_dpr_text(num_rows: int = 60, preamble: Optional[List[List[str]]] = None,
                   row_fn: Callable[[int], List[str]] = ramp_row,
                   trailer: Sequence[Sequence[str]] = (('End of data',),),
                   line_end: str = '\r\n') -> str:
    rows: List[Sequence[str]] = list(preamble_rows() if preamble is None else preamble)
    rows.extend(row_fn(i) for i in range(num_rows))
    rows.extend(trailer)
    return ''.join(csv_line(row) + line_end for row in rows)


def write_dpr(directory, name: str = 'run.Dpr', **kwargs) -> Path:
    path = Path(directory) / name
    path.write_bytes(build_dpr_text(**kwargs).encode('latin-1'))
    return path


def header_defaults() -> Dict[str, object]:
    return {
        'date': '03/14/2024',
        'run_number': 7,
        'run_name': 'Baseline, pull',
        'ambient_press_mb': 1013.0,
        'roller_circ_ft': 12.566,
        'roller_diam_in': 48.0,
        'wheel_circ_m': 1.987,
        'machine_sub': 'S2',
        'opto_slots': 60,
        'roller_inertia': 1.234,
    }
