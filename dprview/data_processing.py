"""
Resampling of dynamometer channels onto unique timestamps
"""

from typing import Tuple

import numpy as np


# Lazy imports for heavy dependencies
def _import_pandas():
    import pandas as pd
    return pd


class DataProcessor:
    """Handles timestamp bucketing of raw channel samples"""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def resample_unique_timestamps(self, time_values: np.ndarray, omega: np.ndarray,
                                   rpm: np.ndarray, speed: np.ndarray
                                   ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Average all samples that share an elapsed-time value

        The logger often samples faster than its timer resolution, so several
        rows carry the same timestamp. Each distinct timestamp becomes one
        sample holding the mean of its rows.

        Args:
            time_values: Elapsed time per row
            omega: Roller angular velocity per row
            rpm: Engine RPM per row
            speed: Wheel speed per row

        Returns:
            Tuple of (time, omega, rpm, speed) arrays ordered by ascending time
        """
        pd = _import_pandas()

        frame = pd.DataFrame({
            'time': np.asarray(time_values, dtype=float),
            'omega': np.asarray(omega, dtype=float),
            'rpm': np.asarray(rpm, dtype=float),
            'speed': np.asarray(speed, dtype=float),
        })
        grouped = frame.groupby('time', sort=True).mean()

        if self.verbose and len(grouped) != len(frame):
            print(f"Resampled {len(frame)} rows to {len(grouped)} unique timestamps")

        return (grouped.index.to_numpy(dtype=float),
                grouped['omega'].to_numpy(dtype=float),
                grouped['rpm'].to_numpy(dtype=float),
                grouped['speed'].to_numpy(dtype=float))
