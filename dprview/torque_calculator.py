"""
Torque and power derivation from roller dynamometer channels
"""

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .channels import (CH_ELAPSED_TIME, CH_ENGINE_RPM, CH_ROLLER_OMEGA,
                       CH_WHEEL_SPEED, REQUIRED_CHANNELS)
from .constants import DprConstants
from .data_processing import DataProcessor
from .run import DprRun


# Lazy imports for heavy dependencies
def _import_pandas():
    import pandas as pd
    return pd


def _empty() -> np.ndarray:
    return np.zeros(0, dtype=float)


@dataclass(eq=False)
class TorqueCurve:
    """Derived torque/power series, one sample per unique timestamp"""
    time: np.ndarray = field(default_factory=_empty)
    rpm: np.ndarray = field(default_factory=_empty)
    speed_mph: np.ndarray = field(default_factory=_empty)
    torque_nm: np.ndarray = field(default_factory=_empty)
    power_kw: np.ndarray = field(default_factory=_empty)
    peak_rpm_idx: int = -1

    def __len__(self) -> int:
        return len(self.rpm)

    @property
    def is_empty(self) -> bool:
        return len(self.rpm) == 0

    def series(self, name: str) -> np.ndarray:
        """Look up a series by its short name (time, rpm, speed, torque, power)"""
        lookup = {
            'time': self.time,
            'rpm': self.rpm,
            'speed': self.speed_mph,
            'torque': self.torque_nm,
            'power': self.power_kw,
        }
        if name not in lookup:
            raise ValueError(f"Unknown series '{name}', expected one of: {', '.join(lookup)}")
        return lookup[name]

    def peak_torque(self) -> Tuple[float, float]:
        """Return (torque_nm, rpm) at the torque maximum"""
        if self.is_empty:
            raise ValueError("Torque curve is empty")
        idx = int(np.argmax(self.torque_nm))
        return float(self.torque_nm[idx]), float(self.rpm[idx])

    def peak_power(self) -> Tuple[float, float]:
        """Return (power_kw, rpm) at the power maximum"""
        if self.is_empty:
            raise ValueError("Torque curve is empty")
        idx = int(np.argmax(self.power_kw))
        return float(self.power_kw[idx]), float(self.rpm[idx])

    def to_dataframe(self) -> 'pd.DataFrame':
        pd = _import_pandas()
        return pd.DataFrame({
            'time_s': self.time,
            'rpm': self.rpm,
            'speed_mph': self.speed_mph,
            'torque_nm': self.torque_nm,
            'power_kw': self.power_kw,
        })


class TorqueCalculator:
    """Computes torque and power from roller acceleration and friction losses"""

    def __init__(self, window_size: int = DprConstants.DEFAULT_WINDOW_SIZE, verbose: bool = False):
        self.window_size = window_size
        self.verbose = verbose
        self.data_processor = DataProcessor(verbose)

    def derive(self, run: DprRun) -> TorqueCurve:
        """
        Derive the torque curve of a run

        Samples are averaged per unique timestamp, roller acceleration is a
        central difference over window_size samples (clamped at the ends), and
        torque is friction torque plus roller inertia times acceleration.

        Args:
            run: Parsed run with elapsed time, RPM, roller omega and wheel speed

        Returns:
            TorqueCurve; empty if any required channel is missing
        """
        if not all(run.has_channel(slot) for slot in REQUIRED_CHANNELS):
            if self.verbose:
                print("Torque curve not computed: required channels missing")
            return TorqueCurve()

        time_values, omega, rpm, speed = self.data_processor.resample_unique_timestamps(
            run.channel(CH_ELAPSED_TIME),
            run.channel(CH_ROLLER_OMEGA),
            run.channel(CH_ENGINE_RPM),
            run.channel(CH_WHEEL_SPEED),
        )
        if len(time_values) == 0:
            return TorqueCurve()

        alpha = self.angular_acceleration(time_values, omega)
        friction_nm = self.friction_torque(speed, run.header.friction_poly) / DprConstants.NM_TO_FTLB

        torque_nm = friction_nm + run.header.roller_inertia * alpha
        power_kw = torque_nm * rpm / DprConstants.RPM_NM_TO_KW

        curve = TorqueCurve(
            time=time_values,
            rpm=rpm,
            speed_mph=speed,
            torque_nm=torque_nm,
            power_kw=power_kw,
            peak_rpm_idx=int(np.argmax(rpm)),
        )

        if self.verbose:
            peak_torque, peak_torque_rpm = curve.peak_torque()
            peak_power, peak_power_rpm = curve.peak_power()
            print(f"Derived {len(curve)} curve points: peak torque {peak_torque:.1f} Nm @ {peak_torque_rpm:.0f} RPM, "
                  f"peak power {peak_power:.1f} kW @ {peak_power_rpm:.0f} RPM")

        return curve

    def angular_acceleration(self, time_values: np.ndarray, omega: np.ndarray) -> np.ndarray:
        """
        Windowed central difference of omega over time

        Index i uses the samples half = window_size // 2 positions either side,
        clamped to the series ends. A non-positive time span gives 0.
        """
        n = len(time_values)
        half = max(self.window_size, 0) // 2
        idx = np.arange(n)
        lo = np.maximum(0, idx - half)
        hi = np.minimum(n - 1, idx + half)

        dt = time_values[hi] - time_values[lo]
        d_omega = omega[hi] - omega[lo]

        alpha = np.zeros(n, dtype=float)
        valid = dt > 0
        alpha[valid] = d_omega[valid] / dt[valid]
        return alpha

    @staticmethod
    def friction_torque(speed: np.ndarray, coefficients) -> np.ndarray:
        """Friction polynomial (highest degree first) evaluated at each speed, in ft-lb"""
        return np.polyval(np.asarray(coefficients, dtype=float), speed)


def compute_torque(run: DprRun, window_size: int = DprConstants.DEFAULT_WINDOW_SIZE) -> TorqueCurve:
    """Derive the torque curve of a run with the given smoothing window"""
    return TorqueCalculator(window_size).derive(run)
