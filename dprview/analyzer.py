"""
Main DynoAnalyzer class that orchestrates all modules
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .block_locator import BlockLocator
from .constants import DprConstants
from .data_loader import DataLoader
from .errors import DprParseError
from .plotting import DEFAULT_GRAPHS, Plotter
from .run import DprRun
from .torque_calculator import TorqueCalculator, TorqueCurve


class DynoAnalyzer:
    """Loads a .Dpr file, derives its torque curve and presents the results"""

    def __init__(self, window_size: int = DprConstants.DEFAULT_WINDOW_SIZE,
                 min_records: int = DprConstants.MIN_RECORDS,
                 min_block_rows: int = DprConstants.MIN_BLOCK_ROWS,
                 smoothing_factor: float = DprConstants.DEFAULT_SMOOTHING_FACTOR,
                 verbose: bool = True):
        self.window_size = window_size
        self.verbose = verbose

        # Initialize sub-modules
        block_locator = BlockLocator(min_records=min_records, min_block_rows=min_block_rows, verbose=verbose)
        self.data_loader = DataLoader(block_locator=block_locator, verbose=verbose)
        self.torque_calculator = TorqueCalculator(window_size, verbose)
        self.plotter = Plotter(smoothing_factor, verbose)

        self.filepath = ''
        self.load_error = ''
        self.run: Optional[DprRun] = None
        self.curve: Optional[TorqueCurve] = None

    def open_file(self, path: Union[str, Path]) -> DprRun:
        """
        Parse a file and derive its torque curve, replacing any previous result

        Raises:
            DprParseError: If the file cannot be parsed; the message is kept in load_error
        """
        self.load_error = ''
        self.run = None
        self.curve = None
        self.filepath = str(path)

        try:
            run = self.data_loader.load_data(path)
        except DprParseError as e:
            self.load_error = str(e)
            raise

        self.run = run
        self.curve = self.torque_calculator.derive(run)
        return run

    def _require_run(self) -> DprRun:
        if self.run is None:
            raise ValueError("No run loaded. Call open_file() first.")
        return self.run

    def generate_report(self) -> str:
        """Generate a text report of the run header and derived peaks"""
        run = self._require_run()
        hdr = run.header

        report = ["Dyno Run Report", "=" * 40, ""]

        report.extend([
            "Run:",
            f"  File: {self.filepath}",
            f"  Date: {hdr.date}  {hdr.time}",
            f"  Run: #{hdr.run_number} {hdr.run_name}".rstrip(),
            f"  Dyno: {hdr.manufacturer} {hdr.model}".rstrip(),
            f"  Samples: {run.num_rows} rows x {run.num_columns} channels",
            "",
            "Ambient:",
            f"  {hdr.ambient_temp_c:.1f} C  {hdr.ambient_press_mb:.0f} mbar  {hdr.ambient_humid_pct:.0f}%",
            f"  Correction Factor: {hdr.correction_factor:.3f}",
            "",
            "Machine:",
            f"  Inertia: {hdr.roller_inertia:.4f} kg.m2",
            f"  Gear Ratio: {hdr.gear_ratio:.4f}",
            f"  Wheel Circumference: {hdr.wheel_circ_m:.4f} m",
            f"  Roller: {hdr.roller_circ_ft:.4f} ft circumference, {hdr.roller_diam_in:.4f} in diameter",
            "",
            "Rated Peaks:",
            f"  {hdr.peak_power_kw:.1f} kW @ {hdr.peak_power_rpm:.0f} RPM",
            f"  {hdr.peak_torque_nm:.1f} Nm @ {hdr.peak_torque_rpm:.0f} RPM",
            "",
        ])

        if self.curve is None or self.curve.is_empty:
            report.append("Derived Curve: not available (required channels missing)")
        else:
            peak_torque, peak_torque_rpm = self.curve.peak_torque()
            peak_power, peak_power_rpm = self.curve.peak_power()
            report.extend([
                f"Derived Curve ({len(self.curve)} points):",
                f"  Max Torque: {peak_torque:.1f} Nm @ {peak_torque_rpm:.0f} RPM",
                f"  Max Power: {peak_power:.1f} kW @ {peak_power_rpm:.0f} RPM",
                f"  Max RPM: {self.curve.rpm[self.curve.peak_rpm_idx]:.0f}",
            ])

        return "\n".join(report)

    def generate_debug_output(self, rpm_increment: int = DprConstants.DEFAULT_RPM_INCREMENT) -> str:
        """
        Generate tabular torque/power data at RPM increments

        Args:
            rpm_increment: RPM step between output rows

        Returns:
            Formatted table of the curve point closest to each RPM step
        """
        self._require_run()
        if self.curve is None or self.curve.is_empty:
            return "No torque curve available for debug output."
        if rpm_increment <= 0:
            raise ValueError("rpm_increment must be positive")

        curve = self.curve
        finite = np.isfinite(curve.rpm)
        if not finite.any():
            return "No torque curve available for debug output."
        rpm = curve.rpm[finite]
        time = curve.time[finite]
        torque = curve.torque_nm[finite]
        power = curve.power_kw[finite]
        min_rpm = float(rpm.min())
        max_rpm = float(rpm.max())

        debug_output = [
            "Debug Mode - Tabular Torque/Power Output", "=" * 50, "",
            f"RPM Range: {min_rpm:.0f} - {max_rpm:.0f}",
            f"Output Increment: {rpm_increment} RPM",
            f"Total Data Points: {len(rpm)}",
            "",
            f"{'RPM':>6} | {'Time (s)':>8} | {'Torque (Nm)':>11} | {'Power (kW)':>10} | Notes",
            "-" * 55,
        ]

        current_rpm = int(min_rpm / rpm_increment) * rpm_increment
        if current_rpm < min_rpm:
            current_rpm += rpm_increment

        while current_rpm <= max_rpm:
            closest = int(abs(rpm - current_rpm).argmin())
            rpm_diff = abs(rpm[closest] - current_rpm)

            # Only output if a point lies within 60% of the increment
            if rpm_diff <= rpm_increment * 0.6:
                notes = f"±{rpm_diff:.0f} RPM" if rpm_diff > rpm_increment * 0.3 else ""
                debug_output.append(
                    f"{current_rpm:>6} | {time[closest]:>8.3f} | {torque[closest]:>11.1f} | "
                    f"{power[closest]:>10.1f} | {notes}"
                )
            current_rpm += rpm_increment

        return "\n".join(debug_output)

    def channel_listing(self) -> List[str]:
        """Populated channel slots as 'slot  name  [unit]' lines"""
        run = self._require_run()
        lines = []
        for slot, channel in enumerate(run.channel_defs):
            unit = f"[{channel.unit}]" if channel.unit else ""
            lines.append(f"{slot:>3}  {channel.name:<18} {unit}".rstrip())
        return lines

    def export_curve_csv(self, path: Union[str, Path]) -> None:
        """Write the derived curve to a CSV file"""
        self._require_run()
        if self.curve is None or self.curve.is_empty:
            raise ValueError("No torque curve available to export.")
        self.curve.to_dataframe().to_csv(path, index=False)
        if self.verbose:
            print(f"Curve exported to {path}")

    def plot_graphs(self, graphs: Sequence[Tuple[str, str]] = DEFAULT_GRAPHS,
                    save_path: Optional[str] = None, title: Optional[str] = None, show: bool = True):
        """Plot the selected series pairs of the derived curve"""
        run = self._require_run()
        if self.curve is None or self.curve.is_empty:
            raise ValueError("No torque curve available to plot.")
        return self.plotter.plot_graphs(self.curve, graphs, run.header, save_path,
                                        title or Path(self.filepath).name, show)
