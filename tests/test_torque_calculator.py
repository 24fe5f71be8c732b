from pathlib import Path
import tempfile
import unittest

import numpy as np

from dprview.channels import CH_ELAPSED_TIME, CH_ENGINE_RPM, CH_ROLLER_OMEGA, CH_WHEEL_SPEED
from dprview.constants import DprConstants
from dprview.data_loader import parse_dpr_file
from dprview.data_processing import DataProcessor
from dprview.header import DprHeader
from dprview.run import DprRun
from dprview.torque_calculator import TorqueCalculator, TorqueCurve, compute_torque

from dpr_samples import preamble_rows, write_dpr


def _make_run(time_values, omega, rpm=None, speed=None, num_columns=10, **header_kwargs):
    n = len(time_values)
    data = np.zeros((num_columns, n))
    columns = {
        CH_ELAPSED_TIME: time_values,
        CH_ROLLER_OMEGA: omega,
        CH_ENGINE_RPM: rpm if rpm is not None else np.linspace(2000, 6000, n),
        CH_WHEEL_SPEED: speed if speed is not None else np.linspace(20, 80, n),
    }
    for slot, values in columns.items():
        if slot < num_columns:
            data[slot] = values
    return DprRun(header=DprHeader(**header_kwargs), data=data, num_rows=n, num_columns=num_columns)


class EmptyCurveTests(unittest.TestCase):
    def test_missing_required_channel_gives_empty_curve(self):
        for num_columns in (3, 6, 9):
            run = _make_run(np.arange(60) * 0.1, np.arange(60) * 1.0, num_columns=num_columns)
            curve = compute_torque(run)
            self.assertTrue(curve.is_empty)
            self.assertEqual(-1, curve.peak_rpm_idx)
            for name in ('time', 'rpm', 'speed', 'torque', 'power'):
                self.assertEqual(0, len(curve.series(name)))

    def test_run_without_rows_gives_empty_curve(self):
        run = DprRun(header=DprHeader(), data=np.zeros((10, 0)), num_rows=0, num_columns=10)
        self.assertTrue(compute_torque(run).is_empty)

    def test_empty_curve_has_no_peaks(self):
        with self.assertRaises(ValueError):
            TorqueCurve().peak_torque()


class ResampleTests(unittest.TestCase):
    def test_duplicate_timestamps_are_averaged(self):
        t, omega, rpm, speed = DataProcessor().resample_unique_timestamps(
            np.array([0.2, 0.0, 0.0, 0.1, 0.2]),
            np.array([5.0, 10.0, 14.0, 3.0, 7.0]),
            np.array([1000.0, 2000.0, 2100.0, 1500.0, 1100.0]),
            np.array([1.0, 2.0, 4.0, 3.0, 5.0]),
        )
        np.testing.assert_array_equal([0.0, 0.1, 0.2], t)
        np.testing.assert_allclose([12.0, 3.0, 6.0], omega)
        np.testing.assert_allclose([2050.0, 1500.0, 1050.0], rpm)
        np.testing.assert_allclose([3.0, 3.0, 3.0], speed)

    def test_curve_length_is_distinct_timestamp_count(self):
        time_values = np.repeat(np.arange(30) * 0.1, 2)
        run = _make_run(time_values, np.arange(60) * 1.0)
        curve = compute_torque(run)
        self.assertEqual(60, run.num_rows)
        self.assertEqual(30, len(curve))
        self.assertEqual(0.0, curve.time[0])
        self.assertTrue(np.all(np.diff(curve.time) > 0))
        for name in ('time', 'rpm', 'speed', 'torque', 'power'):
            self.assertEqual(30, len(curve.series(name)))


class AngularAccelerationTests(unittest.TestCase):
    def test_window_of_one_gives_zero_acceleration(self):
        t = np.arange(20) * 0.1
        alpha = TorqueCalculator(window_size=1).angular_acceleration(t, t ** 2)
        np.testing.assert_array_equal(np.zeros(20), alpha)

    def test_window_covering_series_uses_endpoints(self):
        t = np.arange(20) * 0.1
        omega = t ** 2
        expected = (omega[-1] - omega[0]) / (t[-1] - t[0])
        for window_size in (39, 40, 100):
            alpha = TorqueCalculator(window_size=window_size).angular_acceleration(t, omega)
            np.testing.assert_allclose(np.full(20, expected), alpha)

    def test_window_is_clamped_at_series_ends(self):
        t = np.arange(10, dtype=float)
        omega = t ** 2
        alpha = TorqueCalculator(window_size=5).angular_acceleration(t, omega)
        # half = 2: index 0 spans 0..2, index 5 spans 3..7, index 9 spans 7..9
        self.assertAlmostEqual((4 - 0) / 2, alpha[0])
        self.assertAlmostEqual((49 - 9) / 4, alpha[5])
        self.assertAlmostEqual((81 - 49) / 2, alpha[9])

    def test_single_sample_has_zero_acceleration(self):
        alpha = TorqueCalculator().angular_acceleration(np.array([1.0]), np.array([5.0]))
        np.testing.assert_array_equal([0.0], alpha)

    def test_non_positive_window_behaves_like_zero_half(self):
        t = np.arange(5, dtype=float)
        alpha = TorqueCalculator(window_size=-3).angular_acceleration(t, t)
        np.testing.assert_array_equal(np.zeros(5), alpha)


class DerivationTests(unittest.TestCase):
    def setUp(self):
        self.t = np.arange(60) * 0.1
        self.rpm = 2000 + 50 * np.arange(60.0)

    def test_zero_friction_and_inertia_give_zero_torque_and_power(self):
        run = _make_run(self.t, 10 + 2 * self.t, rpm=self.rpm)
        curve = compute_torque(run)
        np.testing.assert_array_equal(np.zeros(60), curve.torque_nm)
        np.testing.assert_array_equal(np.zeros(60), curve.power_kw)
        self.assertEqual(59, curve.peak_rpm_idx)

    def test_constant_acceleration_gives_inertia_torque(self):
        run = _make_run(self.t, 10 + 2 * self.t, rpm=self.rpm, roller_inertia=1.5)
        curve = compute_torque(run)
        np.testing.assert_allclose(np.full(60, 3.0), curve.torque_nm, rtol=1e-9)
        np.testing.assert_allclose(3.0 * self.rpm / DprConstants.RPM_NM_TO_KW, curve.power_kw, rtol=1e-9)

    def test_friction_polynomial_is_converted_to_newton_metres(self):
        speed = np.linspace(10, 40, 60)
        poly = (0.001, -0.02, 0.5, 3.0)
        run = _make_run(self.t, np.full(60, 10.0), rpm=self.rpm, speed=speed, friction_poly=poly)
        curve = compute_torque(run)
        expected = (poly[0] * speed ** 3 + poly[1] * speed ** 2 + poly[2] * speed + poly[3]) / 0.7375621
        np.testing.assert_allclose(expected, curve.torque_nm)
        np.testing.assert_allclose(speed, curve.speed_mph)

    def test_peak_rpm_index_is_first_maximum(self):
        rpm = np.concatenate([np.linspace(2000, 6000, 30), np.linspace(6000, 3000, 30)])
        curve = compute_torque(_make_run(self.t, np.zeros(60), rpm=rpm))
        self.assertEqual(29, curve.peak_rpm_idx)

    def test_derivation_does_not_modify_run(self):
        run = _make_run(self.t, 10 + 2 * self.t, rpm=self.rpm, roller_inertia=1.5)
        before = run.data.copy()
        compute_torque(run)
        compute_torque(run, window_size=5)
        np.testing.assert_array_equal(before, run.data)

    def test_peaks_and_dataframe(self):
        run = _make_run(self.t, 10 + 2 * self.t, rpm=self.rpm, roller_inertia=1.5)
        curve = compute_torque(run)
        power, power_rpm = curve.peak_power()
        self.assertEqual(self.rpm[-1], power_rpm)
        self.assertAlmostEqual(3.0 * self.rpm[-1] / DprConstants.RPM_NM_TO_KW, power)
        df = curve.to_dataframe()
        self.assertEqual(['time_s', 'rpm', 'speed_mph', 'torque_nm', 'power_kw'], list(df.columns))
        self.assertEqual(60, len(df))
        with self.assertRaises(ValueError):
            curve.series('boost')


class EndToEndTests(unittest.TestCase):
    def test_file_with_zero_coefficients_and_inertia(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_dpr(tmpdir, preamble=preamble_rows(inertia='0'))
            curve = compute_torque(parse_dpr_file(path))

        self.assertEqual(60, len(curve))
        np.testing.assert_array_equal(np.zeros(60), curve.torque_nm)
        np.testing.assert_array_equal(np.zeros(60), curve.power_kw)

    def test_file_with_inertia_and_constant_acceleration(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_dpr(Path(tmpdir))
            run = parse_dpr_file(path)
        curve = compute_torque(run)

        # ramp rows accelerate the roller at 2 rad/s2, header inertia is 1.234
        np.testing.assert_allclose(np.full(60, 1.234 * 2.0), curve.torque_nm, rtol=1e-9)
        self.assertTrue(np.all(curve.power_kw > 0))
        self.assertEqual(59, curve.peak_rpm_idx)
