"""
Plotting and visualization of derived torque curves
"""

from typing import List, Optional, Sequence, Tuple

from .header import DprHeader
from .torque_calculator import TorqueCurve

# Lazy imports for heavy dependencies
def _import_matplotlib():
    import matplotlib.pyplot as plt
    return plt

def _import_scipy():
    from scipy.ndimage import gaussian_filter1d
    return gaussian_filter1d


SERIES_LABELS = {
    'rpm': 'RPM',
    'time': 'Time (s)',
    'speed': 'Speed (mph)',
    'torque': 'Torque (Nm)',
    'power': 'Power (kW)',
}

DEFAULT_GRAPHS: List[Tuple[str, str]] = [('rpm', 'torque'), ('rpm', 'power')]


def parse_graph_spec(spec: str) -> Tuple[str, str]:
    """Parse an 'x:y' series pair such as 'rpm:torque'"""
    parts = [p.strip().lower() for p in spec.split(':')]
    if len(parts) != 2:
        raise ValueError(f"Graph must be given as X:Y, got '{spec}'")
    for name in parts:
        if name not in SERIES_LABELS:
            raise ValueError(f"Unknown series '{name}', expected one of: {', '.join(SERIES_LABELS)}")
    return parts[0], parts[1]


class Plotter:
    """Handles plotting of torque/power series pairs"""

    def __init__(self, smoothing_factor: float = 0.0, verbose: bool = False):
        self.smoothing_factor = smoothing_factor
        self.verbose = verbose

    def plot_graphs(self, curve: TorqueCurve, graphs: Sequence[Tuple[str, str]] = DEFAULT_GRAPHS,
                    header: Optional[DprHeader] = None, save_path: Optional[str] = None,
                    title: Optional[str] = None, show: bool = True):
        """
        Draw one subplot per (x, y) series pair

        Args:
            curve: Derived torque curve
            graphs: Series pairs, names from SERIES_LABELS
            header: Optional run header for the info line
            save_path: Optional path to save the figure
            title: Optional figure title
            show: Display the figure window

        Returns:
            The matplotlib Figure
        """
        if curve.is_empty:
            raise ValueError("Torque curve is empty, nothing to plot.")
        if not graphs:
            raise ValueError("No graphs selected.")

        plt = _import_matplotlib()
        fig, axes = plt.subplots(len(graphs), 1, figsize=(12, 4 * len(graphs)), squeeze=False)

        for ax, (x_name, y_name) in zip(axes[:, 0], graphs):
            x = curve.series(x_name)
            y = curve.series(y_name)

            ax.plot(x, y, linewidth=1.5, alpha=0.6 if self.smoothing_factor > 0 else 1.0,
                    label=SERIES_LABELS[y_name])

            if self.smoothing_factor > 0 and len(y) > 1:
                gaussian_filter1d = _import_scipy()
                ax.plot(x, gaussian_filter1d(y, sigma=self.smoothing_factor), 'k-', linewidth=2.5,
                        label=f'{SERIES_LABELS[y_name]} (Smoothed)')

            # Mark the highest engine speed on RPM based graphs
            if x_name == 'rpm' and curve.peak_rpm_idx >= 0:
                ax.axvline(x=curve.rpm[curve.peak_rpm_idx], color='gray', linestyle='--', alpha=0.5, linewidth=1)

            ax.set_xlabel(SERIES_LABELS[x_name], fontsize=11, fontweight='bold')
            ax.set_ylabel(SERIES_LABELS[y_name], fontsize=11, fontweight='bold')
            ax.set_title(f'{SERIES_LABELS[y_name]} vs {SERIES_LABELS[x_name]}', fontsize=12)
            ax.grid(True, alpha=0.3)
            ax.legend(loc='best')

        if title:
            fig.suptitle(title, fontsize=14, fontweight='bold')

        info_text = self._info_text(curve, header)
        fig.text(0.02, 0.005, info_text, fontsize=10, style='italic')

        fig.tight_layout(rect=(0, 0.03, 1, 1))

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            if self.verbose:
                print(f"Plot saved to {save_path}")

        if show:
            plt.show()

        return fig

    @staticmethod
    def _info_text(curve: TorqueCurve, header: Optional[DprHeader]) -> str:
        peak_torque, peak_torque_rpm = curve.peak_torque()
        peak_power, peak_power_rpm = curve.peak_power()
        text = (f"Peak Torque: {peak_torque:.1f} Nm @ {peak_torque_rpm:.0f} RPM | "
                f"Peak Power: {peak_power:.1f} kW @ {peak_power_rpm:.0f} RPM")
        if header is not None:
            machine = ' '.join(part for part in (header.manufacturer, header.model) if part)
            if machine:
                text = f"{machine}, inertia {header.roller_inertia:.4f} kg.m2\n{text}"
        return text
