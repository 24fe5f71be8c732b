#!/usr/bin/env python3
"""
Torque and Power Viewer for chassis dynamometer .Dpr logs
Parses the run header and sample block, derives the torque/power curve
from roller acceleration and friction losses, and reports or plots it.
"""

import argparse
import sys
import warnings

from .analyzer import DynoAnalyzer
from .constants import DprConstants
from .plotting import DEFAULT_GRAPHS, SERIES_LABELS, parse_graph_spec


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dprview',
        description='Parse dynamometer .Dpr logs and derive torque and power curves',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report plus default torque and power graphs
  dprview run.Dpr

  # Save torque and power against time without opening a window
  dprview run.Dpr --graph time:torque --graph time:power --out run.png --no-show

  # Narrower differentiation window, curve exported to CSV
  dprview run.Dpr --window-size 21 --export-csv curve.csv --no-plot

  # Tabular output every 500 RPM
  dprview run.Dpr --debug --debug-rpm-increment 500
        """
    )

    parser.add_argument('dpr_file', help='Path to .Dpr log file')

    # Derivation
    parser.add_argument('--window-size', type=int, default=DprConstants.DEFAULT_WINDOW_SIZE,
                        help=f'Samples spanned by the acceleration difference (default: {DprConstants.DEFAULT_WINDOW_SIZE})')

    # Block detection
    parser.add_argument('--min-records', type=int, default=DprConstants.MIN_RECORDS,
                        help=f'Minimum records a file must hold (default: {DprConstants.MIN_RECORDS})')
    parser.add_argument('--min-block-rows', type=int, default=DprConstants.MIN_BLOCK_ROWS,
                        help=f'Minimum rows of the data block (default: {DprConstants.MIN_BLOCK_ROWS})')

    # Output
    parser.add_argument('--graph', action='append', default=None, metavar='X:Y',
                        help=f"Series pair to plot, repeatable; series: {', '.join(SERIES_LABELS)} "
                             f"(default: rpm:torque and rpm:power)")
    parser.add_argument('--smoothing-factor', type=float, default=DprConstants.DEFAULT_SMOOTHING_FACTOR,
                        help='Gaussian sigma of a smoothed overlay, 0 to disable (default: 0)')
    parser.add_argument('--title', help='Custom plot title')
    parser.add_argument('--out', help='Save plot to file')
    parser.add_argument('--no-plot', action='store_true', help='Skip generating plot')
    parser.add_argument('--no-show', action='store_true', help='Do not open a plot window')
    parser.add_argument('--export-csv', metavar='PATH', help='Write the derived curve to CSV')
    parser.add_argument('--list-channels', action='store_true', help='List populated channel slots')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode - output tabular data instead of graph')
    parser.add_argument('--debug-rpm-increment', type=int, default=DprConstants.DEFAULT_RPM_INCREMENT,
                        help=f'RPM increment for debug mode output (default: {DprConstants.DEFAULT_RPM_INCREMENT})')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress messages')

    return parser


def main(argv=None):
    """Main entry point"""
    warnings.filterwarnings('ignore')
    args = build_parser().parse_args(argv)

    try:
        graphs = [parse_graph_spec(spec) for spec in args.graph] if args.graph else DEFAULT_GRAPHS

        analyzer = DynoAnalyzer(
            window_size=args.window_size,
            min_records=args.min_records,
            min_block_rows=args.min_block_rows,
            smoothing_factor=args.smoothing_factor,
            verbose=not args.quiet
        )
        analyzer.open_file(args.dpr_file)

        if args.list_channels:
            print("\n".join(analyzer.channel_listing()))

        if args.debug:
            # Debug mode - output tabular data
            print(analyzer.generate_debug_output(args.debug_rpm_increment))
        else:
            print(analyzer.generate_report())

        if args.export_csv:
            analyzer.export_curve_csv(args.export_csv)

        if not args.debug and not args.no_plot:
            if analyzer.curve is None or analyzer.curve.is_empty:
                print("No torque curve to plot: elapsed time, engine RPM, roller omega "
                      "and wheel speed channels are required.")
            else:
                analyzer.plot_graphs(graphs, args.out, args.title, show=not args.no_show)

    except Exception as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
