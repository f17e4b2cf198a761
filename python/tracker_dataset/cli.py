"""suncalc: write solar tracker data files for a location and period."""

import argparse
import logging
import sys
from pathlib import Path

from ._types import Location, Period, RunConfig
from .errors import TrackerDatasetError
from .files import prepare_output_dir
from .scheduler import PROGRAM_VERSION, generate_dataset

logger = logging.getLogger(__name__)

PERIOD_HELP = """calculation period:
  nd = next day (tomorrow, default)
  nm = next month
  nq = next quarter
  ny = next year (Jan-1 until Dec-31)
  td = this day (today)
  tm = this month
  tq = this quarter
  ty = this year (Jan-1 until Dec-31)
  2y = two years (starting this year)
  tf = ten years forward (starting this year)"""

EPILOG = """example:
  suncalc -x 139.628999 -y 35.610381 -t +9 -i 600 -p nd -o ./tracker-data -v"""


def build_parser() -> argparse.ArgumentParser:
    """Command line options of suncalc."""
    defaults = Location()
    parser = argparse.ArgumentParser(
        prog="suncalc",
        description="Calculate sun position data files for solar tracker usage.",
        epilog=EPILOG,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-x", dest="longitude", type=float, default=defaults.longitude,
        help=f"location longitude (default {defaults.longitude})",
    )
    parser.add_argument(
        "-y", dest="latitude", type=float, default=defaults.latitude,
        help=f"location latitude (default {defaults.latitude})",
    )
    parser.add_argument(
        "-t", dest="timezone", type=float, default=defaults.timezone,
        help=f"location timezone offset in hours (default {defaults.timezone:+g})",
    )
    parser.add_argument(
        "-m", dest="declination", type=float, default=defaults.magnetic_declination,
        help="magnetic declination, informational only",
    )
    parser.add_argument(
        "-i", dest="interval", type=int, default=60,
        help="calculation interval in seconds between 60 and 3600, "
        "must divide 86400 (default 60)",
    )
    parser.add_argument(
        "-p", dest="period", default=Period.NEXT_DAY.value,
        choices=[p.value for p in Period], metavar="PERIOD",
        help=PERIOD_HELP,
    )
    parser.add_argument(
        "-o", dest="output_dir", type=Path, default=Path("./tracker-data"),
        help="output folder (default ./tracker-data)",
    )
    parser.add_argument(
        "-k", "--keep", action="store_true",
        help="keep existing files in the output folder",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s v{PROGRAM_VERSION}")
    return parser


def main(argv=None) -> int:
    """Run suncalc; returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        config = RunConfig(
            location=Location(
                longitude=args.longitude,
                latitude=args.latitude,
                timezone=args.timezone,
                magnetic_declination=args.declination,
            ),
            interval=args.interval,
            period=args.period,
            output_dir=args.output_dir,
        )
        prepare_output_dir(config.output_dir, clean=not args.keep)
        generate_dataset(config)
    except (TrackerDatasetError, ValueError) as e:
        logger.error("Error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
