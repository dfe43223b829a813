import argparse, json, logging, sys
from pathlib import Path

from config import Settings
from moon_engine.aggregator import aggregate
from moon_engine.loader import LoadError, load_datasets
from moon_engine.periods import PERIODS, period_label, resolve_default
from plot_engine import render_phase_png
from utils import phase_table

def build_parser(default_period=None):
    if default_period is None:
        default_period = resolve_default(Settings.DEFAULT_PERIOD)
    parser = argparse.ArgumentParser(description="Bitcoin daily range by moon phase")
    parser.add_argument("--period", type=int, choices=PERIODS, default=default_period,
                        help="lookback in lunar cycles")
    parser.add_argument("--moon", default=None, help="moon/bitcoin merged CSV")
    parser.add_argument("--price", default=None, help="bitcoin daily range CSV")
    parser.add_argument("--strict", action="store_true", help="fail on any invalid row")
    parser.add_argument("--json", action="store_true", help="print JSON instead of a table")
    parser.add_argument("--png", nargs="?", const="", default=None,
                        help="write a static chart (default: MOON_OUT_DIR/moon_phases_<period>.png)")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, Settings.LOG_LEVEL, logging.INFO),
        format='[%(asctime)s] %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    moon_path = Path(args.moon) if args.moon else Settings.moon_path()
    price_path = Path(args.price) if args.price else Settings.price_path()
    try:
        data = load_datasets(moon_path, price_path, strict=args.strict or Settings.STRICT_DATES)
    except LoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = aggregate(data.moon_rows, data.price_rows, args.period)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"{period_label(args.period)}")
        print(phase_table(result))

    if args.png is not None:
        out = Path(args.png) if args.png else Settings.OUT_DIR / f"moon_phases_{args.period}.png"
        path = render_phase_png(result, out)
        if path:
            print(f"\nChart saved: {path}")
        else:
            print("\nERROR: chart export failed", file=sys.stderr)
            return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
