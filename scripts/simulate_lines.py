"""
simulate_lines.py — Run random matches through the pricing pipeline offline.

Useful for eyeballing how config changes (EPA scale, rank table, payout
floor) shift the line and payout distribution before deploying them.
Reads the same environment overrides as the API server.

Usage
-----
  python scripts/simulate_lines.py                   # 100 matches, random seed
  python scripts/simulate_lines.py -n 1000 --seed 7  # reproducible batch
  python scripts/simulate_lines.py --epa-scale 12.5  # try a different scale
  python scripts/simulate_lines.py --show 5          # also print 5 matches
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Ensure the project root (one level up from scripts/) is on sys.path so that
# `from backend.xxx import ...` resolves correctly when the script is run
# directly (e.g.  python scripts/simulate_lines.py).
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate random FRC matches and summarise suggested lines."
    )
    parser.add_argument("-n", type=int, default=100, help="Number of matches.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed.")
    parser.add_argument(
        "--epa-scale",
        type=float,
        default=None,
        help="Override EPA_SCALE for this run only.",
    )
    parser.add_argument(
        "--show",
        type=int,
        default=0,
        help="Print the first N simulated matches in full.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    from backend.core.valuation_config import ValuationConfig
    from backend.services.simulator import simulate_matches, summarize

    config = ValuationConfig.from_env()
    if args.epa_scale is not None:
        config = replace(config, epa_scale=args.epa_scale)

    try:
        predictions = simulate_matches(args.n, config, seed=args.seed)
    except ValueError as exc:
        print(f"❌ {exc}")
        sys.exit(1)

    for p in predictions[: args.show]:
        s = p.suggestion
        red, blue = s.per_alliance["red"], s.per_alliance["blue"]
        print(
            f"{p.match_id:>8}  line {s.match_line:6.1f}  "
            f"red {red.alliance_value:7.2f} @ {red.payout_multiplier:.2f}x  "
            f"blue {blue.alliance_value:7.2f} @ {blue.payout_multiplier:.2f}x"
        )

    summary = summarize(predictions)
    print("-" * 50)
    print(f"  Config               : {config!r}")
    print(f"  Matches              : {summary.matches}")
    print(f"  Mean match line      : {summary.mean_match_line}")
    print(f"  Line range           : {summary.min_match_line} – {summary.max_match_line}")
    print(f"  Mean payout red/blue : {summary.mean_red_payout} / {summary.mean_blue_payout}")
    print(f"  Red favoured         : {summary.red_favoured_pct}%")


if __name__ == "__main__":
    main()
