"""CLI helper to run the bonus-depreciation event study on CSV inputs.

This script expects a panel file (state, industry, sex, year, quarter,
emp, earnings, manuf) and an exposure file (industry, z0).  It builds a
`StudyConfig`, runs the full study, prints the summary and writes the
merged panel and figures to the chosen artifact directory.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from bonus_study.helpers.config import StudyConfig
from bonus_study.reporting import print_study_summary
from bonus_study.study import BonusStudy


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the bonus-depreciation employment event study")
    parser.add_argument("panel", type=str, help="Path to the state x industry x gender x quarter panel")
    parser.add_argument("exposure", type=str, help="Path to the industry exposure table (industry, z0)")
    parser.add_argument(
        "--sep",
        type=str,
        default=None,
        help="Field delimiter; sniffed from the file when omitted",
    )
    parser.add_argument(
        "--artifact-dir",
        type=str,
        default="artifacts",
        help="Directory for the merged panel and figures",
    )
    parser.add_argument(
        "--manufacturing-only",
        action="store_true",
        help="Restrict the panel to rows with manuf == 1",
    )
    parser.add_argument(
        "--outcome",
        choices=["emp", "earnings"],
        default="emp",
        help="Level variable whose log is the outcome",
    )
    parser.add_argument("--show", action="store_true", help="Show figures interactively")
    parser.add_argument("--quiet", action="store_true", help="Mute estimator log lines")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    for p in (args.panel, args.exposure):
        if not Path(p).exists():
            raise FileNotFoundError(f"Input file not found: {p}")

    cfg = StudyConfig(
        panel_path=args.panel,
        exposure_path=args.exposure,
        sep=args.sep,
        artifact_dir=args.artifact_dir,
        manufacturing_only=args.manufacturing_only,
        show_plots=args.show,
        verbose=not args.quiet,
    )
    cfg.outcome_col = cfg.earn_col if args.outcome == "earnings" else cfg.emp_col

    results = BonusStudy(cfg).run()
    print_study_summary(results)


if __name__ == "__main__":
    main()
