#!/usr/bin/env python3
"""
CLI entry point for the churn risk pipeline.

Usage:
    # Run from config
    python -m pipeline.run configs/example_run.yaml

    # Score a file directly
    python -m pipeline.run --input users.csv --settings configs/default_risk.yaml

    # Check a settings file without scoring
    python -m pipeline.run --check-settings configs/default_risk.yaml

    # List past runs
    python -m pipeline.run --list
"""

import argparse
import sys
from pathlib import Path

import yaml

from churnrisk.validation import validate_config

from .config import RunConfig
from .runner import PipelineRunner


def check_settings(path: Path) -> int:
    """Validate a risk settings file and report the first violation."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    result = validate_config(data)
    if result.is_valid:
        print(f"Settings OK: {path}")
        for key, value in result.config.to_dict(camel_case=True).items():
            print(f"  {key}: {value}")
        return 0
    print(f"Invalid settings ({result.violation.check}): {result.message}")
    return 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Company churn risk scoring pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m pipeline.run configs/example_run.yaml
  python -m pipeline.run --input users.csv --output out/ --plot
  python -m pipeline.run --check-settings configs/default_risk.yaml
  python -m pipeline.run --list
        """,
    )

    parser.add_argument(
        "configs",
        nargs="*",
        help="Path(s) to YAML run config file(s)",
    )
    parser.add_argument(
        "--input",
        help="Score this user export directly (no run config needed)",
    )
    parser.add_argument(
        "--settings",
        help="Risk settings YAML used with --input",
    )
    parser.add_argument(
        "--output",
        default="output",
        help="Output directory used with --input (default: output)",
    )
    parser.add_argument(
        "--as-of",
        help="Reference date for staleness, e.g. 2025-01-01 (default: now)",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Also write score distribution plots",
    )
    parser.add_argument(
        "--check-settings",
        metavar="PATH",
        help="Validate a risk settings file and exit",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List all past runs",
    )
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Stop batch run if any run errors",
    )

    args = parser.parse_args(argv)

    if args.check_settings:
        return check_settings(Path(args.check_settings))

    runner = PipelineRunner()

    if args.list:
        df = runner.list_runs()
        if df.empty:
            print("No runs found.")
        else:
            print(df.to_string(index=False))
        return 0

    if args.input:
        config = RunConfig(
            name=Path(args.input).stem,
            input_path=args.input,
            risk_config_path=args.settings,
            output_dir=args.output,
            as_of=args.as_of,
            plot=args.plot,
        )
        try:
            result = runner.run(config)
        except Exception as e:
            print(f"ERROR: {e}")
            return 1
        print(result.summary())
        for path in result.output_files:
            print(f"  wrote {path}")
        return 0

    if not args.configs:
        parser.print_help()
        return 1

    results = []
    for config_path in args.configs:
        path = Path(config_path)
        if not path.exists():
            print(f"Config not found: {config_path}")
            if args.stop_on_failure:
                return 1
            continue

        try:
            print(f"\n{'=' * 60}")
            print(f"Running: {path.name}")
            print("=" * 60)

            result = runner.run_from_yaml(path.resolve())
            results.append(result)
            print(result.summary())

        except Exception as e:
            print(f"ERROR: {e}")
            if args.stop_on_failure:
                return 1

    if len(results) > 1:
        print(f"\n{'=' * 60}")
        print("BATCH SUMMARY")
        print("=" * 60)
        print(f"Completed: {len(results)} of {len(args.configs)}")
        for r in results:
            m = r.pipeline.metrics
            print(f"  {r.config.name}: {m.total_companies} companies, {m.high_risk_count} high risk")

    return 0


if __name__ == "__main__":
    sys.exit(main())
