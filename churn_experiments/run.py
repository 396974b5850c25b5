#!/usr/bin/env python3
"""
CLI entry point for the churn experiment pipeline.

Usage:
    # Run single experiment
    python -m churn_experiments.run configs/baseline.yaml

    # Run multiple experiments
    python -m churn_experiments.run configs/baseline.yaml configs/no_derived.yaml

    # List all experiments
    python -m churn_experiments.run --list

    # Compare experiments
    python -m churn_experiments.run --compare
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .runner import ExperimentRunner


def resolve_config_path(config_path: str, experiments_dir: Path) -> Optional[Path]:
    """Resolve a config path, trying the experiments directory first."""
    path = Path(config_path)
    if path.is_absolute():
        return path if path.exists() else None

    experiments_relative = experiments_dir / path
    if experiments_relative.exists():
        return experiments_relative
    if path.exists():
        return path.resolve()
    return None


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="churn-experiments",
        description="Telco churn experiment pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  churn-experiments configs/baseline.yaml
  churn-experiments configs/baseline.yaml configs/no_derived.yaml
  churn-experiments --list
  churn-experiments --compare
        """,
    )

    parser.add_argument(
        "configs",
        nargs="*",
        help="Path(s) to YAML config file(s)",
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help="Directory holding data/, logs/ and artifacts/ (default: package dir)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List all past experiments",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Compare all experiments (sorted by AUC)",
    )
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Stop batch run if any experiment errors",
    )

    args = parser.parse_args(argv)

    runner = ExperimentRunner(base_path=args.base_path)

    # List experiments
    if args.list:
        df = runner.list_experiments()
        if df.empty:
            print("No experiments found.")
        else:
            print(df.to_string(index=False))
        return 0

    # Compare experiments
    if args.compare:
        df = runner.list_experiments()
        if df.empty:
            print("No experiments found.")
        else:
            if "auc_roc" in df.columns:
                df = df.sort_values("auc_roc", ascending=False)
            print("\nExperiment Comparison (sorted by AUC):\n")
            print(df.to_string(index=False))
        return 0

    # Run experiments
    if not args.configs:
        parser.print_help()
        return 1

    experiments_dir = Path(__file__).parent

    config_paths = []
    for config_path in args.configs:
        path = resolve_config_path(config_path, experiments_dir)
        if path is None:
            print(f"Config not found: {config_path}")
            if args.stop_on_failure:
                return 1
            continue
        config_paths.append(path)

    try:
        runner.run_batch(config_paths, stop_on_failure=args.stop_on_failure)
    except Exception:
        # Already printed by run_batch and logged by the runner
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
