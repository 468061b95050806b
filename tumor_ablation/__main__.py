"""CLI entry point: python -m tumor_ablation"""

import argparse
import logging
import sys

import pandas as pd

from tumor_ablation import config
from tumor_ablation.agent import AblationAgent
from tumor_ablation.data.loader import DATASET_REGISTRY
from tumor_ablation.models.trainer import MODEL_CONFIGS
from tumor_ablation.utils.logger import set_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Tumor feature-family ablation - compares classifiers and "
            "measures each measurement family's contribution by leaving it out."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m tumor_ablation\n"
            "  python -m tumor_ablation --csv data.csv --cost 0.1\n"
            "  python -m tumor_ablation --families radius texture area --cv-folds 10\n"
            "  python -m tumor_ablation --models random_forest svm_linear --quiet\n"
            "\n"
            "Set TUMOR_ABLATION_LOG_LEVEL (e.g. DEBUG, WARNING) to change log verbosity.\n"
        ),
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--dataset",
        type=str,
        default="breast_cancer",
        choices=list(DATASET_REGISTRY.keys()),
        help="Bundled dataset to analyze (default: breast_cancer)",
    )
    source.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Path to a WDBC-layout CSV (id, diagnosis, 30 measurements)",
    )
    parser.add_argument(
        "--families",
        type=str,
        nargs="+",
        default=None,
        help="Feature-family prefixes to ablate (default: all ten)",
    )
    parser.add_argument(
        "--models",
        type=str,
        nargs="+",
        default=None,
        choices=list(MODEL_CONFIGS.keys()),
        help="Models to compare (default: all available)",
    )
    parser.add_argument(
        "--cost",
        type=float,
        default=None,
        help="Fixed linear SVM cost for the sweep (default: tuned by grid search)",
    )
    parser.add_argument(
        "--test-size",
        type=float,
        default=config.DEFAULT_TEST_SIZE,
        help=f"Fraction held out for evaluation (default: {config.DEFAULT_TEST_SIZE})",
    )
    parser.add_argument(
        "--cv-folds",
        type=int,
        default=config.DEFAULT_CV_FOLDS,
        help=f"Number of cross-validation folds (default: {config.DEFAULT_CV_FOLDS})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.RANDOM_STATE,
        help=f"Random seed for the split and folds (default: {config.RANDOM_STATE})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List all available models and exit",
    )
    parser.add_argument(
        "--list-families",
        action="store_true",
        help="List the default feature families and exit",
    )
    return parser


def format_summary(report: dict) -> str:
    """Plain-text tables for the model comparison and the ablation sweep."""
    lines = []

    if "model_comparison" in report:
        comparison = pd.DataFrame(report["model_comparison"])[
            ["name", "cv_accuracy_mean", "cv_accuracy_std", "train_accuracy"]
        ]
        lines += ["MODEL COMPARISON (cross-validated)", comparison.to_string(index=False), ""]

    if "ablation" in report:
        ablation = report["ablation"]
        table = pd.DataFrame(ablation["results"])[
            ["family", "accuracy", "n_removed", "n_remaining"]
        ]
        lines += [
            f"ABLATION (linear SVM, C={ablation['cost']:g}, "
            f"best of {ablation['cv_folds']} folds)",
            table.to_string(index=False),
            "",
            "Lower accuracy without a family suggests it matters more.",
        ]

    return "\n".join(lines)


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.list_models:
        print("Available models:")
        for name, (cls, kwargs) in MODEL_CONFIGS.items():
            print(f"  {name:<20} ({cls.__name__}, {kwargs})")
        return

    if args.list_families:
        print("Feature families:")
        for family in config.FEATURE_FAMILIES:
            print(f"  {family}")
        return

    if args.quiet:
        set_level(logging.WARNING)

    agent = AblationAgent(
        dataset=args.dataset,
        csv_path=args.csv,
        families=args.families,
        models=args.models,
        cost=args.cost,
        test_size=args.test_size,
        cv_folds=args.cv_folds,
        random_state=args.seed,
    )

    try:
        report = agent.run()
    except Exception as e:
        print(f"\nAblation failed: {e}", file=sys.stderr)
        sys.exit(1)

    print("\n" + format_summary(report))


if __name__ == "__main__":
    main()
