#!/usr/bin/env python3
"""
Tumor ablation: one command to run everything.

Usage:
    python run.py              # Run the analysis and print the tables
    python run.py --web        # Launch the job API at http://localhost:8000
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(__file__))


def main():
    parser = argparse.ArgumentParser(
        description="Tumor feature-family ablation",
    )
    parser.add_argument(
        "--web", action="store_true",
        help="Launch the job API instead of the CLI analysis",
    )
    args, rest = parser.parse_known_args()

    if args.web:
        print()
        print("  Tumor ablation API")
        print("  Open http://localhost:8000/docs in your browser")
        print("  Press Ctrl+C to stop")
        print()
        import uvicorn
        from tumor_ablation.service.app import create_app
        uvicorn.run(create_app(), host="127.0.0.1", port=8000)
    else:
        from tumor_ablation.__main__ import main as cli_main
        cli_main(rest)


if __name__ == "__main__":
    main()
