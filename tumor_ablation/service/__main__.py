"""Run the ablation API server.

Usage:
    python -m tumor_ablation.service
    # or
    uvicorn tumor_ablation.service.app:create_app --factory --reload
"""

import argparse

import uvicorn

from tumor_ablation.service.app import create_app


def main():
    parser = argparse.ArgumentParser(description="Tumor ablation API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
