"""Logging configuration for the tumor ablation pipeline."""

import logging
import os
import sys

ROOT_LOGGER = "tumor_ablation"
LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_level() -> int:
    name = os.environ.get("TUMOR_ABLATION_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return a logger under the package root.

    Only the root logger carries a handler; module loggers propagate to it,
    so ``set_level`` adjusts the whole package at once.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.setLevel(level if level is not None else _default_level())
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
        root.propagate = False

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_level(level: int) -> None:
    """Change the verbosity of every package logger."""
    get_logger(ROOT_LOGGER).setLevel(level)
