"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging() -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_fraction(value: str, field_name: str = "value") -> float:
    """Parse a float in [0, 1] for argparse arguments.

    Raises:
        argparse.ArgumentTypeError: If the value is not a number in [0, 1].
    """
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{field_name} must be a number") from exc
    if not 0.0 <= parsed <= 1.0:
        raise argparse.ArgumentTypeError(f"{field_name} must be between 0 and 1")
    return parsed


def parse_csv_list(value: str | None) -> list[str]:
    """Split a comma-separated argument into trimmed, non-empty parts."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
