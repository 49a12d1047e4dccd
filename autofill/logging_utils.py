"""Logging helpers."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .field_types import SENSITIVE_FIELD_TYPES
from .io_utils import RunPaths

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
MASK = "***"


class SensitiveValueFilter(logging.Filter):
    """Replace known sensitive profile values in every record it sees."""

    def __init__(self, values: Iterable[str]) -> None:
        super().__init__()
        # Longest first so a value containing another is masked whole.
        self.values = sorted({v for v in values if v and len(v) > 2}, key=len, reverse=True)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.values:
            return True
        message = record.getMessage()
        masked = message
        for value in self.values:
            masked = masked.replace(value, MASK)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def sensitive_values(profile: Mapping[str, str]) -> list[str]:
    """Profile values of the field types that must never reach a log file."""
    return [str(profile.get(ft.value) or "") for ft in SENSITIVE_FIELD_TYPES]


def build_logger(
    run_paths: RunPaths,
    verbose: bool = False,
    *,
    redact: Iterable[str] = (),
) -> logging.Logger:
    logger = logging.getLogger(f"autofill.{run_paths.run_id}")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    if not logger.handlers:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S")
        masking = SensitiveValueFilter(redact)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(masking)
        logger.addHandler(console_handler)

        file_handler = logging.FileHandler(
            run_paths.base_dir / "autofill.log", encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(masking)
        logger.addHandler(file_handler)

    return logger


__all__ = ["SensitiveValueFilter", "build_logger", "sensitive_values"]
