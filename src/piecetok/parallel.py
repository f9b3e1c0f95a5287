"""Worker count and parallel mode selection for `WordPieceTokenizer.encode_batch`."""

import os
from enum import Enum
from typing import Final, Literal

from .errors import ModeError

NUM_WORKERS_ENV: Final[str] = "PIECETOK_NUM_WORKERS"

ParallelStrategy = Literal["auto", "batch", "off"]


class ParallelMode(str, Enum):
    """How `encode_batch` spreads texts over threads."""

    AUTO = "auto"
    BATCH = "batch"
    OFF = "off"

    @classmethod
    def get(cls, name: "str | ParallelMode") -> "ParallelMode":
        """Look up a mode by name, ignoring case; members pass through."""
        if isinstance(name, ParallelMode):
            return name
        try:
            return cls[name.upper()]
        except KeyError:
            raise ModeError(
                "unknown parallel mode",
                invalid_name=name,
                available=[mode.value for mode in cls],
            )


def list_parallel_modes() -> list[str]:
    """Return the names accepted by `ParallelMode.get`."""
    return [mode.value for mode in ParallelMode]


def resolve_workers(num_workers: int | None = None) -> int:
    """
    Return the worker count for batch encoding.

    An explicit ``num_workers`` wins, then the ``PIECETOK_NUM_WORKERS``
    environment variable, then the CPU count. "0" is interpreted as 1 worker.
    """
    if num_workers is None:
        env = os.environ.get(NUM_WORKERS_ENV, "").strip()
        if env:
            try:
                num_workers = int(env)
            except ValueError:
                raise ModeError(f"{NUM_WORKERS_ENV} must be an integer, got {env!r}")
        else:
            num_workers = os.cpu_count() or 1
    return max(1, num_workers)


__all__ = [
    "ParallelStrategy",
    "ParallelMode",
    "list_parallel_modes",
    "resolve_workers",
]
