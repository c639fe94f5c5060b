"""Environment-driven defaults."""

from __future__ import annotations

import os
from typing import Optional

WORKERS_ENV = "RUST_PROJECT_WORKERS"
CARGO_ENV = "CARGO"


def _positive_int_from_env(var_name: str) -> Optional[int]:
    raw = os.getenv(var_name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def default_worker_count() -> int:
    """Worker pool size: $RUST_PROJECT_WORKERS, else the CPU count."""
    from_env = _positive_int_from_env(WORKERS_ENV)
    if from_env is not None:
        return from_env
    return os.cpu_count() or 1


def cargo_executable() -> str:
    return os.getenv(CARGO_ENV) or "cargo"
