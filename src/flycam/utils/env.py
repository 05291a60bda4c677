from __future__ import annotations

import os


def env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return default


def env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Comma-separated list, stripped; ``default`` when unset or empty."""
    v = os.getenv(name)
    if not v or not v.strip():
        return default
    return tuple(part.strip() for part in v.split(","))
