from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from embedref.embed_kinds import EMBED_KINDS


@dataclass(frozen=True)
class AppConfig:
    max_scan_chars: int
    max_urls: int
    log_level: str
    disabled_kinds: frozenset[str]


def _load_dotenv(path: Path) -> None:
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        raw = line.strip()
        if not raw or raw.startswith("#") or "=" not in raw:
            continue

        key, value = raw.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))


def _get_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc


def _get_non_negative_int(name: str, default: int) -> int:
    val = _get_int(name, default)
    if val < 0:
        raise ValueError(f"{name} must be a non-negative integer")
    return val


def _get_kinds(name: str) -> frozenset[str]:
    raw = os.getenv(name) or ""
    kinds = {part.strip().lower() for part in raw.split(",") if part.strip()}
    unknown = kinds.difference(EMBED_KINDS)
    if unknown:
        raise ValueError(f"{name} has unknown kinds: {', '.join(sorted(unknown))}")
    return frozenset(kinds)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    _load_dotenv(Path(".env"))

    return AppConfig(
        max_scan_chars=_get_non_negative_int("EMBEDREF_MAX_SCAN_CHARS", 50_000),
        max_urls=_get_non_negative_int("EMBEDREF_MAX_URLS", 50),
        log_level=(os.getenv("EMBEDREF_LOG_LEVEL") or "INFO").strip().upper(),
        disabled_kinds=_get_kinds("EMBEDREF_DISABLED_KINDS"),
    )
