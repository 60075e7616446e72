"""
Path helpers for repository layout.

Layout:
- config/defaults/: tracked default configs (preset motions)
- data/state/: instance state files (gitignored)
- logs/: rotating server logs (gitignored)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional


@lru_cache(maxsize=1)
def repo_root() -> Path:
    # This file lives at src/api/paths.py -> parents: api/ -> src/ -> repo root
    return Path(__file__).resolve().parents[2]


def config_defaults_dir() -> Path:
    return repo_root() / "config" / "defaults"


def data_state_dir() -> Path:
    return repo_root() / "data" / "state"


def fallback_motions_path() -> Path:
    return config_defaults_dir() / "fallback_motions.yaml"


def debate_state_path() -> Path:
    return data_state_dir() / "debate_state.yaml"


def first_existing(paths: Iterable[Path]) -> Optional[Path]:
    for path in paths:
        try:
            if path.exists():
                return path
        except OSError:
            continue
    return None


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def resolve_repo_path(path: Path) -> Path:
    """Anchor a relative path at the repository root, leave absolute paths alone."""
    expanded = path.expanduser()
    if expanded.is_absolute():
        return expanded
    return repo_root() / expanded
