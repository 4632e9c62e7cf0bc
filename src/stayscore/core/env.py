"""
Project-root helpers for `.env` loading and relative data paths.

Catalog and store paths in settings are relative (`data/...`, `.cache/...`);
they resolve against the project root so the CLI behaves the same from any
working directory inside the repo.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = ("pyproject.toml", ".env", ".git")


@lru_cache
def _project_root() -> Path:
    override = os.getenv("STAYSCORE_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the project `.env` once; existing env vars always win."""
    env_path = _project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (_project_root() / p).resolve()
