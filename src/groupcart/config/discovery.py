"""Locate and read ``groupcart.toml``.

The file is looked up in the starting directory and then in each parent,
so running ``groupcart`` anywhere below a project directory picks up that
project's database settings. ``GROUPCART_CONFIG`` names a file directly and
disables the search.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

from groupcart.config.models import GroupCartConfig

CONFIG_FILENAME = "groupcart.toml"
CONFIG_ENV_VAR = "GROUPCART_CONFIG"


def _search_dirs(start: Path) -> Iterator[Path]:
    resolved = start.resolve()
    yield resolved
    yield from resolved.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    An explicit ``GROUPCART_CONFIG`` is honoured only when it points at an
    existing file; otherwise no config applies.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    for directory in _search_dirs(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, reporting syntax errors as a CLI usage failure."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> GroupCartConfig:
    """Validated sections from *path*, or from the file discovered from *cwd*.

    Missing files yield the built-in defaults.
    """
    target = path if path is not None else find_config(cwd)
    if target is None or not target.is_file():
        return GroupCartConfig()
    return GroupCartConfig.model_validate(read_toml(target))
