"""File helpers shared by the workflows."""
from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from .errors import PreconditionError


def _target_mode(path: Path) -> int:
    """Return the mode a plain ``open(path, "w")`` would leave on ``path``."""

    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_text_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` so that readers never see a partial file.

    The file keeps its existing permissions, or gets the umask default when new.
    """

    mode = _target_mode(path)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_json_file(path: Path) -> Any:
    """Return the decoded JSON document at ``path``."""

    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise PreconditionError(f"Resources file {path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise PreconditionError(f"Resources file {path} is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise PreconditionError(f"Resources file {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise PreconditionError(f"Resources file {path} cannot be read: {exc}") from exc


__all__ = ["read_json_file", "write_text_atomic"]
