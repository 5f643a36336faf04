"""Locate the running tool inside a GOPATH-style root and derive import paths.

The environment-coupled parts (where the tool lives, which roots are
configured) are resolved by tool_dir() and gopath_roots(); the derivation
itself, root_import_path(), is pure.
"""

from __future__ import annotations

import logging
import os
import posixpath
import sys
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)


def _resolve(path: str | os.PathLike) -> str:
    return str(Path(path).absolute().resolve(strict=True))


def tool_dir(argv0: str | None = None) -> str | None:
    """Return the absolute, symlink-free directory of the running tool."""
    argv0 = argv0 if argv0 is not None else sys.argv[0]
    try:
        return _resolve(Path(argv0).parent)
    except (OSError, RuntimeError) as exc:
        logger.debug("cannot resolve tool directory from %r: %s", argv0, exc)
        return None


def gopath_roots(environ: Mapping[str, str] | None = None) -> list[str]:
    """Return the configured root directories, absolute and symlink-free."""
    environ = os.environ if environ is None else environ
    gopath = environ.get("GOPATH") or str(Path.home() / "go")
    roots = []
    for entry in gopath.split(":"):
        if not entry:
            continue
        try:
            roots.append(_resolve(entry))
        except (OSError, RuntimeError) as exc:
            logger.debug("cannot resolve root %r: %s", entry, exc)
            roots.append(os.path.abspath(entry))
    return roots


def root_import_path(go_import_path: str, tool_dir: str | None, roots: list[str]) -> str:
    """Return the import path of a file's package as seen from the tool's root.

    Returns "" when the tool does not live under any of the roots.
    """
    if go_import_path == ".":
        go_import_path = ""
    if not tool_dir:
        return ""
    for root in roots:
        root = root.rstrip("/")
        if tool_dir != root and not tool_dir.startswith(root + "/"):
            continue
        current = tool_dir.removeprefix(root + "/src/")
        if go_import_path.startswith(current):
            return go_import_path
        if go_import_path:
            return posixpath.join(current, go_import_path)
        return current
    return ""


def file_exists(path: str, tool_dir: str | None) -> bool:
    """Report whether path exists relative to the tool's own directory.

    Relative to the tool, not the working directory or the configured
    implementation output path.
    """
    # TODO: check against the implementation output directory instead once
    # the plugin receives it; kept tool-relative so existing stubs next to
    # the binary are still detected. Stubs written under the CLI's --out
    # are not found here and get overwritten on the next --impl run.
    if tool_dir is None:
        return False
    try:
        os.stat(os.path.join(tool_dir, path))
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.debug("cannot stat %s: %s", path, exc)
        return False
    return True
