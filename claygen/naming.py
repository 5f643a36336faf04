"""Derive output file names and Go identifiers from descriptor names.

Output names depend only on the input file name:
  svc.proto          -> svc.pb.goclay.go, svc.pb.impl.go
  api/v1/users.proto -> api/v1/users.pb.goclay.go, api/v1/users.pb.impl.go
  noext              -> noext.pb.goclay.go, noext.pb.impl.go
"""

from __future__ import annotations

import posixpath
import re

WIRING_SUFFIX = ".pb.goclay.go"
IMPL_SUFFIX = ".pb.impl.go"


def _base(name: str) -> str:
    """Strip the extension of the last path element."""
    return posixpath.splitext(name)[0]


def wiring_output_name(name: str) -> str:
    """Return the transport wiring file name for an input file."""
    return _base(name) + WIRING_SUFFIX


def impl_output_name(name: str) -> str:
    """Return the cleaned implementation stub file name for an input file."""
    return posixpath.normpath(_base(name) + IMPL_SUFFIX)


def annotate_string(text: str) -> str:
    """Prefix each line with its 0-based line number."""
    return "\n".join(f"{pos}: {line}" for pos, line in enumerate(text.split("\n")))


def go_identifier(name: str) -> str:
    """Turn an arbitrary file name into a Go identifier fragment."""
    ident = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if ident[:1].isdigit():
        ident = "_" + ident
    return ident


def go_package_name(path: str) -> str:
    """Return the default Go package name for an import path."""
    name = posixpath.basename(path.rstrip("/"))
    return re.sub(r"[.\-]", "_", name) or "main"
