"""Session-wide table of Go import paths and their short names.

Every import path referenced by generated code is bound here exactly once,
so a path keeps one name for the whole run and two paths never share one:

    a/pkg -> pkg
    b/pkg -> pkg_0
    c/pkg -> pkg_1
"""

from __future__ import annotations

import posixpath

from .descriptor import GoPackage


class ImportRegistry:
    """Alias table shared by the loader and every artifact of one run."""

    def __init__(self) -> None:
        self._aliases: dict[str, str] = {}
        self._paths: dict[str, str] = {}
        self._packages: dict[str, GoPackage] = {}

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def alias_for(self, path: str) -> str | None:
        """Return the short name bound to path, if any."""
        return self._paths.get(path)

    def reserve(self, alias: str, path: str) -> bool:
        """Bind alias to path; False if either side is already bound elsewhere."""
        taken = self._aliases.get(alias)
        if taken is not None:
            return taken == path
        if path in self._paths:
            return False
        self._aliases[alias] = path
        self._paths[path] = alias
        return True

    def bind(self, path: str, name: str | None = None) -> GoPackage:
        """Return the package for path, reserving a collision-free short name.

        name overrides the package name derived from the last path segment.
        """
        pkg = self._packages.get(path)
        if pkg is not None:
            return pkg

        name = name or posixpath.basename(path.rstrip("/")) or path
        reserved = self._paths.get(path)
        if reserved is not None:
            pkg = GoPackage(path=path, name=name, alias="" if reserved == name else reserved)
        elif self.reserve(name, path):
            pkg = GoPackage(path=path, name=name)
        else:
            i = 0
            while not self.reserve(f"{name}_{i}", path):
                i += 1
            pkg = GoPackage(path=path, name=name, alias=f"{name}_{i}")

        self._packages[path] = pkg
        return pkg
