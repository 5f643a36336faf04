"""Build Jinja2 template parameters for each artifact of an input file.

Gathers the import list of the wiring and implementation templates,
embeds the file's swagger document and works out how the stub refers to
descriptor types when it lives in another package.
"""

from __future__ import annotations

import json
import logging
import posixpath
from dataclasses import dataclass, field
from typing import Any, Iterable

from .descriptor import GoPackage, InputFile
from .errors import SerializationError
from .imports import ImportRegistry
from .naming import go_package_name
from .rootpath import root_import_path

logger = logging.getLogger(__name__)

# Imported by both artifacts.
COMMON_IMPORTS: tuple[str, ...] = (
    "context",
    "github.com/pkg/errors",
    "github.com/utrack/clay/transport",
)

# Imported by the transport wiring on top of COMMON_IMPORTS.
DESC_IMPORTS: tuple[str, ...] = (
    "fmt",
    "io/ioutil",
    "strings",
    "bytes",
    "net/http",
    "github.com/utrack/clay/transport/httpruntime",
    "github.com/utrack/clay/transport/swagger",
    "github.com/utrack/clay/transport",
    "github.com/grpc-ecosystem/grpc-gateway/runtime",
    "google.golang.org/grpc",
    "github.com/go-chi/chi",
    "github.com/go-openapi/spec",
)

# Imported by the implementation stub on top of COMMON_IMPORTS.
IMPL_IMPORTS: tuple[str, ...] = ("context",)


@dataclass
class RenderParameters:
    """Everything a template needs to render one artifact."""

    file: InputFile
    imports: list[GoPackage] = field(default_factory=list)
    swagger_buffer: bytes | None = None
    desc_prefix: str = ""
    impl_package: str = ""

    def as_context(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "imports": self.imports,
            "pkg": {p.path: p.short_name for p in self.imports},
            "swagger_buffer": self.swagger_buffer,
            "desc_prefix": self.desc_prefix,
            "impl_package": self.impl_package or self.file.go_pkg.name,
        }


class _ImportList:
    """Ordered import list that drops repeated paths."""

    def __init__(self, registry: ImportRegistry) -> None:
        self.registry = registry
        self.packages: list[GoPackage] = []
        self.seen: set[str] = set()

    def add(self, pkg: GoPackage) -> GoPackage:
        if pkg.path not in self.seen:
            self.seen.add(pkg.path)
            self.packages.append(pkg)
        return pkg

    def add_path(self, path: str) -> GoPackage:
        return self.add(self.registry.bind(path))

    def add_request_packages(self, file: InputFile) -> None:
        """Add packages of HTTP-bound request types declared outside the file's package."""
        for _, method in file.http_methods():
            pkg = method.request_type.go_pkg
            if pkg.path == file.go_pkg.path or pkg.path in self.seen:
                continue
            self.add(pkg)


def bind_common_imports(registry: ImportRegistry, paths: Iterable[str] = COMMON_IMPORTS) -> list[GoPackage]:
    """Bind the imports shared by both artifacts; done once per session."""
    return [registry.bind(path) for path in paths]


def serialize_swagger(doc: Any) -> bytes:
    """Serialize a swagger document as 4-space indented UTF-8 JSON."""
    try:
        text = json.dumps(doc, indent=4, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"cannot serialize swagger definition: {exc}") from exc
    return text.encode("utf-8")


def build_desc_params(
    file: InputFile,
    registry: ImportRegistry,
    common: list[GoPackage],
    swagger: Any = None,
) -> RenderParameters:
    """Assemble parameters for the transport wiring template."""
    imports = _ImportList(registry)
    for pkg in common:
        imports.add(pkg)
    for path in DESC_IMPORTS:
        imports.add_path(path)
    imports.add_request_packages(file)

    params = RenderParameters(file=file, imports=imports.packages)
    if swagger is not None:
        params.swagger_buffer = serialize_swagger(swagger)
    return params


def _separate(impl_path: str, desc_path: str) -> bool:
    return posixpath.normpath(impl_path or ".") != posixpath.normpath(desc_path or ".")


def build_impl_params(
    file: InputFile,
    registry: ImportRegistry,
    common: list[GoPackage],
    impl_path: str = "",
    desc_path: str = "",
    tool_dir: str | None = None,
    roots: list[str] | None = None,
) -> RenderParameters:
    """Assemble parameters for the implementation stub template.

    When the stub and the wiring are generated into different locations
    the stub imports the wiring package and prefixes descriptor types with
    its short name.
    """
    imports = _ImportList(registry)
    for pkg in common:
        imports.add(pkg)
    for path in IMPL_IMPORTS:
        imports.add_path(path)

    params = RenderParameters(file=file)
    if _separate(impl_path, desc_path):
        root = root_import_path(file.go_pkg.path, tool_dir, roots or [])
        if root:
            desc_pkg = imports.add_path(posixpath.normpath(posixpath.join(root, desc_path)))
            params.desc_prefix = desc_pkg.short_name + "."
        else:
            logger.info(
                "%s: cannot resolve root import path, stub will not import %s",
                file.name, desc_path,
            )
        if impl_path and posixpath.normpath(impl_path) != ".":
            params.impl_package = go_package_name(posixpath.normpath(impl_path))

    imports.add_request_packages(file)
    params.imports = imports.packages
    return params
