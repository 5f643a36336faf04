"""Load a JSON descriptor set and the swagger documents that go with it.

The descriptor set is the already-parsed form of the .proto files; see
load_descriptors() for its shape. Every Go package met while loading is
bound through the session's ImportRegistry.
"""

from __future__ import annotations

import json
import logging
import posixpath
from pathlib import Path
from typing import Any, Iterable

from .descriptor import GoPackage, HttpRule, InputFile, Message, Method, Service
from .errors import DescriptorError
from .imports import ImportRegistry
from .naming import go_package_name

logger = logging.getLogger(__name__)

HTTP_METHODS = {"get", "put", "post", "delete", "patch"}
SWAGGER_SUFFIX = ".swagger.json"


def _require(raw: Any, key: str, where: str) -> Any:
    if not isinstance(raw, dict) or key not in raw:
        raise DescriptorError(f"{where}: missing '{key}'")
    return raw[key]


def _list(raw: dict, key: str, where: str) -> list:
    """Return the optional list under key; absent means empty."""
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise DescriptorError(f"{where}: '{key}' must be a list")
    return value


def parse_go_package(option: str) -> tuple[str, str | None]:
    """Split a go_package option of the form 'path' or 'path;name'."""
    path, sep, name = option.partition(";")
    return path, (name if sep and name else None)


def _file_package(raw: dict, registry: ImportRegistry) -> GoPackage:
    option = raw.get("go_package")
    if option:
        path, name = parse_go_package(option)
        return registry.bind(path, name or go_package_name(path))
    path = posixpath.dirname(raw["name"]) or "."
    stem = posixpath.splitext(posixpath.basename(raw["name"]))[0]
    return registry.bind(path, go_package_name(path if path != "." else stem))


def _message(raw: Any, owner: GoPackage, registry: ImportRegistry, where: str) -> Message:
    name = _require(raw, "name", where)
    option = raw.get("go_package")
    if not option:
        return Message(name=name, go_pkg=owner)
    path, pkg_name = parse_go_package(option)
    return Message(name=name, go_pkg=registry.bind(path, pkg_name or go_package_name(path)))


def _http_rule(raw: Any, where: str) -> HttpRule | None:
    if raw is None:
        return None
    method = str(_require(raw, "method", where)).lower()
    if method not in HTTP_METHODS:
        raise DescriptorError(f"{where}: unsupported HTTP method {method!r}")
    return HttpRule(method=method, path=_require(raw, "path", where), body=raw.get("body", ""))


def _method(raw: Any, owner: GoPackage, registry: ImportRegistry, where: str) -> Method:
    name = _require(raw, "name", where)
    where = f"{where}.{name}"
    return Method(
        name=name,
        request_type=_message(_require(raw, "request_type", where), owner, registry, where),
        response_type=_message(_require(raw, "response_type", where), owner, registry, where),
        http_rule=_http_rule(raw.get("http"), where),
    )


def parse_file(raw: Any, registry: ImportRegistry) -> InputFile:
    """Build an InputFile from one entry of the descriptor set."""
    name = _require(raw, "name", "file")
    go_pkg = _file_package(raw, registry)
    services = []
    for svc in _list(raw, "services", name):
        svc_name = _require(svc, "name", name)
        where = f"{name}: {svc_name}"
        methods = tuple(_method(m, go_pkg, registry, where) for m in _list(svc, "methods", where))
        services.append(Service(name=svc_name, methods=methods))
    return InputFile(name=name, go_pkg=go_pkg, services=tuple(services))


def parse_descriptor_set(doc: Any, registry: ImportRegistry) -> list[InputFile]:
    """Build InputFiles from a decoded descriptor-set document."""
    files = _require(doc, "files", "descriptor set")
    if not isinstance(files, list):
        raise DescriptorError("descriptor set: 'files' must be a list")
    return [parse_file(raw, registry) for raw in files]


def load_descriptors(path: Path, registry: ImportRegistry) -> list[InputFile]:
    """Load the descriptor set from disk."""
    try:
        with open(path, encoding="utf-8") as f:
            doc = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DescriptorError(f"{path}: {exc}") from exc
    files = parse_descriptor_set(doc, registry)
    logger.debug("Loaded %d files from %s", len(files), path)
    return files


def load_swagger_defs(directory: Path, files: Iterable[InputFile]) -> dict[str, Any]:
    """Load <base>.swagger.json for each input file that has one."""
    defs: dict[str, Any] = {}
    for file in files:
        candidate = directory / (posixpath.splitext(file.name)[0] + SWAGGER_SUFFIX)
        if not candidate.is_file():
            continue
        try:
            with open(candidate, encoding="utf-8") as f:
                defs[file.name] = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DescriptorError(f"{candidate}: {exc}") from exc
        logger.debug("Loaded swagger definition %s", candidate)
    return defs
