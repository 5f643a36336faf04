"""Shared fixtures for claygen tests.

Descriptors are built through the loader from raw dicts, the same shape
as a descriptor-set JSON document, so every test shares one registry with
the files it generates for.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from claygen.context_builder import RenderParameters
from claygen.descriptor import InputFile
from claygen.imports import ImportRegistry
from claygen.loader import parse_file

SVC_PKG = "github.com/acme/svc"


def http_method(
    name: str,
    request: str = "Req",
    request_pkg: str | None = None,
    http: dict | None = None,
    response: str = "Rsp",
) -> dict[str, Any]:
    """Return a raw method entry; http=None adds a default POST binding."""
    request_type: dict[str, Any] = {"name": request}
    if request_pkg:
        request_type["go_package"] = request_pkg
    return {
        "name": name,
        "request_type": request_type,
        "response_type": {"name": response},
        "http": http if http is not None else {"method": "post", "path": f"/v1/{name.lower()}", "body": "*"},
    }


def grpc_method(name: str, request_pkg: str | None = None) -> dict[str, Any]:
    """Return a raw method entry with no HTTP binding."""
    method = http_method(name, request_pkg=request_pkg)
    del method["http"]
    return method


@pytest.fixture
def registry() -> ImportRegistry:
    return ImportRegistry()


@pytest.fixture
def make_file(registry: ImportRegistry) -> Callable[..., InputFile]:
    def _make_file(
        name: str = "svc.proto",
        go_package: str = SVC_PKG,
        methods: list[dict] | None = None,
        services: list[dict] | None = None,
    ) -> InputFile:
        if services is None:
            services = [{"name": "Greeter", "methods": methods if methods is not None else [http_method("Hello")]}]
        raw = {"name": name, "go_package": go_package, "services": services}
        return parse_file(raw, registry)

    return _make_file


class FakeRenderer:
    """Renderer that records parameters and returns a marker per artifact."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, RenderParameters]] = []

    def render_desc(self, params: RenderParameters) -> str:
        self.calls.append(("desc", params))
        return f"// desc {params.file.name}\n"

    def render_impl(self, params: RenderParameters) -> str:
        self.calls.append(("impl", params))
        return f"// impl {params.file.name}\n"


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def tool_dir(tmp_path) -> str:
    """A real directory standing in for the running tool's location."""
    path = tmp_path / "bin"
    path.mkdir()
    return str(path.resolve())
