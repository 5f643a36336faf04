"""Descriptor model consumed by the generator.

These are read-only views of an already-parsed protobuf file set: files,
their services and RPC methods, and the Go packages that own each type.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GoPackage:
    """A Go import path and the local name it is referenced by."""

    path: str
    name: str
    alias: str = ""

    @property
    def short_name(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class Message:
    name: str
    go_pkg: GoPackage

    def go_type(self, current_pkg: str, prefix: str = "") -> str:
        """Return the Go type expression of this message as seen from current_pkg.

        Types living in current_pkg are written bare, or with prefix when
        the referencing code sits in another package than its descriptors.
        """
        if self.go_pkg.path == current_pkg:
            return f"{prefix}{self.name}"
        return f"{self.go_pkg.short_name}.{self.name}"


@dataclass(frozen=True)
class HttpRule:
    method: str
    path: str
    body: str = ""


@dataclass(frozen=True)
class Method:
    name: str
    request_type: Message
    response_type: Message
    http_rule: HttpRule | None = None


@dataclass(frozen=True)
class Service:
    name: str
    methods: tuple[Method, ...] = ()


@dataclass(frozen=True)
class InputFile:
    name: str
    go_pkg: GoPackage
    services: tuple[Service, ...] = field(default_factory=tuple)

    def http_methods(self):
        """Yield (service, method) for methods carrying an HTTP binding, in declaration order."""
        for svc in self.services:
            for method in svc.methods:
                if method.http_rule is not None:
                    yield svc, method
