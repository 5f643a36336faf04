"""Generate clay HTTP transport wiring and implementation stubs for gRPC services."""

__version__ = "0.1.0"
