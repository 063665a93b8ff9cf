"""protots - TypeScript code generator for proto3 schemas."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("protots")
except PackageNotFoundError:
    __version__ = "(local)"
