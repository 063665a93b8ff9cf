"""Errors raised while generating code."""


class GeneratorError(RuntimeError):
    """Raised when code generation cannot proceed."""


class RequestError(GeneratorError):
    """Raised when the code generator request cannot be decoded."""


class OptionError(GeneratorError):
    """Raised for an unrecognized generation option."""


class SyntaxVersionError(GeneratorError):
    """Raised when a file to generate is not proto3."""


class ResolutionError(GeneratorError):
    """Raised when a type or namespace reference cannot be resolved."""


class UnsupportedTypeError(GeneratorError):
    """Raised when a field kind has no codec mapping."""
