"""Cross-file module references for one output file."""

import logging
import posixpath
import re
from dataclasses import dataclass

from google.protobuf.descriptor_pb2 import FileDescriptorProto

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_pb"
OUTPUT_EXTENSION = ".ts"

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]")


@dataclass(frozen=True)
class ModuleRef:
    """An aliased import of another generated module."""

    alias: str
    path: str

    def import_line(self) -> str:
        return f"import * as {self.alias} from '{self.path}'"


def output_module(file_name: str) -> str:
    """Output module path for a schema file: "a/b.proto" -> "a/b_pb"."""
    stem, _ext = posixpath.splitext(file_name)
    return stem + OUTPUT_SUFFIX


def output_file_name(file_name: str) -> str:
    """Name of the generated file for a schema file."""
    return output_module(file_name) + OUTPUT_EXTENSION


class ModuleResolver:
    """Collects the imports one output file needs.

    References are keyed by target file name, so any number of type
    references into the same file collapse to one import. A file never
    imports itself.
    """

    def __init__(self, current: FileDescriptorProto) -> None:
        self.current = current
        self.references: dict[str, ModuleRef] = {}

    def resolve(self, target: FileDescriptorProto) -> ModuleRef | None:
        if target.name == self.current.name:
            return None

        ref = self.references.get(target.name)
        if ref is None:
            module = output_module(target.name)
            start = posixpath.dirname(self.current.name) or "."
            path = posixpath.relpath(module, start)
            if not path.startswith("../"):
                path = "./" + path
            ref = ModuleRef(alias=self._alias(module), path=path)
            self.references[target.name] = ref
            logger.debug("%s imports %s as %s", self.current.name, ref.path, ref.alias)
        return ref

    def _alias(self, module: str) -> str:
        # Must stay a valid identifier: built from the module path, never the relative one.
        base = "___" + _NON_IDENTIFIER.sub("_", module)
        taken = {ref.alias for ref in self.references.values()}
        alias = base
        suffix = 2
        while alias in taken:
            alias = f"{base}_{suffix}"
            suffix += 1
        return alias

    def import_lines(self) -> list[str]:
        """Import statements in first-reference order."""
        return [ref.import_line() for ref in self.references.values()]
