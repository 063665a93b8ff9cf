"""Namespace tree shared by every file of a generation run.

The tree is built once over all files in a request and only read afterwards.
Package scopes and message scopes are both nodes, since proto type names may
be qualified by either.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    FileDescriptorProto,
)

from .errors import ResolutionError

logger = logging.getLogger(__name__)

TypeDescriptor = DescriptorProto | EnumDescriptorProto


class ScopeKind(StrEnum):
    """What declared a namespace node."""

    PACKAGE = auto()
    MESSAGE = auto()


@dataclass
class NamespaceInfo(DataClassJsonMixin):
    """Serializable snapshot of a namespace node and its subtree."""

    name: str
    kind: str
    file: str | None
    messages: list[str] = field(default_factory=list)
    enums: list[str] = field(default_factory=list)
    children: list[NamespaceInfo] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedType:
    """A type reference resolved against the namespace tree."""

    scope: str  # fully-qualified scope, e.g. ".pkg.Outer"
    name: str
    descriptor: TypeDescriptor
    file: FileDescriptorProto
    qualified_name: str  # package-relative, e.g. "Outer.Inner"

    @property
    def fq_name(self) -> str:
        return f"{self.scope}.{self.name}"


def _split(path: str) -> list[str]:
    return [part for part in path.split(".") if part]


class Namespace:
    """One package or message scope."""

    def __init__(
        self,
        name: str = "",
        parent: Namespace | None = None,
        kind: ScopeKind = ScopeKind.PACKAGE,
        file: FileDescriptorProto | None = None,
    ) -> None:
        self.name = name
        self.parent = parent
        self.kind = kind
        self.file = file
        self.children: dict[str, Namespace] = {}
        self.types: dict[str, TypeDescriptor] = {}
        self.owners: dict[str, FileDescriptorProto] = {}

    @property
    def fq_name(self) -> str:
        if self.parent is None:
            return ""
        return f"{self.parent.fq_name}.{self.name}"

    @property
    def message_path(self) -> list[str]:
        """Names of the enclosing messages, outermost first, excluding packages."""
        path: list[str] = []
        node: Namespace | None = self
        while node is not None and node.kind == ScopeKind.MESSAGE:
            path.insert(0, node.name)
            node = node.parent
        return path

    def parse(self, file: FileDescriptorProto) -> None:
        """Register a file's package and every type it declares."""
        ns = self
        for part in _split(file.package):
            ns = ns._child(part, ScopeKind.PACKAGE, None)

        for enum in file.enum_type:
            ns._add_type(enum.name, enum, file)
        for message in file.message_type:
            ns._add_message(message, file)
        logger.debug("Registered %s under namespace '%s'", file.name, ns.fq_name or ".")

    def _child(self, name: str, kind: ScopeKind, file: FileDescriptorProto | None) -> Namespace:
        child = self.children.get(name)
        if child is None:
            child = Namespace(name, self, kind, file)
            self.children[name] = child
        return child

    def _add_type(self, name: str, descriptor: TypeDescriptor, file: FileDescriptorProto) -> None:
        self.types[name] = descriptor
        self.owners[name] = file

    def _add_message(self, message: DescriptorProto, file: FileDescriptorProto) -> None:
        self._add_type(message.name, message, file)
        scope = self._child(message.name, ScopeKind.MESSAGE, file)
        for enum in message.enum_type:
            scope._add_type(enum.name, enum, file)
        for nested in message.nested_type:
            scope._add_message(nested, file)

    def find_namespace(self, path: str) -> Namespace:
        """Find the scope for a dotted path, e.g. ".pkg.Outer"."""
        ns = self
        for part in _split(path):
            child = ns.children.get(part)
            if child is None:
                raise ResolutionError(f"unable to find namespace for: {path}")
            ns = child
        return ns

    def find_name(self, type_name: str) -> ResolvedType:
        """Resolve a dotted type reference such as ".pkg.Outer.Inner".

        The longest prefix that names a registered scope is the scope; the
        remainder must be a single type declared directly in it.
        """
        parts = _split(type_name)
        ns = self
        consumed = 0
        for part in parts[:-1]:
            child = ns.children.get(part)
            if child is None:
                break
            ns = child
            consumed += 1

        remainder = parts[consumed:]
        if len(remainder) != 1 or remainder[0] not in ns.types:
            raise ResolutionError(f"unable to resolve type: {type_name}")

        name = remainder[0]
        return ResolvedType(
            scope=ns.fq_name,
            name=name,
            descriptor=ns.types[name],
            file=ns.owners[name],
            qualified_name=".".join([*ns.message_path, name]),
        )

    def shadowing_scope(self, name: str, path: list[str]) -> Namespace | None:
        """Innermost message scope along path (below self) that declares name."""
        found = None
        node: Namespace | None = self
        for part in path:
            node = node.children.get(part)
            if node is None:
                break
            if name in node.types:
                found = node
        return found

    def describe(self) -> NamespaceInfo:
        """Snapshot this node and everything below it."""
        return NamespaceInfo(
            name=self.fq_name or ".",
            kind=self.kind.value,
            file=self.file.name if self.file is not None else None,
            messages=[n for n, t in self.types.items() if isinstance(t, DescriptorProto)],
            enums=[n for n, t in self.types.items() if isinstance(t, EnumDescriptorProto)],
            children=[child.describe() for child in self.children.values()],
        )


def build_namespace(files: list[FileDescriptorProto]) -> Namespace:
    """Build the shared tree over all files of a request."""
    root = Namespace()
    for file in files:
        root.parse(file)
    return root
