"""Field model and codec fragment generation.

A Field wraps one FieldDescriptorProto together with the type it references,
and produces the TypeScript statements that decode or encode it. Fragments
are returned as lists of unindented lines; indentation is applied when the
whole file is rendered.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
    OneofDescriptorProto,
)

from .errors import ResolutionError, UnsupportedTypeError
from .modules import ModuleRef, ModuleResolver
from .namespace import Namespace, ResolvedType
from .types import ScalarKind, WireType, scalar_kind

ONEOF_TYPE_NAME = "oneof_type"


class Field:
    """Read-only view over one field descriptor plus its resolved type."""

    def __init__(
        self, descriptor: FieldDescriptorProto, namespace: Namespace, modules: ModuleResolver
    ) -> None:
        self.descriptor = descriptor
        self.namespace = namespace
        self.modules = modules
        self.oneof: Oneof | None = None
        self.resolved: ResolvedType | None = None
        self.module: ModuleRef | None = None
        self.type_name = ""
        self.is_map = False

        if descriptor.type_name:
            self.resolved = namespace.find_name(descriptor.type_name)
            self.type_name = self.resolved.qualified_name
            module = self.module = modules.resolve(self.resolved.file)
            if module is not None:
                self.type_name = f"{module.alias}.{self.type_name}"
            target = self.resolved.descriptor
            if isinstance(target, DescriptorProto) and target.options.map_entry:
                self.is_map = True

    def __repr__(self) -> str:
        return f"Field({self.name!r}, number={self.number})"

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def number(self) -> int:
        return self.descriptor.number

    @property
    def kind(self) -> ScalarKind:
        return scalar_kind(self.descriptor.type)

    @property
    def is_oneof_member(self) -> bool:
        return self.descriptor.HasField("oneof_index")

    @property
    def is_repeated(self) -> bool:
        return self.descriptor.label == FieldDescriptorProto.LABEL_REPEATED

    @property
    def is_message(self) -> bool:
        return self.descriptor.type in (
            FieldDescriptorProto.TYPE_MESSAGE,
            FieldDescriptorProto.TYPE_GROUP,
        )

    @property
    def is_packed(self) -> bool:
        return self.kind.packable

    def map_fields(self) -> tuple[Field, Field]:
        """Key and value fields of the synthetic map-entry message."""
        if not self.is_map:
            raise UnsupportedTypeError(f"field {self.name} is not a map")
        entry = self.resolved.descriptor
        key = Field(entry.field[0], self.namespace, self.modules)
        value = Field(entry.field[1], self.namespace, self.modules)
        return key, value

    def check_visible(self, site: list[str], local: Collection[str] = ()) -> None:
        """Fail if the emitted type name would bind to another declaration at site.

        Only same-file names can be shadowed; imported ones carry an alias.
        """
        fields = [self, self.map_fields()[1]] if self.is_map else [self]
        for f in fields:
            if f.resolved is None or f.module is not None:
                continue
            check_visible(
                f.type_name, f.namespace, f.modules.current, site, local, f.descriptor.type_name
            )

    @property
    def ts_type(self) -> str:
        kind = self.kind
        if kind.ts_type is None:
            return self.type_name
        return kind.ts_type

    @property
    def labeled_type(self) -> str:
        if self.is_map:
            key, value = self.map_fields()
            return f"Map<{key.ts_type}, {value.ts_type}>"
        if self.is_repeated:
            return f"{self.ts_type}[]"
        if self.is_message:
            return f"{self.ts_type} | null"
        return self.ts_type

    @property
    def default_value(self) -> str:
        if self.is_map:
            return f"new {self.labeled_type}()"
        if self.is_repeated:
            return "[]"
        return self.kind.default

    def reader(self, dec: str) -> str:
        kind = self.kind
        if kind.reader is None:
            raise UnsupportedTypeError(
                f"no reader for field {self.name} of type {kind.name}"
            )
        return f"{dec}.{kind.reader}()"

    def primitive_writer(self, enc: str, value: str) -> tuple[str, str]:
        """Tag and value statements for one scalar value, without ';'."""
        kind = self.kind
        if kind.writer is None:
            raise UnsupportedTypeError(
                f"no writer for field {self.name} of type {kind.name}"
            )
        tag = f"{enc}.writeTag({self.number}, {int(kind.wire_type)})"
        return tag, f"{enc}.{kind.writer}({value})"

    def decoder(self, dec: str, wt: str) -> list[str]:
        """Statements merging one occurrence of this field from dec."""
        this = f"this.{self.name}"
        if self.is_map:
            _, value = self.map_fields()
            lines = [
                "{",
                f"let obj = new {self.type_name}();",
                f"obj.MergeFrom({dec}.readDecoder());",
            ]
            if value.is_message:
                lines.append(
                    f"{this}.set(obj.key, obj.value == null ? new {value.ts_type}() : obj.value);"
                )
            else:
                lines.append(f"{this}.set(obj.key, obj.value);")
            lines.append("}")
            return lines

        if self.is_message:
            if self.is_repeated:
                return [
                    "{",
                    f"let obj = new {self.type_name}();",
                    f"obj.MergeFrom({dec}.readDecoder());",
                    f"{this}.push(obj)",
                    "}",
                ]
            if self.oneof is not None:
                return [
                    "{",
                    f"let msg = new {self.type_name}();",
                    f"msg.MergeFrom({dec}.readDecoder());",
                    f"this.{self.oneof.name} = new {self.oneof.fq_namespace}.{self.name}(msg);",
                    "}",
                ]
            return [
                f"if ({this} == null) {this} = new {self.type_name}();",
                f"{this}.MergeFrom({dec}.readDecoder());",
            ]

        reader = self.reader(dec)
        if self.oneof is not None:
            return [f"this.{self.oneof.name} = new {self.oneof.fq_namespace}.{self.name}({reader});"]
        if not self.is_repeated:
            return [f"{this} = {reader};"]
        if not self.is_packed:
            return [f"{this}.push({reader})"]
        return [
            f"if ({wt} == {int(WireType.LENGTH_DELIMITED)}) {{",
            f"let packed = {dec}.readDecoder();",
            "while (!packed.isEOF()) {",
            f"{this}.push({self.reader('packed')})",
            "}",
            "} else {",
            f"{this}.push({reader})",
            "}",
        ]

    def elision_guard(self) -> str:
        """Condition that holds when a singular scalar differs from its default."""
        this = f"this.{self.name}"
        if self.descriptor.type == FieldDescriptorProto.TYPE_BYTES:
            return f"{this}.length != 0"
        if self.kind.is_long:
            return f"!{this}.isZero()"
        return f"{this} != {self.default_value}"

    def encoder(self, enc: str, lib: str) -> list[str]:
        """Statements writing this field to enc. Oneof members are not handled here."""
        this = f"this.{self.name}"
        if self.is_map:
            return [
                f"for (const [k, v] of {this}) {{",
                f"let obj = new {self.type_name}();",
                "obj.key = k;",
                "obj.value = v;",
                f"let nested = new {lib}.Internal.Encoder();",
                "obj.WriteTo(nested);",
                f"{enc}.writeEncoder(nested, {self.number});",
                "}",
            ]

        if self.is_message:
            if self.is_repeated:
                head = [f"for (const msg of {this}) {{", "if (msg == null) continue;"]
            else:
                head = [f"const msg = {this};", "if (msg != null) {"]
            return [
                "{",
                *head,
                f"let nested = new {lib}.Internal.Encoder();",
                "msg.WriteTo(nested);",
                f"{enc}.writeEncoder(nested, {self.number})",
                "}",
                "}",
            ]

        if not self.is_repeated:
            tag, writer = self.primitive_writer(enc, this)
            return [f"if ({self.elision_guard()}) {{", f"{tag};", f"{writer};", "}"]

        if self.is_packed:
            _, writer = self.primitive_writer("packed", "elem")
            return [
                f"if ({this}.length > 0) {{",
                f"const packed = new {lib}.Internal.Encoder();",
                f"for (let elem of {this}) {{",
                f"{writer};",
                "}",
                f"{enc}.writeEncoder(packed, {self.number});",
                "}",
            ]
        tag, writer = self.primitive_writer(enc, "elem")
        return [f"for (let elem of {this}) {{", f"{tag};", f"{writer};", "}"]


@dataclass
class Oneof:
    """Fields of one message that share a oneof index."""

    descriptor: OneofDescriptorProto
    fq_namespace: str
    fields: list[Field] = field(default_factory=list)
    type_name: str = ONEOF_TYPE_NAME

    @property
    def name(self) -> str:
        return self.descriptor.name

    def variant_writer(self, member: Field, enc: str, lib: str) -> list[str]:
        """Dispatcher statements for the case where member is the active variant."""
        value = f"(oo as {member.name}).value"
        if member.is_message:
            return [
                "{",
                f"let nested = new {lib}.Internal.Encoder();",
                f"let msg = {value};",
                "if (msg != null) {",
                "msg.WriteTo(nested);",
                "}",
                f"{enc}.writeEncoder(nested, {member.number});",
                "return",
                "}",
            ]
        tag, writer = member.primitive_writer(enc, value)
        return [f"{tag};", f"{writer};", "return;"]


def check_visible(
    name: str,
    namespace: Namespace,
    file: FileDescriptorProto,
    site: list[str],
    local: Collection[str] = (),
    reference: str | None = None,
) -> None:
    """Fail if a package-relative name emitted at site would bind elsewhere.

    site is the namespace path enclosing the reference and local holds the
    names declared in the innermost block. A declaration of the first segment
    of name in any of those scopes hides the package-level one.
    """
    head = name.split(".")[0]
    package = namespace.find_namespace(file.package)
    if head in local:
        where = ".".join([package.fq_name, *site, head])
    else:
        scope = package.shadowing_scope(head, site)
        if scope is None:
            return
        where = f"{scope.fq_name}.{head}"
    raise ResolutionError(
        f"type reference {reference or name} in file {file.name} is shadowed by {where}"
    )


def wrap_fields(
    message: DescriptorProto, namespace: Namespace, modules: ModuleResolver, path: list[str]
) -> tuple[list[Field], list[Oneof]]:
    """Wrap a message's fields and group oneof members by their oneof.

    path is the package-relative name of the message; each oneof's union type
    lives in the namespace path + [oneof name]. Fails if any emitted type name
    would be shadowed where it is written.
    """
    fields = [Field(fd, namespace, modules) for fd in message.field]
    oneofs = [
        Oneof(descriptor=od, fq_namespace=".".join([*path, od.name]))
        for od in message.oneof_decl
    ]
    for f in fields:
        if f.is_oneof_member:
            oneof = oneofs[f.descriptor.oneof_index]
            oneof.fields.append(f)
            f.oneof = oneof

    site = path[:-1]
    for f in fields:
        f.check_visible(site)
    for oneof in oneofs:
        check_visible(oneof.fq_namespace, namespace, modules.current, site)
        members = [f.name for f in oneof.fields]
        for f in oneof.fields:
            f.check_visible([*path, oneof.name], members)
    return fields, oneofs
