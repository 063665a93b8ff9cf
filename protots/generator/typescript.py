"""TypeScript code generator for proto3 files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import ClassVar

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    FileDescriptorProto,
    MethodDescriptorProto,
    ServiceDescriptorProto,
)
from jinja2 import Environment, PackageLoader

from .errors import SyntaxVersionError
from .fields import Field, Oneof, wrap_fields
from .modules import ModuleRef, ModuleResolver
from .namespace import Namespace

logger = logging.getLogger(__name__)

IMPORT_PLACEHOLDER = "!!!IMPORT_PLACEHOLDER!!!"
BLANK_LINE = "<blank>"
LIBRARY_ALIAS = "__pb__"
LONG_IMPORT = "import * as __long from 'long'"
INDENT = "  "

_USES_LONG = re.compile(r"\b__long\b")

env = Environment(
    loader=PackageLoader("protots.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("typescript.ts.j2")


@dataclass
class EnumBlock:
    """A declared enum and the path of messages enclosing it."""

    kind: ClassVar[str] = "enum"
    descriptor: EnumDescriptorProto
    prefix: list[str]

    @property
    def name(self) -> str:
        return self.descriptor.name


@dataclass
class OneofBlock:
    """The variant classes, union type and dispatcher of one oneof."""

    kind: ClassVar[str] = "oneof"
    oneof: Oneof
    prefix: list[str]


@dataclass
class MessageBlock:
    """A message class."""

    kind: ClassVar[str] = "message"
    descriptor: DescriptorProto
    prefix: list[str]
    fields: list[Field]
    oneofs: list[Oneof]

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def plain_fields(self) -> list[Field]:
        """Fields rendered as their own properties."""
        return [f for f in self.fields if not f.is_oneof_member]


@dataclass
class Method:
    """A unary RPC with its resolved input and output type names."""

    name: str
    input_type: str
    output_type: str


@dataclass
class ServiceBlock:
    """A client class for one service."""

    kind: ClassVar[str] = "service"
    name: str
    fq_name: str
    methods: list[Method] = field(default_factory=list)


def _type_reference(type_name: str, namespace: Namespace, modules: ModuleResolver) -> str:
    resolved = namespace.find_name(type_name)
    module = modules.resolve(resolved.file)
    if module is None:
        return resolved.qualified_name
    return f"{module.alias}.{resolved.qualified_name}"


def _is_streaming(method: MethodDescriptorProto) -> bool:
    return method.client_streaming or method.server_streaming


def _message_blocks(
    message: DescriptorProto,
    namespace: Namespace,
    modules: ModuleResolver,
    prefix: list[str],
) -> list[EnumBlock | OneofBlock | MessageBlock]:
    path = [*prefix, message.name]
    fields, oneofs = wrap_fields(message, namespace, modules, path)

    blocks: list[EnumBlock | OneofBlock | MessageBlock] = [
        MessageBlock(message, prefix, fields, oneofs)
    ]
    blocks.extend(OneofBlock(oneof, path) for oneof in oneofs)
    blocks.extend(EnumBlock(enum, path) for enum in message.enum_type)
    for nested in message.nested_type:
        blocks.extend(_message_blocks(nested, namespace, modules, path))
    return blocks


def _service_block(
    service: ServiceDescriptorProto, package: str, namespace: Namespace, modules: ModuleResolver
) -> ServiceBlock:
    fq_name = f"{package}.{service.name}" if package else service.name
    block = ServiceBlock(service.name, fq_name)
    for method in service.method:
        if _is_streaming(method):
            logger.debug("Skipping streaming method %s.%s", fq_name, method.name)
            continue
        block.methods.append(
            Method(
                name=method.name,
                input_type=_type_reference(method.input_type, namespace, modules),
                output_type=_type_reference(method.output_type, namespace, modules),
            )
        )
    return block


def _indent(text: str) -> str:
    """Indent rendered lines by their braces.

    A line starting with "}" closes a level before it is written; a line
    ending with "{" opens one after it. Empty lines are template noise and
    are dropped; BLANK_LINE marks an intended empty line.
    """
    out: list[str] = []
    depth = 0
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line == BLANK_LINE:
            out.append("")
            continue
        if line.startswith("}"):
            depth -= 1
        out.append(INDENT * max(depth, 0) + line)
        if line.endswith("{"):
            depth += 1
    return "\n".join(out) + "\n"


def render_file(
    file: FileDescriptorProto,
    namespace: Namespace,
    *,
    library_import: str = "protobuf",
    gen_service: bool = False,
    debug: bool = False,
) -> str:
    """Render one proto3 file to TypeScript source."""
    if file.syntax != "proto3":
        raise SyntaxVersionError(f"unsupported syntax: {file.syntax} in file {file.name}")

    package_ns = namespace.find_namespace(file.package)
    modules = ModuleResolver(file)
    library = ModuleRef(alias=LIBRARY_ALIAS, path=library_import)

    blocks: list[EnumBlock | OneofBlock | MessageBlock | ServiceBlock] = [
        EnumBlock(enum, []) for enum in file.enum_type
    ]
    for message in file.message_type:
        blocks.extend(_message_blocks(message, namespace, modules, []))
    if gen_service:
        blocks.extend(
            _service_block(service, file.package, namespace, modules) for service in file.service
        )
    logger.debug(
        "Rendering %s: %d blocks in namespace '%s'",
        file.name,
        len(blocks),
        package_ns.fq_name or ".",
    )

    body = _indent(
        template.render(
            file=file,
            blocks=blocks,
            lib=library.alias,
            debug=debug,
            IMPORT_PLACEHOLDER=IMPORT_PLACEHOLDER,
            BLANK_LINE=BLANK_LINE,
        )
    )

    imports = [library.import_line(), *modules.import_lines()]
    if _USES_LONG.search(body):
        imports.append(LONG_IMPORT)
    return body.replace(IMPORT_PLACEHOLDER, "".join(f"{line}\n" for line in imports), 1)
