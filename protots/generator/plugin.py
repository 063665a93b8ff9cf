"""Protoc plugin request handling."""

from __future__ import annotations

import logging

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.descriptor_pb2 import FileDescriptorSet
from google.protobuf.message import DecodeError

from .errors import RequestError
from .modules import output_file_name
from .namespace import build_namespace
from .options import GeneratorOptions
from .typescript import render_file

logger = logging.getLogger(__name__)


def parse_request(data: bytes) -> CodeGeneratorRequest:
    """Decode a serialized CodeGeneratorRequest."""
    try:
        return CodeGeneratorRequest.FromString(data)
    except DecodeError as e:
        raise RequestError(f"error unmarshaling CodeGeneratorRequest: {e}") from e


def parse_descriptor_set(data: bytes) -> FileDescriptorSet:
    """Decode a serialized FileDescriptorSet."""
    try:
        return FileDescriptorSet.FromString(data)
    except DecodeError as e:
        raise RequestError(f"error unmarshaling FileDescriptorSet: {e}") from e


def request_from_descriptor_set(
    descriptor_set: FileDescriptorSet,
    files_to_generate: list[str] | None = None,
    parameter: str = "",
) -> CodeGeneratorRequest:
    """Build a request equivalent to what protoc would send for these files."""
    request = CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(descriptor_set.file)
    if files_to_generate is None:
        files_to_generate = [f.name for f in descriptor_set.file]
    request.file_to_generate.extend(files_to_generate)
    return request


def generate(
    request: CodeGeneratorRequest, *, debug: bool = False
) -> CodeGeneratorResponse:
    """Generate TypeScript for every requested file.

    The namespace is built once over all files in the request; each requested
    file is then rendered independently. Any error aborts the whole run.
    """
    options = GeneratorOptions.parse(request.parameter, debug=debug)
    logger.debug("Options: %s", options.to_json())
    namespace = build_namespace(list(request.proto_file))

    wanted = set(request.file_to_generate)
    missing = wanted - {f.name for f in request.proto_file}
    if missing:
        raise RequestError(f"files to generate are missing from the request: {sorted(missing)}")

    response = CodeGeneratorResponse()
    for file in request.proto_file:
        if file.name not in wanted:
            continue
        logger.info("Generating %s", output_file_name(file.name))
        content = render_file(
            file,
            namespace,
            library_import=options.library_import,
            gen_service=options.gen_service,
            debug=options.debug,
        )
        response.file.add(name=output_file_name(file.name), content=content)
    return response


def run(data: bytes, *, debug: bool = False) -> bytes:
    """Bytes in, bytes out: the whole plugin invocation."""
    response = generate(parse_request(data), debug=debug)
    return response.SerializeToString()
