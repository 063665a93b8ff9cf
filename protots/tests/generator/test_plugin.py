"""Tests for protoc request handling."""

import json
import logging

import pytest
from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.descriptor_pb2 import FileDescriptorSet

from protots.generator.errors import OptionError, RequestError, ResolutionError, SyntaxVersionError
from protots.generator.plugin import (
    generate,
    parse_request,
    request_from_descriptor_set,
    run,
)


def _request(files, generate_names, parameter=""):
    request = CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(files)
    request.file_to_generate.extend(generate_names)
    return request


def describe_generate():
    def generates_only_requested_files(expect, geometry, scene):
        response = generate(_request([geometry, scene], ["app/scene.proto"]))
        expect([f.name for f in response.file]) == ["app/scene_pb.ts"]
        expect(response.file[0].content.startswith("// Generated by the protocol buffer compiler.")) == True
        expect("// Source: app/scene.proto\n" in response.file[0].content) == True

    def generates_in_descriptor_order(expect, geometry, scene):
        response = generate(_request([geometry, scene], ["app/scene.proto", "geo/geometry.proto"]))
        expect([f.name for f in response.file]) == ["geo/geometry_pb.ts", "app/scene_pb.ts"]

    def resolves_types_declared_after_their_use(expect, geometry, scene):
        response = generate(_request([scene, geometry], ["app/scene.proto"]))
        expect("___geo_geometry_pb.Point" in response.file[0].content) == True

    def applies_options(expect, geometry, scene):
        response = generate(
            _request([geometry, scene], ["app/scene.proto"], "plugin=grpc,library_import=pbrt")
        )
        content = response.file[0].content
        expect("import * as __pb__ from 'pbrt'" in content) == True
        expect("export class CanvasClient {" in content) == True

    def is_reproducible(expect, geometry, scene):
        request = _request([geometry, scene], ["geo/geometry.proto", "app/scene.proto"], "plugin=grpc")
        expect(generate(request)) == generate(request)

    def rejects_unknown_options(geometry):
        with pytest.raises(OptionError):
            generate(_request([geometry], ["geo/geometry.proto"], "lang=js"))

    def rejects_proto2_files(geometry):
        geometry.syntax = "proto2"
        with pytest.raises(SyntaxVersionError, match="geo/geometry.proto"):
            generate(_request([geometry], ["geo/geometry.proto"]))

    def ignores_syntax_of_dependencies(expect, geometry, scene):
        geometry.syntax = "proto2"
        response = generate(_request([geometry, scene], ["app/scene.proto"]))
        expect(len(response.file)) == 1

    def aborts_without_partial_output_on_missing_types(geometry, scene):
        with pytest.raises(ResolutionError, match=".geo.Point"):
            generate(_request([scene], ["app/scene.proto"]))

    def rejects_requests_for_unknown_files(geometry):
        with pytest.raises(RequestError, match="missing.proto"):
            generate(_request([geometry], ["missing.proto"]))


def describe_run():
    def round_trips_serialized_messages(expect, geometry):
        data = _request([geometry], ["geo/geometry.proto"]).SerializeToString()
        response = CodeGeneratorResponse.FromString(run(data))
        expect([f.name for f in response.file]) == ["geo/geometry_pb.ts"]

    def rejects_malformed_requests():
        with pytest.raises(RequestError, match="CodeGeneratorRequest"):
            parse_request(b"\xff\xff\xff")


def describe_request_from_descriptor_set():
    def generates_every_file_by_default(expect, geometry, scene):
        descriptor_set = FileDescriptorSet(file=[geometry, scene])
        request = request_from_descriptor_set(descriptor_set)
        expect(list(request.file_to_generate)) == ["geo/geometry.proto", "app/scene.proto"]
        expect(request.parameter) == ""

    def limits_to_named_files(expect, geometry, scene):
        descriptor_set = FileDescriptorSet(file=[geometry, scene])
        request = request_from_descriptor_set(descriptor_set, ["app/scene.proto"], "plugin=grpc")
        expect(list(request.file_to_generate)) == ["app/scene.proto"]
        expect(request.parameter) == "plugin=grpc"
        expect(len(request.proto_file)) == 2


def describe_logging():
    def records_the_parsed_options(expect, caplog, monkeypatch, geometry):
        monkeypatch.setattr(logging.getLogger("protots"), "propagate", True)
        with caplog.at_level(logging.DEBUG, logger="protots.generator.plugin"):
            generate(_request([geometry], ["geo/geometry.proto"], "plugin=grpc"))
        options = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Options: ")]
        expect(len(options)) == 1
        data = json.loads(options[0].removeprefix("Options: "))
        expect(data) == {"gen_service": True, "library_import": "protobuf", "debug": False}
