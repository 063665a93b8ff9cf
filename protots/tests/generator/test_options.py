"""Tests for generation option parsing."""

import pytest

from protots.generator.errors import OptionError
from protots.generator.options import GeneratorOptions


def describe_parse():
    def defaults_without_parameter(expect):
        options = GeneratorOptions.parse("")
        expect(options.gen_service) == False
        expect(options.library_import) == "protobuf"
        expect(options.debug) == False

    def enables_services(expect):
        expect(GeneratorOptions.parse("plugin=grpc").gen_service) == True

    def overrides_library_import(expect):
        options = GeneratorOptions.parse("library_import=./runtime/pb,plugin=grpc")
        expect(options.library_import) == "./runtime/pb"
        expect(options.gen_service) == True

    def keeps_equals_signs_in_paths(expect):
        expect(GeneratorOptions.parse("library_import=a=b").library_import) == "a=b"

    def passes_debug_through(expect):
        expect(GeneratorOptions.parse("", debug=True).debug) == True

    def rejects_unknown_options():
        with pytest.raises(OptionError, match="unknown compiler option: plugin=twirp"):
            GeneratorOptions.parse("plugin=grpc,plugin=twirp")

    def serializes_to_json(expect):
        data = GeneratorOptions.parse("plugin=grpc").to_dict()
        expect(data) == {"gen_service": True, "library_import": "protobuf", "debug": False}
