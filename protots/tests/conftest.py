"""Unit tests configuration file."""

import pytest
from google.protobuf import text_format
from google.protobuf.descriptor_pb2 import FileDescriptorProto

from protots.generator.namespace import Namespace, build_namespace

GEOMETRY = """
name: "geo/geometry.proto"
package: "geo"
syntax: "proto3"
message_type {
  name: "Point"
  field { name: "x" number: 1 label: LABEL_OPTIONAL type: TYPE_INT32 }
  field { name: "y" number: 2 label: LABEL_OPTIONAL type: TYPE_INT32 }
}
enum_type {
  name: "Color"
  options { allow_alias: true }
  value { name: "RED" number: 0 }
  value { name: "GREEN" number: 1 }
  value { name: "VERDE" number: 1 }
}
"""

SCENE = """
name: "app/scene.proto"
package: "app"
dependency: "geo/geometry.proto"
syntax: "proto3"
message_type {
  name: "Shape"
  field { name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
  field { name: "origin" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE type_name: ".geo.Point" }
  field { name: "vertices" number: 3 label: LABEL_REPEATED type: TYPE_MESSAGE type_name: ".geo.Point" }
  field { name: "weights" number: 4 label: LABEL_REPEATED type: TYPE_INT64 }
  field { name: "tags" number: 5 label: LABEL_REPEATED type: TYPE_STRING }
  field { name: "labels" number: 6 label: LABEL_REPEATED type: TYPE_MESSAGE type_name: ".app.Shape.LabelsEntry" }
  field { name: "radius" number: 7 label: LABEL_OPTIONAL type: TYPE_DOUBLE oneof_index: 0 }
  field { name: "corner" number: 8 label: LABEL_OPTIONAL type: TYPE_MESSAGE type_name: ".geo.Point" oneof_index: 0 }
  field { name: "color" number: 9 label: LABEL_OPTIONAL type: TYPE_ENUM type_name: ".geo.Color" }
  field { name: "kind" number: 10 label: LABEL_OPTIONAL type: TYPE_ENUM type_name: ".app.Shape.Kind" }
  field { name: "payload" number: 11 label: LABEL_OPTIONAL type: TYPE_BYTES }
  field { name: "id" number: 12 label: LABEL_OPTIONAL type: TYPE_UINT64 }
  field { name: "children" number: 13 label: LABEL_REPEATED type: TYPE_MESSAGE type_name: ".app.Shape.Child" }
  field { name: "anchors" number: 14 label: LABEL_REPEATED type: TYPE_MESSAGE type_name: ".app.Shape.AnchorsEntry" }
  nested_type {
    name: "LabelsEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_INT32 }
    options { map_entry: true }
  }
  nested_type {
    name: "AnchorsEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE type_name: ".geo.Point" }
    options { map_entry: true }
  }
  nested_type {
    name: "Child"
    field { name: "at" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE type_name: ".geo.Point" }
    nested_type {
      name: "Leaf"
      field { name: "depth" number: 1 label: LABEL_OPTIONAL type: TYPE_SINT32 }
    }
  }
  enum_type {
    name: "Kind"
    value { name: "UNKNOWN" number: 0 }
    value { name: "CIRCLE" number: 1 }
  }
  oneof_decl { name: "size" }
}
message_type { name: "Empty" }
service {
  name: "Canvas"
  method { name: "Draw" input_type: ".app.Shape" output_type: ".app.Empty" }
  method { name: "Watch" input_type: ".app.Empty" output_type: ".app.Shape" server_streaming: true }
  method { name: "Locate" input_type: ".app.Empty" output_type: ".geo.Point" }
}
"""


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


def parse_file(text: str) -> FileDescriptorProto:
    """Parse a FileDescriptorProto written in text format."""
    return text_format.Parse(text, FileDescriptorProto())


@pytest.fixture
def proto_file():
    return parse_file


@pytest.fixture
def geometry() -> FileDescriptorProto:
    return parse_file(GEOMETRY)


@pytest.fixture
def scene() -> FileDescriptorProto:
    return parse_file(SCENE)


@pytest.fixture
def namespace(geometry, scene) -> Namespace:
    return build_namespace([geometry, scene])
