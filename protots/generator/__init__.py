"""Protots TypeScript code generator."""

from .errors import *
from .fields import Field as Field
from .fields import Oneof as Oneof
from .modules import ModuleRef as ModuleRef
from .modules import ModuleResolver as ModuleResolver
from .modules import output_file_name as output_file_name
from .namespace import Namespace as Namespace
from .namespace import ResolvedType as ResolvedType
from .namespace import build_namespace as build_namespace
from .options import GeneratorOptions as GeneratorOptions
from .plugin import generate as generate
from .typescript import render_file as render_file
from .types import *
