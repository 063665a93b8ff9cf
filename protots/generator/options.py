"""Generation options passed through the protoc parameter string."""

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin

from .errors import OptionError

DEFAULT_LIBRARY_IMPORT = "protobuf"


@dataclass(frozen=True)
class GeneratorOptions(DataClassJsonMixin):
    """Settings for one generation run.

    gen_service: emit client classes for services ("plugin=grpc").
    library_import: module the runtime is imported from ("library_import=<path>").
    debug: trace every field read/write in the generated codec. Only
        reachable from the command line.
    """

    gen_service: bool = False
    library_import: str = DEFAULT_LIBRARY_IMPORT
    debug: bool = False

    @classmethod
    def parse(cls, parameter: str, *, debug: bool = False) -> "GeneratorOptions":
        """Parse a comma-separated parameter string, e.g. "plugin=grpc,library_import=pb"."""
        gen_service = False
        library_import = DEFAULT_LIBRARY_IMPORT

        for param in parameter.split(","):
            if not param:
                continue
            if param == "plugin=grpc":
                gen_service = True
                continue
            if param.startswith("library_import="):
                library_import = param.removeprefix("library_import=")
                continue
            raise OptionError(f"unknown compiler option: {param}")

        return cls(gen_service=gen_service, library_import=library_import, debug=debug)
