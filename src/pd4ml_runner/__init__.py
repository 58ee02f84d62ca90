"""pd4ml-runner: a typed command-line wrapper around the PD4ML HTML-to-PDF tool."""

from .compiler import CommandCompiler, pack_permissions
from .document import Document, configure_fonts
from .exceptions import (
    InvalidOptionError,
    PD4MLError,
    ToolNotFoundError,
    ToolReportedError,
)
from .options import OPTION_REGISTRY, OptionDescriptor, OptionSet
from .parser import parse_output, raise_for_errors
from .runner import ProcessRunner
from .scratch import ScratchFiles

__all__ = [
    "CommandCompiler",
    "Document",
    "InvalidOptionError",
    "OPTION_REGISTRY",
    "OptionDescriptor",
    "OptionSet",
    "PD4MLError",
    "ProcessRunner",
    "ScratchFiles",
    "ToolNotFoundError",
    "ToolReportedError",
    "configure_fonts",
    "pack_permissions",
    "parse_output",
    "raise_for_errors",
]
