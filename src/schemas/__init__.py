"""Schema definitions for pd4ml-runner."""

from .invocation import CommandInvocation
from .page_source import PageSource
from .result import GENERAL_ERROR, ExecutionResult
from .tool_config import ToolConfig

__all__ = [
    "CommandInvocation",
    "ExecutionResult",
    "GENERAL_ERROR",
    "PageSource",
    "ToolConfig",
]
