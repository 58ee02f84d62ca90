"""Parser for the external tool's line-oriented output.

Recognized lines:
    BYTES: <int>       size of the generated PDF
    PAGES: <int>       number of generated pages
    ERROR: <message>   error without a number (recorded as 0)
    ERR<n>: <message>  numbered error
Everything else is free-form diagnostics and is ignored.
"""

import re

from schemas import GENERAL_ERROR, ExecutionResult

from .exceptions import ToolReportedError

BYTES_PATTERN = re.compile(r"^BYTES:\s*(\d+)\s*$")
PAGES_PATTERN = re.compile(r"^PAGES:\s*(\d+)\s*$")
ERROR_PATTERN = re.compile(r"^ERROR:(.*)$")
NUMBERED_ERROR_PATTERN = re.compile(r"^ERR(\d+):(.*)$")


def parse_output(raw: str) -> ExecutionResult:
    """Build an ExecutionResult from raw tool output.

    Later errors with the same number overwrite earlier ones.

    Args:
        raw: Combined stdout/stderr of the tool

    Returns:
        A new ExecutionResult
    """
    result = ExecutionResult(output=raw)

    for line in raw.splitlines():
        line = line.strip()
        if match := BYTES_PATTERN.match(line):
            result.bytes = int(match.group(1))
        elif match := PAGES_PATTERN.match(line):
            result.pages = int(match.group(1))
        elif match := ERROR_PATTERN.match(line):
            result.errors[GENERAL_ERROR] = match.group(1).strip()
        elif match := NUMBERED_ERROR_PATTERN.match(line):
            result.errors[int(match.group(1))] = match.group(2).strip()

    return result


def raise_for_errors(result: ExecutionResult) -> ExecutionResult:
    """Raise ToolReportedError if the invocation failed.

    Args:
        result: A parsed result

    Returns:
        The result itself when it succeeded

    Raises:
        ToolReportedError: When no page count was reported
    """
    if result.success:
        return result

    if result.errors:
        summary = "; ".join(
            f"[{number}] {message}" for number, message in sorted(result.errors.items())
        )
    else:
        summary = "no page count reported"
    raise ToolReportedError(f"PD4ML failed: {summary}", errors=result.errors)
