"""Command compiler for the PD4ML bridge.

Turns an OptionSet and a list of page sources into a CommandInvocation.
Arguments are built as discrete tokens; quoting only happens when the
invocation is rendered for display.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from schemas import CommandInvocation, PageSource, ToolConfig

from .exceptions import InvalidOptionError
from .options import (
    INSET_KEYS,
    OPTION_REGISTRY,
    PERMISSION_KEYS,
    OptionSet,
    is_negation,
)
from .scratch import ScratchFiles

logger = logging.getLogger(__name__)

HEADLESS_FLAG = "-Djava.awt.headless=true"

# 16-bit permission word: 10 reserved high bits set, 4 permission bits, 2 reserved low bits clear
PERMISSION_RESERVED_HIGH = "1111111111"
PERMISSION_RESERVED_LOW = "00"


def pack_permissions(options: OptionSet) -> int:
    """Pack the allow_* options into the tool's permission integer.

    Bit order (high to low) is annotate, copy, modify, print. A set bit
    grants the right.
    """
    bits = "".join("1" if options.get(key) else "0" for key in PERMISSION_KEYS)
    return int(PERMISSION_RESERVED_HIGH + bits + PERMISSION_RESERVED_LOW, 2)


def format_insets(options: OptionSet) -> str:
    """Return insets as ``top,left,bottom,right,unit``."""
    return ",".join(str(options.get(key)) for key in INSET_KEYS)


def format_mapping(value: Mapping[str, Any]) -> str:
    """Join template pairs as ``name=value`` sorted by name, skipping blanks."""
    pairs = [
        f"{name}={item}"
        for name, item in sorted(value.items())
        if item is not None and str(item) != ""
    ]
    return ";".join(pairs)


def option_tokens(options: OptionSet) -> list[list[str]]:
    """Serialize options into flag groups, one list of tokens per flag.

    Permission and inset options collapse into a single group each.
    """
    groups = []
    for key, value in options.items():
        descriptor = OPTION_REGISTRY[key]
        if descriptor.kind in ("permission", "inset"):
            continue
        if descriptor.kind == "boolean":
            if is_negation(value):
                groups.append(["--no-" + descriptor.flag[2:]])
            else:
                groups.append([descriptor.flag])
        elif descriptor.kind == "mapping":
            joined = format_mapping(value)
            if joined:
                groups.append([descriptor.flag, joined])
        else:
            groups.append([descriptor.flag, str(value)])

    permissions = pack_permissions(options)
    if options.get("debug"):
        logger.info(f"[PD4ML] permissions: {permissions:b}")
    groups.append(["--permissions", str(permissions)])
    groups.append(["--insets", format_insets(options)])
    return groups


def flag_name(group: list[str]) -> str:
    flag = group[0]
    return flag[5:] if flag.startswith("--no-") else flag[2:]


class CommandCompiler:
    """Compile options and page sources into an invocation of the bridge.

    Attributes:
        config: Tool paths and JVM settings
    """

    def __init__(self, config: ToolConfig | None = None):
        self.config = config or ToolConfig()

    def check_paths(self) -> None:
        """Fail fast if the jar, the runtime or the font directory is missing.

        Raises:
            InvalidOptionError: Naming the first invalid path
        """
        invalid = self.config.invalid_paths()
        if invalid:
            label, path = invalid[0]
            raise InvalidOptionError(f"Invalid {label} path: {path}", option=f"{label}_path")

    def compile(
        self,
        options: OptionSet,
        sources: Iterable[PageSource],
        scratch: ScratchFiles,
        output_path: Path | None = None,
    ) -> CommandInvocation:
        """Build the command for one rendering invocation.

        Option groups are sorted by flag name; page tokens follow in the
        order given. Inline text sources are written to scratch files.

        Args:
            options: Validated options
            sources: Page sources in caller order
            scratch: Scope that owns any scratch files created here
            output_path: Where the tool should write the PDF (optional)

        Returns:
            The compiled CommandInvocation

        Raises:
            InvalidOptionError: If a prerequisite path is missing
        """
        self.check_paths()

        groups = option_tokens(options)
        groups.append(["--ttf", str(self.config.font_path)])
        if output_path is not None:
            groups.append(["--out", str(output_path)])
        groups.sort(key=flag_name)

        arguments = [token for group in groups for token in group]
        for source in sources:
            arguments.append(self._source_token(source, scratch))

        return CommandInvocation(
            java_path=self.config.java_path,
            jvm_args=self._jvm_args(),
            class_path=self.config.class_path,
            main=self.config.bridge_class,
            arguments=tuple(arguments),
        )

    def compile_font_configuration(self) -> CommandInvocation:
        """Build the command that writes the tool's font properties file.

        Raises:
            InvalidOptionError: If a prerequisite path is missing
        """
        self.check_paths()
        return CommandInvocation(
            java_path=self.config.java_path,
            jvm_args=self._jvm_args(),
            main=str(self.config.jar_path),
            arguments=("-configure.fonts", str(self.config.font_path)),
        )

    def _jvm_args(self) -> tuple[str, ...]:
        return (f"-Xmx{self.config.max_heap}", HEADLESS_FLAG)

    def _source_token(self, source: PageSource, scratch: ScratchFiles) -> str:
        if source.is_text:
            return str(scratch.write(source.value))
        return source.value
