"""High-level document API for the PD4ML wrapper.

A Document collects options and page content, then runs the external tool
once per call to ``generate``:

    document = Document(ToolConfig.from_env())
    document.set_option("page_orientation", "LANDSCAPE")
    document.add_content("<h1>Quarterly report</h1>")
    result = document.save_to(Path("report.pdf"))
    if not result.success:
        ...
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from schemas import CommandInvocation, ExecutionResult, PageSource, ToolConfig

from .compiler import CommandCompiler
from .exceptions import ToolNotFoundError
from .options import OptionSet
from .parser import parse_output
from .runner import ProcessRunner
from .scratch import ScratchFiles

logger = logging.getLogger(__name__)


class Document:
    """Options plus page sources for one PD4ML rendering.

    Attributes:
        config: Tool paths and JVM settings
        options: Validated options
        pages: Page sources in the order they were added
        last_result: Result of the most recent generate call
    """

    def __init__(
        self,
        config: ToolConfig | None = None,
        options: dict[str, Any] | None = None,
        compiler: CommandCompiler | None = None,
        runner: ProcessRunner | None = None,
    ):
        self.config = config or ToolConfig()
        self.options = OptionSet(options)
        self.compiler = compiler or CommandCompiler(self.config)
        self.runner = runner or ProcessRunner()
        self.pages: list[PageSource] = []
        self.last_result: ExecutionResult | None = None
        self._content: list[str] = []

    @classmethod
    def create(
        cls,
        build: Callable[["Document"], Any],
        config: ToolConfig | None = None,
        options: dict[str, Any] | None = None,
        **kwargs,
    ) -> ExecutionResult:
        """Build a document with a callback, then generate it.

        Usage:
            result = Document.create(lambda doc: doc.add_content("<p>Hi</p>"), config)

        Args:
            build: Called with the new Document to set options and add content
            config: Tool paths and JVM settings
            options: Initial options
            **kwargs: Passed to the Document constructor (compiler, runner)

        Returns:
            ExecutionResult of the generate call
        """
        document = cls(config, options=options, **kwargs)
        build(document)
        return document.generate()

    @classmethod
    def create_and_save(
        cls,
        path: Path,
        build: Callable[["Document"], Any],
        config: ToolConfig | None = None,
        options: dict[str, Any] | None = None,
        **kwargs,
    ) -> ExecutionResult:
        """Build a document with a callback, then render it into ``path``."""
        document = cls(config, options=options, **kwargs)
        build(document)
        return document.save_to(path)

    def set_option(self, key: str, value: Any) -> None:
        """Set an option; None reverts it to the default.

        Raises:
            InvalidOptionError: For an unknown key or an invalid value
        """
        self.options.set_option(key, value)

    def remove_option(self, key: str) -> None:
        self.options.remove_option(key)

    def add_content(self, html: str) -> None:
        """Append HTML to the inline content buffer."""
        self._content.append(html)

    @property
    def content(self) -> str:
        return "".join(self._content)

    def add_page(self, source: PageSource | str | Path) -> PageSource:
        """Add a page by URL, file path or inline text.

        Strings are classified by content; PageSource instances are kept as is.

        Returns:
            The PageSource that was added
        """
        if not isinstance(source, PageSource):
            source = PageSource.classify(source)
        self.pages.append(source)
        return source

    def sources(self) -> list[PageSource]:
        """Page sources for the next invocation, inline content first."""
        sources = []
        if self.content:
            sources.append(PageSource.text(self.content))
        return sources + self.pages

    def compile(
        self, scratch: ScratchFiles, output_path: Path | None = None
    ) -> CommandInvocation:
        """Compile the current state into a CommandInvocation."""
        return self.compiler.compile(self.options, self.sources(), scratch, output_path)

    def generate(self, output_path: Path | None = None) -> ExecutionResult:
        """Run the external tool and parse its output.

        Scratch files are removed before this returns or raises.

        Args:
            output_path: Where the tool should write the PDF (optional)

        Returns:
            ExecutionResult; check ``success`` or pass it to ``raise_for_errors``

        Raises:
            InvalidOptionError: If a prerequisite path is missing
            ToolNotFoundError: If the tool cannot be launched
        """
        self.last_result = None
        with ScratchFiles(self.config.scratch_dir) as scratch:
            invocation = self.compile(scratch, output_path)
            if self.options.get("debug"):
                logger.info(f"[PD4ML] command: {invocation.command_line}")
            else:
                logger.debug(f"[PD4ML] command: {invocation.command_line}")

            raw = self.runner.execute(invocation)

        result = parse_output(raw)
        self.last_result = result

        if result.success:
            logger.info(f"PD4ML generated {result.pages} pages ({result.bytes} bytes)")
        else:
            logger.warning(f"PD4ML reported no page count; errors: {result.errors}")
        return result

    def save_to(self, path: Path) -> ExecutionResult:
        """Render into the PDF file at ``path``."""
        return self.generate(output_path=Path(path))


def configure_fonts(
    config: ToolConfig | None = None, runner: ProcessRunner | None = None
) -> str:
    """Build the tool's font properties file inside the font directory.

    The tool needs this file to resolve font names.

    Returns:
        Raw output of the tool

    Raises:
        InvalidOptionError: If a prerequisite path is missing
        ToolNotFoundError: If the tool cannot be launched
    """
    config = config or ToolConfig()
    runner = runner or ProcessRunner()
    invocation = CommandCompiler(config).compile_font_configuration()
    logger.info(f"Building font information in {config.font_path}")
    logger.debug(f"[PD4ML] command: {invocation.command_line}")
    try:
        return runner.execute(invocation)
    except ToolNotFoundError as e:
        raise ToolNotFoundError(
            f"Could not build font properties file: {e.message}",
            exit_status=e.exit_status,
        ) from e
