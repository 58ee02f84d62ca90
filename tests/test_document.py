"""Tests for the Document facade."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pd4ml_runner.document import Document, configure_fonts
from pd4ml_runner.exceptions import (
    InvalidOptionError,
    ToolNotFoundError,
    ToolReportedError,
)
from pd4ml_runner.parser import raise_for_errors
from pd4ml_runner.runner import ProcessRunner
from schemas import PageSource


class RecordingRunner(ProcessRunner):
    """Runner that records scratch files visible during execution."""

    def __init__(self, output="PAGES: 1\n", error=None):
        self.output = output
        self.error = error
        self.invocations = []
        self.seen_files = []

    def execute(self, invocation):
        self.invocations.append(invocation)
        for token in invocation.arguments:
            path = Path(token)
            if path.name.startswith("pd4ml-") and path.suffix == ".html":
                self.seen_files.append((path, path.exists()))
        if self.error is not None:
            raise self.error
        return self.output


class TestDocumentOptions:
    """Tests for Document option handling."""

    def test_options_in_constructor(self, tool_config):
        """Constructor options are validated and applied."""
        document = Document(tool_config, options={"page_orientation": "LANDSCAPE"})

        assert document.options["page_orientation"] == "LANDSCAPE"

    def test_invalid_option_at_set_time(self, tool_config):
        """Unknown options fail immediately."""
        document = Document(tool_config)

        with pytest.raises(InvalidOptionError, match="Invalid option colour"):
            document.set_option("colour", "red")

    def test_remove_option(self, tool_config):
        """remove_option reverts to default."""
        document = Document(tool_config, options={"html_width": 1200})

        document.remove_option("html_width")

        assert document.options["html_width"] == 800


class TestDocumentSources:
    """Tests for page sources."""

    def test_add_page_classifies(self, tool_config, tmp_path):
        """Strings are classified into URL, file or text."""
        html_file = tmp_path / "page.html"
        html_file.write_text("<p>x</p>")
        document = Document(tool_config)

        kinds = [
            document.add_page("https://example.com").kind,
            document.add_page(str(html_file)).kind,
            document.add_page(html_file).kind,
            document.add_page("<p>inline</p>").kind,
        ]

        assert kinds == ["url", "file", "file", "text"]

    def test_add_page_keeps_page_source(self, tool_config):
        """PageSource instances are added unchanged."""
        document = Document(tool_config)
        source = PageSource.text("https://not-a-url-really")

        assert document.add_page(source) is source

    def test_content_buffer_first(self, tool_config):
        """Inline content becomes the first source."""
        document = Document(tool_config)
        document.add_page("https://example.com")
        document.add_content("<h1>Title</h1>")
        document.add_content("<p>Body</p>")

        sources = document.sources()

        assert sources[0] == PageSource.text("<h1>Title</h1><p>Body</p>")
        assert sources[1] == PageSource.url("https://example.com")

    def test_no_content_no_text_source(self, tool_config):
        """An empty buffer adds no source."""
        assert Document(tool_config).sources() == []


class TestDocumentGenerate:
    """Tests for Document.generate."""

    def test_generate_parses_output(self, tool_config, mock_runner):
        """generate returns the parsed result."""
        document = Document(tool_config, runner=mock_runner)
        document.add_page("https://example.com")

        result = document.generate()

        assert result.pages == 3
        assert result.bytes == 1024
        assert result.errors == {2: "missing image"}
        assert document.last_result is result
        mock_runner.execute.assert_called_once()

    def test_generate_replaces_last_result(self, tool_config):
        """Each call produces a fresh result."""
        runner = RecordingRunner(output="PAGES: 2\n")
        document = Document(tool_config, runner=runner)
        first = document.generate()

        runner.output = "ERROR: broken\n"
        second = document.generate()

        assert first.pages == 2
        assert second.pages is None
        assert second.errors == {0: "broken"}
        assert document.last_result is second

    def test_scratch_files_removed_after_success(self, tool_config, tool_paths):
        """Scratch files exist during execution and are removed afterwards."""
        runner = RecordingRunner()
        document = Document(tool_config, runner=runner)
        document.add_content("<p>Hello</p>")
        document.add_page("<p>Second</p>")

        document.generate()

        assert len(runner.seen_files) == 2
        assert all(existed for _, existed in runner.seen_files)
        assert not any(path.exists() for path, _ in runner.seen_files)
        assert list(tool_paths["scratch"].iterdir()) == []

    def test_scratch_files_removed_after_failure(self, tool_config, tool_paths):
        """Scratch files are removed when the runner raises."""
        runner = RecordingRunner(error=ToolNotFoundError("gone", exit_status=127))
        document = Document(tool_config, runner=runner)
        document.add_content("<p>Hello</p>")

        with pytest.raises(ToolNotFoundError):
            document.generate()

        assert len(runner.seen_files) == 1
        assert list(tool_paths["scratch"].iterdir()) == []
        assert document.last_result is None

    def test_invalid_paths_fail_before_running(self, tool_config, tmp_path):
        """Missing prerequisites raise before the runner is called."""
        config = tool_config.model_copy(update={"font_path": tmp_path / "nowhere"})
        runner = MagicMock(spec=ProcessRunner)
        document = Document(config, runner=runner)

        with pytest.raises(InvalidOptionError, match="Invalid font path"):
            document.generate()

        runner.execute.assert_not_called()

    def test_save_to_passes_output(self, tool_config, tmp_path):
        """save_to adds the output path to the command."""
        runner = RecordingRunner(output="BYTES: 5\nPAGES: 1\n")
        document = Document(tool_config, runner=runner)

        result = document.save_to(tmp_path / "report.pdf")

        arguments = list(runner.invocations[0].arguments)
        assert arguments[arguments.index("--out") + 1] == str(tmp_path / "report.pdf")
        assert result.success

    def test_debug_logs_command_at_info(self, tool_config, caplog):
        """With debug set the command line is logged at INFO."""
        runner = RecordingRunner()
        document = Document(tool_config, options={"debug": True}, runner=runner)

        with caplog.at_level(logging.INFO, logger="pd4ml_runner.document"):
            document.generate()

        assert "[PD4ML] command:" in caplog.text
        assert "--debug" in caplog.text

    def test_command_not_logged_at_info_without_debug(self, tool_config, caplog):
        """Without debug the command line stays at DEBUG."""
        document = Document(tool_config, runner=RecordingRunner())

        with caplog.at_level(logging.INFO, logger="pd4ml_runner.document"):
            document.generate()

        assert "[PD4ML] command:" not in caplog.text

    def test_failed_result_raise_for_errors(self, tool_config):
        """Callers can turn a failed result into ToolReportedError."""
        runner = RecordingRunner(output="ERR3: bad css\n")
        result = Document(tool_config, runner=runner).generate()

        with pytest.raises(ToolReportedError) as exc_info:
            raise_for_errors(result)

        assert exc_info.value.errors == {3: "bad css"}


    def test_command_logged_once_without_debug(self, tool_config, caplog):
        """The command line is logged a single time at DEBUG."""
        document = Document(tool_config, runner=RecordingRunner())

        with caplog.at_level(logging.DEBUG):
            document.generate()

        assert caplog.text.count("[PD4ML] command:") == 1

    def test_debug_logs_permission_bits(self, tool_config, caplog):
        """With debug set the permission word is logged in binary."""
        document = Document(
            tool_config,
            options={"debug": True, "allow_print": False},
            runner=RecordingRunner(),
        )

        with caplog.at_level(logging.INFO, logger="pd4ml_runner.compiler"):
            document.generate()

        assert "[PD4ML] permissions: 1111111111111000" in caplog.text


class TestDocumentBuilders:
    """Tests for Document.create and Document.create_and_save."""

    def test_create_builds_then_generates(self, tool_config):
        """create passes the new document to the callback, then generates."""
        runner = RecordingRunner(output="BYTES: 9\nPAGES: 1\n")

        def build(document):
            assert runner.invocations == []
            document.set_option("page_orientation", "LANDSCAPE")
            document.add_page("https://example.com")

        result = Document.create(build, tool_config, runner=runner)

        assert result.pages == 1
        arguments = list(runner.invocations[0].arguments)
        assert arguments[arguments.index("--page-orientation") + 1] == "LANDSCAPE"
        assert arguments[-1] == "https://example.com"
        assert "--out" not in arguments

    def test_create_applies_initial_options(self, tool_config):
        """Initial options are set before the callback runs."""
        seen = []

        Document.create(
            lambda document: seen.append(document.options["html_width"]),
            tool_config,
            options={"html_width": 1024},
            runner=RecordingRunner(),
        )

        assert seen == [1024]

    def test_create_and_save_passes_output(self, tool_config, tmp_path):
        """create_and_save renders into the given path."""
        runner = RecordingRunner()

        result = Document.create_and_save(
            tmp_path / "report.pdf",
            lambda document: document.add_content("<p>Hello</p>"),
            tool_config,
            runner=runner,
        )

        assert result.success
        arguments = list(runner.invocations[0].arguments)
        assert arguments[arguments.index("--out") + 1] == str(tmp_path / "report.pdf")

    def test_create_invalid_option_in_callback(self, tool_config):
        """Invalid options raised in the callback stop before running the tool."""
        runner = RecordingRunner()

        with pytest.raises(InvalidOptionError):
            Document.create(lambda document: document.set_option("margin", 5), tool_config, runner=runner)

        assert runner.invocations == []


class TestConfigureFonts:
    """Tests for configure_fonts."""

    def test_runs_font_configuration(self, tool_config, tool_paths):
        """The font build command is executed and its output returned."""
        runner = RecordingRunner(output="fonts: 12\n")

        output = configure_fonts(tool_config, runner)

        assert output == "fonts: 12\n"
        assert "-configure.fonts" in runner.invocations[0].arguments

    def test_tool_not_found(self, tool_config):
        """Launch failures are reported as ToolNotFoundError."""
        runner = RecordingRunner(error=ToolNotFoundError("missing", exit_status=127))

        with pytest.raises(ToolNotFoundError, match="Could not build font properties file") as exc_info:
            configure_fonts(tool_config, runner)

        assert exc_info.value.exit_status == 127
