"""Pytest fixtures for pd4ml-runner tests."""

from unittest.mock import MagicMock

import pytest

from pd4ml_runner.runner import ProcessRunner
from schemas import ToolConfig


@pytest.fixture
def tool_paths(tmp_path):
    """Create a fake runtime, jar and font directory on disk."""
    java = tmp_path / "jre" / "bin" / "java"
    java.parent.mkdir(parents=True)
    java.write_text("#!/bin/sh\n")

    jar = tmp_path / "extras" / "pd4ml" / "pd4ml.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"PK\x03\x04")

    fonts = tmp_path / "extras" / "fonts"
    fonts.mkdir(parents=True)

    scratch = tmp_path / "scratch"
    scratch.mkdir()

    return {"java": java, "jar": jar, "fonts": fonts, "scratch": scratch}


@pytest.fixture
def tool_config(tool_paths):
    """ToolConfig pointing at the fake tool paths."""
    return ToolConfig(
        java_path=str(tool_paths["java"]),
        jar_path=tool_paths["jar"],
        font_path=tool_paths["fonts"],
        scratch_dir=tool_paths["scratch"],
    )


@pytest.fixture
def sample_output():
    """Typical output of a successful rendering."""
    return (
        "PD4ML bridge starting\n"
        "BYTES: 1024\n"
        "PAGES: 3\n"
        "ERR2: missing image\n"
    )


@pytest.fixture
def mock_runner(sample_output):
    """ProcessRunner stand-in returning sample_output."""
    runner = MagicMock(spec=ProcessRunner)
    runner.execute.return_value = sample_output
    return runner
