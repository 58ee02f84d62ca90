"""Process-wide configuration for the external PD4ML tool.

The configuration is an explicit, immutable value handed to every
invocation. Nothing reads ambient global state.
"""

import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

DEFAULT_JAVA_PATH = "java"
DEFAULT_JAR_PATH = Path("extras/pd4ml/pd4ml.jar")
DEFAULT_FONT_PATH = Path("extras/fonts")
DEFAULT_BRIDGE_CLASS = "Pd4Bridge"
DEFAULT_MAX_HEAP = "512m"

ENV_PREFIX = "PD4ML_"


class ToolConfig(BaseModel):
    """Paths and JVM settings used to launch the external tool.

    Attributes:
        java_path: Java runtime executable, either a path or a command on PATH
        jar_path: Path to the PD4ML jar archive
        font_path: Directory of TrueType fonts handed to the tool
        bridge_path: Directory holding the bridge class (default: the jar's directory)
        bridge_class: Main class of the bridge
        max_heap: JVM maximum heap size (passed as -Xmx)
        scratch_dir: Directory for scratch files (default: system temp dir)
    """

    java_path: str = DEFAULT_JAVA_PATH
    jar_path: Path = DEFAULT_JAR_PATH
    font_path: Path = DEFAULT_FONT_PATH
    bridge_path: Path | None = None
    bridge_class: str = DEFAULT_BRIDGE_CLASS
    max_heap: str = DEFAULT_MAX_HEAP
    scratch_dir: Path | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ToolConfig":
        """Build a configuration from ``PD4ML_*`` environment variables.

        Unset or blank variables fall back to the field defaults.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            ToolConfig populated from the environment
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in cls.model_fields:
            raw = (environ.get(ENV_PREFIX + field_name.upper()) or "").strip()
            if raw:
                values[field_name] = raw
        return cls.model_validate(values)

    @property
    def bridge_dir(self) -> Path:
        return self.bridge_path or self.jar_path.parent

    @property
    def class_path(self) -> str:
        """Classpath joining the jar, the working directory and the bridge."""
        return os.pathsep.join([str(self.jar_path), ".", str(self.bridge_dir)])

    def java_exists(self) -> bool:
        """Whether the runtime names an existing file or a command on PATH."""
        return Path(self.java_path).exists() or shutil.which(self.java_path) is not None

    def invalid_paths(self) -> list[tuple[str, str]]:
        """Return ``(label, path)`` pairs for every prerequisite that is missing.

        Checked in the order jar, java, font.
        """
        invalid = []
        if not self.jar_path.exists():
            invalid.append(("jar", str(self.jar_path)))
        if not self.java_exists():
            invalid.append(("java", self.java_path))
        if not self.font_path.exists():
            invalid.append(("font", str(self.font_path)))
        return invalid
