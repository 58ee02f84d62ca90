"""Command invocation schema."""

import shlex

from pydantic import BaseModel


class CommandInvocation(BaseModel):
    """A fully compiled call of the external tool.

    The arguments are kept as discrete tokens and only joined into a
    single string for display.

    Attributes:
        java_path: Runtime executable
        jvm_args: Arguments for the runtime itself (heap size, headless mode)
        class_path: Classpath for the bridge class, or None for ``-jar`` calls
        main: Bridge class name, or the jar path for ``-jar`` calls
        arguments: Tool arguments following the main class
    """

    java_path: str
    jvm_args: tuple[str, ...] = ()
    class_path: str | None = None
    main: str
    arguments: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @property
    def argv(self) -> list[str]:
        """Full token list, ready for subprocess."""
        argv = [self.java_path, *self.jvm_args]
        if self.class_path is not None:
            argv += ["-cp", self.class_path, self.main]
        else:
            argv += ["-jar", self.main]
        return argv + list(self.arguments)

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)
