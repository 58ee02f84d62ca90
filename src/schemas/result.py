"""Execution result schema."""

from pydantic import BaseModel, Field

GENERAL_ERROR = 0


class ExecutionResult(BaseModel):
    """Structured view of the external tool's output.

    An invocation counts as successful only when the tool reported a page
    count; the process exit code alone says nothing.

    Attributes:
        bytes: Size of the generated PDF, from the ``BYTES:`` line
        pages: Number of generated pages, from the ``PAGES:`` line
        output: Raw combined stdout/stderr text
        errors: Error messages by number (0 for unnumbered ``ERROR:`` lines)
    """

    bytes: int | None = None
    pages: int | None = None
    output: str = ""
    errors: dict[int, str] = Field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.pages is not None

