"""Page source schema.

A page source is one document handed to the external tool: a URL, a path
to an existing file, or inline HTML text.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

URL_SCHEMES = ("http://", "https://")


class PageSource(BaseModel):
    """A single page/content source for an invocation.

    Attributes:
        kind: "url", "file" or "text"
        value: The URL, the file path, or the inline text
    """

    kind: Literal["url", "file", "text"]
    value: str

    model_config = {"frozen": True}

    @classmethod
    def classify(cls, value: str | Path) -> "PageSource":
        """Sniff a string and wrap it in the matching source kind.

        http(s) URLs win over paths; anything that is neither a URL nor an
        existing path is treated as inline text.
        """
        if isinstance(value, Path):
            return cls.file(value)
        if value.lower().startswith(URL_SCHEMES):
            return cls.url(value)
        # os.path.exists swallows ENAMETOOLONG and NUL bytes from long HTML strings
        if value and os.path.exists(value):
            return cls.file(value)
        return cls.text(value)

    @classmethod
    def url(cls, value: str) -> "PageSource":
        return cls(kind="url", value=value)

    @classmethod
    def file(cls, value: str | Path) -> "PageSource":
        return cls(kind="file", value=str(value))

    @classmethod
    def text(cls, value: str) -> "PageSource":
        return cls(kind="text", value=value)

    @property
    def is_text(self) -> bool:
        return self.kind == "text"
