from __future__ import annotations

from pydantic import BaseModel


class ToolResult(BaseModel):
    """Text payload returned to the transport, flagged when it reports an error."""

    text: str
    is_error: bool = False

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=True)
