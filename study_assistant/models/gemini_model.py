"""Pydantic model describing a Gemini model offered to the chat UI."""

from typing import Optional

from pydantic import BaseModel


class GeminiModelInfo(BaseModel):
    """A selectable Gemini model."""
    id: str
    name: str
    description: Optional[str] = None
    input_token_limit: Optional[int] = None
    output_token_limit: Optional[int] = None
    multimodal: bool = False
