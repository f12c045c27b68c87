"""Pydantic models for query classification and template repair results.

These are transient values produced per message by the classification
core; none of them is persisted.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


CategoryLabel = Literal["Physics", "Chemistry", "Biology", "Other"]

DEFAULT_SUBJECT = "General Knowledge"
DEFAULT_TOPIC = "Conceptual Understanding"

# Upper bounds on text accepted over HTTP; the classification regexes are
# superlinear on long single lines.
MAX_MESSAGE_LENGTH = 8000
MAX_RESPONSE_LENGTH = 16000


class SubjectTopic(BaseModel):
    """Display-cased subject and topic detected for a message."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(default=DEFAULT_SUBJECT, min_length=1)
    topic: str = Field(default=DEFAULT_TOPIC, min_length=1)


class EducationalQuery(BaseModel):
    """Everything needed to force the answer template for one message."""

    model_config = ConfigDict(frozen=True)

    subject: str = DEFAULT_SUBJECT
    topic: str = DEFAULT_TOPIC
    question: str = ""
    forced_template: bool = Field(
        default=False,
        description="The user asked for the template explicitly (Subject:/Question:/template/format)"
    )


class ExtractedSections(BaseModel):
    """Solution and tips recovered from a response that ignored the template."""

    model_config = ConfigDict(frozen=True)

    solution: str = ""
    tricks: str = ""


class QueryAnalysis(BaseModel):
    """Full classification of a message, as returned by POST /api/analyze."""

    is_educational: bool
    is_factual: bool
    is_concept_query: bool
    subject: str
    topic: str
    question: str
    category: CategoryLabel
    forced_template: bool = False


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    message: str = Field(..., max_length=MAX_MESSAGE_LENGTH, description="Raw user message")
    response: Optional[str] = Field(
        default=None,
        max_length=MAX_RESPONSE_LENGTH,
        description="Optional model response, used only for category voting"
    )


class RepairRequest(BaseModel):
    """Request body for POST /api/templates/repair."""

    message: str = Field(..., max_length=MAX_MESSAGE_LENGTH, description="The user message the response answers")
    response: str = Field(..., max_length=MAX_RESPONSE_LENGTH, description="Raw model response to check and repair")


class RepairResult(BaseModel):
    """Result of checking (and if needed repairing) a model response."""

    content: str
    was_compliant: bool
    repaired: bool
    subject: str
    topic: str
