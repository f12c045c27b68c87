"""Pydantic models for concept cards."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from study_assistant.models.classification import CategoryLabel


CARD_CATEGORIES = ("Physics", "Chemistry", "Biology", "Other")

CategoryFilter = Literal["All", "Physics", "Chemistry", "Biology", "Other"]


class ConceptCardDraft(BaseModel):
    """A card before it is stored (no id or timestamp yet)."""
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: CategoryLabel = "Other"
    color_gradient: Optional[str] = None


class ConceptCard(ConceptCardDraft):
    """A stored concept card."""
    id: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ConceptCardCreate(ConceptCardDraft):
    """Request body for POST /api/concept-cards."""


class ConceptCardUpdate(BaseModel):
    """Request body for PATCH /api/concept-cards/{card_id}."""
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[CategoryLabel] = None
    color_gradient: Optional[str] = None
