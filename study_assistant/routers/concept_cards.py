"""Concept card API: list, create, edit and delete cards."""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, Response, status

from study_assistant.db.concept_cards import (
    add_concept_card,
    delete_concept_card,
    list_concept_cards,
    update_concept_card,
)
from study_assistant.db.supabase_client import get_supabase_client
from study_assistant.models.concept_card import (
    CategoryFilter,
    ConceptCard,
    ConceptCardCreate,
    ConceptCardUpdate,
)
from study_assistant.routers.chats import _validate_uuid
from study_assistant.services.concept_cards import random_gradient

router = APIRouter(prefix="/api/concept-cards", tags=["concept-cards"])


@router.get("", response_model=List[ConceptCard])
async def get_concept_cards(
    category: CategoryFilter = Query("All", description="Physics, Chemistry, Biology, Other or All"),
) -> List[Dict[str, Any]]:
    """Cards newest first, optionally filtered by category."""
    return await list_concept_cards(get_supabase_client(), category)


@router.post("", response_model=ConceptCard, status_code=status.HTTP_201_CREATED)
async def post_concept_card(body: ConceptCardCreate) -> Dict[str, Any]:
    """Create a card by hand. A gradient is picked when none is given."""
    return await add_concept_card(
        get_supabase_client(),
        title=body.title,
        content=body.content,
        category=body.category,
        color_gradient=body.color_gradient or random_gradient(),
    )


@router.patch("/{card_id}", response_model=ConceptCard)
async def patch_concept_card(card_id: str, body: ConceptCardUpdate) -> Dict[str, Any]:
    """Update the given fields of a card."""
    card_id = _validate_uuid(card_id, "card_id")
    updates = body.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    row = await update_concept_card(get_supabase_client(), card_id, updates)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Concept card not found: {card_id}")
    return row


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_concept_card(card_id: str) -> Response:
    card_id = _validate_uuid(card_id, "card_id")
    if not await delete_concept_card(get_supabase_client(), card_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Concept card not found: {card_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
