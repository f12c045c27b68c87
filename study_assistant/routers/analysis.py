"""Analysis API: run the classification core and template repair on raw text.

Both endpoints are local and deterministic; no model or database call is made.
"""

import asyncio

from fastapi import APIRouter, Request

from study_assistant.middleware.rate_limit import RATE_LIMITS, get_limiter
from study_assistant.models.classification import (
    AnalyzeRequest,
    QueryAnalysis,
    RepairRequest,
    RepairResult,
)
from study_assistant.services.category_classifier import determine_category
from study_assistant.services.query_classifier import (
    is_concept_query,
    is_educational_query,
    is_factual_query,
)
from study_assistant.services.question_extractor import extract_main_concept
from study_assistant.services.response_template import ensure_template, is_template_compliant
from study_assistant.services.subject_detector import parse_educational_query

router = APIRouter(prefix="/api", tags=["analysis"])
limiter = get_limiter()


def analyze_message(message: str, response: str = "") -> QueryAnalysis:
    """Every classifier verdict for one message."""
    query = parse_educational_query(message)
    return QueryAnalysis(
        is_educational=is_educational_query(message),
        is_factual=is_factual_query(message),
        is_concept_query=is_concept_query(message),
        subject=query.subject,
        topic=query.topic,
        question=query.question,
        category=determine_category(extract_main_concept(message), message, response),
        forced_template=query.forced_template,
    )


@router.post("/analyze", response_model=QueryAnalysis)
@limiter.limit(RATE_LIMITS["analyze"])  # type: ignore[untyped-decorator]
async def analyze(request: Request, body: AnalyzeRequest) -> QueryAnalysis:
    """Classify a message: educational/factual/concept flags, subject, topic, question and card category."""
    return await asyncio.to_thread(analyze_message, body.message, body.response or "")


@router.post("/templates/repair", response_model=RepairResult)
@limiter.limit(RATE_LIMITS["analyze"])  # type: ignore[untyped-decorator]
async def repair_template(request: Request, body: RepairRequest) -> RepairResult:
    """Check a model response against the answer template and rebuild it if needed."""
    query = await asyncio.to_thread(parse_educational_query, body.message)
    was_compliant = is_template_compliant(body.response)
    content, repaired = await asyncio.to_thread(ensure_template, body.response, query)
    return RepairResult(
        content=content,
        was_compliant=was_compliant,
        repaired=repaired,
        subject=query.subject,
        topic=query.topic,
    )
