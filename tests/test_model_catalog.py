"""Tests for Gemini model discovery and ordering."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from study_assistant.models.gemini_model import GeminiModelInfo
from study_assistant.services.model_catalog import (
    fallback_catalog,
    format_model_name,
    is_multimodal,
    list_available_models,
    sort_models,
)


def _listed(name, actions=("generateContent",), display_name=None):
    return SimpleNamespace(
        name=name,
        display_name=display_name,
        description=None,
        input_token_limit=1048576,
        output_token_limit=8192,
        supported_actions=list(actions),
    )


def test_format_model_name():
    assert format_model_name("gemini-1.5-pro") == "Gemini 1.5 Pro"
    assert format_model_name("gemini-2.0-flash-exp") == "Gemini 2.0 Flash Exp"


@pytest.mark.parametrize("model_id,expected", [
    ("gemini-2.0-flash", True),
    ("gemini-1.5-pro", True),
    ("gemini-pro-vision", True),
    ("gemini-pro", False),
])
def test_is_multimodal(model_id, expected):
    assert is_multimodal(model_id) is expected


def test_sort_order():
    ids = ["gemini-1.5-flash", "gemini-2.0-flash-exp", "gemini-1.5-pro", "gemini-2.0-flash"]
    models = [GeminiModelInfo(id=i, name=i) for i in ids]

    assert [m.id for m in sort_models(models)] == [
        "gemini-2.0-flash",
        "gemini-2.0-flash-exp",
        "gemini-1.5-pro",
        "gemini-1.5-flash",
    ]


def test_fallback_catalog_deduplicates():
    catalog = fallback_catalog(["gemini-1.5-flash", "gemini-2.0-flash", "gemini-1.5-flash"])

    assert [m.id for m in catalog] == ["gemini-2.0-flash", "gemini-1.5-flash"]
    assert catalog[0].name == "Gemini 2.0 Flash"


@pytest.mark.asyncio
async def test_lists_only_generative_gemini_models():
    client = MagicMock()
    client.models.list.return_value = [
        _listed("models/gemini-1.5-pro", display_name="Gemini 1.5 Pro"),
        _listed("models/text-embedding-004"),
        _listed("models/gemini-embedding-001", actions=("embedContent",)),
        _listed("models/gemini-2.0-flash"),
    ]

    models = await list_available_models(client, ["gemini-2.0-flash"])

    assert [m.id for m in models] == ["gemini-2.0-flash", "gemini-1.5-pro"]
    assert models[0].name == "Gemini 2.0 Flash"
    assert models[0].output_token_limit == 8192


@pytest.mark.asyncio
async def test_api_error_falls_back_to_configured_models():
    client = MagicMock()
    client.models.list.side_effect = Exception("network down")

    models = await list_available_models(client, ["gemini-2.0-flash", "gemini-1.5-flash"])

    assert [m.id for m in models] == ["gemini-2.0-flash", "gemini-1.5-flash"]


@pytest.mark.asyncio
async def test_no_gemini_models_falls_back():
    client = MagicMock()
    client.models.list.return_value = [_listed("models/text-embedding-004")]

    models = await list_available_models(client, ["gemini-2.0-flash"])

    assert [m.id for m in models] == ["gemini-2.0-flash"]
