"""Tests for _urls.py."""

from __future__ import annotations

import pytest

from genai_kit.gemini._exceptions import InvalidArgumentError
from genai_kit.gemini._urls import (
    BASE_URL_GOOGLE_AI,
    BASE_URL_VERTEX_AI,
    URL_GOOGLE_AI,
    URL_VERTEX_AI,
    add_query_string,
    model_id,
    render,
    sanitize_endpoint_name,
    sanitize_model_name,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("gemini-pro", "models/gemini-pro"),
        ("models/gemini-pro", "models/gemini-pro"),
        ("tunedModels/abc", "tunedModels/abc"),
        ("publishers/google/models/gemini-pro", "publishers/google/models/gemini-pro"),
    ],
)
def test_sanitize_model_name(name: str, expected: str) -> None:
    assert sanitize_model_name(name) == expected


def test_model_id_takes_last_segment() -> None:
    assert model_id("models/text-bison-001") == "text-bison-001"
    assert model_id("aqa") == "aqa"


def test_sanitize_endpoint_name() -> None:
    assert sanitize_endpoint_name(None) is None
    assert sanitize_endpoint_name("") is None
    assert sanitize_endpoint_name("123") == "endpoints/123"
    assert sanitize_endpoint_name("projects/p/locations/r/endpoints/123") == "endpoints/123"


def test_render_direct_url() -> None:
    values = {
        "BaseUrlGoogleAi": BASE_URL_GOOGLE_AI,
        "version": "v1beta",
        "model": "models/gemini-pro",
        "method": "generateContent",
    }
    assert render(URL_GOOGLE_AI, values) == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent"
    )


def test_render_expands_nested_base_url() -> None:
    values = {
        "BaseUrlVertexAi": BASE_URL_VERTEX_AI,
        "version": "v1",
        "region": "europe-west4",
        "projectId": "proj",
        "publisher": "google",
        "model": "models/gemini-pro",
        "method": "streamGenerateContent",
    }
    assert render(URL_VERTEX_AI, values) == (
        "https://europe-west4-aiplatform.googleapis.com/v1/projects/proj/locations/"
        "europe-west4/publishers/google/models/gemini-pro:streamGenerateContent"
    )


def test_render_missing_placeholder() -> None:
    with pytest.raises(InvalidArgumentError, match="method"):
        render(URL_GOOGLE_AI, {"BaseUrlGoogleAi": "https://x", "model": "models/m"})


def test_add_query_string_skips_empty_values() -> None:
    url = add_query_string(
        "https://x/tunedModels", {"pageSize": "10", "pageToken": None, "filter": ""}
    )
    assert url == "https://x/tunedModels?pageSize=10"


def test_add_query_string_appends_to_existing_query() -> None:
    assert add_query_string("https://x/m?alt=sse", {"key": "v"}) == "https://x/m?alt=sse&key=v"
    assert add_query_string("https://x/m", {}) == "https://x/m"
