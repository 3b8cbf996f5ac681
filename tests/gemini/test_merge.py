"""Tests for request merging and method/URL resolution."""

from __future__ import annotations

import pytest

from genai_kit.gemini._context import Backend, BackendContext, ModelDefaults
from genai_kit.gemini._dispatch import Method, merge_request, method_for_model, resolve_url
from genai_kit.gemini._types import (
    CachedContent,
    Content,
    FunctionDeclaration,
    GenerateContentRequest,
    GenerationConfig,
    SafetySetting,
    TextPart,
    Tool,
    ToolConfig,
)

_DEFAULT_TOOL = Tool(function_declarations=(FunctionDeclaration(name="default_fn"),))
_CALLER_TOOL = Tool(function_declarations=(FunctionDeclaration(name="caller_fn"),))


def _context(**kwargs: object) -> BackendContext:
    defaults = ModelDefaults(
        generation_config=GenerationConfig(temperature=0.1),
        safety_settings=(
            SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_NONE"),
        ),
        tools=(_DEFAULT_TOOL,),
        tool_config=ToolConfig(),
        system_instruction=Content(parts=(TextPart("be brief"),)),
    )
    return BackendContext(model="gemini-1.5-pro", api_key="k", defaults=defaults, **kwargs)


def _request(**kwargs: object) -> GenerateContentRequest:
    return GenerateContentRequest(
        contents=(Content(role="user", parts=(TextPart("hi"),)),), **kwargs
    )


def test_fills_absent_fields_from_defaults() -> None:
    context = _context()
    merged = merge_request(_request(), context)
    assert merged.model == "models/gemini-1.5-pro"
    assert merged.generation_config == GenerationConfig(temperature=0.1)
    assert merged.tools == (_DEFAULT_TOOL,)
    assert merged.system_instruction.text == "be brief"
    assert merged.safety_settings == context.defaults.safety_settings


def test_caller_values_win() -> None:
    config = GenerationConfig(temperature=0.9)
    merged = merge_request(
        _request(tools=(_CALLER_TOOL,), generation_config=config, model="gemini-1.5-flash"),
        _context(),
    )
    assert merged.tools == (_CALLER_TOOL,)
    assert merged.generation_config is config
    assert merged.model == "models/gemini-1.5-flash"


def test_merge_never_touches_request_or_defaults() -> None:
    context = _context()
    request = _request()
    merge_request(request, context, json_mode=True, grounding=True)
    assert request.generation_config is None
    assert request.tools is None
    assert context.defaults.generation_config.response_mime_type is None
    assert context.defaults.tools == (_DEFAULT_TOOL,)


def test_cached_content_clears_tools_and_instruction() -> None:
    cached = CachedContent(
        name="cachedContents/abc",
        model="models/gemini-1.5-pro-001",
        contents=(Content(role="user", parts=(TextPart("context doc"),)),),
    )
    merged = merge_request(_request(model="gemini-1.5-flash"), _context(cached_content=cached))
    assert merged.cached_content == "cachedContents/abc"
    assert merged.model == "models/gemini-1.5-pro-001"
    assert merged.tools is None
    assert merged.tool_config is None
    assert merged.system_instruction is None
    assert [c.text for c in merged.contents] == ["context doc", "hi"]
    # generation config and safety still come from the defaults
    assert merged.generation_config == GenerationConfig(temperature=0.1)


def test_json_mode_sets_mime_type() -> None:
    merged = merge_request(_request(), _context(), json_mode=True)
    assert merged.generation_config.response_mime_type == "application/json"
    assert merged.generation_config.temperature == 0.1


def test_grounding_appends_search_tool() -> None:
    merged = merge_request(_request(tools=()), _context(), grounding=True)
    (tool,) = merged.tools
    assert tool.google_search_retrieval.dynamic_retrieval_config.mode == "MODE_DYNAMIC"


@pytest.mark.parametrize(
    ("model", "expected"),
    [
        ("chat-bison-001", Method.GENERATE_MESSAGE),
        ("models/text-bison-001", Method.GENERATE_TEXT),
        ("embedding-gecko-001", Method.EMBED_TEXT),
        ("embedding-001", Method.EMBED_CONTENT),
        ("text-embedding-004", Method.EMBED_CONTENT),
        ("AQA", Method.GENERATE_ANSWER),
        ("gemini-1.5-pro", Method.GENERATE_CONTENT),
    ],
)
def test_method_for_model_direct(model: str, expected: str) -> None:
    assert method_for_model(BackendContext(model=model, api_key="k")) == expected


def test_method_for_model_cloud() -> None:
    context = BackendContext(
        backend=Backend.CLOUD, model="gemini-1.5-pro", project_id="p", region="us-central1"
    )
    assert method_for_model(context) == Method.STREAM_GENERATE_CONTENT
    context.endpoint_id = "endpoints/42"
    assert method_for_model(context) == Method.GENERATE_CONTENT


def test_resolve_url_cloud_endpoint() -> None:
    context = BackendContext(
        backend=Backend.CLOUD,
        model="gemini-1.5-pro",
        project_id="p",
        region="us-east1",
        endpoint_id="42",
    )
    assert resolve_url(context, Method.GENERATE_CONTENT) == (
        "https://us-east1-aiplatform.googleapis.com/v1/projects/p/locations/us-east1/"
        "endpoints/42:generateContent"
    )


def test_resolve_url_model_override() -> None:
    context = BackendContext(model="gemini-1.5-pro", api_key="k")
    assert resolve_url(context, Method.COUNT_TOKENS, "tunedModels/x") == (
        "https://generativelanguage.googleapis.com/v1beta/tunedModels/x:countTokens"
    )
