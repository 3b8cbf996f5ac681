"""Tests for the backend context and its environment fallbacks."""

from __future__ import annotations

import pytest

from genai_kit.gemini._context import (
    DEFAULT_MODEL,
    DEFAULT_REGION,
    Backend,
    BackendContext,
)
from genai_kit.gemini._exceptions import InvalidArgumentError
from genai_kit.gemini._types import CachedContent, Content, TextPart, Tool, TunedModel, TuningJob


def test_direct_defaults() -> None:
    context = BackendContext.from_env(api_key="key")
    assert context.backend is Backend.DIRECT
    assert context.model == DEFAULT_MODEL
    assert context.model_name == "models/gemini-1.5-pro"
    assert context.version == "v1beta"


def test_env_fallbacks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    monkeypatch.setenv("GOOGLE_AI_MODEL", "gemini-1.5-flash")
    context = BackendContext.from_env()
    assert context.api_key == "env-key"
    assert context.model == "gemini-1.5-flash"


def test_explicit_arguments_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    monkeypatch.setenv("GOOGLE_AI_MODEL", "gemini-1.5-flash")
    context = BackendContext.from_env(model="aqa", api_key="arg-key")
    assert context.api_key == "arg-key"
    assert context.model == "aqa"


def test_access_token_only_read_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_ACCESS_TOKEN", "token")
    assert BackendContext.from_env(api_key="key").access_token is None
    assert BackendContext.from_env().access_token == "token"


def test_cloud_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PROJECT_ID", "proj")
    monkeypatch.setenv("GOOGLE_API_KEY", "ignored")
    context = BackendContext.from_env(Backend.CLOUD, access_token="t")
    assert context.project_id == "proj"
    assert context.region == DEFAULT_REGION
    assert context.api_key is None
    assert context.version == "v1"


def test_cloud_requires_project() -> None:
    with pytest.raises(InvalidArgumentError, match="project_id"):
        BackendContext.from_env(Backend.CLOUD, access_token="t")


def test_credential_headers_api_key() -> None:
    assert BackendContext(api_key="k").credential_headers() == {"x-goog-api-key": "k"}


def test_credential_headers_bearer_with_project() -> None:
    context = BackendContext(
        backend=Backend.CLOUD, access_token="t", project_id="proj", region="us-central1"
    )
    assert context.credential_headers() == {
        "Authorization": "Bearer t",
        "x-goog-user-project": "proj",
    }


def test_credential_headers_need_exactly_one() -> None:
    with pytest.raises(InvalidArgumentError, match="No credential"):
        BackendContext().credential_headers()
    with pytest.raises(InvalidArgumentError, match="not both"):
        BackendContext(api_key="k", access_token="t").credential_headers()


def test_for_cached_content_forces_model_and_tools() -> None:
    tool = Tool(code_execution={})
    cached = CachedContent(
        name="cachedContents/1",
        model="models/gemini-1.5-flash-001",
        tools=(tool,),
        system_instruction=Content(parts=(TextPart("sys"),)),
    )
    context = BackendContext.for_cached_content(cached, api_key="k")
    assert context.model == "models/gemini-1.5-flash-001"
    assert context.cached_content is cached
    assert context.defaults.tools == (tool,)
    assert context.defaults.system_instruction.text == "sys"


def test_for_cached_content_requires_handle() -> None:
    with pytest.raises(InvalidArgumentError):
        BackendContext.for_cached_content(None, api_key="k")  # type: ignore[arg-type]


def test_for_tuning_job_uses_endpoint() -> None:
    job = TuningJob(
        name="tuningJobs/9",
        tuned_model=TunedModel(
            model="projects/p/locations/r/models/7",
            endpoint="projects/p/locations/r/endpoints/55",
        ),
    )
    context = BackendContext.for_tuning_job(
        job, access_token="t", project_id="p", region="us-central1"
    )
    assert context.endpoint_id == "endpoints/55"
    assert context.model == "projects/p/locations/r/models/7"
    assert context.tuning_job is job
