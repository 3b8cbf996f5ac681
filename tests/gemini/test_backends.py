"""Tests for the GoogleAI / VertexAI factories."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from genai_kit.gemini import (
    AsyncGenerativeModel,
    GenerativeModel,
    GoogleAI,
    VertexAI,
    create_backend,
)
from genai_kit.gemini._exceptions import InvalidArgumentError
from genai_kit.gemini._types import CachedContent, GenerationConfig, TunedModel, TuningJob
from tests.conftest import MockResponse, candidate_json


def test_google_ai_generative_model(mock_session: MagicMock) -> None:
    model = GoogleAI(api_key="k").generative_model(
        "gemini-1.5-flash",
        session=mock_session,
        generation_config=GenerationConfig(temperature=0.3),
    )
    assert isinstance(model, GenerativeModel)
    assert model.name == "models/gemini-1.5-flash"
    assert model.api_key == "k"
    assert model.context.defaults.generation_config.temperature == 0.3


def test_google_ai_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    model = GoogleAI().async_generative_model()
    assert isinstance(model, AsyncGenerativeModel)
    assert model.api_key == "env-key"
    assert model.model == "gemini-1.5-pro"


def test_google_ai_cached_model(mock_session: MagicMock) -> None:
    cached = CachedContent(name="cachedContents/c", model="models/gemini-1.5-pro-002")
    model = GoogleAI(api_key="k").cached_model(cached, session=mock_session)
    mock_session.request.return_value = MockResponse(json_data=candidate_json("ok"))
    model.generate_content("Hi")
    args = mock_session.request.call_args.args
    assert args[1].endswith("/models/gemini-1.5-pro-002:generateContent")


def test_vertex_ai_generative_model(mock_session: MagicMock) -> None:
    vertex = VertexAI(project_id="proj", region="europe-west1", access_token="t")
    model = vertex.generative_model("gemini-1.5-pro", session=mock_session)
    assert model.api_key is None
    assert model.context.region == "europe-west1"
    mock_session.request.return_value = MockResponse(text="[]")
    assert model.generate_content("Hi").text == ""
    url = mock_session.request.call_args.args[1]
    assert url.startswith("https://europe-west1-aiplatform.googleapis.com/v1/projects/proj/")


def test_vertex_ai_endpoint_model(mock_session: MagicMock) -> None:
    vertex = VertexAI(project_id="proj", region="us-central1", access_token="t")
    model = vertex.generative_model(endpoint="987", session=mock_session)
    mock_session.request.return_value = MockResponse(json_data=candidate_json("ok"))
    model.generate_content("Hi")
    url = mock_session.request.call_args.args[1]
    assert url.endswith("/locations/us-central1/endpoints/987:generateContent")


def test_vertex_ai_tuned_model() -> None:
    job = TuningJob(tuned_model=TunedModel(model="models/tuned-1", endpoint="endpoints/5"))
    vertex = VertexAI(project_id="proj", region="us-central1", access_token="t")
    model = vertex.tuned_model(job, asynchronous=True)
    assert isinstance(model, AsyncGenerativeModel)
    assert model.context.endpoint_id == "endpoints/5"
    assert model.model == "models/tuned-1"


def test_vertex_ai_requires_project() -> None:
    with pytest.raises(InvalidArgumentError):
        VertexAI(access_token="t").generative_model()


def test_create_backend() -> None:
    assert isinstance(create_backend("direct", api_key="k"), GoogleAI)
    assert isinstance(create_backend("cloud", project_id="p"), VertexAI)
    with pytest.raises(InvalidArgumentError, match="Unknown backend"):
        create_backend("azure")
