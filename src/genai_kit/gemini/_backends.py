"""Backend factories: direct (API key) and cloud-hosted (project, region, OAuth)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from genai_kit.gemini._async_model import AsyncGenerativeModel
from genai_kit.gemini._context import Backend, BackendContext
from genai_kit.gemini._exceptions import InvalidArgumentError
from genai_kit.gemini._model import GenerativeModel
from genai_kit.gemini._types import CachedContent, GenerationConfig, SafetySetting, TuningJob


def _model_class(asynchronous: bool) -> type[GenerativeModel] | type[AsyncGenerativeModel]:
    return AsyncGenerativeModel if asynchronous else GenerativeModel


class GoogleAI:
    """Factory for models on the direct backend.

    Usage::

        genai = GoogleAI(api_key="...")
        model = genai.generative_model("gemini-1.5-flash")
    """

    backend = Backend.DIRECT

    def __init__(self, api_key: str | None = None, *, access_token: str | None = None) -> None:
        self._api_key = api_key
        self._access_token = access_token

    def _context(self, model: str | None = None) -> BackendContext:
        return BackendContext.from_env(
            self.backend, model=model, api_key=self._api_key, access_token=self._access_token
        )

    def generative_model(self, model: str | None = None, **kwargs: Any) -> GenerativeModel:
        """Create a blocking model; ``kwargs`` are the model defaults and ``session``."""
        return GenerativeModel(context=self._context(model), **kwargs)

    def async_generative_model(
        self, model: str | None = None, **kwargs: Any
    ) -> AsyncGenerativeModel:
        return AsyncGenerativeModel(context=self._context(model), **kwargs)

    def cached_model(
        self,
        cached_content: CachedContent,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        asynchronous: bool = False,
        **kwargs: Any,
    ) -> GenerativeModel | AsyncGenerativeModel:
        """A model bound to ``cached_content``: its model id, tools and system instruction."""
        context = BackendContext.for_cached_content(
            cached_content,
            backend=self.backend,
            generation_config=generation_config,
            safety_settings=tuple(safety_settings) if safety_settings is not None else None,
            api_key=self._api_key,
            access_token=self._access_token,
        )
        return _model_class(asynchronous)(context=context, **kwargs)


class VertexAI:
    """Factory for models on the cloud-hosted backend.

    ``project_id`` and ``region`` fall back to ``GOOGLE_PROJECT_ID`` and
    ``GOOGLE_REGION``; the access token to ``GOOGLE_ACCESS_TOKEN``.
    """

    backend = Backend.CLOUD

    def __init__(
        self,
        project_id: str | None = None,
        region: str | None = None,
        *,
        access_token: str | None = None,
    ) -> None:
        self._project_id = project_id
        self._region = region
        self._access_token = access_token

    def _context(self, model: str | None = None, endpoint: str | None = None) -> BackendContext:
        return BackendContext.from_env(
            self.backend,
            model=model,
            access_token=self._access_token,
            project_id=self._project_id,
            region=self._region,
            endpoint_id=endpoint,
        )

    def generative_model(
        self, model: str | None = None, *, endpoint: str | None = None, **kwargs: Any
    ) -> GenerativeModel:
        """Create a blocking model, optionally served from a deployed ``endpoint``."""
        return GenerativeModel(context=self._context(model, endpoint), **kwargs)

    def async_generative_model(
        self, model: str | None = None, *, endpoint: str | None = None, **kwargs: Any
    ) -> AsyncGenerativeModel:
        return AsyncGenerativeModel(context=self._context(model, endpoint), **kwargs)

    def cached_model(
        self,
        cached_content: CachedContent,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        asynchronous: bool = False,
        **kwargs: Any,
    ) -> GenerativeModel | AsyncGenerativeModel:
        context = BackendContext.for_cached_content(
            cached_content,
            backend=self.backend,
            generation_config=generation_config,
            safety_settings=tuple(safety_settings) if safety_settings is not None else None,
            access_token=self._access_token,
            project_id=self._project_id,
            region=self._region,
        )
        return _model_class(asynchronous)(context=context, **kwargs)

    def tuned_model(
        self,
        tuning_job: TuningJob,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        asynchronous: bool = False,
        **kwargs: Any,
    ) -> GenerativeModel | AsyncGenerativeModel:
        """A model serving the result of ``tuning_job`` from its endpoint."""
        context = BackendContext.for_tuning_job(
            tuning_job,
            backend=self.backend,
            generation_config=generation_config,
            safety_settings=tuple(safety_settings) if safety_settings is not None else None,
            access_token=self._access_token,
            project_id=self._project_id,
            region=self._region,
        )
        return _model_class(asynchronous)(context=context, **kwargs)


def create_backend(name: str | Backend, **kwargs: Any) -> GoogleAI | VertexAI:
    """Create a backend factory by name (``"direct"`` or ``"cloud"``)."""
    if name == Backend.DIRECT:
        return GoogleAI(**kwargs)
    if name == Backend.CLOUD:
        return VertexAI(**kwargs)
    supported = sorted(b.value for b in Backend)
    raise InvalidArgumentError(f"Unknown backend {name!r}. Supported: {supported}")
