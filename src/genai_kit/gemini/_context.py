"""Backend context: which service to call, as which model, with which credential."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum

from genai_kit.gemini._exceptions import InvalidArgumentError
from genai_kit.gemini._types import (
    CachedContent,
    Content,
    GenerationConfig,
    SafetySetting,
    Tool,
    ToolConfig,
    TuningJob,
)
from genai_kit.gemini._urls import (
    BASE_URL_GOOGLE_AI,
    BASE_URL_VERTEX_AI,
    sanitize_endpoint_name,
    sanitize_model_name,
)

DEFAULT_MODEL = "gemini-1.5-pro"
DEFAULT_REGION = "us-central1"
DEFAULT_PUBLISHER = "google"

ENV_API_KEY = "GOOGLE_API_KEY"
ENV_ACCESS_TOKEN = "GOOGLE_ACCESS_TOKEN"
ENV_MODEL = "GOOGLE_AI_MODEL"
ENV_PROJECT_ID = "GOOGLE_PROJECT_ID"
ENV_REGION = "GOOGLE_REGION"


class Backend(StrEnum):
    DIRECT = "direct"
    CLOUD = "cloud"


_API_VERSIONS = {Backend.DIRECT: "v1beta", Backend.CLOUD: "v1"}


def _env(name: str, value: str | None, default: str | None = None) -> str | None:
    return value or os.environ.get(name) or default


@dataclass(frozen=True, slots=True)
class ModelDefaults:
    """Instance-level values merged into requests that leave them unset."""

    generation_config: GenerationConfig | None = None
    safety_settings: tuple[SafetySetting, ...] | None = None
    tools: tuple[Tool, ...] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: Content | None = None


@dataclass(slots=True)
class BackendContext:
    """Per-model state consulted by every dispatch.

    ``model``, ``api_key`` and ``access_token`` may be reassigned by the
    application between calls; the library never mutates any field.
    """

    backend: Backend = Backend.DIRECT
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    access_token: str | None = None
    project_id: str | None = None
    region: str | None = None
    endpoint_id: str | None = None
    api_version: str | None = None
    publisher: str = DEFAULT_PUBLISHER
    defaults: ModelDefaults = field(default_factory=ModelDefaults)
    cached_content: CachedContent | None = None
    tuning_job: TuningJob | None = None

    def __post_init__(self) -> None:
        if self.backend is Backend.CLOUD and not (self.project_id and self.region):
            raise InvalidArgumentError(
                "The cloud-hosted backend needs both project_id and region. "
                f"Pass them or set {ENV_PROJECT_ID} / {ENV_REGION}."
            )
        self.endpoint_id = sanitize_endpoint_name(self.endpoint_id)

    @classmethod
    def from_env(
        cls,
        backend: Backend = Backend.DIRECT,
        *,
        model: str | None = None,
        api_key: str | None = None,
        access_token: str | None = None,
        project_id: str | None = None,
        region: str | None = None,
        endpoint_id: str | None = None,
        defaults: ModelDefaults | None = None,
    ) -> BackendContext:
        """Build a context from explicit values, falling back to the environment."""
        if backend is Backend.CLOUD:
            # the cloud-hosted backend authenticates with OAuth only
            api_key = None
            project_id = _env(ENV_PROJECT_ID, project_id)
            region = _env(ENV_REGION, region, DEFAULT_REGION)
        else:
            api_key = _env(ENV_API_KEY, api_key)
        if not api_key:
            access_token = _env(ENV_ACCESS_TOKEN, access_token)
        return cls(
            backend=backend,
            model=_env(ENV_MODEL, model, DEFAULT_MODEL) or DEFAULT_MODEL,
            api_key=api_key,
            access_token=access_token,
            project_id=project_id,
            region=region,
            endpoint_id=endpoint_id,
            defaults=defaults or ModelDefaults(),
        )

    @classmethod
    def for_cached_content(
        cls,
        cached_content: CachedContent,
        *,
        backend: Backend = Backend.DIRECT,
        generation_config: GenerationConfig | None = None,
        safety_settings: tuple[SafetySetting, ...] | None = None,
        **kwargs: str | None,
    ) -> BackendContext:
        """Context whose model and tool defaults come from ``cached_content``."""
        if cached_content is None:
            raise InvalidArgumentError("cached_content is required")
        context = cls.from_env(
            backend,
            defaults=ModelDefaults(
                generation_config=generation_config,
                safety_settings=safety_settings,
                tools=cached_content.tools,
                tool_config=cached_content.tool_config,
                system_instruction=cached_content.system_instruction,
            ),
            **kwargs,
        )
        context.model = cached_content.model
        context.cached_content = cached_content
        return context

    @classmethod
    def for_tuning_job(
        cls,
        tuning_job: TuningJob,
        *,
        backend: Backend = Backend.CLOUD,
        generation_config: GenerationConfig | None = None,
        safety_settings: tuple[SafetySetting, ...] | None = None,
        **kwargs: str | None,
    ) -> BackendContext:
        """Context serving the tuned model (and its endpoint) of ``tuning_job``."""
        if tuning_job is None or tuning_job.tuned_model is None:
            raise InvalidArgumentError("tuning_job with a tuned_model is required")
        tuned = tuning_job.tuned_model
        context = cls.from_env(
            backend,
            endpoint_id=tuned.endpoint,
            defaults=ModelDefaults(
                generation_config=generation_config, safety_settings=safety_settings
            ),
            **kwargs,
        )
        if tuned.model:
            context.model = tuned.model
        context.tuning_job = tuning_job
        return context

    @property
    def is_cloud(self) -> bool:
        return self.backend is Backend.CLOUD

    @property
    def model_name(self) -> str:
        """The model as a resource path, e.g. ``models/gemini-1.5-pro``."""
        return sanitize_model_name(self.model)

    @property
    def version(self) -> str:
        return self.api_version or _API_VERSIONS[self.backend]

    def url_values(self, method: str | None = None) -> dict[str, str | None]:
        """Values for the placeholders of the URL templates."""
        return {
            "BaseUrlGoogleAi": BASE_URL_GOOGLE_AI,
            "BaseUrlVertexAi": BASE_URL_VERTEX_AI,
            "version": self.version,
            "region": self.region,
            "projectId": self.project_id,
            "publisher": self.publisher,
            "model": self.model_name,
            "endpointId": self.endpoint_id,
            "method": method,
        }

    def credential_headers(self) -> dict[str, str]:
        """Authentication headers; exactly one credential must be configured."""
        if self.api_key and self.access_token:
            raise InvalidArgumentError("Set either api_key or access_token, not both.")
        if self.api_key:
            return {"x-goog-api-key": self.api_key}
        if self.access_token:
            headers = {"Authorization": f"Bearer {self.access_token}"}
            if self.project_id:
                headers["x-goog-user-project"] = self.project_id
            return headers
        raise InvalidArgumentError(
            f"No credential provided. Pass api_key= or access_token=, "
            f"or set {ENV_API_KEY} / {ENV_ACCESS_TOKEN}."
        )
