"""Dispatch core shared by the sync and async models.

Every public operation is split in two halves. A ``_prepare_*`` method here
validates the input, merges the instance defaults, resolves the URL and
serializes the body into a :class:`PreparedCall`; the front ends in
``_model`` and ``_async_model`` only send it and decode the answer.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from genai_kit.gemini._codec import deserialize, deserialize_list, serialize
from genai_kit.gemini._context import BackendContext, ModelDefaults
from genai_kit.gemini._exceptions import InvalidArgumentError, UnsupportedOperationError
from genai_kit.gemini._folding import fold_responses
from genai_kit.gemini._http import USER_AGENT
from genai_kit.gemini._streaming import StreamMode
from genai_kit.gemini._types import (
    AnswerStyle,
    BatchEmbedContentsRequest,
    BatchEmbedTextRequest,
    Content,
    CountTokensRequest,
    CountTokensResponse,
    CreateTunedModelRequest,
    CreateTunedModelResponse,
    DynamicRetrievalConfig,
    EmbedContentRequest,
    EmbedContentResponse,
    EmbedTextRequest,
    EmbedTextResponse,
    GenerateAnswerRequest,
    GenerateAnswerResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerateMessageRequest,
    GenerateMessageResponse,
    GenerateTextRequest,
    GenerateTextResponse,
    GenerationConfig,
    GoogleSearchRetrieval,
    ListModelsResponse,
    ListTunedModelsResponse,
    Message,
    MessagePrompt,
    ModelInfo,
    Operation,
    Part,
    PredictLongRunningRequest,
    PredictRequest,
    PredictResponse,
    Role,
    SafetySetting,
    TaskType,
    TextPart,
    TextPrompt,
    Tool,
    ToolConfig,
    TransferOwnershipRequest,
)
from genai_kit.gemini._urls import (
    URL_GOOGLE_AI,
    URL_VERTEX_AI,
    URL_VERTEX_ENDPOINT,
    add_query_string,
    model_id,
    render,
    sanitize_model_name,
)

logger = logging.getLogger(__name__)

MEDIA_TYPE_JSON = "application/json"

_TUNED_MODELS_NEED_OAUTH = (
    "Accessing tuned models via API key is not supported. "
    "Use an OAuth access token for your project instead."
)


class Model:
    """Model ids that have dedicated endpoints or operations."""

    BISON_TEXT = "text-bison-001"
    BISON_CHAT = "chat-bison-001"
    GECKO_EMBEDDING = "embedding-gecko-001"
    EMBEDDING = "embedding-001"
    TEXT_EMBEDDING = "text-embedding-004"
    AQA = "aqa"
    GEMINI_10_PRO_001 = "gemini-1.0-pro-001"
    GEMINI_15_PRO = "gemini-1.5-pro"
    GEMINI_15_FLASH = "gemini-1.5-flash"


class Method:
    GENERATE_CONTENT = "generateContent"
    STREAM_GENERATE_CONTENT = "streamGenerateContent"
    GENERATE_TEXT = "generateText"
    GENERATE_MESSAGE = "generateMessage"
    GENERATE_ANSWER = "generateAnswer"
    EMBED_TEXT = "embedText"
    BATCH_EMBED_TEXT = "batchEmbedText"
    EMBED_CONTENT = "embedContent"
    BATCH_EMBED_CONTENTS = "batchEmbedContents"
    COUNT_TOKENS = "countTokens"
    COUNT_TEXT_TOKENS = "countTextTokens"
    COUNT_MESSAGE_TOKENS = "countMessageTokens"
    TRANSFER_OWNERSHIP = "transferOwnership"
    PREDICT = "predict"
    PREDICT_LONG_RUNNING = "predictLongRunning"


_DEDICATED_METHODS = {
    Model.BISON_CHAT: Method.GENERATE_MESSAGE,
    Model.BISON_TEXT: Method.GENERATE_TEXT,
    Model.GECKO_EMBEDDING: Method.EMBED_TEXT,
    Model.EMBEDDING: Method.EMBED_CONTENT,
    Model.TEXT_EMBEDDING: Method.EMBED_CONTENT,
    Model.AQA: Method.GENERATE_ANSWER,
}

_EMBEDDING_MODELS = (Model.EMBEDDING, Model.TEXT_EMBEDDING)
_TUNABLE_MODELS = (Model.BISON_TEXT, Model.GEMINI_10_PRO_001)


def method_for_model(context: BackendContext) -> str:
    """The API method a plain generate call on ``context.model`` maps to."""
    dedicated = _DEDICATED_METHODS.get(model_id(context.model_name).lower())
    if dedicated is not None:
        return dedicated
    if context.is_cloud:
        if context.endpoint_id:
            return Method.GENERATE_CONTENT
        return Method.STREAM_GENERATE_CONTENT
    return Method.GENERATE_CONTENT


def resolve_url(context: BackendContext, method: str, model: str | None = None) -> str:
    """Render the method URL for ``context``, optionally for another ``model``."""
    values = context.url_values(method)
    if model:
        values["model"] = sanitize_model_name(model)
    if context.is_cloud:
        template = URL_VERTEX_ENDPOINT if context.endpoint_id else URL_VERTEX_AI
    else:
        template = URL_GOOGLE_AI
    return render(template, values)


def _resource_url(context: BackendContext, path: str) -> str:
    values = context.url_values()
    values["path"] = path
    return render("{BaseUrlGoogleAi}/{path}", values)


def fill_absent[T](target: T, values: Mapping[str, Any]) -> T:
    """Copy of ``target`` with each ``None`` field set from ``values``."""
    changes = {
        name: value
        for name, value in values.items()
        if value is not None and getattr(target, name) is None
    }
    return dataclasses.replace(target, **changes) if changes else target


def _as_tuple(values: Sequence[Any] | None) -> tuple[Any, ...] | None:
    return tuple(values) if values is not None else None


def _is_turns(value: Any) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, str)
        and bool(value)
        and all(isinstance(item, Content) for item in value)
    )


def user_content(value: str | Content | Sequence[Part]) -> Content:
    """Wrap a prompt string or a list of parts as one user turn."""
    if isinstance(value, Content):
        return value
    if isinstance(value, str):
        return Content(role=Role.USER, parts=(TextPart(value),))
    return Content(role=Role.USER, parts=tuple(value))


def _embedding_content(value: str | Content | Sequence[str]) -> Content:
    if isinstance(value, Content):
        return value
    if isinstance(value, str):
        return Content(parts=(TextPart(value),))
    return Content(parts=tuple(TextPart(text) for text in value if text))


def merge_request(
    request: GenerateContentRequest,
    context: BackendContext,
    *,
    json_mode: bool = False,
    grounding: bool = False,
) -> GenerateContentRequest:
    """Return a copy of ``request`` with the instance defaults filled in.

    Only fields the caller left unset are filled. Active cached content wins
    over the tool and system-instruction defaults, which the server already
    holds for it.
    """
    defaults = context.defaults
    merged = fill_absent(
        request,
        {
            "tools": defaults.tools,
            "tool_config": defaults.tool_config,
            "system_instruction": defaults.system_instruction,
        },
    )

    cached = context.cached_content
    if cached is not None:
        merged = dataclasses.replace(
            merged,
            cached_content=cached.name,
            model=cached.model,
            contents=(*(cached.contents or ()), *merged.contents),
            tools=None,
            tool_config=None,
            system_instruction=None,
        )

    merged = fill_absent(
        merged,
        {
            "model": context.model_name,
            "generation_config": defaults.generation_config,
            "safety_settings": defaults.safety_settings,
        },
    )
    if merged.model is not None:
        merged = dataclasses.replace(merged, model=sanitize_model_name(merged.model))

    if json_mode:
        config = merged.generation_config or GenerationConfig()
        merged = dataclasses.replace(
            merged,
            generation_config=dataclasses.replace(config, response_mime_type=MEDIA_TYPE_JSON),
        )

    if grounding:
        search = Tool(
            google_search_retrieval=GoogleSearchRetrieval(
                dynamic_retrieval_config=DynamicRetrievalConfig()
            )
        )
        merged = dataclasses.replace(merged, tools=(*(merged.tools or ()), search))

    return merged


@dataclass(frozen=True, slots=True)
class PreparedCall:
    """Everything needed to send one request and decode its answer.

    ``response_type`` of ``None`` means the raw response text is returned.
    ``fold`` reduces a JSON-array body of partial responses to one response.
    """

    operation: str
    http_method: str
    url: str
    headers: dict[str, str]
    body: str | None = None
    response_type: type | None = None
    fold: bool = False
    unwrap: Callable[[Any], Any] | None = None
    stream_mode: StreamMode | None = None

    def decode(self, text: str) -> Any:
        if self.response_type is None:
            return text
        if self.fold and text.lstrip().startswith("["):
            partials = deserialize_list(text, self.response_type)
            logger.debug("Folding %d partial responses of %s", len(partials), self.operation)
            result: Any = fold_responses(partials)
        else:
            result = deserialize(text, self.response_type)
        return self.unwrap(result) if self.unwrap is not None else result


class BaseGenerativeModel:
    """Shared state and request preparation for the generative models.

    Args:
        model: Model id or resource name. Falls back to ``GOOGLE_AI_MODEL``.
        api_key: API key for the direct backend. Falls back to ``GOOGLE_API_KEY``.
        access_token: OAuth bearer token. Falls back to ``GOOGLE_ACCESS_TOKEN``.
        generation_config: Default generation config for content requests.
        safety_settings: Default safety settings for content requests.
        tools: Default tools for content requests.
        tool_config: Default tool config for content requests.
        system_instruction: Default system instruction (string or Content).
        context: A prebuilt backend context. Explicit defaults above fill the
            fields its own defaults leave unset.
    """

    def __init__(
        self,
        model: str | None = None,
        *,
        api_key: str | None = None,
        access_token: str | None = None,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
        system_instruction: str | Content | None = None,
        context: BackendContext | None = None,
    ) -> None:
        if isinstance(system_instruction, str):
            system_instruction = Content(parts=(TextPart(system_instruction),))
        defaults = ModelDefaults(
            generation_config=generation_config,
            safety_settings=_as_tuple(safety_settings),
            tools=_as_tuple(tools),
            tool_config=tool_config,
            system_instruction=system_instruction,
        )
        if context is None:
            context = BackendContext.from_env(
                model=model, api_key=api_key, access_token=access_token, defaults=defaults
            )
        else:
            context.defaults = fill_absent(
                context.defaults,
                {f.name: getattr(defaults, f.name) for f in dataclasses.fields(defaults)},
            )
            if model:
                context.model = model
            if api_key:
                context.api_key = api_key
            if access_token:
                context.access_token = access_token
        self._context = context
        self.use_json_mode = False
        self.use_grounding = False
        self.use_server_sent_events = False

    @property
    def context(self) -> BackendContext:
        return self._context

    @property
    def model(self) -> str:
        return self._context.model

    @model.setter
    def model(self, value: str) -> None:
        self._context.model = value

    @property
    def name(self) -> str:
        """The model as a resource name, e.g. ``models/gemini-1.5-pro``."""
        return self._context.model_name

    @property
    def api_key(self) -> str | None:
        return self._context.api_key

    @api_key.setter
    def api_key(self, value: str | None) -> None:
        self._context.api_key = value

    @property
    def access_token(self) -> str | None:
        return self._context.access_token

    @access_token.setter
    def access_token(self, value: str | None) -> None:
        self._context.access_token = value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(model={self._context.model!r}, "
            f"backend={self._context.backend.value!r})"
        )

    # -- checks, in the order they are applied --------------------------------

    def _require_model(self, operation: str, *allowed: str) -> None:
        if model_id(self._context.model_name).lower() not in allowed:
            raise UnsupportedOperationError(
                f"{operation} is not supported by model {self._context.model!r}; "
                f"use one of {', '.join(allowed)}."
            )

    def _require_direct(self, operation: str) -> None:
        if self._context.is_cloud:
            raise UnsupportedOperationError(
                f"{operation} is only available on the direct backend."
            )

    def _check_features(self, tools: Sequence[Tool] | None = None) -> None:
        cached = self._context.cached_content is not None
        if cached and self.use_json_mode:
            raise UnsupportedOperationError("Cached content cannot be combined with JSON mode.")
        if cached and self.use_grounding:
            raise UnsupportedOperationError("Cached content cannot be combined with grounding.")
        if self.use_json_mode and self.use_grounding:
            raise UnsupportedOperationError("JSON mode cannot be combined with grounding.")
        if self.use_grounding:
            effective = tools if tools is not None else self._context.defaults.tools
            if any(tool.function_declarations for tool in effective or ()):
                raise UnsupportedOperationError(
                    "Grounding cannot be combined with function calling tools."
                )

    def _require_oauth(self) -> None:
        if self._context.api_key:
            raise UnsupportedOperationError(_TUNED_MODELS_NEED_OAUTH)

    @staticmethod
    def _require(value: Any, name: str) -> None:
        blank = isinstance(value, str) and not value.strip()
        if value is None or blank or (isinstance(value, Sequence) and not value):
            raise InvalidArgumentError(f"{name} is required")

    # -- call assembly ----------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": MEDIA_TYPE_JSON,
            "Accept": MEDIA_TYPE_JSON,
            "User-Agent": USER_AGENT,
            **self._context.credential_headers(),
        }

    def _call(
        self,
        operation: str,
        http_method: str,
        url: str,
        body: Any = None,
        response_type: type | None = None,
        **options: Any,
    ) -> PreparedCall:
        payload = serialize(body) if body is not None else None
        call = PreparedCall(
            operation=operation,
            http_method=http_method,
            url=url,
            headers=self._headers(),
            body=payload,
            response_type=response_type,
            **options,
        )
        logger.debug("%s: %s %s", operation, http_method, url)
        if payload is not None and logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s request body: %s", operation, payload)
        return call

    def _content_request(
        self,
        request: GenerateContentRequest | str | Content | Sequence[Part] | Sequence[Content] | None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
    ) -> GenerateContentRequest:
        self._require(request, "request")
        if isinstance(request, GenerateContentRequest):
            req = request
        elif _is_turns(request):
            req = GenerateContentRequest(contents=tuple(request))
        else:
            req = GenerateContentRequest(contents=(user_content(request),))
        return fill_absent(
            req,
            {
                "generation_config": generation_config,
                "safety_settings": _as_tuple(safety_settings),
                "tools": _as_tuple(tools),
                "tool_config": tool_config,
            },
        )

    # -- operations -------------------------------------------------------------

    def _prepare_generate_content(
        self,
        request: Any,
        *,
        stream: bool = False,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
    ) -> PreparedCall:
        request_tools = request.tools if isinstance(request, GenerateContentRequest) else None
        self._check_features(request_tools if request_tools is not None else tools)
        req = self._content_request(
            request,
            generation_config=generation_config,
            safety_settings=safety_settings,
            tools=tools,
            tool_config=tool_config,
        )
        merged = merge_request(
            req, self._context, json_mode=self.use_json_mode, grounding=self.use_grounding
        )

        if stream:
            url = resolve_url(self._context, Method.STREAM_GENERATE_CONTENT, merged.model)
            if self.use_server_sent_events:
                mode = StreamMode.SSE
                url = add_query_string(url, {"alt": "sse"})
            else:
                mode = StreamMode.ARRAY
            return self._call(
                "generate_content_stream",
                "POST",
                url,
                merged,
                GenerateContentResponse,
                stream_mode=mode,
            )

        url = resolve_url(self._context, method_for_model(self._context), merged.model)
        return self._call(
            "generate_content",
            "POST",
            url,
            merged,
            GenerateContentResponse,
            fold=self._context.is_cloud,
        )

    def _count_request_for(self, prompt: str | Sequence[Part]) -> Any:
        mid = model_id(self._context.model_name).lower()
        if isinstance(prompt, str):
            if mid == Model.BISON_CHAT:
                return GenerateMessageRequest(
                    prompt=MessagePrompt(messages=(Message(content=prompt),))
                )
            if mid == Model.BISON_TEXT:
                return GenerateTextRequest(prompt=TextPrompt(prompt))
            if mid == Model.GECKO_EMBEDDING:
                return EmbedTextRequest(text=prompt, model=self._context.model_name)
        return GenerateContentRequest(contents=(user_content(prompt),))

    def _prepare_count_tokens(self, request: Any) -> PreparedCall:
        self._require(request, "request")
        if _is_turns(request):
            request = GenerateContentRequest(contents=tuple(request))
        elif isinstance(request, str) or (
            isinstance(request, Sequence) and not isinstance(request, (str, bytes))
        ):
            request = self._count_request_for(request)
        elif isinstance(request, Content):
            request = GenerateContentRequest(contents=(request,))

        if isinstance(request, (GenerateTextRequest, EmbedTextRequest)):
            method, body = Method.COUNT_TEXT_TOKENS, request
        elif isinstance(request, GenerateMessageRequest):
            method, body = Method.COUNT_MESSAGE_TOKENS, request
        elif isinstance(request, GenerateContentRequest):
            method = Method.COUNT_TOKENS
            body = self._count_tokens_body(request)
        else:
            raise InvalidArgumentError(f"Cannot count tokens of {type(request).__name__}")

        url = resolve_url(self._context, method)
        return self._call("count_tokens", "POST", url, body, CountTokensResponse)

    def _count_tokens_body(self, request: GenerateContentRequest) -> CountTokensRequest:
        bare = GenerateContentRequest(contents=request.contents)
        if request == bare:
            return CountTokensRequest(contents=request.contents)
        model = sanitize_model_name(request.model or self._context.model)
        return CountTokensRequest(
            generate_content_request=dataclasses.replace(request, model=model)
        )

    def _prepare_generate_text(self, request: GenerateTextRequest | str | None) -> PreparedCall:
        self._require_model("generate_text", Model.BISON_TEXT)
        self._require(request, "prompt")
        if isinstance(request, str):
            request = GenerateTextRequest(prompt=TextPrompt(request))
        url = resolve_url(self._context, Method.GENERATE_TEXT)
        return self._call("generate_text", "POST", url, request, GenerateTextResponse)

    def _prepare_generate_message(
        self, request: GenerateMessageRequest | str | None
    ) -> PreparedCall:
        self._require_model("generate_message", Model.BISON_CHAT)
        self._require(request, "prompt")
        if isinstance(request, str):
            request = GenerateMessageRequest(
                prompt=MessagePrompt(messages=(Message(content=request),))
            )
        url = resolve_url(self._context, Method.GENERATE_MESSAGE)
        return self._call("generate_message", "POST", url, request, GenerateMessageResponse)

    def _prepare_embed_text(self, request: EmbedTextRequest | str | None) -> PreparedCall:
        self._require_model("embed_text", Model.GECKO_EMBEDDING)
        self._require(request, "prompt")
        if isinstance(request, str):
            request = EmbedTextRequest(text=request)
        request = fill_absent(request, {"model": self._context.model_name})
        url = resolve_url(self._context, Method.EMBED_TEXT)
        return self._call("embed_text", "POST", url, request, EmbedTextResponse)

    def _prepare_batch_embed_text(
        self, request: BatchEmbedTextRequest | Sequence[str] | None
    ) -> PreparedCall:
        self._require_model("batch_embed_text", Model.GECKO_EMBEDDING)
        self._require(request, "texts")
        if not isinstance(request, BatchEmbedTextRequest):
            request = BatchEmbedTextRequest(texts=tuple(request))
        url = resolve_url(self._context, Method.BATCH_EMBED_TEXT)
        return self._call("batch_embed_text", "POST", url, request, EmbedTextResponse)

    def _check_embedding(
        self, operation: str, model: str, task_type: str | None, title: str | None
    ) -> None:
        if model_id(model).lower() not in _EMBEDDING_MODELS:
            raise UnsupportedOperationError(
                f"{operation} is not supported by model {model!r}; "
                f"use one of {', '.join(_EMBEDDING_MODELS)}."
            )
        if title and task_type != TaskType.RETRIEVAL_DOCUMENT:
            raise UnsupportedOperationError(
                "A title can only be set for the RETRIEVAL_DOCUMENT task type."
            )

    def _prepare_embed_content(
        self,
        request: EmbedContentRequest | str | Content | Sequence[str] | None,
        *,
        model: str | None = None,
        task_type: TaskType | str | None = None,
        title: str | None = None,
    ) -> PreparedCall:
        req: EmbedContentRequest | None
        if request is None or isinstance(request, EmbedContentRequest):
            req = request
        else:
            req = EmbedContentRequest(content=_embedding_content(request))
        target = sanitize_model_name((req.model if req else None) or model or self._context.model)
        task = (req.task_type if req else None) or task_type
        heading = (req.title if req else None) or title
        self._check_embedding("embed_content", target, task, heading)
        if req is None or req.content is None:
            raise InvalidArgumentError("content is required")

        req = dataclasses.replace(req, model=target, task_type=task, title=heading)
        url = resolve_url(self._context, Method.EMBED_CONTENT, target)
        return self._call("embed_content", "POST", url, req, EmbedContentResponse)

    def _prepare_batch_embed_contents(
        self,
        requests: Sequence[EmbedContentRequest | str | Content] | None,
        *,
        model: str | None = None,
        task_type: TaskType | str | None = None,
        title: str | None = None,
    ) -> PreparedCall:
        target = sanitize_model_name(model or self._context.model)
        self._check_embedding("batch_embed_contents", target, task_type, title)
        self._require(requests, "requests")
        items = []
        for item in requests:
            if not isinstance(item, EmbedContentRequest):
                item = EmbedContentRequest(content=_embedding_content(item))
            item = fill_absent(item, {"model": target, "task_type": task_type, "title": title})
            item = dataclasses.replace(item, model=sanitize_model_name(item.model))
            self._check_embedding("batch_embed_contents", item.model, item.task_type, item.title)
            items.append(item)
        body = BatchEmbedContentsRequest(requests=tuple(items))
        url = resolve_url(self._context, Method.BATCH_EMBED_CONTENTS, target)
        return self._call("batch_embed_contents", "POST", url, body, EmbedContentResponse)

    def _prepare_generate_answer(
        self,
        request: GenerateAnswerRequest | str | None,
        *,
        answer_style: AnswerStyle | str | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
    ) -> PreparedCall:
        self._require_model("generate_answer", Model.AQA)
        self._require(request, "prompt")
        if not isinstance(request, GenerateAnswerRequest):
            request = GenerateAnswerRequest(contents=(user_content(request),))
        request = fill_absent(
            request,
            {
                "answer_style": answer_style or AnswerStyle.ABSTRACTIVE,
                "safety_settings": _as_tuple(safety_settings)
                or self._context.defaults.safety_settings,
            },
        )
        url = resolve_url(self._context, Method.GENERATE_ANSWER)
        return self._call("generate_answer", "POST", url, request, GenerateAnswerResponse)

    def _prepare_list_models(
        self,
        *,
        tuned: bool = False,
        page_size: int | None = None,
        page_token: str | None = None,
        filter: str | None = None,
    ) -> PreparedCall:
        self._require_direct("list_models")
        params = {
            "pageSize": str(page_size) if page_size is not None else None,
            "pageToken": page_token,
        }
        if tuned:
            self._require_oauth()
            params["filter"] = filter
            url = add_query_string(_resource_url(self._context, "tunedModels"), params)
            return self._call(
                "list_tuned_models",
                "GET",
                url,
                response_type=ListTunedModelsResponse,
                unwrap=lambda r: list(r.tuned_models or ()),
            )
        url = add_query_string(_resource_url(self._context, "models"), params)
        return self._call(
            "list_models",
            "GET",
            url,
            response_type=ListModelsResponse,
            unwrap=lambda r: list(r.models or ()),
        )

    def _prepare_get_model(self, model: str | None = None) -> PreparedCall:
        self._require_direct("get_model")
        name = sanitize_model_name(model or self._context.model)
        if name.lower().startswith("tunedmodels/"):
            self._require_oauth()
        return self._call(
            "get_model", "GET", _resource_url(self._context, name), response_type=ModelInfo
        )

    def _prepare_create_tuned_model(
        self, request: CreateTunedModelRequest | None
    ) -> PreparedCall:
        self._require_direct("create_tuned_model")
        self._require_model("create_tuned_model", *_TUNABLE_MODELS)
        self._require_oauth()
        self._require(request, "request")
        request = fill_absent(request, {"base_model": self._context.model_name})
        url = _resource_url(self._context, "tunedModels")
        return self._call(
            "create_tuned_model", "POST", url, request, CreateTunedModelResponse
        )

    def _prepare_delete_tuned_model(self, model: str | None) -> PreparedCall:
        self._require_direct("delete_tuned_model")
        self._require_oauth()
        self._require(model, "model")
        url = _resource_url(self._context, sanitize_model_name(model))
        return self._call("delete_tuned_model", "DELETE", url)

    def _prepare_update_tuned_model(
        self, model: str | None, tuned_model: ModelInfo | None, update_mask: str | None = None
    ) -> PreparedCall:
        self._require_direct("update_tuned_model")
        self._require_oauth()
        self._require(model, "model")
        self._require(tuned_model, "tuned_model")
        url = add_query_string(
            _resource_url(self._context, sanitize_model_name(model)),
            {"updateMask": update_mask},
        )
        return self._call("update_tuned_model", "PATCH", url, tuned_model, ModelInfo)

    def _prepare_transfer_ownership(
        self, model: str | None, email_address: str | None
    ) -> PreparedCall:
        self._require_direct("transfer_ownership")
        self._require_oauth()
        self._require(model, "model")
        self._require(email_address, "email_address")
        path = f"{sanitize_model_name(model)}:{Method.TRANSFER_OWNERSHIP}"
        body = TransferOwnershipRequest(email_address=email_address)
        return self._call("transfer_ownership", "POST", _resource_url(self._context, path), body)

    def _prepare_predict(self, request: PredictRequest | None) -> PreparedCall:
        self._require(request, "request")
        url = resolve_url(self._context, Method.PREDICT)
        return self._call("predict", "POST", url, request, PredictResponse)

    def _prepare_predict_long_running(
        self, request: PredictLongRunningRequest | None
    ) -> PreparedCall:
        self._require(request, "request")
        url = resolve_url(self._context, Method.PREDICT_LONG_RUNNING)
        return self._call("predict_long_running", "POST", url, request, Operation)
