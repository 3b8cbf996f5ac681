"""Asynchronous generative model backed by ``httpx``."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any

import httpx

from genai_kit.gemini._async_http import async_send, async_stream_lines, async_stream_text
from genai_kit.gemini._dispatch import BaseGenerativeModel, PreparedCall
from genai_kit.gemini._model import Prompt
from genai_kit.gemini._streaming import CancellationToken, StreamMode, astream_responses
from genai_kit.gemini._types import (
    AnswerStyle,
    BatchEmbedTextRequest,
    Content,
    CountTokensResponse,
    CreateTunedModelRequest,
    CreateTunedModelResponse,
    EmbedContentRequest,
    EmbedContentResponse,
    EmbedTextRequest,
    EmbedTextResponse,
    GenerateAnswerRequest,
    GenerateAnswerResponse,
    GenerateContentResponse,
    GenerateMessageRequest,
    GenerateMessageResponse,
    GenerateTextRequest,
    GenerateTextResponse,
    GenerationConfig,
    ModelInfo,
    Operation,
    PredictLongRunningRequest,
    PredictRequest,
    PredictResponse,
    SafetySetting,
    TaskType,
    Tool,
    ToolConfig,
)

if TYPE_CHECKING:
    from genai_kit.gemini._chat import AsyncChatSession


class AsyncGenerativeModel(BaseGenerativeModel):
    """Async client sharing one ``httpx.AsyncClient`` across concurrent calls.

    Usage::

        async with AsyncGenerativeModel("gemini-1.5-flash", api_key="...") as model:
            response = await model.generate_content("Hello")
    """

    def __init__(
        self,
        model: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, **kwargs)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncGenerativeModel:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _execute(self, call: PreparedCall, timeout: float | None) -> Any:
        text = await async_send(
            self._client, call.http_method, call.url, call.headers, call.body, timeout
        )
        return call.decode(text)

    async def generate_content(
        self,
        request: Prompt | None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
        timeout: float | None = None,
    ) -> GenerateContentResponse:
        call = self._prepare_generate_content(
            request,
            generation_config=generation_config,
            safety_settings=safety_settings,
            tools=tools,
            tool_config=tool_config,
        )
        return await self._execute(call, timeout)

    def generate_content_stream(
        self,
        request: Prompt | None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
        cancel: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Stream partial responses; consume with ``async for``.

        Not a coroutine: input is validated when called, and the request is
        sent on the first ``__anext__``.
        """
        call = self._prepare_generate_content(
            request,
            stream=True,
            generation_config=generation_config,
            safety_settings=safety_settings,
            tools=tools,
            tool_config=tool_config,
        )
        if call.stream_mode is StreamMode.SSE:
            source = async_stream_lines(self._client, call.url, call.headers, call.body, timeout)
        else:
            source = async_stream_text(self._client, call.url, call.headers, call.body, timeout)
        return astream_responses(source, call.stream_mode, GenerateContentResponse, cancel)

    async def count_tokens(
        self,
        request: Prompt | GenerateTextRequest | GenerateMessageRequest | EmbedTextRequest | None,
        *,
        timeout: float | None = None,
    ) -> CountTokensResponse:
        return await self._execute(self._prepare_count_tokens(request), timeout)

    def start_chat(
        self,
        history: Sequence[Content] | None = None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
    ) -> AsyncChatSession:
        from genai_kit.gemini._chat import AsyncChatSession

        return AsyncChatSession(
            self,
            history,
            generation_config=generation_config,
            safety_settings=safety_settings,
            tools=tools,
        )

    async def generate_text(
        self, request: GenerateTextRequest | str | None, *, timeout: float | None = None
    ) -> GenerateTextResponse:
        return await self._execute(self._prepare_generate_text(request), timeout)

    async def generate_message(
        self, request: GenerateMessageRequest | str | None, *, timeout: float | None = None
    ) -> GenerateMessageResponse:
        return await self._execute(self._prepare_generate_message(request), timeout)

    async def embed_text(
        self, request: EmbedTextRequest | str | None, *, timeout: float | None = None
    ) -> EmbedTextResponse:
        return await self._execute(self._prepare_embed_text(request), timeout)

    async def batch_embed_text(
        self, request: BatchEmbedTextRequest | Sequence[str] | None, *, timeout: float | None = None
    ) -> EmbedTextResponse:
        return await self._execute(self._prepare_batch_embed_text(request), timeout)

    async def embed_content(
        self,
        request: EmbedContentRequest | str | Content | Sequence[str] | None,
        *,
        model: str | None = None,
        task_type: TaskType | str | None = None,
        title: str | None = None,
        timeout: float | None = None,
    ) -> EmbedContentResponse:
        call = self._prepare_embed_content(request, model=model, task_type=task_type, title=title)
        return await self._execute(call, timeout)

    async def batch_embed_contents(
        self,
        requests: Sequence[EmbedContentRequest | str | Content] | None,
        *,
        model: str | None = None,
        task_type: TaskType | str | None = None,
        title: str | None = None,
        timeout: float | None = None,
    ) -> EmbedContentResponse:
        call = self._prepare_batch_embed_contents(
            requests, model=model, task_type=task_type, title=title
        )
        return await self._execute(call, timeout)

    async def generate_answer(
        self,
        request: GenerateAnswerRequest | str | None,
        *,
        answer_style: AnswerStyle | str | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        timeout: float | None = None,
    ) -> GenerateAnswerResponse:
        call = self._prepare_generate_answer(
            request, answer_style=answer_style, safety_settings=safety_settings
        )
        return await self._execute(call, timeout)

    async def list_models(
        self,
        *,
        tuned: bool = False,
        page_size: int | None = None,
        page_token: str | None = None,
        filter: str | None = None,
        timeout: float | None = None,
    ) -> list[ModelInfo]:
        call = self._prepare_list_models(
            tuned=tuned, page_size=page_size, page_token=page_token, filter=filter
        )
        return await self._execute(call, timeout)

    async def get_model(
        self, model: str | None = None, *, timeout: float | None = None
    ) -> ModelInfo:
        return await self._execute(self._prepare_get_model(model), timeout)

    async def create_tuned_model(
        self, request: CreateTunedModelRequest | None, *, timeout: float | None = None
    ) -> CreateTunedModelResponse:
        return await self._execute(self._prepare_create_tuned_model(request), timeout)

    async def delete_tuned_model(self, model: str | None, *, timeout: float | None = None) -> str:
        return await self._execute(self._prepare_delete_tuned_model(model), timeout)

    async def update_tuned_model(
        self,
        model: str | None,
        tuned_model: ModelInfo | None,
        update_mask: str | None = None,
        *,
        timeout: float | None = None,
    ) -> ModelInfo:
        call = self._prepare_update_tuned_model(model, tuned_model, update_mask)
        return await self._execute(call, timeout)

    async def transfer_ownership(
        self, model: str | None, email_address: str | None, *, timeout: float | None = None
    ) -> str:
        call = self._prepare_transfer_ownership(model, email_address)
        return await self._execute(call, timeout)

    async def predict(
        self, request: PredictRequest | None, *, timeout: float | None = None
    ) -> PredictResponse:
        return await self._execute(self._prepare_predict(request), timeout)

    async def predict_long_running(
        self, request: PredictLongRunningRequest | None, *, timeout: float | None = None
    ) -> Operation:
        return await self._execute(self._prepare_predict_long_running(request), timeout)
