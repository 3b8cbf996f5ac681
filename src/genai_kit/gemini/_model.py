"""Synchronous generative model backed by ``requests``."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

import requests

from genai_kit.gemini._dispatch import BaseGenerativeModel, PreparedCall
from genai_kit.gemini._http import send, stream_lines, stream_text
from genai_kit.gemini._streaming import CancellationToken, StreamMode, stream_responses
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
    GenerateContentRequest,
    GenerateContentResponse,
    GenerateMessageRequest,
    GenerateMessageResponse,
    GenerateTextRequest,
    GenerateTextResponse,
    GenerationConfig,
    ModelInfo,
    Operation,
    Part,
    PredictLongRunningRequest,
    PredictRequest,
    PredictResponse,
    SafetySetting,
    TaskType,
    Tool,
    ToolConfig,
)

if TYPE_CHECKING:
    from genai_kit.gemini._chat import ChatSession

type Prompt = GenerateContentRequest | str | Content | Sequence[Part] | Sequence[Content]


class GenerativeModel(BaseGenerativeModel):
    """Blocking client for one model on the direct or cloud-hosted backend.

    Usage::

        model = GenerativeModel("gemini-1.5-flash", api_key="...")
        print(model.generate_content("Hello").text)

    Args:
        session: A ``requests.Session`` to send with. When omitted the model
            creates one and closes it in :meth:`close`.
        **kwargs: See :class:`BaseGenerativeModel`.
    """

    def __init__(
        self,
        model: str | None = None,
        *,
        session: requests.Session | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, **kwargs)
        self._owns_session = session is None
        self._session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> GenerativeModel:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _execute(self, call: PreparedCall, timeout: float | None) -> Any:
        text = send(self._session, call.http_method, call.url, call.headers, call.body, timeout)
        return call.decode(text)

    # -- content generation -----------------------------------------------------

    def generate_content(
        self,
        request: Prompt | None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
        timeout: float | None = None,
    ) -> GenerateContentResponse:
        """Generate a response for a prompt string, parts or a full request.

        On the cloud-hosted backend the partial responses of the answer are
        folded into one.
        """
        call = self._prepare_generate_content(
            request,
            generation_config=generation_config,
            safety_settings=safety_settings,
            tools=tools,
            tool_config=tool_config,
        )
        return self._execute(call, timeout)

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
    ) -> Iterator[GenerateContentResponse]:
        """Stream partial responses as the server produces them.

        Input is validated now; the request is only sent once the returned
        iterator is first advanced. Setting ``cancel`` ends the iteration at
        the next chunk boundary and closes the connection.
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
            source = stream_lines(self._session, call.url, call.headers, call.body, timeout)
        else:
            source = stream_text(self._session, call.url, call.headers, call.body, timeout)
        return stream_responses(source, call.stream_mode, GenerateContentResponse, cancel)

    def count_tokens(
        self,
        request: Prompt | GenerateTextRequest | GenerateMessageRequest | EmbedTextRequest | None,
        *,
        timeout: float | None = None,
    ) -> CountTokensResponse:
        """Count the tokens of a prompt, picking the counting method by request type."""
        return self._execute(self._prepare_count_tokens(request), timeout)

    def start_chat(
        self,
        history: Sequence[Content] | None = None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
    ) -> ChatSession:
        from genai_kit.gemini._chat import ChatSession

        return ChatSession(
            self,
            history,
            generation_config=generation_config,
            safety_settings=safety_settings,
            tools=tools,
        )

    # -- legacy endpoints -------------------------------------------------------

    def generate_text(
        self, request: GenerateTextRequest | str | None, *, timeout: float | None = None
    ) -> GenerateTextResponse:
        return self._execute(self._prepare_generate_text(request), timeout)

    def generate_message(
        self, request: GenerateMessageRequest | str | None, *, timeout: float | None = None
    ) -> GenerateMessageResponse:
        return self._execute(self._prepare_generate_message(request), timeout)

    def embed_text(
        self, request: EmbedTextRequest | str | None, *, timeout: float | None = None
    ) -> EmbedTextResponse:
        return self._execute(self._prepare_embed_text(request), timeout)

    def batch_embed_text(
        self, request: BatchEmbedTextRequest | Sequence[str] | None, *, timeout: float | None = None
    ) -> EmbedTextResponse:
        return self._execute(self._prepare_batch_embed_text(request), timeout)

    # -- embeddings and answering -----------------------------------------------

    def embed_content(
        self,
        request: EmbedContentRequest | str | Content | Sequence[str] | None,
        *,
        model: str | None = None,
        task_type: TaskType | str | None = None,
        title: str | None = None,
        timeout: float | None = None,
    ) -> EmbedContentResponse:
        """Embed one piece of content with ``embedding-001`` or ``text-embedding-004``."""
        call = self._prepare_embed_content(request, model=model, task_type=task_type, title=title)
        return self._execute(call, timeout)

    def batch_embed_contents(
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
        return self._execute(call, timeout)

    def generate_answer(
        self,
        request: GenerateAnswerRequest | str | None,
        *,
        answer_style: AnswerStyle | str | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        timeout: float | None = None,
    ) -> GenerateAnswerResponse:
        """Answer a question grounded in inline passages (``aqa`` model only)."""
        call = self._prepare_generate_answer(
            request, answer_style=answer_style, safety_settings=safety_settings
        )
        return self._execute(call, timeout)

    # -- model management -------------------------------------------------------

    def list_models(
        self,
        *,
        tuned: bool = False,
        page_size: int | None = None,
        page_token: str | None = None,
        filter: str | None = None,
        timeout: float | None = None,
    ) -> list[ModelInfo]:
        """List base models, or the caller's tuned models with ``tuned=True``."""
        call = self._prepare_list_models(
            tuned=tuned, page_size=page_size, page_token=page_token, filter=filter
        )
        return self._execute(call, timeout)

    def get_model(self, model: str | None = None, *, timeout: float | None = None) -> ModelInfo:
        return self._execute(self._prepare_get_model(model), timeout)

    def create_tuned_model(
        self, request: CreateTunedModelRequest | None, *, timeout: float | None = None
    ) -> CreateTunedModelResponse:
        return self._execute(self._prepare_create_tuned_model(request), timeout)

    def delete_tuned_model(self, model: str | None, *, timeout: float | None = None) -> str:
        return self._execute(self._prepare_delete_tuned_model(model), timeout)

    def update_tuned_model(
        self,
        model: str | None,
        tuned_model: ModelInfo | None,
        update_mask: str | None = None,
        *,
        timeout: float | None = None,
    ) -> ModelInfo:
        call = self._prepare_update_tuned_model(model, tuned_model, update_mask)
        return self._execute(call, timeout)

    def transfer_ownership(
        self, model: str | None, email_address: str | None, *, timeout: float | None = None
    ) -> str:
        return self._execute(self._prepare_transfer_ownership(model, email_address), timeout)

    # -- prediction -------------------------------------------------------------

    def predict(
        self, request: PredictRequest | None, *, timeout: float | None = None
    ) -> PredictResponse:
        return self._execute(self._prepare_predict(request), timeout)

    def predict_long_running(
        self, request: PredictLongRunningRequest | None, *, timeout: float | None = None
    ) -> Operation:
        return self._execute(self._prepare_predict_long_running(request), timeout)
