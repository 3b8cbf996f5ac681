"""Multi-turn chat sessions that keep their own history."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator, Sequence
from typing import TYPE_CHECKING

from genai_kit.gemini._dispatch import user_content
from genai_kit.gemini._streaming import CancellationToken
from genai_kit.gemini._types import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    Part,
    Role,
    SafetySetting,
    TextPart,
    Tool,
)

if TYPE_CHECKING:
    from genai_kit.gemini._async_model import AsyncGenerativeModel
    from genai_kit.gemini._model import GenerativeModel


def _reply(response: GenerateContentResponse) -> Content:
    if response.candidates and response.candidates[0].content is not None:
        content = response.candidates[0].content
        return Content(role=Role.MODEL, parts=content.parts)
    return Content(role=Role.MODEL, parts=(TextPart(response.text),))


class _ChatState:
    def __init__(
        self,
        history: Sequence[Content] | None,
        generation_config: GenerationConfig | None,
        safety_settings: Sequence[SafetySetting] | None,
        tools: Sequence[Tool] | None,
    ) -> None:
        self.history: list[Content] = list(history or ())
        self._generation_config = generation_config
        self._safety_settings = tuple(safety_settings) if safety_settings is not None else None
        self._tools = tuple(tools) if tools is not None else None

    def _turn(
        self, message: str | Content | Sequence[Part]
    ) -> tuple[Content, GenerateContentRequest]:
        turn = user_content(message)
        request = GenerateContentRequest(
            contents=(*self.history, turn),
            generation_config=self._generation_config,
            safety_settings=self._safety_settings,
            tools=self._tools,
        )
        return turn, request

    def _record(self, turn: Content, reply: Content) -> None:
        self.history.append(turn)
        self.history.append(reply)


class ChatSession(_ChatState):
    """A conversation with a :class:`GenerativeModel`.

    The history only grows once a turn has completed, so a failed call can be
    retried with the same message.
    """

    def __init__(
        self,
        model: GenerativeModel,
        history: Sequence[Content] | None = None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
    ) -> None:
        super().__init__(history, generation_config, safety_settings, tools)
        self.model = model

    def send_message(
        self, message: str | Content | Sequence[Part], *, timeout: float | None = None
    ) -> GenerateContentResponse:
        turn, request = self._turn(message)
        response = self.model.generate_content(request, timeout=timeout)
        self._record(turn, _reply(response))
        return response

    def send_message_stream(
        self,
        message: str | Content | Sequence[Part],
        *,
        cancel: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> Iterator[GenerateContentResponse]:
        """Stream the reply; it is added to the history when the stream completes."""
        turn, request = self._turn(message)
        stream = self.model.generate_content_stream(request, cancel=cancel, timeout=timeout)

        def _iterate() -> Iterator[GenerateContentResponse]:
            text: list[str] = []
            for chunk in stream:
                text.append(chunk.text)
                yield chunk
            self._record(turn, Content(role=Role.MODEL, parts=(TextPart("".join(text)),)))

        return _iterate()


class AsyncChatSession(_ChatState):
    """A conversation with an :class:`AsyncGenerativeModel`."""

    def __init__(
        self,
        model: AsyncGenerativeModel,
        history: Sequence[Content] | None = None,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
    ) -> None:
        super().__init__(history, generation_config, safety_settings, tools)
        self.model = model

    async def send_message(
        self, message: str | Content | Sequence[Part], *, timeout: float | None = None
    ) -> GenerateContentResponse:
        turn, request = self._turn(message)
        response = await self.model.generate_content(request, timeout=timeout)
        self._record(turn, _reply(response))
        return response

    def send_message_stream(
        self,
        message: str | Content | Sequence[Part],
        *,
        cancel: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        turn, request = self._turn(message)
        stream = self.model.generate_content_stream(request, cancel=cancel, timeout=timeout)

        async def _iterate() -> AsyncIterator[GenerateContentResponse]:
            text: list[str] = []
            async for chunk in stream:
                text.append(chunk.text)
                yield chunk
            self._record(turn, Content(role=Role.MODEL, parts=(TextPart("".join(text)),)))

        return _iterate()
