"""Fold the partial responses of a cloud-hosted generate call into one answer."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from genai_kit.gemini._types import (
    Candidate,
    Content,
    FinishReason,
    GenerateContentResponse,
    GroundingMetadata,
    Role,
    TextPart,
)


def _empty_candidate() -> Candidate:
    return Candidate(content=Content(role=Role.MODEL, parts=(TextPart(""),)))


def fold_responses(partials: Sequence[GenerateContentResponse]) -> GenerateContentResponse:
    """Reduce ordered partial responses to a single logical response.

    The first partial carrying grounding metadata is captured and left out of
    the text. A partial that finished for safety reasons is returned as is.
    Otherwise the last partial is returned with the concatenated text and the
    captured grounding metadata.
    """
    grounding: GroundingMetadata | None = None
    captured = False
    text_parts: list[str] = []

    for partial in partials:
        if not captured and partial.grounding_metadata is not None:
            grounding = partial.grounding_metadata
            captured = True
            continue
        if partial.finish_reason == FinishReason.SAFETY:
            return partial
        text_parts.append(partial.text)

    last = partials[-1] if partials else GenerateContentResponse()
    candidates = last.candidates or (_empty_candidate(),)
    first = candidates[0]
    content = first.content or Content(role=Role.MODEL)

    # the accumulated text replaces every text part of the last partial
    parts = (
        TextPart("".join(text_parts)),
        *(p for p in content.parts if not isinstance(p, TextPart)),
    )

    first = dataclasses.replace(
        first,
        content=dataclasses.replace(content, parts=parts),
        grounding_metadata=grounding,
    )
    return dataclasses.replace(last, candidates=(first, *candidates[1:]))
