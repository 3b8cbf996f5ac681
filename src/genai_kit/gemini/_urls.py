"""URL templates and model/endpoint name handling."""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urlencode

from genai_kit.gemini._exceptions import InvalidArgumentError

BASE_URL_GOOGLE_AI = "https://generativelanguage.googleapis.com/{version}"
BASE_URL_VERTEX_AI = (
    "https://{region}-aiplatform.googleapis.com/{version}/projects/{projectId}/locations/{region}"
)

URL_GOOGLE_AI = "{BaseUrlGoogleAi}/{model}:{method}"
URL_VERTEX_AI = "{BaseUrlVertexAi}/publishers/{publisher}/{model}:{method}"
URL_VERTEX_ENDPOINT = "{BaseUrlVertexAi}/{endpointId}:{method}"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def sanitize_model_name(name: str) -> str:
    """Prefix a bare model id with ``models/``; qualified names pass through."""
    if "/" in name:
        return name
    return f"models/{name}"


def model_id(name: str) -> str:
    """Return the last path segment of a model name (``models/x`` -> ``x``)."""
    return name.rsplit("/", 1)[-1]


def sanitize_endpoint_name(name: str | None) -> str | None:
    """Normalize an endpoint reference to ``endpoints/<id>``."""
    if not name:
        return None
    if "endpoints/" in name:
        return "endpoints/" + name.split("endpoints/", 1)[1]
    if "/" in name:
        return name
    return f"endpoints/{name}"


def render(template: str, values: Mapping[str, str | None]) -> str:
    """Substitute ``{placeholder}`` tokens, expanding nested templates first.

    Raises InvalidArgumentError when a placeholder has no value.
    """

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        value = values.get(key)
        if value is None:
            raise InvalidArgumentError(f"No value for URL placeholder {{{key}}}")
        return value

    # base URL values are themselves templates
    previous = None
    url = template
    while previous != url:
        previous = url
        url = _PLACEHOLDER.sub(_sub, url)
    return url


def add_query_string(url: str, params: Mapping[str, str | None]) -> str:
    """Append the non-empty ``params`` to ``url`` as an encoded query string."""
    kept = {k: v for k, v in params.items() if v is not None and v != ""}
    if not kept:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(kept)}"
