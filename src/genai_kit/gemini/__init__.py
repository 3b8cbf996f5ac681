"""Gemini client: direct (API key) and cloud-hosted (project/region/OAuth) backends."""

from genai_kit.gemini._async_model import AsyncGenerativeModel
from genai_kit.gemini._backends import GoogleAI, VertexAI, create_backend
from genai_kit.gemini._chat import AsyncChatSession, ChatSession
from genai_kit.gemini._codec import JsonArrayDecoder, deserialize, iter_sse, serialize
from genai_kit.gemini._context import Backend, BackendContext, ModelDefaults
from genai_kit.gemini._dispatch import Method, Model, merge_request, method_for_model
from genai_kit.gemini._exceptions import (
    DeserializationError,
    GenAIError,
    InvalidArgumentError,
    RateLimitError,
    StreamDecodingError,
    TransportError,
    UnsupportedOperationError,
)
from genai_kit.gemini._folding import fold_responses
from genai_kit.gemini._model import GenerativeModel
from genai_kit.gemini._streaming import CancellationToken, StreamMode
from genai_kit.gemini._types import (
    AnswerStyle,
    Blob,
    CachedContent,
    Candidate,
    Content,
    CountTokensResponse,
    CreateTunedModelRequest,
    EmbedContentRequest,
    EmbedContentResponse,
    FileData,
    FileDataPart,
    FinishReason,
    FunctionCall,
    FunctionCallPart,
    FunctionDeclaration,
    FunctionResponse,
    FunctionResponsePart,
    GenerateAnswerRequest,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    GroundingMetadata,
    HarmBlockThreshold,
    HarmCategory,
    InlineDataPart,
    ModelInfo,
    Part,
    Role,
    SafetySetting,
    Schema,
    TaskType,
    TextPart,
    Tool,
    ToolConfig,
    TunedModel,
    TuningJob,
)
from genai_kit.gemini._urls import sanitize_model_name

__all__ = [
    "AnswerStyle",
    "AsyncChatSession",
    "AsyncGenerativeModel",
    "Backend",
    "BackendContext",
    "Blob",
    "CachedContent",
    "CancellationToken",
    "Candidate",
    "ChatSession",
    "Content",
    "CountTokensResponse",
    "CreateTunedModelRequest",
    "DeserializationError",
    "EmbedContentRequest",
    "EmbedContentResponse",
    "FileData",
    "FileDataPart",
    "FinishReason",
    "FunctionCall",
    "FunctionCallPart",
    "FunctionDeclaration",
    "FunctionResponse",
    "FunctionResponsePart",
    "GenAIError",
    "GenerateAnswerRequest",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "GenerativeModel",
    "GoogleAI",
    "GroundingMetadata",
    "HarmBlockThreshold",
    "HarmCategory",
    "InlineDataPart",
    "InvalidArgumentError",
    "JsonArrayDecoder",
    "Method",
    "Model",
    "ModelDefaults",
    "ModelInfo",
    "Part",
    "RateLimitError",
    "Role",
    "SafetySetting",
    "Schema",
    "StreamDecodingError",
    "StreamMode",
    "TaskType",
    "TextPart",
    "Tool",
    "ToolConfig",
    "TransportError",
    "TunedModel",
    "TuningJob",
    "UnsupportedOperationError",
    "VertexAI",
    "create_backend",
    "deserialize",
    "fold_responses",
    "iter_sse",
    "merge_request",
    "method_for_model",
    "sanitize_model_name",
    "serialize",
]
