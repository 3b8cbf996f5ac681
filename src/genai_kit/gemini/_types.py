"""Typed request and response shapes for the Gemini API.

Every DTO is a frozen, slotted dataclass. Field names are the snake_case form
of the wire names; :mod:`genai_kit.gemini._codec` converts between the two.
Optional fields default to ``None`` and are omitted from serialized bodies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

type JsonValue = str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]


# --- Enumerations ---


class Role(StrEnum):
    USER = "user"
    MODEL = "model"
    FUNCTION = "function"


class FinishReason(StrEnum):
    UNSPECIFIED = "FINISH_REASON_UNSPECIFIED"
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    OTHER = "OTHER"


class TaskType(StrEnum):
    UNSPECIFIED = "TASK_TYPE_UNSPECIFIED"
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"
    SEMANTIC_SIMILARITY = "SEMANTIC_SIMILARITY"
    CLASSIFICATION = "CLASSIFICATION"
    CLUSTERING = "CLUSTERING"


class HarmCategory(StrEnum):
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class HarmBlockThreshold(StrEnum):
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"


class AnswerStyle(StrEnum):
    ABSTRACTIVE = "ABSTRACTIVE"
    EXTRACTIVE = "EXTRACTIVE"
    VERBOSE = "VERBOSE"


# --- Content parts ---


@dataclass(frozen=True, slots=True)
class Blob:
    """Raw bytes (base64) with their media type."""

    mime_type: str
    data: str


@dataclass(frozen=True, slots=True)
class FileData:
    """Reference to a file already uploaded to the service."""

    mime_type: str
    file_uri: str


@dataclass(frozen=True, slots=True)
class VideoMetadata:
    """Clip boundaries for video input, as duration strings such as ``"1.5s"``."""

    start_offset: str | None = None
    end_offset: str | None = None


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """A function call predicted by the model."""

    name: str
    args: dict[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class FunctionResponse:
    """The result of a function call, sent back to the model."""

    name: str
    response: dict[str, JsonValue]


# Each part variant's first field is its wire discriminant.


@dataclass(frozen=True, slots=True)
class TextPart:
    text: str


@dataclass(frozen=True, slots=True)
class InlineDataPart:
    inline_data: Blob


@dataclass(frozen=True, slots=True)
class FileDataPart:
    file_data: FileData
    video_metadata: VideoMetadata | None = None


@dataclass(frozen=True, slots=True)
class FunctionCallPart:
    function_call: FunctionCall


@dataclass(frozen=True, slots=True)
class FunctionResponsePart:
    function_response: FunctionResponse


type Part = TextPart | InlineDataPart | FileDataPart | FunctionCallPart | FunctionResponsePart


@dataclass(frozen=True, slots=True)
class Content:
    """One conversation turn."""

    role: str | None = None
    parts: tuple[Part, ...] = ()

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))


# --- Generation configuration ---


@dataclass(frozen=True, slots=True)
class Schema:
    """Subset of OpenAPI schema used for structured output and function parameters."""

    type: str | None = None
    format: str | None = None
    description: str | None = None
    nullable: bool | None = None
    items: Schema | None = None
    enum: tuple[str, ...] | None = None
    properties: dict[str, JsonValue] | None = None
    required: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: tuple[str, ...] | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    response_mime_type: str | None = None
    response_schema: Schema | None = None


@dataclass(frozen=True, slots=True)
class SafetySetting:
    category: str
    threshold: str


@dataclass(frozen=True, slots=True)
class SafetyRating:
    category: str | None = None
    probability: str | None = None
    blocked: bool | None = None


# --- Tools ---


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    name: str
    description: str | None = None
    parameters: Schema | None = None


@dataclass(frozen=True, slots=True)
class DynamicRetrievalConfig:
    mode: str = "MODE_DYNAMIC"
    dynamic_threshold: float | None = None


@dataclass(frozen=True, slots=True)
class GoogleSearchRetrieval:
    dynamic_retrieval_config: DynamicRetrievalConfig | None = None


@dataclass(frozen=True, slots=True)
class Tool:
    """A tool the model may use: function declarations or a built-in retrieval tool."""

    function_declarations: tuple[FunctionDeclaration, ...] | None = None
    google_search_retrieval: GoogleSearchRetrieval | None = None
    code_execution: dict[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class FunctionCallingConfig:
    mode: str | None = None
    allowed_function_names: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class ToolConfig:
    function_calling_config: FunctionCallingConfig | None = None


# --- Content generation ---


@dataclass(frozen=True, slots=True)
class GenerateContentRequest:
    contents: tuple[Content, ...] = ()
    model: str | None = None
    generation_config: GenerationConfig | None = None
    safety_settings: tuple[SafetySetting, ...] | None = None
    tools: tuple[Tool, ...] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: Content | None = None
    cached_content: str | None = None


@dataclass(frozen=True, slots=True)
class CitationSource:
    start_index: int | None = None
    end_index: int | None = None
    uri: str | None = None
    license: str | None = None


@dataclass(frozen=True, slots=True)
class CitationMetadata:
    citation_sources: tuple[CitationSource, ...] | None = None


@dataclass(frozen=True, slots=True)
class GroundingMetadata:
    """Evidence attached to a response produced with retrieval enabled."""

    web_search_queries: tuple[str, ...] | None = None
    retrieval_queries: tuple[str, ...] | None = None
    search_entry_point: dict[str, JsonValue] | None = None
    grounding_chunks: tuple[JsonValue, ...] | None = None
    grounding_supports: tuple[JsonValue, ...] | None = None


@dataclass(frozen=True, slots=True)
class Candidate:
    content: Content | None = None
    finish_reason: str | None = None
    safety_ratings: tuple[SafetyRating, ...] | None = None
    citation_metadata: CitationMetadata | None = None
    grounding_metadata: GroundingMetadata | None = None
    token_count: int | None = None
    index: int | None = None


@dataclass(frozen=True, slots=True)
class PromptFeedback:
    block_reason: str | None = None
    safety_ratings: tuple[SafetyRating, ...] | None = None


@dataclass(frozen=True, slots=True)
class UsageMetadata:
    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    total_token_count: int | None = None
    cached_content_token_count: int | None = None


@dataclass(frozen=True, slots=True)
class GenerateContentResponse:
    """A full response, or one partial of a streamed response."""

    candidates: tuple[Candidate, ...] | None = None
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None

    @property
    def text(self) -> str:
        """Text of the first candidate, or ``""`` when there is none."""
        if not self.candidates or self.candidates[0].content is None:
            return ""
        return self.candidates[0].content.text

    @property
    def finish_reason(self) -> str | None:
        if not self.candidates:
            return None
        return self.candidates[0].finish_reason

    @property
    def grounding_metadata(self) -> GroundingMetadata | None:
        if not self.candidates:
            return None
        return self.candidates[0].grounding_metadata


@dataclass(frozen=True, slots=True)
class CountTokensRequest:
    """Either bare contents or a full generate request to count tokens for."""

    contents: tuple[Content, ...] | None = None
    generate_content_request: GenerateContentRequest | None = None


@dataclass(frozen=True, slots=True)
class CountTokensResponse:
    total_tokens: int | None = None
    token_count: int | None = None
    cached_content_token_count: int | None = None


# --- Attributed question answering ---


@dataclass(frozen=True, slots=True)
class GroundingPassage:
    id: str
    content: Content


@dataclass(frozen=True, slots=True)
class GroundingPassages:
    passages: tuple[GroundingPassage, ...] = ()


@dataclass(frozen=True, slots=True)
class GenerateAnswerRequest:
    contents: tuple[Content, ...] = ()
    answer_style: str | None = None
    safety_settings: tuple[SafetySetting, ...] | None = None
    inline_passages: GroundingPassages | None = None
    temperature: float | None = None


@dataclass(frozen=True, slots=True)
class GenerateAnswerResponse:
    answer: Candidate | None = None
    answerable_probability: float | None = None
    input_feedback: dict[str, JsonValue] | None = None

    @property
    def text(self) -> str:
        if self.answer is None or self.answer.content is None:
            return ""
        return self.answer.content.text


# --- Embeddings ---


@dataclass(frozen=True, slots=True)
class EmbedContentRequest:
    content: Content | None = None
    model: str | None = None
    task_type: str | None = None
    title: str | None = None
    output_dimensionality: int | None = None


@dataclass(frozen=True, slots=True)
class BatchEmbedContentsRequest:
    requests: tuple[EmbedContentRequest, ...] = ()


@dataclass(frozen=True, slots=True)
class ContentEmbedding:
    values: tuple[float, ...] = ()


@dataclass(frozen=True, slots=True)
class EmbedContentResponse:
    embedding: ContentEmbedding | None = None
    embeddings: tuple[ContentEmbedding, ...] | None = None


# --- Legacy text, chat and embedding models ---


@dataclass(frozen=True, slots=True)
class TextPrompt:
    text: str


@dataclass(frozen=True, slots=True)
class GenerateTextRequest:
    prompt: TextPrompt | None = None
    model: str | None = None
    temperature: float | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    safety_settings: tuple[SafetySetting, ...] | None = None
    stop_sequences: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class TextCompletion:
    output: str = ""
    safety_ratings: tuple[SafetyRating, ...] | None = None
    citation_metadata: CitationMetadata | None = None


@dataclass(frozen=True, slots=True)
class GenerateTextResponse:
    candidates: tuple[TextCompletion, ...] | None = None
    filters: tuple[JsonValue, ...] | None = None
    safety_feedback: tuple[JsonValue, ...] | None = None

    @property
    def text(self) -> str:
        if not self.candidates:
            return ""
        return self.candidates[0].output


@dataclass(frozen=True, slots=True)
class Message:
    """A chat message for the legacy chat model."""

    content: str
    author: str | None = None
    citation_metadata: CitationMetadata | None = None


@dataclass(frozen=True, slots=True)
class Example:
    input: Message
    output: Message


@dataclass(frozen=True, slots=True)
class MessagePrompt:
    messages: tuple[Message, ...] = ()
    context: str | None = None
    examples: tuple[Example, ...] | None = None


@dataclass(frozen=True, slots=True)
class GenerateMessageRequest:
    prompt: MessagePrompt | None = None
    temperature: float | None = None
    candidate_count: int | None = None
    top_p: float | None = None
    top_k: int | None = None


@dataclass(frozen=True, slots=True)
class GenerateMessageResponse:
    candidates: tuple[Message, ...] | None = None
    messages: tuple[Message, ...] | None = None
    filters: tuple[JsonValue, ...] | None = None

    @property
    def text(self) -> str:
        if not self.candidates:
            return ""
        return self.candidates[0].content


@dataclass(frozen=True, slots=True)
class EmbedTextRequest:
    text: str | None = None
    model: str | None = None


@dataclass(frozen=True, slots=True)
class BatchEmbedTextRequest:
    texts: tuple[str, ...] | None = None
    requests: tuple[EmbedTextRequest, ...] | None = None


@dataclass(frozen=True, slots=True)
class Embedding:
    value: tuple[float, ...] = ()


@dataclass(frozen=True, slots=True)
class EmbedTextResponse:
    embedding: Embedding | None = None
    embeddings: tuple[Embedding, ...] | None = None


# --- Models and tuning ---


@dataclass(frozen=True, slots=True)
class TuningExample:
    output: str
    text_input: str | None = None


@dataclass(frozen=True, slots=True)
class TuningExamples:
    examples: tuple[TuningExample, ...] = ()


@dataclass(frozen=True, slots=True)
class Dataset:
    examples: TuningExamples | None = None


@dataclass(frozen=True, slots=True)
class Hyperparameters:
    batch_size: int | None = None
    learning_rate: float | None = None
    epoch_count: int | None = None


@dataclass(frozen=True, slots=True)
class TuningTask:
    training_data: Dataset | None = None
    hyperparameters: Hyperparameters | None = None
    start_time: str | None = None
    complete_time: str | None = None
    snapshots: tuple[JsonValue, ...] | None = None


@dataclass(frozen=True, slots=True)
class TunedModelSource:
    tuned_model: str | None = None
    base_model: str | None = None


@dataclass(frozen=True, slots=True)
class ModelInfo:
    """Metadata of a base or tuned model."""

    name: str | None = None
    base_model_id: str | None = None
    version: str | None = None
    display_name: str | None = None
    description: str | None = None
    input_token_limit: int | None = None
    output_token_limit: int | None = None
    supported_generation_methods: tuple[str, ...] | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    state: str | None = None
    create_time: str | None = None
    update_time: str | None = None
    tuning_task: TuningTask | None = None
    tuned_model_source: TunedModelSource | None = None
    base_model: str | None = None


@dataclass(frozen=True, slots=True)
class ListModelsResponse:
    models: tuple[ModelInfo, ...] | None = None
    next_page_token: str | None = None


@dataclass(frozen=True, slots=True)
class ListTunedModelsResponse:
    tuned_models: tuple[ModelInfo, ...] | None = None
    next_page_token: str | None = None


@dataclass(frozen=True, slots=True)
class CreateTunedModelRequest:
    base_model: str | None = None
    display_name: str | None = None
    description: str | None = None
    tuning_task: TuningTask | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None


@dataclass(frozen=True, slots=True)
class CreateTunedModelMetadata:
    tuned_model: str | None = None
    total_steps: int | None = None
    completed_steps: int | None = None
    completed_percent: float | None = None


@dataclass(frozen=True, slots=True)
class CreateTunedModelResponse:
    name: str | None = None
    metadata: CreateTunedModelMetadata | None = None
    done: bool | None = None


@dataclass(frozen=True, slots=True)
class TransferOwnershipRequest:
    email_address: str


# --- Server-side handles ---


@dataclass(frozen=True, slots=True)
class CachedContent:
    """A stored conversation prefix that later requests can reuse."""

    name: str
    model: str
    contents: tuple[Content, ...] | None = None
    tools: tuple[Tool, ...] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: Content | None = None
    display_name: str | None = None
    ttl: str | None = None
    expire_time: str | None = None


@dataclass(frozen=True, slots=True)
class TunedModel:
    model: str | None = None
    endpoint: str | None = None


@dataclass(frozen=True, slots=True)
class TuningJob:
    """A cloud-hosted tuning job whose tuned model serves from an endpoint."""

    name: str | None = None
    tuned_model: TunedModel | None = None
    state: str | None = None


# --- Prediction ---


@dataclass(frozen=True, slots=True)
class PredictRequest:
    instances: tuple[JsonValue, ...] = ()
    parameters: dict[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class PredictLongRunningRequest:
    instances: tuple[JsonValue, ...] = ()
    parameters: dict[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class PredictResponse:
    predictions: tuple[JsonValue, ...] | None = None


@dataclass(frozen=True, slots=True)
class Operation:
    """A long-running operation handle."""

    name: str | None = None
    done: bool | None = None
    metadata: dict[str, JsonValue] | None = None
    response: dict[str, JsonValue] | None = None
    error: dict[str, JsonValue] | None = None
