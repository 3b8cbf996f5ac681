"""05: Embeddings and token counting."""

from genai_kit.gemini import GenerativeModel, TaskType

with GenerativeModel("text-embedding-004") as model:
    single = model.embed_content(
        "The quick brown fox.", task_type=TaskType.RETRIEVAL_DOCUMENT, title="Fox"
    )
    print(f"dimensions: {len(single.embedding.values)}")

    batch = model.batch_embed_contents(["first document", "second document"])
    print(f"batch size: {len(batch.embeddings)}")

with GenerativeModel("gemini-1.5-flash") as model:
    print(f"tokens: {model.count_tokens('How many tokens is this?').total_tokens}")
