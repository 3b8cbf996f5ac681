"""03: Streaming, with chunked-array and server-sent-event framing.

The second stream is cancelled after three chunks.
"""

from genai_kit.gemini import CancellationToken, GenerativeModel

with GenerativeModel("gemini-1.5-flash") as model:
    print("=== chunked JSON array ===")
    for partial in model.generate_content_stream("Explain photosynthesis in three sentences."):
        print(partial.text, end="", flush=True)
    print("\n")

    print("=== server-sent events ===")
    model.use_server_sent_events = True
    token = CancellationToken()
    stream = model.generate_content_stream("Count from 1 to 500.", cancel=token)
    for i, partial in enumerate(stream):
        print(partial.text, end="", flush=True)
        if i == 2:
            token.cancel()
    print()
