"""01: Hello world (direct backend).

Reads the API key from GOOGLE_API_KEY.
"""

from genai_kit.gemini import GenerativeModel

with GenerativeModel("gemini-1.5-flash") as model:
    response = model.generate_content("Say hello in three languages.")
    print(response.text)

    usage = response.usage_metadata
    if usage is not None:
        print(f"\n[Tokens: {usage.total_token_count}]")
