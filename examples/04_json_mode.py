"""04: JSON mode with a response schema."""

import json

from genai_kit.gemini import GenerationConfig, GenerativeModel, Schema

schema = Schema(
    type="object",
    properties={
        "name": {"type": "string"},
        "population": {"type": "integer"},
    },
    required=("name", "population"),
)

with GenerativeModel("gemini-1.5-flash") as model:
    model.use_json_mode = True
    response = model.generate_content(
        "Describe the largest city in Japan.",
        generation_config=GenerationConfig(response_schema=schema),
    )
    print(json.loads(response.text))
