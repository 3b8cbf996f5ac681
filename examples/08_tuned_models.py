"""08: Tuned models.

Tuned-model management needs an OAuth token (GOOGLE_ACCESS_TOKEN); an API
key is rejected before any request is sent.
"""

from genai_kit.gemini import CreateTunedModelRequest, GenerativeModel
from genai_kit.gemini._types import Dataset, TuningExample, TuningExamples, TuningTask

with GenerativeModel("gemini-1.0-pro-001") as model:
    for tuned in model.list_models(tuned=True, page_size=10):
        print(tuned.name, tuned.state)

    examples = TuningExamples(
        examples=(
            TuningExample(text_input="1", output="2"),
            TuningExample(text_input="2", output="3"),
        )
    )
    operation = model.create_tuned_model(
        CreateTunedModelRequest(
            display_name="increment",
            tuning_task=TuningTask(training_data=Dataset(examples=examples)),
        )
    )
    print(operation.name)
