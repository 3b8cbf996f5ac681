"""06: Cloud-hosted backend.

Needs GOOGLE_PROJECT_ID and an OAuth token in GOOGLE_ACCESS_TOKEN
(for example from ``gcloud auth print-access-token``).
"""

from genai_kit.gemini import VertexAI

vertex = VertexAI(region="us-central1")

with vertex.generative_model("gemini-1.5-pro") as model:
    # partial responses are folded into one answer
    print(model.generate_content("Summarize the plot of Hamlet.").text)

    model.use_grounding = True
    response = model.generate_content("Who won the most recent Tour de France?")
    print(response.text)
    if response.grounding_metadata is not None:
        print(response.grounding_metadata.web_search_queries)
