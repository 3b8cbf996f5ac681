"""02: Multi-turn chat.

The session keeps the history and sends it with every turn.
"""

from genai_kit.gemini import GenerativeModel

with GenerativeModel("gemini-1.5-flash", system_instruction="Answer in one sentence.") as model:
    chat = model.start_chat()
    for question in ("My name is Ada.", "What is my name?"):
        print(f"> {question}")
        print(chat.send_message(question).text)

    print(f"\n[{len(chat.history)} turns in history]")
