"""07: Async model.

Concurrent calls share one connection pool.
"""

import asyncio

from genai_kit.gemini import AsyncGenerativeModel


async def main():
    async with AsyncGenerativeModel("gemini-1.5-flash") as model:
        print("=== Async streaming ===")
        async for partial in model.generate_content_stream("Count from 1 to 5."):
            print(partial.text, end="", flush=True)
        print("\n")

        print("=== Parallel requests ===")
        questions = ["Name one planet.", "Name one ocean.", "Name one element."]
        responses = await asyncio.gather(*(model.generate_content(q) for q in questions))
        for question, resp in zip(questions, responses, strict=True):
            print(f"  Q: {question}")
            print(f"  A: {resp.text}\n")


if __name__ == "__main__":
    asyncio.run(main())
