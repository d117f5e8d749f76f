"""Test doubles for the model client."""

from app.services.llm import TextGenerator


class FakeGenerator(TextGenerator):
    """
    Scripted stand-in for the model.

    Each call pops the next queued item: strings are returned, exceptions
    are raised. With an empty queue it echoes the NOTES block of the
    prompt, which is enough to check that answers come from the context.
    """

    def __init__(self, responses: list | None = None):
        self.responses = list(responses or [])
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        notes = prompt.split("NOTES:\n", 1)[-1].split("\n\nQUESTION:", 1)[0]
        return f"From your notes: {notes.strip()}\nConfidence: High"

    @property
    def calls(self) -> int:
        return len(self.prompts)
