"""Test doubles and settings builders shared by the test modules."""

from __future__ import annotations

import asyncio

from doclens.config import Settings


class FakeGenerator:
    """Stands in for the language model.

    ``reply`` is returned after ``delay`` seconds; ``error`` is raised instead
    when set.  Every prompt is recorded in ``prompts``.
    """

    def __init__(self, reply: str = "Summary text.", delay: float = 0.0, error: Exception | None = None):
        self.reply = reply
        self.delay = delay
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


def make_settings(**overrides) -> Settings:
    """Settings with deterministic defaults, independent of the environment."""
    values = dict(
        fetch_timeout=5.0,
        fetch_max_redirects=5,
        fetch_tolerated_statuses=(401, 403),
        min_region_length=100,
        max_content_length=8000,
        min_content_length=50,
        llm_provider="none",
        summary_timeout=2.0,
        api_token="",
        require_auth=True,
    )
    values.update(overrides)
    return Settings(**values)
