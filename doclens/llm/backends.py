"""Text-generation backends for the summarizer.

Providers
---------
``ollama`` (default)
    A LangChain ``ChatOllama`` model talking to the local Ollama server.
    Configure via ``OLLAMA_BASE_URL`` and ``OLLAMA_CHAT_MODEL``.

``openai``
    A LangChain ``ChatOpenAI`` model.  Requires ``OPENAI_API_KEY``.
    Configure via ``OPENAI_CHAT_MODEL``.

``none``
    No backend; the pipeline returns extracted content with a placeholder
    analysis.

Backends are built once and injected; a missing credential raises
:class:`~doclens.errors.ConfigurationError` here, not on the first request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from langchain_core.messages import HumanMessage

from doclens.config import Settings
from doclens.errors import ConfigurationError

DISABLED_PROVIDERS = frozenset({"", "none", "off", "disabled"})


class TextGenerator(Protocol):
    """Anything that turns a prompt into text."""

    async def generate(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class GenerationPolicy:
    """Sampling settings passed through to the model unchanged."""

    temperature: float = 0.6
    top_p: float = 0.85
    top_k: int = 40
    max_output_tokens: int = 8192

    @classmethod
    def from_settings(cls, config: Settings) -> "GenerationPolicy":
        return cls(
            temperature=config.llm_temperature,
            top_p=config.llm_top_p,
            top_k=config.llm_top_k,
            max_output_tokens=config.llm_max_output_tokens,
        )


class ChatModelGenerator:
    """Adapts a LangChain chat model to :class:`TextGenerator`.

    The prompt is sent as a single human message.
    """

    def __init__(self, model: Any) -> None:
        self.model = model

    async def generate(self, prompt: str) -> str:
        response = await self.model.ainvoke([HumanMessage(content=prompt)])
        content = response.content if hasattr(response, "content") else response
        if not isinstance(content, str):
            raise TypeError(f"Model returned {type(content).__name__}, expected text")
        return content


# ---------------------------------------------------------------------------
# Provider implementations
# ---------------------------------------------------------------------------

def _ollama_model(config: Settings, policy: GenerationPolicy) -> Any:
    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=config.ollama_chat_model,
        base_url=config.ollama_base_url,
        temperature=policy.temperature,
        top_p=policy.top_p,
        top_k=policy.top_k,
        num_predict=policy.max_output_tokens,
    )


def _openai_model(config: Settings, policy: GenerationPolicy) -> Any:
    api_key = os.environ.get("OPENAI_API_KEY", "")
    if not api_key:
        raise ConfigurationError(
            "OPENAI_API_KEY environment variable is not set. "
            "Set it or switch to LLM_PROVIDER=ollama."
        )

    from langchain_openai import ChatOpenAI

    # The OpenAI chat API has no top_k parameter.
    return ChatOpenAI(
        model=config.openai_chat_model,
        api_key=api_key,
        temperature=policy.temperature,
        top_p=policy.top_p,
        max_tokens=policy.max_output_tokens,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_generator(
    config: Settings, policy: Optional[GenerationPolicy] = None
) -> Optional[TextGenerator]:
    """Return the configured :class:`TextGenerator`, or ``None`` if disabled.

    Raises:
        ConfigurationError: Unknown provider, or missing credentials.
    """
    provider = config.llm_provider.strip().lower()
    if provider in DISABLED_PROVIDERS:
        return None

    policy = policy or GenerationPolicy.from_settings(config)
    if provider == "ollama":
        return ChatModelGenerator(_ollama_model(config, policy))
    if provider == "openai":
        return ChatModelGenerator(_openai_model(config, policy))
    raise ConfigurationError(
        f"Unknown LLM_PROVIDER {config.llm_provider!r}. Use: ollama | openai | none"
    )
