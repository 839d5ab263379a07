"""Summarization invoker.

Sends normalized page text to a :class:`TextGenerator` under a hard deadline.
Every failure mode is returned as a :class:`~doclens.errors.Failure` so the
orchestrator can decide to degrade instead of failing the request.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from doclens.config import Settings
from doclens.deadline import DeadlineExceeded, race_deadline
from doclens.errors import ErrorKind, Failure
from doclens.llm.backends import TextGenerator, build_generator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 45.0

# Each entry is a heading plus the points the model should cover under it.
DEFAULT_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Technology Overview", ("Precise description", "Core principles", "Use cases")),
    (
        "Key Technical Capabilities",
        ("Feature breakdown", "Unique aspects", "Integration potential"),
    ),
    (
        "Implementation Guidance",
        ("Setup instructions", "Configuration details", "Dependency management"),
    ),
    (
        "Advanced Patterns",
        ("Complex scenarios", "Optimization techniques", "Error handling"),
    ),
    (
        "Expert Insights",
        ("Architectural considerations", "Scalability strategies", "Potential limitations"),
    ),
)


def build_prompt(
    text: str, sections: Sequence[tuple[str, Sequence[str]]] = DEFAULT_SECTIONS
) -> str:
    """Return the summarization prompt for *text*."""
    lines = [
        "Provide a comprehensive technical documentation summary.",
        "",
        f"CONTEXT: {text}",
        "",
        "ANALYSIS REQUIREMENTS:",
    ]
    for i, (heading, points) in enumerate(sections, start=1):
        lines.append(f"{i}. {heading}")
        lines.extend(f"   - {point}" for point in points)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


class Summarizer:
    """Races a :class:`TextGenerator` call against a timeout.

    Args:
        generator: The text-generation backend.
        timeout: Seconds to wait before giving up on the backend.
        sections: Headings the summary must cover.
    """

    def __init__(
        self,
        generator: TextGenerator,
        timeout: float = DEFAULT_TIMEOUT,
        sections: Sequence[tuple[str, Sequence[str]]] = DEFAULT_SECTIONS,
    ) -> None:
        self.generator = generator
        self.timeout = timeout
        self.sections = sections

    async def summarize(self, text: str) -> Union[str, Failure]:
        """Return the generated analysis of *text*, or a failure."""
        prompt = build_prompt(text, self.sections)
        try:
            analysis = await race_deadline(self.generator.generate(prompt), self.timeout)
        except DeadlineExceeded as exc:
            logger.warning("[Summarization] %s", exc)
            return Failure(ErrorKind.SUMMARIZATION_TIMEOUT, "Analysis timed out", str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("[Summarization] backend error")
            return Failure(
                ErrorKind.SUMMARIZATION_FAILURE,
                "Analysis failed",
                str(exc) or exc.__class__.__name__,
            )

        if not isinstance(analysis, str) or not analysis.strip():
            logger.warning("[Summarization] backend returned no text")
            return Failure(
                ErrorKind.SUMMARIZATION_FAILURE, "Analysis failed", "Model returned empty output"
            )
        return analysis.strip()


def build_summarizer(config: Settings) -> Optional[Summarizer]:
    """Return a :class:`Summarizer` for *config*, or ``None`` when disabled.

    Raises:
        ConfigurationError: If the provider is unknown or lacks credentials.
    """
    generator = build_generator(config)
    if generator is None:
        return None
    return Summarizer(generator, timeout=config.summary_timeout)
