"""Summarization and chat over extracted page text."""

from doclens.llm.backends import GenerationPolicy, TextGenerator, build_generator
from doclens.llm.chat import answer_question
from doclens.llm.summarizer import Summarizer, build_summarizer

__all__ = [
    "TextGenerator",
    "GenerationPolicy",
    "build_generator",
    "Summarizer",
    "build_summarizer",
    "answer_question",
]
