"""Prompt builder: turns structured creative briefs into prompt text.

One template exists per prompt type (script, voice, video generation,
image, relaxing content and creative scan). Each template validates its
brief with a pydantic model before rendering.
"""

from .builder import ERROR_PREFIX, UNKNOWN_TYPE_PROMPT, PromptBuilder, PromptTemplate, generate_prompt

__all__ = [
    "ERROR_PREFIX",
    "UNKNOWN_TYPE_PROMPT",
    "PromptBuilder",
    "PromptTemplate",
    "generate_prompt",
]
