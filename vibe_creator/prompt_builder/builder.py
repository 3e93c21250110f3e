from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from vibe_creator.core.models.domain import PromptType

from .inputs import (
    CreativeScanInput,
    ImageInput,
    RelaxingInput,
    ScriptInput,
    VideoGenInput,
    VoiceInput,
)
from .templates import (
    generate_creative_scan_prompt,
    generate_image_prompt,
    generate_relaxing_prompt,
    generate_script_prompt,
    generate_video_gen_prompt,
    generate_voice_prompt,
)

logger = logging.getLogger(__name__)

UNKNOWN_TYPE_PROMPT = "// Unknown prompt type"
ERROR_PREFIX = "// Error generating prompt: "


@dataclass(frozen=True)
class PromptTemplate:
    """A brief model paired with the function that renders it."""

    input_model: Type[BaseModel]
    render: Callable[[Any], str]


_BUILTIN_TEMPLATES: Dict[PromptType, PromptTemplate] = {
    PromptType.SCRIPT: PromptTemplate(ScriptInput, generate_script_prompt),
    PromptType.VOICE: PromptTemplate(VoiceInput, generate_voice_prompt),
    PromptType.VIDEO_GEN: PromptTemplate(VideoGenInput, generate_video_gen_prompt),
    PromptType.IMAGE: PromptTemplate(ImageInput, generate_image_prompt),
    PromptType.RELAXING: PromptTemplate(RelaxingInput, generate_relaxing_prompt),
    PromptType.CREATIVE_SCAN: PromptTemplate(CreativeScanInput, generate_creative_scan_prompt),
}


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


class PromptBuilder:
    """Renders structured briefs into prompt text.

    Generation never raises: an invalid brief yields an error marker string
    that is stored as the version's generated prompt, so the user can fix
    the input and regenerate.
    """

    def __init__(self, *, templates: Optional[Mapping[PromptType, PromptTemplate]] = None) -> None:
        self._templates = dict(templates or _BUILTIN_TEMPLATES)

    def supports(self, prompt_type: PromptType | str) -> bool:
        try:
            return PromptType(prompt_type) in self._templates
        except ValueError:
            return False

    def generate(self, prompt_type: PromptType | str, input_data: Mapping[str, Any]) -> str:
        try:
            template = self._templates[PromptType(prompt_type)]
        except (KeyError, ValueError):
            return UNKNOWN_TYPE_PROMPT

        try:
            brief = template.input_model.model_validate(dict(input_data or {}))
            return template.render(brief)
        except ValidationError as exc:
            logger.debug(f"Invalid {prompt_type} brief: {exc}")
            return ERROR_PREFIX + _describe(exc)
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning(f"Failed to render {prompt_type} prompt: {exc}")
            return ERROR_PREFIX + str(exc)


_default_builder = PromptBuilder()


def generate_prompt(prompt_type: PromptType | str, input_data: Mapping[str, Any]) -> str:
    """Render ``input_data`` with the built-in template for ``prompt_type``."""
    return _default_builder.generate(prompt_type, input_data)
