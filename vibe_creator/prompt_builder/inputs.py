"""Structured briefs accepted by each prompt template.

Briefs arrive as free-form JSON from the prompt builder form. Each model
validates the fields its template needs; list fields default to empty so a
partially filled form still produces a prompt.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from vibe_creator.core.models.base import CamelSchema

AspectRatio = Literal["16:9", "9:16", "1:1", "4:3", "4:5"]


class ScriptInput(CamelSchema):
    niche: str
    platform: Literal["youtube", "tiktok", "instagram", "facebook"]
    duration: Literal["15s", "30s", "60s", "3min", "10min", "30min"]
    tone: str
    target_audience: str
    keywords: List[str] = Field(default_factory=list)
    content_goal: str
    call_to_action: Optional[str] = None
    additional_context: Optional[str] = None
    narrative_style: Literal["linear", "hook-problem-solution", "before-after", "story-arc", "listicle"] = "linear"
    emotional_journey: List[str] = Field(default_factory=list)
    key_message: str


class VoiceInput(CamelSchema):
    script: str
    voice_style: Literal["narrator", "conversational", "energetic", "calm", "dramatic", "friendly"]
    language: Literal["id", "en"] = "en"
    gender: Literal["male", "female", "neutral"] = "neutral"
    emotion: str
    pace: Literal["slow", "normal", "fast", "dynamic"] = "normal"
    emphasis: List[str] = Field(default_factory=list)
    pause_points: List[str] = Field(default_factory=list)


class VideoGenInput(CamelSchema):
    concept: str
    style: str
    aspect_ratio: AspectRatio = "16:9"
    duration: Literal["5s", "10s", "15s", "30s"] = "10s"
    camera: str
    lighting: str
    movement: str
    mood: str
    color_palette: List[str] = Field(default_factory=list)
    additional_details: Optional[str] = None


class ImageInput(CamelSchema):
    subject: str
    style: str
    aspect_ratio: AspectRatio = "16:9"
    purpose: Literal["thumbnail", "cover", "post", "story", "banner"]
    mood: str
    colors: List[str] = Field(default_factory=list)
    text_overlay: Optional[str] = None
    brand: Optional[str] = None
    additional_details: Optional[str] = None


class RelaxingInput(CamelSchema):
    environment: Literal["rain", "forest", "ocean", "fireplace", "cafe", "city", "space", "underwater", "custom"]
    custom_environment: Optional[str] = None
    primary_sound: str
    secondary_sounds: List[str] = Field(default_factory=list)
    ambient_details: List[str] = Field(default_factory=list)
    duration: Literal["30min", "1hour", "3hours", "8hours", "10hours"] = "1hour"
    mood: Literal["peaceful", "focus", "sleep", "meditation", "study", "relaxation"]
    intensity: Literal["subtle", "moderate", "immersive"] = "moderate"
    visual_style: Optional[str] = None
    loop_seamless: bool = True


class ExtractedFrame(CamelSchema):
    timestamp: float
    storage_key: Optional[str] = None
    description: Optional[str] = None


class CreativeScanInput(CamelSchema):
    source_url: Optional[str] = None
    source_asset_id: Optional[str] = None
    analysis_type: Literal["hook", "structure", "engagement", "full", "viral-elements"] = "full"
    niche: str
    competitor_info: Optional[str] = None
    extracted_frames: List[ExtractedFrame] = Field(default_factory=list)
    focus_areas: List[str] = Field(default_factory=list)
