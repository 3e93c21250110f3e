"""Prompt text templates, one per prompt type."""

from __future__ import annotations

from typing import Iterable

from .inputs import (
    CreativeScanInput,
    ImageInput,
    RelaxingInput,
    ScriptInput,
    VideoGenInput,
    VoiceInput,
)

_PLATFORM_GUIDE = {
    "youtube": "YouTube (watch time, depth and retention across the whole video)",
    "tiktok": "TikTok (a hook inside the first 3 seconds, fast pacing, trend-aware audio)",
    "instagram": "Instagram Reels (strong visuals, relatable and easy to share)",
    "facebook": "Facebook (community driven, sparks discussion and shares)",
}

_NARRATIVE_GUIDE = {
    "linear": "A linear story from start to finish with a clear climax",
    "hook-problem-solution": "Hook -> Problem -> Agitate -> Solution -> CTA",
    "before-after": "A sharp contrast between the situation before and after",
    "story-arc": "Setup -> Rising action -> Climax -> Resolution",
    "listicle": "A numbered list with punchy transitions between points",
}

_DURATION_GUIDE = {
    "15s": "15 seconds (micro content, one core message)",
    "30s": "30 seconds (short form, one or two key points)",
    "60s": "1 minute (short form with detail, two or three points)",
    "3min": "3 minutes (mid form, a complete story)",
    "10min": "10 minutes (long form, educational depth)",
    "30min": "30 minutes (deep dive, comprehensive)",
}

_VOICE_STYLE_GUIDE = {
    "narrator": "professional and authoritative, like a documentary narrator",
    "conversational": "relaxed and friendly, like talking to a friend",
    "energetic": "upbeat and enthusiastic",
    "calm": "calm and soothing",
    "dramatic": "dramatic with strong shifts in intonation",
    "friendly": "warm and approachable",
}

_PACE_GUIDE = {
    "slow": "slow and deliberate for emphasis",
    "normal": "natural and conversational",
    "fast": "quick and energetic",
    "dynamic": "varied: faster on exciting parts, slower on key points",
}

_PURPOSE_GUIDE = {
    "thumbnail": "a clickable, attention-grabbing YouTube thumbnail",
    "cover": "a professional cover image",
    "post": "a social media feed post",
    "story": "an Instagram or Facebook story",
    "banner": "a banner or header image",
}

_MOOD_GUIDE = {
    "peaceful": "peaceful and quiet for general relaxation",
    "focus": "supports concentration and productivity",
    "sleep": "soothing enough to fall asleep to",
    "meditation": "meditative and introspective",
    "study": "unobtrusive background for studying",
    "relaxation": "easy-going, for relieving stress",
}

_INTENSITY_GUIDE = {
    "subtle": "very soft, barely noticeable",
    "moderate": "present but never dominant",
    "immersive": "immersive and enveloping",
}

_ANALYSIS_GUIDE = {
    "hook": "focus on the hook and attention-grabbing elements",
    "structure": "focus on structure and pacing",
    "engagement": "focus on what drives likes, comments and shares",
    "full": "a comprehensive analysis of every aspect",
    "viral-elements": "identify the elements that made the content go viral",
}


def _numbered(items: Iterable[str], quote: bool = False) -> str:
    lines = [f'{i}. "{item}"' if quote else f"{i}. {item}" for i, item in enumerate(items, start=1)]
    return "\n".join(lines) if lines else "-"


def _section(title: str, body: str | None) -> str:
    return f"## {title}\n{body}\n\n" if body else ""


def generate_script_prompt(brief: ScriptInput) -> str:
    return (
        f"You are a professional script writer for {_PLATFORM_GUIDE[brief.platform]}.\n\n"
        "## PROJECT BRIEF\n"
        f"- **Niche**: {brief.niche}\n"
        f"- **Target length**: {_DURATION_GUIDE[brief.duration]}\n"
        f"- **Tone**: {brief.tone}\n"
        f"- **Target audience**: {brief.target_audience}\n"
        f"- **Content goal**: {brief.content_goal}\n"
        f"- **Keywords**: {', '.join(brief.keywords) or '-'}\n"
        f"- **Key message**: {brief.key_message}\n\n"
        "## NARRATIVE STRUCTURE\n"
        f"Use this structure: **{_NARRATIVE_GUIDE[brief.narrative_style]}**\n\n"
        "## EMOTIONAL JOURNEY\n"
        "Take the audience through these emotions:\n"
        f"{_numbered(brief.emotional_journey)}\n\n"
        "## INSTRUCTIONS\n\n"
        "### Hook (0-3 seconds)\n"
        "- Open with a scroll-stopping line\n"
        "- Use a pattern interrupt or a provocative question\n"
        "- Keep it relevant to the target audience\n\n"
        "### Body\n"
        f'- Tell an engaging, relatable story in a "{brief.tone}" tone\n'
        "- Add micro-hooks to hold attention\n"
        "- Deliver concrete, actionable value\n\n"
        "### Closing\n"
        "- Land the key message in a memorable way\n"
        f"- Call to action: {brief.call_to_action or 'match it to the content goal'}\n\n"
        f"{_section('ADDITIONAL CONTEXT', brief.additional_context)}"
        "## EXPECTED OUTPUT\n\n"
        "Write the full script with:\n"
        "1. Timestamps for each segment\n"
        "2. Spoken lines and on-screen text\n"
        "3. B-roll and visual suggestions\n"
        f"4. Realistic timing for {brief.duration}\n"
        "5. Language that fits the platform and audience"
    )


def generate_voice_prompt(brief: VoiceInput) -> str:
    language = "Indonesian" if brief.language == "id" else "English"
    return (
        "You are a professional voice director. Write voice-over guidance for a text-to-speech AI.\n\n"
        "## SCRIPT TO READ\n"
        f"```\n{brief.script}\n```\n\n"
        "## VOICE CHARACTER\n"
        f"- **Style**: {_VOICE_STYLE_GUIDE[brief.voice_style]}\n"
        f"- **Language**: {language}\n"
        f"- **Gender**: {brief.gender}\n"
        f"- **Dominant emotion**: {brief.emotion}\n"
        f"- **Pace**: {_PACE_GUIDE[brief.pace]}\n\n"
        "## EMPHASIS\n"
        "Stress these words or phrases:\n"
        f"{_numbered(brief.emphasis, quote=True)}\n\n"
        "## PAUSES\n"
        "Hold a longer pause after:\n"
        f"{_numbered(brief.pause_points, quote=True)}\n\n"
        "## EXPECTED OUTPUT\n\n"
        "Produce a prompt for a TTS platform (ElevenLabs, PlayHT) containing:\n\n"
        "1. **Voice configuration**: voice type, stability, similarity boost and style exaggeration (0-1)\n"
        '2. **Marked-up script**: SSML or platform markup, pauses as <break time="Xs"/>, '
        "emphasis as <emphasis>text</emphasis>\n"
        "3. **Segment breakdown**: split long scripts and add a delivery note per segment"
    )


def generate_video_gen_prompt(brief: VideoGenInput) -> str:
    return (
        "You are a prompt engineer for AI video generation (Veo, Runway, Pika).\n\n"
        "## VIDEO CONCEPT\n"
        f"{brief.concept}\n\n"
        "## TECHNICAL SPECIFICATION\n"
        f"- **Style**: {brief.style}\n"
        f"- **Aspect ratio**: {brief.aspect_ratio}\n"
        f"- **Duration**: {brief.duration}\n"
        f"- **Camera**: {brief.camera}\n"
        f"- **Lighting**: {brief.lighting}\n"
        f"- **Movement**: {brief.movement}\n"
        f"- **Mood**: {brief.mood}\n"
        f"- **Color palette**: {', '.join(brief.color_palette) or '-'}\n\n"
        f"{_section('ADDITIONAL DETAILS', brief.additional_details)}"
        "## EXPECTED OUTPUT\n\n"
        "Write an optimised prompt for each platform:\n\n"
        "### 1. Veo\n### 2. Runway Gen-3\n### 3. Pika\n\n"
        "For every prompt include a detailed main prompt, a negative prompt and recommended settings.\n"
        "Be specific and unambiguous, and cover every important visual aspect."
    )


def generate_image_prompt(brief: ImageInput) -> str:
    details = [
        f"- **Subject**: {brief.subject}",
        f"- **Style**: {brief.style}",
        f"- **Aspect ratio**: {brief.aspect_ratio}",
        f"- **Mood**: {brief.mood}",
        f"- **Dominant colors**: {', '.join(brief.colors) or '-'}",
    ]
    if brief.text_overlay:
        details.append(f'- **Text overlay**: "{brief.text_overlay}"')
    if brief.brand:
        details.append(f"- **Brand**: {brief.brand}")
    return (
        "You are a prompt engineer for AI image generation (DALL-E, Midjourney, Ideogram).\n\n"
        "## PURPOSE\n"
        f"{_PURPOSE_GUIDE[brief.purpose]}\n\n"
        "## SPECIFICATION\n" + "\n".join(details) + "\n\n"
        f"{_section('ADDITIONAL DETAILS', brief.additional_details)}"
        "## EXPECTED OUTPUT\n\n"
        "### 1. DALL-E 3\n[Detailed natural language prompt]\n\n"
        "### 2. Midjourney\n[With --ar, --style and --v parameters]\n\n"
        "### 3. Ideogram\n[Optimised for text rendering when there is a text overlay]\n\n"
        "For thumbnails make sure of expressive faces, high contrast, a composition that reads at "
        "small sizes and room for text."
    )


def generate_relaxing_prompt(brief: RelaxingInput) -> str:
    environment = brief.custom_environment if brief.environment == "custom" else brief.environment
    return (
        "You are a sound designer for relaxing and ambient content.\n\n"
        "## ENVIRONMENT\n"
        f"{environment or 'custom'}\n\n"
        "## AUDIO DESIGN\n"
        f"- **Primary sound**: {brief.primary_sound}\n"
        f"- **Secondary sounds**: {', '.join(brief.secondary_sounds) or '-'}\n"
        f"- **Ambient details**: {', '.join(brief.ambient_details) or '-'}\n"
        f"- **Intensity**: {_INTENSITY_GUIDE[brief.intensity]}\n"
        f"- **Target mood**: {_MOOD_GUIDE[brief.mood]}\n"
        f"- **Duration**: {brief.duration}\n"
        f"- **Seamless loop**: {'Yes' if brief.loop_seamless else 'No'}\n\n"
        f"{_section('VISUAL STYLE', brief.visual_style)}"
        "## EXPECTED OUTPUT\n\n"
        "### 1. Audio prompt for AI music generation (Suno, Udio)\n"
        "Soundscape description, sound elements, tempo and how the piece evolves over time.\n\n"
        "### 2. Visual prompt for the background video\n"
        "Scene description, subtle slow movement and color grading.\n\n"
        "### 3. Looping strategy\n"
        f"How to build a seamless {brief.duration} loop: fade points, transitions and variation "
        "patterns that avoid monotony."
    )


def generate_creative_scan_prompt(brief: CreativeScanInput) -> str:
    source = f"URL: {brief.source_url}" if brief.source_url else "Uploaded video"
    return (
        "You are a professional content strategist and video analyst.\n\n"
        f"## VIDEO UNDER ANALYSIS\n{source}\n\n"
        f"## NICHE\n{brief.niche}\n\n"
        f"## ANALYSIS TYPE\n{_ANALYSIS_GUIDE[brief.analysis_type]}\n\n"
        f"## FOCUS AREAS\n{_numbered(brief.focus_areas)}\n\n"
        f"{_section('COMPETITOR INFO', brief.competitor_info)}"
        "## EXTRACTED KEY FRAMES\n"
        f"{len(brief.extracted_frames)} frames were extracted from the video.\n\n"
        "## ANALYSIS INSTRUCTIONS\n\n"
        "### 1. Hook analysis (0-3 seconds)\n"
        "### 2. Structure breakdown: pacing, rhythm and transitions\n"
        "### 3. Engagement elements: retention drivers and CTA placement\n"
        "### 4. Visual and audio analysis: style, music and text overlays\n"
        "### 5. Actionable insights: what to adopt, what to improve, a unique angle\n"
        "### 6. Content ideas: 3 to 5 ideas inspired by, but not copying, this video"
    )
