"""
compiler.py — Turns a raw prompt + settings into the final backend prompt.

Pipeline (fixed order, each step works on the previous step's output):
  1. Blend     "cat | dog"       → "cat mixed with dog"
  2. Weights   "(neon:1.6)"      → "extremely emphasized neon"
  3. Style     preset phrase     → ", <phrase>"
  4. Steps     steps > 40        → quality phrase
  5. Guidance  > 12 / < 5        → adherence phrase (at most one)
  6. Negative  non-empty         → ". Exclude: <negative>"

Pure and total: no I/O, no randomness, never raises. Malformed weight
syntax is left in the text as written.
"""

from __future__ import annotations

import re
from typing import List

from .catalog import STYLE_PROMPTS
from .models import GenerationSettings

BLEND_SEPARATOR = "|"
BLEND_CONNECTIVE = " mixed with "

# (text:number): text is any run without ':'; matched left to right, non-overlapping
WEIGHT_PATTERN = re.compile(r"\(([^:]+):([\d.]+)\)")

QUALITY_PHRASE = ", hyper-detailed, intricate details, maximum quality"
STRICT_GUIDANCE_PHRASE = ", strictly follow prompt, no deviation"
CREATIVE_GUIDANCE_PHRASE = ", creative interpretation, artistic freedom"
NEGATIVE_PREFIX = ". Exclude: "

QUALITY_STEPS_THRESHOLD = 40
STRICT_GUIDANCE_THRESHOLD = 12
CREATIVE_GUIDANCE_THRESHOLD = 5


def resolve_blend(text: str) -> str:
    """Join '|'-separated segments into one "a mixed with b" clause."""
    if BLEND_SEPARATOR not in text:
        return text.strip()
    segments: List[str] = [s.strip() for s in text.split(BLEND_SEPARATOR)]
    return BLEND_CONNECTIVE.join(s for s in segments if s)


def describe_weight(text: str, weight: float) -> str:
    """Map a numeric weight onto one of the fixed emphasis phrases. Bounds are exclusive."""
    if weight > 1.5:
        return f"extremely emphasized {text}"
    if weight > 1.1:
        return f"strongly emphasized {text}"
    if weight > 1.0:
        return f"emphasized {text}"
    if weight < 0.5:
        return f"faint traces of {text}"
    if weight < 0.9:
        return f"subtle {text}"
    return text


def _replace_weight(match: "re.Match[str]") -> str:
    text, raw_weight = match.group(1), match.group(2)
    try:
        weight = float(raw_weight)
    except ValueError:
        # "1.2.3", "." and the like
        return match.group(0)
    return describe_weight(text, weight)


def resolve_weights(text: str) -> str:
    return WEIGHT_PATTERN.sub(_replace_weight, text)


def compile_prompt(settings: GenerationSettings) -> str:
    """Build the exact text sent to the backend. Aspect ratio never appears here."""
    prompt = resolve_weights(resolve_blend(settings.prompt))

    style_phrase = STYLE_PROMPTS.get(settings.style_preset, "")
    if style_phrase:
        prompt += f", {style_phrase}"

    if settings.steps > QUALITY_STEPS_THRESHOLD:
        prompt += QUALITY_PHRASE

    if settings.guidance_scale > STRICT_GUIDANCE_THRESHOLD:
        prompt += STRICT_GUIDANCE_PHRASE
    elif settings.guidance_scale < CREATIVE_GUIDANCE_THRESHOLD:
        prompt += CREATIVE_GUIDANCE_PHRASE

    if settings.negative_prompt:
        prompt += f"{NEGATIVE_PREFIX}{settings.negative_prompt}"

    return prompt
