"""Prompt 构建 -- 将主题扩展为涂色页生成 prompt"""

import random
import re

from .catalog import CATEGORY_TOPICS
from .models import Difficulty

CATEGORY_MODIFIERS: dict[str, str] = {
    "animals": "cute friendly animal, simple rounded shapes, expressive eyes",
    "vehicles": "fun chunky vehicle, simple mechanical details, cartoon style",
    "fantasy": "magical whimsical creature, fantasy details, enchanting",
    "nature": "simple nature illustration, clean botanical style, peaceful",
    "space": "space themed illustration, stars and cosmic elements, fun sci-fi",
    "food": "cute kawaii food character, simple and fun, smiling face",
    "holidays": "festive celebratory illustration, holiday themed, family friendly",
    "characters": "character illustration, expressive, simple costume and props",
}

DIFFICULTY_MODIFIERS: dict[Difficulty, str] = {
    Difficulty.SIMPLE: "very simple design, big bold shapes, minimal details",
    Difficulty.MEDIUM: "moderate detail, clear distinct areas to color",
    Difficulty.DETAILED: "rich detailed design, intricate patterns, many small areas",
}

_BASE_STYLE = (
    "thick simple outlines, no shading, no gray fills, no color, "
    "pure white background, cartoon style, child friendly, "
    "printable coloring book style, clean line art, no text, no watermark, "
    "high contrast black lines on white"
)


def enhance_prompt(
    topic: str,
    category: str | None = None,
    difficulty: Difficulty | None = None,
    age_range: str | None = None,
) -> str:
    """生成单行涂色页 prompt

    未知分类不追加修饰语。
    """
    parts = ["black and white kids coloring page", topic]
    if category and (modifier := CATEGORY_MODIFIERS.get(category)):
        parts.append(modifier)
    if difficulty is not None:
        parts.append(DIFFICULTY_MODIFIERS[difficulty])
    if age_range:
        parts.append(f"suitable for children aged {age_range}")
    parts.append(_BASE_STYLE)
    return re.sub(r"\s+", " ", ", ".join(parts)).strip()


def random_topic(category: str | None = None, rng: random.Random | None = None) -> str:
    """随机挑选一个主题；分类未知时从全部分类中挑选"""
    chooser = rng or random
    if category and category in CATEGORY_TOPICS:
        return chooser.choice(CATEGORY_TOPICS[category])
    all_topics = [t for topics in CATEGORY_TOPICS.values() for t in topics]
    return chooser.choice(all_topics)


def birthday_prompt(topic: str, age: int | None = None) -> str:
    """生日主题涂色页 prompt"""
    parts = [
        "black and white kids coloring page",
        topic,
        "birthday themed illustration, festive birthday decorations, "
        "balloons and stars in background",
    ]
    if age:
        parts.append(f"suitable for a {age} year old")
    parts.append("fun and celebratory mood")
    parts.append(_BASE_STYLE)
    return re.sub(r"\s+", " ", ", ".join(parts)).strip()
