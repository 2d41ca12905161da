"""Terminal rendering for tool results."""

from .formatting import (
    render_code,
    render_comparison,
    render_conversation,
    render_markdown,
    render_meal_plan,
    render_recipe,
    render_research,
    render_slogans,
    render_text_styled,
    render_trip_plan,
    render_workout_plan,
)
from .output import save_images, save_video, slugify

__all__ = [
    "render_code",
    "render_comparison",
    "render_conversation",
    "render_markdown",
    "render_meal_plan",
    "render_recipe",
    "render_research",
    "render_slogans",
    "render_text_styled",
    "render_trip_plan",
    "render_workout_plan",
    "save_images",
    "save_video",
    "slugify",
]
