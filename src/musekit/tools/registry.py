"""Tool registry: maps every creative tool name to its implementation."""

from enum import Enum
from typing import Any

from .base import CreativeToolBase
from .chat import ChatPersona
from .structured import MealPlanner, RecipeGenerator, TripPlanner, WorkoutPlanner
from .text import (
    CodeAssistant,
    DocumentAnalyst,
    EmailWriter,
    ResearchAssistant,
    SloganGenerator,
    SocialMediaPostGenerator,
    StoryWriter,
)
from .video import VideoGenerator
from .visual import ConceptVisualizer, ImageGenerator, ImageStylizer, VisualAnalyst


class CreativeTool(str, Enum):
    STORY_WRITER = "Story Writer"
    IMAGE_GENERATOR = "Image Generator"
    IMAGE_STYLIZER = "Image Stylizer"
    CONCEPT_VISUALIZER = "Concept Visualizer"
    SLOGAN_GENERATOR = "Slogan Generator"
    RESEARCH_ASSISTANT = "Research Assistant"
    VIDEO_GENERATOR = "Video Generator"
    CHAT_PERSONA = "Chat Persona"
    RECIPE_GENERATOR = "Recipe Generator"
    EMAIL_WRITER = "Email Writer"
    WORKOUT_PLANNER = "Workout Planner"
    MEAL_PLANNER = "Meal Planner"
    SOCIAL_MEDIA_POST_GENERATOR = "Social Media Post Generator"
    VISUAL_ANALYST = "Visual Analyst"
    CODE_ASSISTANT = "Code Assistant"
    DOCUMENT_ANALYST = "Document Analyst"
    TRIP_PLANNER = "Trip Planner"
    MODEL_COMPARISON_HUB = "Model Hub"
    PROMPT_LIBRARY = "Prompt Library"


# The hub and the prompt library are not form tools; see
# ``musekit.streaming.ComparisonHub`` and ``musekit.library.PromptLibrary``.
TOOL_CLASSES: dict[CreativeTool, type[CreativeToolBase[Any, Any]]] = {
    CreativeTool.STORY_WRITER: StoryWriter,
    CreativeTool.IMAGE_GENERATOR: ImageGenerator,
    CreativeTool.IMAGE_STYLIZER: ImageStylizer,
    CreativeTool.CONCEPT_VISUALIZER: ConceptVisualizer,
    CreativeTool.SLOGAN_GENERATOR: SloganGenerator,
    CreativeTool.RESEARCH_ASSISTANT: ResearchAssistant,
    CreativeTool.VIDEO_GENERATOR: VideoGenerator,
    CreativeTool.CHAT_PERSONA: ChatPersona,
    CreativeTool.RECIPE_GENERATOR: RecipeGenerator,
    CreativeTool.EMAIL_WRITER: EmailWriter,
    CreativeTool.WORKOUT_PLANNER: WorkoutPlanner,
    CreativeTool.MEAL_PLANNER: MealPlanner,
    CreativeTool.SOCIAL_MEDIA_POST_GENERATOR: SocialMediaPostGenerator,
    CreativeTool.VISUAL_ANALYST: VisualAnalyst,
    CreativeTool.CODE_ASSISTANT: CodeAssistant,
    CreativeTool.DOCUMENT_ANALYST: DocumentAnalyst,
    CreativeTool.TRIP_PLANNER: TripPlanner,
}


def create_tool(tool: CreativeTool | str, **kwargs: Any) -> CreativeToolBase[Any, Any]:
    """Factory function to create a tool instance.

    Args:
        tool: Tool enum member or its display name (e.g. "Recipe Generator")
        **kwargs: Constructor arguments (e.g. ``on_fragment`` for streaming tools)

    Returns:
        Tool instance

    Raises:
        ValueError: If the name is unknown or does not refer to a form tool
    """
    try:
        key = CreativeTool(tool)
    except ValueError:
        raise ValueError(f"Unknown tool: {tool}") from None

    tool_class = TOOL_CLASSES.get(key)
    if tool_class is None:
        raise ValueError(f"{key.value} is not a form-based tool")
    return tool_class(**kwargs)
