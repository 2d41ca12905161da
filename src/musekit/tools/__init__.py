from .base import CreativeToolBase, ToolForm, ToolSession, ToolState, ToolStatus, describe_error
from .chat import PERSONAS, ChatForm, ChatPersona
from .models import (
    ConceptVisualization,
    MealPlan,
    Recipe,
    ResearchResult,
    TripPlan,
    WorkoutPlan,
)
from .registry import TOOL_CLASSES, CreativeTool, create_tool
from .structured import (
    MealForm,
    MealPlanner,
    RecipeForm,
    RecipeGenerator,
    TripForm,
    TripPlanner,
    WorkoutForm,
    WorkoutPlanner,
)
from .text import (
    CodeAssistant,
    CodeForm,
    DocumentAnalyst,
    DocumentForm,
    EmailForm,
    EmailWriter,
    ResearchAssistant,
    ResearchForm,
    SloganForm,
    SloganGenerator,
    SocialMediaPostGenerator,
    SocialPostForm,
    StoryForm,
    StoryWriter,
)
from .video import VideoForm, VideoGenerator, progress_message
from .visual import (
    AnalyzeImageForm,
    ConceptForm,
    ConceptVisualizer,
    ImageForm,
    ImageGenerator,
    ImageStylizer,
    StylizeForm,
    VisualAnalyst,
)

__all__ = [
    "CreativeToolBase",
    "ToolForm",
    "ToolSession",
    "ToolState",
    "ToolStatus",
    "describe_error",
    "CreativeTool",
    "TOOL_CLASSES",
    "create_tool",
    "PERSONAS",
    "ChatForm",
    "ChatPersona",
    "ConceptVisualization",
    "MealPlan",
    "Recipe",
    "ResearchResult",
    "TripPlan",
    "WorkoutPlan",
    "MealForm",
    "MealPlanner",
    "RecipeForm",
    "RecipeGenerator",
    "TripForm",
    "TripPlanner",
    "WorkoutForm",
    "WorkoutPlanner",
    "CodeAssistant",
    "CodeForm",
    "DocumentAnalyst",
    "DocumentForm",
    "EmailForm",
    "EmailWriter",
    "ResearchAssistant",
    "ResearchForm",
    "SloganForm",
    "SloganGenerator",
    "SocialMediaPostGenerator",
    "SocialPostForm",
    "StoryForm",
    "StoryWriter",
    "VideoForm",
    "VideoGenerator",
    "progress_message",
    "AnalyzeImageForm",
    "ConceptForm",
    "ConceptVisualizer",
    "ImageForm",
    "ImageGenerator",
    "ImageStylizer",
    "StylizeForm",
    "VisualAnalyst",
]
