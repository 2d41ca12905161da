"""Image tools: generation, stylization, concept visualization and vision."""

from typing import Literal

from pydantic import Field

from ..config import AspectRatio
from ..errors import InputValidationError, ServiceError
from ..llm import GenerativeProvider, ImagePayload
from .base import CreativeToolBase, ToolForm
from .models import ConceptVisualization



class ImageForm(ToolForm):
    prompt: str = ""
    aspect_ratio: AspectRatio = "1:1"


class ImageGenerator(CreativeToolBase[ImageForm, list[ImagePayload]]):
    name = "Image Generator"
    form_model = ImageForm
    failure_message = "Failed to generate images from Gemini API."

    def validate(self, form: ImageForm) -> None:
        if not form.prompt:
            raise InputValidationError("Please enter a prompt to generate an image.")

    async def execute(self, provider: GenerativeProvider, form: ImageForm) -> list[ImagePayload]:
        return await provider.generate_images(form.prompt, aspect_ratio=form.aspect_ratio)


# -- Stylizer ----------------------------------------------------------------

ArtStyle = Literal[
    "Impressionist Painting",
    "Cyberpunk Art",
    "Anime / Manga",
    "Vintage Film Photography",
    "Watercolor Painting",
    "Abstract Expressionism",
    "Pop Art",
    "Steampunk",
]

ART_STYLES: tuple[str, ...] = (
    "Impressionist Painting",
    "Cyberpunk Art",
    "Anime / Manga",
    "Vintage Film Photography",
    "Watercolor Painting",
    "Abstract Expressionism",
    "Pop Art",
    "Steampunk",
)

STYLIZE_ANALYSIS_PROMPT = (
    "Describe this image in vivid and extensive detail. Focus on the main subject, background "
    "elements, colors, lighting, mood, and overall composition. This description will be used "
    "to recreate the image in a different artistic style."
)


class StylizeForm(ToolForm):
    image: ImagePayload | None = None
    style: ArtStyle = "Impressionist Painting"


class ImageStylizer(CreativeToolBase[StylizeForm, ImagePayload]):
    """Redraws an uploaded image in another art style.

    The image is first described in detail, then a new square image is
    generated from that description plus the chosen style.
    """

    name = "Image Stylizer"
    form_model = StylizeForm
    failure_message = "A failure occurred during the image stylization process."

    def validate(self, form: StylizeForm) -> None:
        if form.image is None:
            raise InputValidationError("Please upload an image to stylize.")

    async def execute(self, provider: GenerativeProvider, form: StylizeForm) -> ImagePayload:
        description = await provider.analyze_image(form.image, STYLIZE_ANALYSIS_PROMPT)
        images = await provider.generate_images(f"{description}. Art style: {form.style}.", aspect_ratio="1:1")
        if not images:
            raise ServiceError("The AI failed to generate a new image based on the style.")
        return images[0]


# -- Concept visualizer ------------------------------------------------------


class ConceptForm(ToolForm):
    concept: str = ""
    stage: Literal["describe", "image"] = "describe"
    description: str = Field(default="", description="Stage one output, required for the image stage")


def build_concept_prompt(concept: str) -> str:
    return (
        "Create a highly detailed, vivid, and artistic description of the following concept. "
        "Focus on visual elements, colors, textures, lighting, and atmosphere. "
        "This description will be used as a prompt for an AI image generator. "
        f'Concept: "{concept}"'
    )


class ConceptVisualizer(CreativeToolBase[ConceptForm, ConceptVisualization]):
    """Turns an abstract concept into an image in two user-driven stages.

    Stage ``describe`` expands the concept into a rich visual description.
    Stage ``image`` renders that (possibly edited) description at 16:9.
    """

    name = "Concept Visualizer"
    form_model = ConceptForm

    def validate(self, form: ConceptForm) -> None:
        if form.stage == "describe" and not form.concept:
            raise InputValidationError("Please enter a concept to visualize.")
        if form.stage == "image" and not form.description:
            raise InputValidationError("Please generate a description first.")

    def failure_message_for(self, form: ConceptForm) -> str:
        if form.stage == "image":
            return "Failed to generate images from Gemini API."
        return "Failed to generate text from Gemini API."

    async def execute(self, provider: GenerativeProvider, form: ConceptForm) -> ConceptVisualization:
        if form.stage == "describe":
            description = await provider.complete_text(build_concept_prompt(form.concept))
            return ConceptVisualization(description=description)

        images = await provider.generate_images(form.description, aspect_ratio="16:9")
        return ConceptVisualization(description=form.description, image=images[0] if images else None)


# -- Visual analyst ----------------------------------------------------------

DEFAULT_ANALYSIS_PROMPT = "Describe this image in detail."


class AnalyzeImageForm(ToolForm):
    image: ImagePayload | None = None
    prompt: str = ""


class VisualAnalyst(CreativeToolBase[AnalyzeImageForm, str]):
    name = "Visual Analyst"
    form_model = AnalyzeImageForm
    failure_message = "Failed to analyze image with Gemini API."

    def validate(self, form: AnalyzeImageForm) -> None:
        if form.image is None:
            raise InputValidationError("Please upload an image to analyze.")

    async def execute(self, provider: GenerativeProvider, form: AnalyzeImageForm) -> str:
        return await provider.analyze_image(form.image, form.prompt or DEFAULT_ANALYSIS_PROMPT)
