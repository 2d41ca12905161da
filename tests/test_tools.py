"""Unit tests for the creative tools and the tool session."""
import asyncio
import json

import pytest

from musekit.errors import InputValidationError, InvalidFormatError, JobFailedError, ServiceError
from musekit.jobs import JobState
from musekit.llm import VideoJob
from musekit.prompts import get_system_instruction
from musekit.tools import (
    PERSONAS,
    AnalyzeImageForm,
    ChatForm,
    ChatPersona,
    CodeAssistant,
    CodeForm,
    ConceptForm,
    ConceptVisualizer,
    CreativeTool,
    DocumentAnalyst,
    DocumentForm,
    EmailForm,
    EmailWriter,
    ImageForm,
    ImageGenerator,
    ImageStylizer,
    MealForm,
    MealPlanner,
    Recipe,
    RecipeForm,
    RecipeGenerator,
    ResearchAssistant,
    ResearchForm,
    SloganForm,
    SloganGenerator,
    SocialMediaPostGenerator,
    SocialPostForm,
    StoryForm,
    StoryWriter,
    StylizeForm,
    ToolSession,
    ToolStatus,
    TripForm,
    TripPlanner,
    VideoForm,
    VideoGenerator,
    VisualAnalyst,
    WorkoutForm,
    WorkoutPlanner,
    create_tool,
)
from musekit.tools.base import describe_error
from musekit.tools.text import build_document_prompt, parse_slogans
from musekit.tools.video import progress_message

RECIPE_JSON = json.dumps({
    "recipeName": "Vegan Lasagna",
    "description": "Layers of comfort.",
    "prepTime": "20 minutes",
    "cookTime": "45 minutes",
    "totalTime": "65 minutes",
    "servings": "6 servings",
    "ingredients": ["12 lasagna sheets", "500g spinach"],
    "instructions": ["Preheat the oven.", "Layer and bake."],
})


class TestValidation:
    """Tests that blank input never reaches the service."""

    @pytest.mark.parametrize(
        ("tool", "form", "message"),
        [
            (StoryWriter(), StoryForm(prompt="  "), "Please enter a prompt for your story."),
            (SloganGenerator(), SloganForm(product_name="Fizz"), "Please provide both a product name and description."),
            (ResearchAssistant(), ResearchForm(), "Please enter a research query."),
            (EmailWriter(), EmailForm(purpose="Custom", recipient_info="Bob"), "Please provide the purpose and recipient information."),
            (SocialMediaPostGenerator(), SocialPostForm(), "Please provide a topic for the social media post."),
            (CodeAssistant(), CodeForm(mode="generate"), "Please provide a description of the code you want to generate."),
            (CodeAssistant(), CodeForm(mode="debug", code="x = 1"), "Please provide both the code and a description of the error."),
            (DocumentAnalyst(), DocumentForm(), "Please provide some text to analyze."),
            (DocumentAnalyst(), DocumentForm(document="text", mode="qa"), "Please enter a question to ask about the document."),
            (ImageGenerator(), ImageForm(), "Please enter a prompt to generate an image."),
            (ImageStylizer(), StylizeForm(), "Please upload an image to stylize."),
            (ConceptVisualizer(), ConceptForm(), "Please enter a concept to visualize."),
            (ConceptVisualizer(), ConceptForm(stage="image"), "Please generate a description first."),
            (VisualAnalyst(), AnalyzeImageForm(prompt="what is this?"), "Please upload an image to analyze."),
            (RecipeGenerator(), RecipeForm(), "Please enter what you'd like to cook."),
            (TripPlanner(), TripForm(destination="Lisbon"), "Please provide a destination and your interests."),
            (VideoGenerator(), VideoForm(), "Please enter a prompt for your video."),
            (ChatPersona(), ChatForm(message=""), "Please enter a message to send."),
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_form_makes_no_call(self, provider, tool, form, message):
        """Test that validation errors are reported without a service call."""
        state = await ToolSession(tool, provider).submit(form)

        assert state.status is ToolStatus.ERROR
        assert state.error == message
        assert provider.calls == []

    def test_numeric_bounds_enforced_by_form(self):
        """Test that out-of-range numbers are rejected by the form model."""
        with pytest.raises(ValueError):
            WorkoutForm(days_per_week=8)
        with pytest.raises(ValueError):
            MealForm(calories=1100)
        with pytest.raises(ValueError):
            MealForm(calories=2050)
        with pytest.raises(ValueError):
            TripForm(destination="Rome", interests="food", duration=15)


class TestToolSession:
    """Tests for request lifecycle and error mapping."""

    @pytest.mark.asyncio
    async def test_success_stores_result(self, provider):
        """Test that a successful request ends DONE with the result."""
        session = ToolSession(SocialMediaPostGenerator(), provider)
        state = await session.submit(SocialPostForm(topic="launch day"))

        assert state.status is ToolStatus.DONE
        assert state.result == "A generated answer."
        assert state.error is None
        assert session.state is state

    @pytest.mark.asyncio
    async def test_service_error_uses_tool_message(self, provider):
        """Test that a service failure shows the tool's failure message."""
        provider.failures["complete_text"] = ServiceError("401 unauthorized")
        state = await ToolSession(EmailWriter(), provider).submit(EmailForm(recipient_info="Team"))

        assert state.status is ToolStatus.ERROR
        assert state.error == "Failed to generate email from Gemini API."
        assert state.result is None

    @pytest.mark.asyncio
    async def test_invalid_format_appends_hint(self, provider):
        """Test that a schema mismatch adds the invalid-format hint."""
        provider.structured_json = '{"recipeName": "Half a recipe"}'
        state = await ToolSession(RecipeGenerator(), provider).submit(RecipeForm(request="soup"))

        assert state.status is ToolStatus.ERROR
        assert state.error == (
            "Failed to generate recipe from Gemini API. The model may have returned an invalid format."
        )

    @pytest.mark.asyncio
    async def test_error_clears_previous_result(self, provider):
        """Test that a new request never shows the previous result."""
        session = ToolSession(SocialMediaPostGenerator(), provider)
        await session.submit(SocialPostForm(topic="first"))

        provider.failures["complete_text"] = ServiceError("boom")
        state = await session.submit(SocialPostForm(topic="second"))

        assert state.result is None
        assert state.status is ToolStatus.ERROR

    @pytest.mark.asyncio
    async def test_submit_while_loading_is_ignored(self, provider):
        """Test that a second submit during a request does nothing."""
        provider.default_stream = ["a", "b", "c"]
        session = ToolSession(StoryWriter(), provider)

        first = asyncio.create_task(session.submit(StoryForm(prompt="dragons")))
        await asyncio.sleep(0)
        assert session.state.is_loading

        ignored = await session.submit(StoryForm(prompt="knights"))
        assert ignored.is_loading
        final = await first

        assert final.result == "abc"
        assert len(provider.calls_to("complete_text_stream")) == 1

    @pytest.mark.asyncio
    async def test_reset_returns_to_idle(self, provider):
        """Test that reset clears a finished request."""
        session = ToolSession(SocialMediaPostGenerator(), provider)
        await session.submit(SocialPostForm(topic="x"))
        assert session.reset().status is ToolStatus.IDLE

    def test_describe_error_mapping(self):
        """Test the message chosen for each error kind."""
        failure = "Failed to do it."
        assert describe_error(failure, InputValidationError("Fill it in.")) == "Fill it in."
        assert describe_error(failure, ServiceError("HTTP 500")) == failure
        assert describe_error(failure, InvalidFormatError("bad json")).endswith("invalid format.")
        assert describe_error(failure, JobFailedError("Video generation failed: quota")) == (
            "Video generation failed: quota"
        )


class TestTextTools:
    """Tests for prompt building in the text tools."""

    @pytest.mark.asyncio
    async def test_story_streams_fragments(self, provider):
        """Test that the story accumulates every fragment."""
        seen = []
        tool = StoryWriter(on_fragment=lambda fragment, message: seen.append(message.text))

        state = await ToolSession(tool, provider).submit(StoryForm(prompt="a lighthouse"))

        assert state.result == "Once upon a time."
        assert seen == ["Once", "Once upon", "Once upon a time."]
        call = provider.calls_to("complete_text_stream")[0]
        assert call["prompt"] == "a lighthouse"
        assert call["system_instruction"] == get_system_instruction("story_writer")

    @pytest.mark.asyncio
    async def test_story_failure_mid_stream(self, provider):
        """Test that a broken stream reports the story failure message."""
        provider.default_stream = ["Once", ServiceError("connection reset")]
        state = await ToolSession(StoryWriter(), provider).submit(StoryForm(prompt="x"))

        assert state.status is ToolStatus.ERROR
        assert state.error == "Failed to generate story stream from Gemini API."

    def test_parse_slogans(self):
        """Test that blank lines and list dashes are dropped."""
        text = "- Fizz up your day\n\n  - Taste the spark  \nPure bubbles\n- \n"
        assert parse_slogans(text) == ["Fizz up your day", "Taste the spark", "Pure bubbles"]

    @pytest.mark.asyncio
    async def test_slogan_prompt(self, provider):
        """Test the slogan request wording and result parsing."""
        provider.text = "One\nTwo\n- Three"
        state = await ToolSession(SloganGenerator(), provider).submit(
            SloganForm(product_name="Fizz", description="sparkling water")
        )

        assert state.result == ["One", "Two", "Three"]
        prompt = provider.calls_to("complete_text")[0]["prompt"]
        assert 'named "Fizz"' in prompt
        assert '"sparkling water"' in prompt

    @pytest.mark.asyncio
    async def test_email_custom_purpose_and_temperature(self, provider):
        """Test that a custom purpose replaces the preset and temperature is 0.7."""
        form = EmailForm(purpose="Custom", custom_purpose="Ask for a raise", recipient_info="My manager", tone="Direct")
        await ToolSession(EmailWriter(), provider).submit(form)

        call = provider.calls_to("complete_text")[0]
        assert "- **Purpose:** Ask for a raise" in call["prompt"]
        assert "- **Tone:** Direct" in call["prompt"]
        assert call["prompt"].endswith('starting with "Subject: [Your Subject]".')
        assert call["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_social_post_prompt(self, provider):
        """Test the social post wording."""
        await ToolSession(SocialMediaPostGenerator(), provider).submit(
            SocialPostForm(topic="our new app", platform="LinkedIn", tone="Witty")
        )
        call = provider.calls_to("complete_text")[0]
        assert call["prompt"].startswith('Create a social media post for LinkedIn about "our new app".')
        assert "The tone of the post should be Witty." in call["prompt"]
        assert call["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_code_generate_mode(self, provider):
        """Test code generation settings."""
        state = await ToolSession(CodeAssistant(), provider).submit(
            CodeForm(language="Go", description="reverse a string")
        )

        call = provider.calls_to("complete_text")[0]
        assert call["prompt"] == "Generate a code snippet in Go for the following task: reverse a string"
        assert call["temperature"] == 0.2
        assert call["system_instruction"] == get_system_instruction("code_generator", language="Go")
        assert state.result.mode == "generate"
        assert state.result.language == "Go"

    @pytest.mark.asyncio
    async def test_code_debug_mode(self, provider):
        """Test that debug mode fences the code and uses a lower temperature."""
        await ToolSession(CodeAssistant(), provider).submit(
            CodeForm(mode="debug", language="Python", code="print(x)", error_description="NameError")
        )

        call = provider.calls_to("complete_text")[0]
        assert "```python\nprint(x)\n```" in call["prompt"]
        assert call["prompt"].endswith("Error/Problem Description: NameError")
        assert call["temperature"] == 0.1
        assert call["system_instruction"] == get_system_instruction("code_debugger")

    @pytest.mark.asyncio
    async def test_code_failure_message_depends_on_mode(self, provider):
        """Test the per-mode failure messages."""
        provider.failures["complete_text"] = ServiceError("down")
        session = ToolSession(CodeAssistant(), provider)

        generate = await session.submit(CodeForm(description="sort a list"))
        debug = await session.submit(CodeForm(mode="debug", code="x", error_description="y"))

        assert generate.error == "Failed to generate code from Gemini API."
        assert debug.error == "Failed to debug code with Gemini API."

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            ("summarize", "concise summary"),
            ("extract", "bulleted list"),
            ("qa", 'Question: "Why?"'),
        ],
    )
    def test_document_prompt_modes(self, mode, expected):
        """Test that each analysis mode builds its own prompt."""
        prompt = build_document_prompt(DocumentForm(document="Body text.", mode=mode, question="Why?"))
        assert expected in prompt
        assert "Body text." in prompt

    @pytest.mark.asyncio
    async def test_research_returns_sources(self, provider):
        """Test that research passes the query through."""
        state = await ToolSession(ResearchAssistant(), provider).submit(ResearchForm(query="tides"))
        assert state.result.text == "Grounded answer."
        assert provider.calls_to("research") == [{"query": "tides"}]


class TestChatPersona:
    """Tests for the persona chat conversation."""

    @pytest.mark.asyncio
    async def test_history_excludes_new_message(self, provider):
        """Test that prior turns go as history and the new message is sent alone."""
        tool = ChatPersona()
        session = ToolSession(tool, provider)

        await session.submit(ChatForm(message="Hi"))
        await session.submit(ChatForm(message="And then?"))

        first, second = provider.calls_to("complete_text_stream")
        assert first["history"] == []
        assert [m.text for m in second["history"]] == ["Hi", "Once upon a time."]
        assert second["prompt"] == "And then?"
        assert second["system_instruction"] == PERSONAS["Helpful Assistant"]
        assert len(tool.messages) == 4

    @pytest.mark.asyncio
    async def test_switching_persona_resets_history(self, provider):
        """Test that a different persona starts a new conversation."""
        tool = ChatPersona()
        session = ToolSession(tool, provider)
        await session.submit(ChatForm(message="Hello"))

        state = await session.submit(ChatForm(message="Ahoy", persona="Pirate Captain"))

        assert tool.persona == "Pirate Captain"
        assert [m.text for m in state.result] == ["Ahoy", "Once upon a time."]
        assert provider.calls_to("complete_text_stream")[-1]["history"] == []

    def test_switch_to_same_persona_clears(self):
        """Test that re-selecting the persona still clears the history."""
        tool = ChatPersona()
        tool._conversation.add_user_turn("old")
        tool.switch_persona("Helpful Assistant")
        assert tool.messages == []

    @pytest.mark.asyncio
    async def test_failed_reply_keeps_user_message(self, provider):
        """Test that a failed stream removes only the model reply."""
        provider.streams[PERSONAS["Sarcastic Robot"]] = ["Oh ", ServiceError("dropped")]
        tool = ChatPersona(persona="Sarcastic Robot")

        state = await ToolSession(tool, provider).submit(ChatForm(message="Hi", persona="Sarcastic Robot"))

        assert state.error == "Failed to generate stream from Gemini API."
        assert [(m.role, m.text) for m in tool.messages] == [("user", "Hi")]


class TestVisualTools:
    """Tests for the image tools."""

    @pytest.mark.asyncio
    async def test_image_generator_aspect_ratio(self, provider):
        """Test that the chosen aspect ratio is requested."""
        state = await ToolSession(ImageGenerator(), provider).submit(ImageForm(prompt="a fox", aspect_ratio="9:16"))
        assert len(state.result) == 1
        assert provider.calls_to("generate_images")[0]["aspect_ratio"] == "9:16"

    @pytest.mark.asyncio
    async def test_stylizer_describes_then_generates(self, provider, image_payload):
        """Test the two-step stylization."""
        provider.text = "A red barn at dusk"
        state = await ToolSession(ImageStylizer(), provider).submit(StylizeForm(image=image_payload, style="Pop Art"))

        assert state.status is ToolStatus.DONE
        assert [name for name, _ in provider.calls] == ["analyze_image", "generate_images"]
        generate = provider.calls_to("generate_images")[0]
        assert generate["prompt"] == "A red barn at dusk. Art style: Pop Art."
        assert generate["aspect_ratio"] == "1:1"

    @pytest.mark.asyncio
    async def test_stylizer_without_result_image(self, provider, image_payload):
        """Test that an empty generation is a stylization failure."""
        provider.images = []
        state = await ToolSession(ImageStylizer(), provider).submit(StylizeForm(image=image_payload))
        assert state.error == "A failure occurred during the image stylization process."

    @pytest.mark.asyncio
    async def test_concept_two_stages(self, provider):
        """Test describe then render, with an edited description."""
        tool = ConceptVisualizer()
        session = ToolSession(tool, provider)

        described = await session.submit(ConceptForm(concept="nostalgia"))
        assert described.result.description == "A generated answer."
        assert described.result.image is None
        assert 'Concept: "nostalgia"' in provider.calls_to("complete_text")[0]["prompt"]
        assert provider.calls_to("complete_text")[0]["system_instruction"] is None

        rendered = await session.submit(ConceptForm(stage="image", description="An edited scene"))
        assert rendered.result.image is not None
        assert provider.calls_to("generate_images")[0] == {"prompt": "An edited scene", "aspect_ratio": "16:9"}

    @pytest.mark.asyncio
    async def test_visual_analyst_default_prompt(self, provider, image_payload):
        """Test that a blank question falls back to a detailed description."""
        await ToolSession(VisualAnalyst(), provider).submit(AnalyzeImageForm(image=image_payload))
        assert provider.calls_to("analyze_image")[0]["prompt"] == "Describe this image in detail."


class TestStructuredTools:
    """Tests for the schema-backed planners."""

    @pytest.mark.asyncio
    async def test_recipe_parsed(self, provider):
        """Test that camelCase JSON becomes a Recipe."""
        provider.structured_json = RECIPE_JSON
        state = await ToolSession(RecipeGenerator(), provider).submit(RecipeForm(request="vegan lasagna"))

        assert isinstance(state.result, Recipe)
        assert state.result.recipe_name == "Vegan Lasagna"
        assert state.result.instructions[-1] == "Layer and bake."
        call = provider.calls_to("complete_structured")[0]
        assert '"vegan lasagna"' in call["prompt"]
        assert call["schema"] is Recipe

    @pytest.mark.asyncio
    async def test_planner_instructions(self, provider):
        """Test that each planner sends its own system instruction."""
        provider.structured_json = "{}"
        await ToolSession(WorkoutPlanner(), provider).submit(WorkoutForm(days_per_week=4))
        await ToolSession(MealPlanner(), provider).submit(MealForm(calories=1800, days=2))
        await ToolSession(TripPlanner(), provider).submit(TripForm(destination="Kyoto", interests="temples"))

        calls = provider.calls_to("complete_structured")
        assert [c["system_instruction"] for c in calls] == [
            get_system_instruction("workout_planner"),
            get_system_instruction("meal_planner"),
            get_system_instruction("trip_planner"),
        ]
        assert "- Days per week: 4" in calls[0]["prompt"]
        assert calls[1]["prompt"].startswith("Create a 2-day meal plan")
        assert "Approximately 1800 calories" in calls[1]["prompt"]
        assert "5-day trip to Kyoto" in calls[2]["prompt"]


class TestVideoTool:
    """Tests for the video generator tool."""

    @pytest.mark.asyncio
    async def test_video_via_session(self, provider):
        """Test that the tool returns the downloaded video."""
        provider.poll_results = [VideoJob(name="operations/video-1", done=True, video_uri="https://example.test/v.mp4")]
        state = await ToolSession(VideoGenerator(interval=0.01), provider).submit(VideoForm(prompt="a sunrise"))

        assert state.status is ToolStatus.DONE
        assert state.result.data == provider.video_bytes

    @pytest.mark.asyncio
    async def test_start_failure_message(self, provider):
        """Test the message when submission fails."""
        provider.failures["submit_video_job"] = ServiceError("quota")
        state = await ToolSession(VideoGenerator(interval=0.01), provider).submit(VideoForm(prompt="x"))
        assert state.error == "Failed to start video generation with Gemini API."

    @pytest.mark.asyncio
    async def test_poll_failure_message(self, provider):
        """Test the message when a status check fails."""
        provider.poll_results = [ServiceError("poll broke")]
        state = await ToolSession(VideoGenerator(interval=0.01), provider).submit(VideoForm(prompt="x"))
        assert state.error == "Failed to poll video operation from Gemini API."

    @pytest.mark.asyncio
    async def test_cancel_abandons_job(self, provider):
        """Test that cancelling the tool stops polling and yields no video."""
        tool = VideoGenerator(interval=0.01)
        tool.cancel()
        session = ToolSession(tool, provider)
        run = asyncio.create_task(session.submit(VideoForm(prompt="forever")))

        await asyncio.sleep(0.035)
        tool.cancel()
        state = await run

        assert state.status is ToolStatus.DONE
        assert state.result is None
        assert tool.state is JobState.CANCELLED
        assert provider.calls_to("fetch_video") == []

    def test_progress_messages_rotate(self):
        """Test that the status line changes every interval and wraps around."""
        first = progress_message(0.0)
        assert progress_message(3.9) == first
        assert progress_message(4.0) != first
        assert progress_message(-1.0) == first


class TestRegistry:
    """Tests for the tool registry."""

    def test_every_form_tool_is_registered(self):
        """Test that create_tool builds every tool except the hub and library."""
        for tool in CreativeTool:
            if tool in (CreativeTool.MODEL_COMPARISON_HUB, CreativeTool.PROMPT_LIBRARY):
                with pytest.raises(ValueError):
                    create_tool(tool)
            else:
                assert create_tool(tool).name == tool.value

    def test_create_by_display_name(self):
        """Test that tools can be created from their display name."""
        assert isinstance(create_tool("Recipe Generator"), RecipeGenerator)

    def test_unknown_tool(self):
        """Test that an unknown name is rejected."""
        with pytest.raises(ValueError, match="Unknown tool"):
            create_tool("Time Machine")
