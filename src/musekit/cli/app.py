"""Main CLI application using Typer."""
import asyncio
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, NoReturn

import typer
from dotenv import load_dotenv
from rich.console import Console, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from ..config import ASPECT_RATIOS, VIDEO_POLL_INTERVAL_SECONDS, VIDEO_PROGRESS_INTERVAL_SECONDS
from ..errors import InputValidationError, MuseError
from ..files import load_document, load_image, load_source_file
from ..jobs import JobState, PeriodicTask
from ..library import PromptLibrary
from ..llm import ChatMessage
from ..render import (
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
    save_images,
    save_video,
)
from ..streaming import ComparisonHub
from ..tools import (
    PERSONAS,
    AnalyzeImageForm,
    ChatForm,
    ChatPersona,
    CodeAssistant,
    CodeForm,
    ConceptForm,
    ConceptVisualizer,
    CreativeToolBase,
    DocumentAnalyst,
    DocumentForm,
    EmailForm,
    EmailWriter,
    ImageForm,
    ImageGenerator,
    ImageStylizer,
    MealForm,
    MealPlanner,
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
    ToolState,
    ToolStatus,
    TripForm,
    TripPlanner,
    VideoForm,
    VideoGenerator,
    VisualAnalyst,
    WorkoutForm,
    WorkoutPlanner,
    progress_message,
)
from ..tools.chat import DEFAULT_PERSONA
from ..tools.structured import BUDGETS, DIETS, FITNESS_GOALS, FITNESS_LEVELS, MIN_DAILY_CALORIES
from ..tools.text import CODE_LANGUAGES, EMAIL_PURPOSES, EMAIL_TONES, SOCIAL_PLATFORMS, SOCIAL_TONES
from ..tools.visual import ART_STYLES
from .providers import configure_logging, get_api_key, get_output_dir, get_prompt_store, require_llm

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="musekit",
    help="Generative AI creative tools: writing, images, video, planners and a model comparison hub",
    no_args_is_help=True,
    add_completion=True,
)
prompts_app = typer.Typer(help="Manage the saved prompt library", no_args_is_help=True)
app.add_typer(prompts_app, name="prompts")

# Console for rich output
console = Console()

EXIT_WORDS = ("exit", "quit", "q")


def _choice(options: Sequence[str]) -> Callable[[str], str]:
    """Typer callback restricting an option to a fixed list."""
    def check(value: str) -> str:
        if value not in options:
            raise typer.BadParameter(f"Choose one of: {', '.join(options)}")
        return value
    return check


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(code=1)


async def _submit(tool: CreativeToolBase[Any, Any], form: Any, status: str | None = None) -> ToolState[Any]:
    """Run one tool request against the configured provider."""
    llm = require_llm(console)
    async with llm:
        session = ToolSession(tool, llm)
        if status is None:
            return await session.submit(form)
        with console.status(f"[dim]{status}[/dim]"):
            return await session.submit(form)


def _run(
    tool: CreativeToolBase[Any, Any],
    form: Any,
    render: Callable[[Any], RenderableType],
    status: str | None = None,
) -> Any:
    """Submit ``form``, print the rendered result or the error, and return the result."""
    state = asyncio.run(_submit(tool, form, status or f"{tool.name} is working..."))
    if state.status is ToolStatus.ERROR:
        _fail(state.error)
    console.print(render(state.result))
    return state.result


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Logging level: debug, info, warning, or error"
    ),
):
    """Generative AI creative tools backed by Gemini."""
    configure_logging(log_level)


# -- Writing -----------------------------------------------------------------


@app.command()
def story(prompt: str = typer.Argument(..., help="What the story should be about")):
    """Write a story, streamed as it is generated."""
    async def _story():
        with Live(render_markdown(""), console=console, refresh_per_second=12) as live:
            tool = StoryWriter(on_fragment=lambda fragment, message: live.update(render_markdown(message.text)))
            return await _submit(tool, StoryForm(prompt=prompt))

    state = asyncio.run(_story())
    if state.status is ToolStatus.ERROR:
        _fail(state.error)


@app.command()
def slogans(
    product_name: str = typer.Argument(..., help="Product name"),
    description: str = typer.Argument(..., help="What the product is"),
):
    """Generate five catchy slogans for a product."""
    _run(SloganGenerator(), SloganForm(product_name=product_name, description=description), render_slogans)


@app.command()
def email(
    recipient: str = typer.Option("", "--recipient", "-r", help="Who the email is for"),
    purpose: str = typer.Option(
        "Meeting Request", "--purpose", "-p", callback=_choice(EMAIL_PURPOSES), help="Purpose of the email"
    ),
    custom_purpose: str = typer.Option("", "--custom-purpose", help="Purpose text when --purpose is Custom"),
    tone: str = typer.Option("Formal", "--tone", "-t", callback=_choice(EMAIL_TONES), help="Tone of voice"),
    info: str = typer.Option("", "--info", "-i", help="Additional information or context"),
):
    """Draft an email with a subject line."""
    form = EmailForm(
        purpose=purpose,
        custom_purpose=custom_purpose,
        recipient_info=recipient,
        tone=tone,
        more_info=info,
    )
    _run(EmailWriter(), form, lambda text: Panel(render_text_styled(text), title="Email", border_style="cyan"))


@app.command()
def social(
    topic: str = typer.Argument(..., help="What the post is about"),
    platform: str = typer.Option(
        "Twitter (X)", "--platform", "-p", callback=_choice(SOCIAL_PLATFORMS), help="Target platform"
    ),
    tone: str = typer.Option("Professional", "--tone", "-t", callback=_choice(SOCIAL_TONES), help="Tone of voice"),
):
    """Write a social media post with hashtags."""
    _run(
        SocialMediaPostGenerator(),
        SocialPostForm(topic=topic, platform=platform, tone=tone),
        lambda text: Panel(render_text_styled(text), title=platform, border_style="magenta"),
    )


@app.command()
def research(query: str = typer.Argument(..., help="Research question")):
    """Answer a question using Google Search grounding."""
    _run(ResearchAssistant(), ResearchForm(query=query), render_research, status="Researching...")


@app.command()
def code(
    text: str = typer.Argument(..., help="Task description, or the error description with --debug"),
    language: str = typer.Option("Python", "--language", "-L", callback=_choice(CODE_LANGUAGES), help="Language"),
    debug: Path | None = typer.Option(
        None, "--debug", "-d", exists=True, dir_okay=False, help="File with the buggy code to debug"
    ),
):
    """Generate a code snippet, or debug one with --debug."""
    if debug is not None:
        try:
            source = load_source_file(debug)
        except InputValidationError as e:
            _fail(str(e))
        form = CodeForm(mode="debug", language=language, code=source, error_description=text)
    else:
        form = CodeForm(mode="generate", language=language, description=text)
    _run(CodeAssistant(), form, render_code)


@app.command()
def document(
    path: Path = typer.Argument(..., help="Plain-text (.txt) document"),
    mode: str = typer.Option(
        "summarize", "--mode", "-m", callback=_choice(("summarize", "extract", "qa")), help="Analysis mode"
    ),
    question: str = typer.Option("", "--question", "-q", help="Question to answer (qa mode)"),
):
    """Summarize, extract key points from, or question a document."""
    try:
        text = load_document(path)
    except InputValidationError as e:
        _fail(str(e))
    _run(
        DocumentAnalyst(),
        DocumentForm(document=text, mode=mode, question=question),
        lambda result: Panel(render_markdown(result), title=f"Document ({mode})", border_style="blue"),
    )


# -- Images and video --------------------------------------------------------


def _print_saved(paths: list[Path]) -> RenderableType:
    return render_text_styled("\n".join(f"Saved {p}" for p in paths), style="green")


@app.command()
def image(
    prompt: str = typer.Argument(..., help="Image description"),
    aspect_ratio: str = typer.Option("1:1", "--aspect-ratio", "-a", callback=_choice(ASPECT_RATIOS)),
):
    """Generate an image and save it to the output directory."""
    output_dir = get_output_dir()
    _run(
        ImageGenerator(),
        ImageForm(prompt=prompt, aspect_ratio=aspect_ratio),
        lambda images: _print_saved(save_images(images, output_dir, prompt)),
        status="Generating image...",
    )


@app.command()
def stylize(
    path: Path = typer.Argument(..., help="Image to restyle (max 4MB)"),
    style: str = typer.Option(
        "Impressionist Painting", "--style", "-s", callback=_choice(ART_STYLES), help="Target art style"
    ),
):
    """Redraw an image in a different art style."""
    try:
        payload = load_image(path)
    except InputValidationError as e:
        _fail(str(e))
    output_dir = get_output_dir()
    _run(
        ImageStylizer(),
        StylizeForm(image=payload, style=style),
        lambda result: _print_saved(save_images([result], output_dir, f"{path.stem}-{style}")),
        status="Stylizing image...",
    )


@app.command(name="analyze-image")
def analyze_image(
    path: Path = typer.Argument(..., help="Image to analyze (max 4MB)"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Question about the image"),
):
    """Ask a question about an image."""
    try:
        payload = load_image(path)
    except InputValidationError as e:
        _fail(str(e))
    _run(
        VisualAnalyst(),
        AnalyzeImageForm(image=payload, prompt=prompt),
        lambda text: Panel(render_markdown(text), title="Analysis", border_style="blue"),
        status="Analyzing image...",
    )


@app.command()
def visualize(
    concept: str = typer.Argument(..., help="Abstract concept to visualize"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Generate the image without asking"),
):
    """Describe a concept in vivid detail, then render it as an image."""
    tool = ConceptVisualizer()
    described = _run(
        tool,
        ConceptForm(concept=concept),
        lambda result: Panel(render_markdown(result.description), title="Description", border_style="magenta"),
        status="Describing concept...",
    )
    if not yes and not typer.confirm("Generate an image from this description?", default=True):
        return

    output_dir = get_output_dir()
    _run(
        tool,
        ConceptForm(concept=concept, stage="image", description=described.description),
        lambda result: (
            _print_saved(save_images([result.image], output_dir, concept))
            if result.image is not None
            else render_text_styled("No image was generated.", style="yellow")
        ),
        status="Generating image...",
    )


@app.command()
def video(
    prompt: str = typer.Argument(..., help="Video description"),
    interval: float = typer.Option(VIDEO_POLL_INTERVAL_SECONDS, "--interval", min=0.1, help="Seconds between status checks"),
):
    """Generate a short video (takes a few minutes)."""
    async def _video():
        started = time.monotonic()
        with console.status(progress_message(0)) as status:
            async def rotate() -> bool:
                status.update(progress_message(time.monotonic() - started))
                return False

            def on_state_change(state: JobState) -> None:
                if state is JobState.SUBMITTED:
                    console.log("Video job submitted")

            rotator = PeriodicTask(rotate, VIDEO_PROGRESS_INTERVAL_SECONDS, name="video-progress")
            rotator.start()
            try:
                return await _submit(VideoGenerator(interval=interval, on_state_change=on_state_change), VideoForm(prompt=prompt))
            finally:
                rotator.cancel()

    try:
        state = asyncio.run(_video())
    except KeyboardInterrupt:
        console.print("\n[dim]Video generation cancelled.[/dim]")
        raise typer.Exit(code=130)

    if state.status is ToolStatus.ERROR:
        _fail(state.error)
    if state.result is not None:
        console.print(_print_saved([save_video(state.result, get_output_dir(), prompt)]))


# -- Planners ----------------------------------------------------------------


@app.command()
def recipe(request: str = typer.Argument(..., help="What you'd like to cook")):
    """Generate a complete recipe."""
    _run(RecipeGenerator(), RecipeForm(request=request), render_recipe, status="Cooking up a recipe...")


@app.command()
def workout(
    goal: str = typer.Option("Build Muscle", "--goal", "-g", callback=_choice(FITNESS_GOALS)),
    level: str = typer.Option("Beginner", "--level", "-L", callback=_choice(FITNESS_LEVELS)),
    days: int = typer.Option(3, "--days", "-d", min=1, max=7, help="Workout days per week"),
):
    """Create a one-week workout plan."""
    _run(
        WorkoutPlanner(),
        WorkoutForm(goal=goal, level=level, days_per_week=days),
        render_workout_plan,
        status="Planning workouts...",
    )


@app.command()
def meal(
    diet: str = typer.Option("Anything", "--diet", callback=_choice(DIETS)),
    calories: int = typer.Option(2000, "--calories", "-c", min=MIN_DAILY_CALORIES, help="Daily calorie target"),
    days: int = typer.Option(3, "--days", "-d", min=1, max=7),
):
    """Create a meal plan with a grocery list."""
    rounded = round(calories / 100) * 100
    _run(MealPlanner(), MealForm(diet=diet, calories=rounded, days=days), render_meal_plan, status="Planning meals...")


@app.command()
def trip(
    destination: str = typer.Argument(..., help="Where you are going"),
    interests: str = typer.Option("", "--interests", "-i", help="What you enjoy, e.g. 'food, museums'"),
    days: int = typer.Option(5, "--days", "-d", min=1, max=14),
    budget: str = typer.Option("Mid-range", "--budget", "-b", callback=_choice(BUDGETS)),
):
    """Plan a day-by-day travel itinerary."""
    _run(
        TripPlanner(),
        TripForm(destination=destination, interests=interests, duration=days, budget=budget),
        render_trip_plan,
        status="Planning your trip...",
    )


# -- Conversations -----------------------------------------------------------


@app.command()
def chat(
    persona: str = typer.Option(DEFAULT_PERSONA, "--persona", "-p", callback=_choice(tuple(PERSONAS))),
):
    """Interactive chat with a persona. Type /reset to start over, /history to review."""
    async def _chat():
        llm = require_llm(console)
        async with llm:
            live_holder: list[Live] = []

            def on_fragment(fragment: str, message: ChatMessage) -> None:
                if live_holder:
                    live_holder[0].update(render_markdown(message.text))

            tool = ChatPersona(persona=persona, on_fragment=on_fragment)
            session = ToolSession(tool, llm)

            console.print(f"[bold cyan]Chatting with: {persona}[/bold cyan]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave\n[/dim]")

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input.strip():
                    continue
                if user_input.strip().lower() in EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break
                if user_input.strip() == "/reset":
                    tool.switch_persona(tool.persona)
                    console.print("[dim]Conversation cleared.[/dim]")
                    continue
                if user_input.strip() == "/history":
                    console.print(render_conversation(tool.messages, model_label=tool.persona))
                    continue

                console.print(f"[bold green]{tool.persona}:[/bold green]")
                with Live(render_markdown(""), console=console, refresh_per_second=12) as live:
                    live_holder[:] = [live]
                    state = await session.submit(ChatForm(message=user_input, persona=tool.persona))
                    live_holder.clear()
                if state.status is ToolStatus.ERROR:
                    console.print(f"[red]Error: {state.error}[/red]")

    asyncio.run(_chat())


@app.command()
def compare(prompt: str | None = typer.Argument(None, help="Prompt to send; omit for interactive mode")):
    """Send one prompt to seven model personas and stream all answers side by side."""
    async def _send(hub: ComparisonHub, text: str) -> None:
        with Live(render_comparison(hub.configs, hub.histories), console=console, refresh_per_second=8) as live:
            def on_fragment(config_id: str, fragment: str, message: ChatMessage) -> None:
                live.update(render_comparison(hub.configs, hub.histories))

            outcomes = await hub.send(text, on_fragment=on_fragment)
            live.update(render_comparison(hub.configs, hub.histories))

        if outcomes:
            failed = [config.name for config in hub.configs if not outcomes[config.id].ok]
            if failed:
                console.print(f"[yellow]{len(failed)} of {len(outcomes)} models failed: {', '.join(failed)}[/yellow]")

    async def _compare():
        llm = require_llm(console)
        async with llm:
            hub = ComparisonHub(llm)
            if prompt is not None:
                await _send(hub, prompt)
                return

            console.print("[bold cyan]Model Comparison Hub[/bold cyan]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave; /reset clears histories\n[/dim]")
            while True:
                try:
                    user_input = console.input("[bold yellow]Prompt:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if user_input.strip().lower() in EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break
                if user_input.strip() == "/reset":
                    hub.reset()
                    console.print("[dim]Histories cleared.[/dim]")
                    continue
                try:
                    await _send(hub, user_input)
                except InputValidationError as e:
                    console.print(f"[red]Error: {e}[/red]")

    try:
        asyncio.run(_compare())
    except InputValidationError as e:
        _fail(str(e))


# -- Prompt library ----------------------------------------------------------


async def _open_library() -> PromptLibrary:
    library = PromptLibrary(get_prompt_store())
    await library.open()
    return library


@prompts_app.command("list")
def prompts_list():
    """Show saved prompts, most recent first."""
    async def _list():
        library = await _open_library()
        try:
            return library.prompts
        finally:
            await library.close()

    saved = asyncio.run(_list())
    if not saved:
        console.print("[dim]Your prompt library is empty.[/dim]")
        return

    table = Table(title="Prompt Library")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Prompt")
    for entry in saved:
        table.add_row(entry.id, entry.title, entry.prompt)
    console.print(table)


@prompts_app.command("add")
def prompts_add(
    title: str = typer.Argument(..., help="Short title"),
    prompt: str = typer.Argument(..., help="Prompt text"),
):
    """Save a prompt at the top of the library."""
    async def _add():
        library = await _open_library()
        try:
            return await library.add(title, prompt)
        finally:
            await library.close()

    try:
        saved = asyncio.run(_add())
    except MuseError as e:
        _fail(str(e))
    console.print(f"[green]Saved prompt {saved.id}: {saved.title}[/green]")


@prompts_app.command("delete")
def prompts_delete(prompt_id: str = typer.Argument(..., help="ID of the prompt to delete")):
    """Delete a saved prompt by id."""
    async def _delete():
        library = await _open_library()
        try:
            return await library.delete(prompt_id)
        finally:
            await library.close()

    if not asyncio.run(_delete()):
        _fail(f"No saved prompt with id {prompt_id}")
    console.print(f"[green]Deleted prompt {prompt_id}[/green]")


# -- Diagnostics -------------------------------------------------------------


@app.command()
def health():
    """Check API key configuration and prompt store access."""
    async def _health():
        all_healthy = True

        if get_api_key():
            console.print("[green]+[/green] Gemini API key: SET")
        else:
            console.print("[red]x[/red] Gemini API key: NOT SET")
            all_healthy = False

        store = get_prompt_store()
        try:
            await store.connect()
            count = len(await store.load_all())
            console.print(f"[green]+[/green] Prompt store ({store.backend_type}): OK, {count} saved")
        except MuseError as e:
            console.print(f"[red]x[/red] Prompt store ({store.backend_type}): FAILED ({e})")
            all_healthy = False
        finally:
            await store.disconnect()

        if not all_healthy:
            raise typer.Exit(code=1)

    asyncio.run(_health())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
