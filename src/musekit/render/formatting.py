"""Rich renderables for tool results.

Hides the details of how each result type is laid out in a terminal.
"""

from collections.abc import Mapping, Sequence

from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..llm import ChatMessage, ResearchResult
from ..streaming import ModelConfig
from ..tools.models import CodeResult, MealPlan, Recipe, TripPlan, WorkoutPlan

CATEGORY_STYLES: dict[str, str] = {
    "Food": "yellow",
    "Sightseeing": "cyan",
    "Activity": "green",
    "Culture": "magenta",
    "Relaxation": "blue",
    "Travel": "bright_black",
}


def render_markdown(text: str) -> Markdown:
    """Render free text (model output is markdown-flavoured)."""
    return Markdown(text or "")


def render_text_styled(text: str, style: str = "") -> Text:
    """Plain text with folding; model output is never parsed as markup."""
    return Text(text, style=style, overflow="fold")


def render_slogans(slogans: Sequence[str]) -> Panel:
    body = Text()
    for i, slogan in enumerate(slogans, 1):
        body.append(f"{i}. ", style="bold cyan")
        body.append(f"{slogan}\n")
    return Panel(body, title="Slogans", border_style="cyan")


def render_code(result: CodeResult) -> RenderableType:
    if result.mode == "debug":
        return Panel(render_markdown(result.text), title=f"Debug ({result.language})", border_style="green")
    fence = f"```{result.language.lower()}\n{result.text}\n```"
    return Panel(render_markdown(fence), title=f"Generated {result.language}", border_style="green")


def render_research(result: ResearchResult) -> Group:
    """Answer text followed by a numbered source list."""
    parts: list[RenderableType] = [render_markdown(result.text)]
    if result.sources:
        sources = Text()
        for i, source in enumerate(result.sources, 1):
            sources.append(f"{i}. ", style="bold")
            sources.append(source.title, style="cyan")
            sources.append(f"\n   {source.uri}\n", style="dim")
        parts.append(Panel(sources, title="Sources", border_style="blue"))
    return Group(*parts)


def render_recipe(recipe: Recipe) -> Panel:
    times = Table.grid(padding=(0, 2))
    times.add_row("[bold]Prep[/bold]", "[bold]Cook[/bold]", "[bold]Total[/bold]", "[bold]Servings[/bold]")
    times.add_row(
        Text(recipe.prep_time),
        Text(recipe.cook_time),
        Text(recipe.total_time),
        Text(recipe.servings),
    )

    ingredients = Text("\n".join(f"- {item}" for item in recipe.ingredients))
    instructions = Text("\n".join(f"{i}. {step}" for i, step in enumerate(recipe.instructions, 1)))

    body = Group(
        Text(recipe.description, style="italic"),
        Text(),
        times,
        Text(),
        Text("Ingredients", style="bold yellow"),
        ingredients,
        Text(),
        Text("Instructions", style="bold yellow"),
        instructions,
    )
    return Panel(body, title=recipe.recipe_name, border_style="yellow")


def render_trip_plan(plan: TripPlan) -> Panel:
    days: list[RenderableType] = []
    for daily in plan.itinerary:
        table = Table(title=f"Day {daily.day}: {daily.title}", title_justify="left", expand=True)
        table.add_column("When", style="bold", no_wrap=True)
        table.add_column("Activity")
        table.add_column("Category", no_wrap=True)
        for activity in daily.activities:
            category = activity.category.value
            table.add_row(
                Text(activity.time_of_day),
                Text.assemble((activity.title, "bold"), "\n", activity.description),
                Text(category, style=CATEGORY_STYLES.get(category, "")),
            )
        days.append(table)
    return Panel(Group(*days), title=plan.trip_title, border_style="cyan")


def render_workout_plan(plan: WorkoutPlan) -> Panel:
    days: list[RenderableType] = []
    for workout in plan.weekly_schedule:
        table = Table(title=f"{workout.day}: {workout.focus}", title_justify="left", expand=True)
        table.add_column("Exercise")
        table.add_column("Sets", no_wrap=True)
        table.add_column("Reps", no_wrap=True)
        table.add_column("Rest", no_wrap=True)
        for exercise in workout.exercises:
            table.add_row(Text(exercise.name), Text(exercise.sets), Text(exercise.reps), Text(exercise.rest))
        days.append(table)
    return Panel(Group(*days), title=plan.plan_title, border_style="green")


def render_meal_plan(plan: MealPlan) -> Panel:
    parts: list[RenderableType] = []
    for daily in plan.daily_plans:
        table = Table(title=f"{daily.day} ({daily.total_calories} kcal)", title_justify="left", expand=True)
        table.add_column("Meal", style="bold", no_wrap=True)
        table.add_column("Dish")
        table.add_column("kcal", justify="right", no_wrap=True)
        for label, meal in (
            ("Breakfast", daily.meals.breakfast),
            ("Lunch", daily.meals.lunch),
            ("Dinner", daily.meals.dinner),
            ("Snack", daily.meals.snack),
        ):
            table.add_row(label, Text.assemble((meal.name, "bold"), "\n", meal.description), str(meal.calories))
        parts.append(table)

    groceries = Table(title="Grocery List", title_justify="left", expand=True)
    groceries.add_column("Item")
    groceries.add_column("Quantity")
    for entry in plan.grocery_list:
        groceries.add_row(Text(entry.item), Text(entry.quantity))
    parts.append(groceries)
    return Panel(Group(*parts), title=plan.plan_title, border_style="magenta")


def render_conversation(messages: Sequence[ChatMessage], model_label: str = "Model") -> Group:
    """Render chat turns; an empty open model turn shows a typing marker."""
    rows: list[RenderableType] = []
    for message in messages:
        if message.role == "user":
            rows.append(Text.assemble(("You: ", "bold cyan"), message.text))
        else:
            rows.append(Text.assemble((f"{model_label}: ", "bold green")))
            rows.append(render_markdown(message.text) if message.text else Text("...", style="dim"))
    return Group(*rows)


def render_comparison(configs: Sequence[ModelConfig], histories: Mapping[str, Sequence[ChatMessage]]) -> Group:
    """One panel per participant with its latest answer."""
    panels: list[RenderableType] = []
    for config in configs:
        messages = histories.get(config.id, [])
        latest = messages[-1] if messages and messages[-1].role == "model" else None
        if latest is None:
            body: RenderableType = Text(config.description, style="dim")
        elif latest.text.startswith("Error: "):
            body = Text(latest.text, style="red")
        elif latest.text:
            body = render_markdown(latest.text)
        else:
            body = Text("...", style="dim")
        panels.append(Panel(body, title=config.name, subtitle=f"temp {config.temperature}", border_style="blue"))
    return Group(*panels)
