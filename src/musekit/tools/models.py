"""Structured result objects.

Each model doubles as the output schema sent to the service: field names
are exposed in camelCase (the service's JSON convention) and accepted in
either case when parsing. All results are immutable value objects built
from one response.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..llm.models import GroundingSource, ImagePayload, ResearchResult


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Recipe(_Result):
    """A complete recipe."""

    recipe_name: str = Field(description="The name of the recipe.")
    description: str = Field(description="A short, enticing description of the dish.")
    prep_time: str = Field(description="Preparation time, e.g., '15 minutes'.")
    cook_time: str = Field(description="Cooking time, e.g., '25 minutes'.")
    total_time: str = Field(description="Total time to make the dish.")
    servings: str = Field(description="Number of servings, e.g., '4 servings'.")
    ingredients: list[str] = Field(description="A list of ingredients with quantities.")
    instructions: list[str] = Field(description="Step-by-step instructions for preparing the dish.")


class ActivityCategory(str, Enum):
    FOOD = "Food"
    SIGHTSEEING = "Sightseeing"
    ACTIVITY = "Activity"
    CULTURE = "Culture"
    RELAXATION = "Relaxation"
    TRAVEL = "Travel"


class Activity(_Result):
    time_of_day: str = Field(description="e.g., 'Morning', 'Afternoon', 'Evening'.")
    title: str = Field(description="The name of the activity, e.g., 'Visit the Eiffel Tower'.")
    description: str = Field(description="A one or two-sentence description of the activity.")
    category: ActivityCategory = Field(description="The category of the activity.")


class DailyPlan(_Result):
    day: int = Field(description="The day number, e.g., 1.")
    title: str = Field(description="A brief theme for the day, e.g., 'Historical Exploration'.")
    activities: list[Activity] = Field(description="A list of activities for the day.")


class TripPlan(_Result):
    """A day-by-day travel itinerary."""

    trip_title: str = Field(description="A catchy title for the trip, e.g., 'An Adventurous 5 Days in Tokyo'.")
    itinerary: list[DailyPlan] = Field(description="An array of daily plans.")


class Exercise(_Result):
    name: str
    sets: str = Field(description="e.g., '3 sets' or '4 sets'.")
    reps: str = Field(description="e.g., '8-12 reps' or '45 seconds'.")
    rest: str = Field(description="e.g., '60s rest' or '90s rest'.")


class DailyWorkout(_Result):
    day: str = Field(description="The day of the week or day number, e.g., 'Day 1' or 'Monday'.")
    focus: str = Field(description="The main focus of the day's workout, e.g., 'Full Body Strength'.")
    exercises: list[Exercise]


class WorkoutPlan(_Result):
    """A one-week training schedule."""

    plan_title: str = Field(description="A catchy title for the workout plan.")
    weekly_schedule: list[DailyWorkout]


class Meal(_Result):
    name: str
    calories: int
    description: str


class Meals(_Result):
    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snack: Meal


class DailyMealPlan(_Result):
    day: str = Field(description="e.g., 'Day 1'.")
    meals: Meals
    total_calories: int


class GroceryItem(_Result):
    item: str
    quantity: str


class MealPlan(_Result):
    """A multi-day meal plan with a consolidated grocery list."""

    plan_title: str
    daily_plans: list[DailyMealPlan]
    grocery_list: list[GroceryItem]


class ConceptVisualization(BaseModel):
    """Output of the two-stage concept visualizer."""

    model_config = ConfigDict(frozen=True)

    description: str
    image: ImagePayload | None = None


class CodeResult(BaseModel):
    """Generated code or a debugging explanation."""

    model_config = ConfigDict(frozen=True)

    language: str
    mode: str
    text: str


__all__ = [
    "Recipe",
    "ActivityCategory",
    "Activity",
    "DailyPlan",
    "TripPlan",
    "Exercise",
    "DailyWorkout",
    "WorkoutPlan",
    "Meal",
    "Meals",
    "DailyMealPlan",
    "GroceryItem",
    "MealPlan",
    "ConceptVisualization",
    "CodeResult",
    "GroundingSource",
    "ResearchResult",
]
