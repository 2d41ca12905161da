"""Planners that return structured results parsed against a schema."""

from typing import Literal

from pydantic import Field

from ..errors import InputValidationError
from ..llm import GenerativeProvider
from ..prompts import get_system_instruction
from .base import CreativeToolBase, ToolForm
from .models import MealPlan, Recipe, TripPlan, WorkoutPlan


class RecipeForm(ToolForm):
    request: str = ""


class RecipeGenerator(CreativeToolBase[RecipeForm, Recipe]):
    name = "Recipe Generator"
    form_model = RecipeForm
    failure_message = "Failed to generate recipe from Gemini API."

    def validate(self, form: RecipeForm) -> None:
        if not form.request:
            raise InputValidationError("Please enter what you'd like to cook.")

    async def execute(self, provider: GenerativeProvider, form: RecipeForm) -> Recipe:
        prompt = (
            "You are an expert chef. Generate a complete recipe based on the following request: "
            f'"{form.request}". Ensure all fields are filled out appropriately.'
        )
        return await provider.complete_structured(prompt, Recipe)


# -- Workout -----------------------------------------------------------------

FitnessGoal = Literal["Build Muscle", "Lose Weight", "Improve Endurance", "General Fitness"]
FitnessLevel = Literal["Beginner", "Intermediate", "Advanced"]

FITNESS_GOALS: tuple[str, ...] = ("Build Muscle", "Lose Weight", "Improve Endurance", "General Fitness")
FITNESS_LEVELS: tuple[str, ...] = ("Beginner", "Intermediate", "Advanced")


class WorkoutForm(ToolForm):
    goal: FitnessGoal = "Build Muscle"
    level: FitnessLevel = "Beginner"
    days_per_week: int = Field(default=3, ge=1, le=7)


class WorkoutPlanner(CreativeToolBase[WorkoutForm, WorkoutPlan]):
    name = "Workout Planner"
    form_model = WorkoutForm
    failure_message = "Failed to generate workout plan from Gemini API."

    async def execute(self, provider: GenerativeProvider, form: WorkoutForm) -> WorkoutPlan:
        prompt = (
            "Create a 1-week workout plan for a user with the following details:\n"
            f"- Fitness Goal: {form.goal}\n"
            f"- Fitness Level: {form.level}\n"
            f"- Days per week: {form.days_per_week}\n"
            "\n"
            "For each workout day, provide a clear focus (e.g., 'Upper Body Strength', 'Cardio & Core') "
            "and a list of 5-7 exercises. For each exercise, specify the name, sets, reps, and rest period."
        )
        return await provider.complete_structured(
            prompt,
            WorkoutPlan,
            system_instruction=get_system_instruction("workout_planner"),
        )


# -- Meal --------------------------------------------------------------------

Diet = Literal["Anything", "Vegetarian", "Vegan", "Low-Carb", "Paleo"]
DIETS: tuple[str, ...] = ("Anything", "Vegetarian", "Vegan", "Low-Carb", "Paleo")

MIN_DAILY_CALORIES = 1200


class MealForm(ToolForm):
    diet: Diet = "Anything"
    calories: int = Field(default=2000, ge=MIN_DAILY_CALORIES, multiple_of=100)
    days: int = Field(default=3, ge=1, le=7)


class MealPlanner(CreativeToolBase[MealForm, MealPlan]):
    name = "Meal Planner"
    form_model = MealForm
    failure_message = "Failed to generate meal plan from Gemini API."

    async def execute(self, provider: GenerativeProvider, form: MealForm) -> MealPlan:
        prompt = (
            f"Create a {form.days}-day meal plan for a user with the following requirements:\n"
            f"- Dietary Preference: {form.diet}\n"
            f"- Daily Calorie Target: Approximately {form.calories} calories.\n"
            "\n"
            "For each day, provide meals for breakfast, lunch, dinner, and one snack. For each meal, "
            "provide a name, a short description, and an approximate calorie count. "
            "Calculate the total calories for each day.\n"
            "Finally, create a consolidated grocery list for all the ingredients needed for the entire plan."
        )
        return await provider.complete_structured(
            prompt,
            MealPlan,
            system_instruction=get_system_instruction("meal_planner"),
        )


# -- Trip --------------------------------------------------------------------

Budget = Literal["Budget", "Mid-range", "Luxury"]
BUDGETS: tuple[str, ...] = ("Budget", "Mid-range", "Luxury")


class TripForm(ToolForm):
    destination: str = ""
    interests: str = ""
    duration: int = Field(default=5, ge=1, le=14)
    budget: Budget = "Mid-range"


class TripPlanner(CreativeToolBase[TripForm, TripPlan]):
    name = "Trip Planner"
    form_model = TripForm
    failure_message = "Failed to generate trip plan from Gemini API."

    def validate(self, form: TripForm) -> None:
        if not form.destination or not form.interests:
            raise InputValidationError("Please provide a destination and your interests.")

    async def execute(self, provider: GenerativeProvider, form: TripForm) -> TripPlan:
        prompt = (
            f"Generate a travel itinerary for a {form.duration}-day trip to {form.destination}.\n"
            f"Interests: {form.interests}.\n"
            f"Budget: {form.budget}.\n"
            "Provide a variety of activities covering morning, afternoon, and evening for each day. "
            "For each activity, specify a category from this list: "
            "'Food', 'Sightseeing', 'Activity', 'Culture', 'Relaxation', 'Travel'."
        )
        return await provider.complete_structured(
            prompt,
            TripPlan,
            system_instruction=get_system_instruction("trip_planner"),
        )
