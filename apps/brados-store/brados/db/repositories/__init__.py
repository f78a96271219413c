"""
Per-domain repositories over the document store.

Each repository takes the store as its first constructor argument; clock and
id generation are injectable keyword arguments.
"""
from .barcodes import BarcodeRepository
from .cycling import CyclingActivityRepository
from .exercises import ExerciseRepository
from .guided_meditations import GuidedMeditationRepository
from .ingredients import IngredientRepository
from .meal_plan_sessions import MealPlanSessionRepository
from .meals import MealRepository
from .meditation_sessions import MeditationSessionRepository
from .mesocycles import MesocycleRepository
from .plans import PlanDayExerciseRepository, PlanDayRepository, PlanRepository
from .recipes import RecipeRepository
from .stretch_sessions import StretchSessionRepository
from .stretches import StretchRepository
from .workout_sets import WorkoutSetRepository
from .workouts import WorkoutRepository

__all__ = [
    "BarcodeRepository",
    "CyclingActivityRepository",
    "ExerciseRepository",
    "GuidedMeditationRepository",
    "IngredientRepository",
    "MealPlanSessionRepository",
    "MealRepository",
    "MeditationSessionRepository",
    "MesocycleRepository",
    "PlanDayExerciseRepository",
    "PlanDayRepository",
    "PlanRepository",
    "RecipeRepository",
    "StretchRepository",
    "StretchSessionRepository",
    "WorkoutRepository",
    "WorkoutSetRepository",
]
