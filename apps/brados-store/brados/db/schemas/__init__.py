"""
Domain-split Pydantic schemas.

Each entity has a ``*Create`` model (create-time defaults live here), an
all-optional ``*Update`` model whose ``model_fields_set`` marks the provided
fields, and the entity model returned by repositories.
"""
from .common import CamelDocumentModel, DocumentModel, Number
from .lifting import (
    CompletedSetRow,
    Exercise,
    ExerciseCreate,
    ExerciseUpdate,
    Mesocycle,
    MesocycleCreate,
    MesocycleUpdate,
    Plan,
    PlanCreate,
    PlanDay,
    PlanDayCreate,
    PlanDayExercise,
    PlanDayExerciseCreate,
    PlanDayExerciseUpdate,
    PlanDayUpdate,
    PlanUpdate,
    Workout,
    WorkoutCreate,
    WorkoutSet,
    WorkoutSetCreate,
    WorkoutSetUpdate,
    WorkoutUpdate,
)
from .meals import (
    ConversationMessage,
    CritiqueOperation,
    Ingredient,
    Meal,
    MealCreate,
    MealPlanEntry,
    MealPlanSession,
    MealPlanSessionCreate,
    MealPlanSessionUpdate,
    MealUpdate,
    Recipe,
    RecipeIngredient,
    RecipeStep,
)
from .meditation import (
    GuidedMeditationCategory,
    GuidedMeditationInterjection,
    GuidedMeditationListing,
    GuidedMeditationScript,
    GuidedMeditationScriptCreate,
    GuidedMeditationScriptUpdate,
    GuidedMeditationSegment,
    GuidedMeditationSegmentInput,
    MeditationSession,
    MeditationSessionCreate,
    MeditationStats,
)
from .stretching import (
    CompletedStretch,
    StretchDefinition,
    StretchRegion,
    StretchRegionCreate,
    StretchRegionUpdate,
    StretchSession,
    StretchSessionCreate,
)
from .cycling import (
    ActivityStreams,
    ActivityStreamsInput,
    CyclingActivity,
    CyclingActivityCreate,
    CyclingActivityUpdate,
    DeleteCyclingActivityResult,
)
from .barcodes import Barcode, BarcodeCreate, BarcodeUpdate
