from typing import List, Literal, Optional

from pydantic import StrictBool

from .common import DocumentModel, Number

MealType = Literal["breakfast", "lunch", "dinner"]
ConversationRole = Literal["user", "assistant"]

MEAL_TYPES = ("breakfast", "lunch", "dinner")
CONVERSATION_ROLES = ("user", "assistant")


class MealCreate(DocumentModel):
    name: str
    meal_type: MealType
    effort: Number
    has_red_meat: StrictBool
    prep_ahead: StrictBool
    url: str


class MealUpdate(DocumentModel):
    name: Optional[str] = None
    meal_type: Optional[MealType] = None
    effort: Optional[Number] = None
    has_red_meat: Optional[StrictBool] = None
    prep_ahead: Optional[StrictBool] = None
    url: Optional[str] = None
    last_planned: Optional[str] = None


class Meal(MealCreate):
    id: str
    last_planned: Optional[str]
    created_at: str
    updated_at: str


class Ingredient(DocumentModel):
    id: str
    name: str
    store_section: str
    created_at: str
    updated_at: str


class RecipeIngredient(DocumentModel):
    ingredient_id: str
    quantity: Optional[Number]
    unit: Optional[str]


class RecipeStep(DocumentModel):
    step_number: Number
    instruction: str


class Recipe(DocumentModel):
    id: str
    meal_id: str
    ingredients: List[RecipeIngredient]
    steps: Optional[List[RecipeStep]]
    created_at: str
    updated_at: str


class MealPlanEntry(DocumentModel):
    day_index: Number
    meal_type: MealType
    meal_id: Optional[str]
    meal_name: Optional[str]


class CritiqueOperation(DocumentModel):
    day_index: Number
    meal_type: MealType
    new_meal_id: Optional[str]


class ConversationMessage(DocumentModel):
    role: ConversationRole
    content: str
    operations: Optional[List[CritiqueOperation]] = None


class MealPlanSessionCreate(DocumentModel):
    plan: List[MealPlanEntry]
    meals_snapshot: List[Meal]
    history: List[ConversationMessage] = []
    is_finalized: StrictBool = False


class MealPlanSessionUpdate(DocumentModel):
    plan: Optional[List[MealPlanEntry]] = None
    meals_snapshot: Optional[List[Meal]] = None
    history: Optional[List[ConversationMessage]] = None
    is_finalized: Optional[StrictBool] = None


class MealPlanSession(MealPlanSessionCreate):
    id: str
    created_at: str
    updated_at: str
