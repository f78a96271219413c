from typing import Literal, Optional

from pydantic import StrictBool

from .common import DocumentModel, Number

MesocycleStatus = Literal["pending", "active", "completed", "cancelled"]
WorkoutStatus = Literal["pending", "in_progress", "completed", "skipped"]
WorkoutSetStatus = Literal["pending", "completed", "skipped"]
DayOfWeek = Literal[0, 1, 2, 3, 4, 5, 6]

MESOCYCLE_STATUSES = ("pending", "active", "completed", "cancelled")
WORKOUT_STATUSES = ("pending", "in_progress", "completed", "skipped")
WORKOUT_SET_STATUSES = ("pending", "completed", "skipped")


class ExerciseCreate(DocumentModel):
    name: str
    weight_increment: Number = 5.0
    is_custom: StrictBool = False


class ExerciseUpdate(DocumentModel):
    name: Optional[str] = None
    weight_increment: Optional[Number] = None
    is_custom: Optional[StrictBool] = None


class Exercise(ExerciseCreate):
    id: str
    created_at: str
    updated_at: str


class PlanCreate(DocumentModel):
    name: str
    duration_weeks: Number = 6


class PlanUpdate(DocumentModel):
    name: Optional[str] = None
    duration_weeks: Optional[Number] = None


class Plan(PlanCreate):
    id: str
    created_at: str
    updated_at: str


class PlanDayCreate(DocumentModel):
    plan_id: str
    day_of_week: DayOfWeek
    name: str
    sort_order: Number


class PlanDayUpdate(DocumentModel):
    day_of_week: Optional[DayOfWeek] = None
    name: Optional[str] = None
    sort_order: Optional[Number] = None


class PlanDay(PlanDayCreate):
    id: str


class PlanDayExerciseCreate(DocumentModel):
    plan_day_id: str
    exercise_id: str
    sets: Number = 2
    reps: Number = 8
    weight: Number = 30.0
    rest_seconds: Number = 60
    sort_order: Number
    min_reps: Number = 8
    max_reps: Number = 12


class PlanDayExerciseUpdate(DocumentModel):
    exercise_id: Optional[str] = None
    sets: Optional[Number] = None
    reps: Optional[Number] = None
    weight: Optional[Number] = None
    rest_seconds: Optional[Number] = None
    sort_order: Optional[Number] = None
    min_reps: Optional[Number] = None
    max_reps: Optional[Number] = None


class PlanDayExercise(PlanDayExerciseCreate):
    id: str


class MesocycleCreate(DocumentModel):
    plan_id: str
    start_date: str


class MesocycleUpdate(DocumentModel):
    current_week: Optional[Number] = None
    status: Optional[MesocycleStatus] = None


class Mesocycle(MesocycleCreate):
    id: str
    current_week: Number
    status: MesocycleStatus
    created_at: str
    updated_at: str


class WorkoutCreate(DocumentModel):
    mesocycle_id: str
    plan_day_id: str
    week_number: Number
    scheduled_date: str


class WorkoutUpdate(DocumentModel):
    status: Optional[WorkoutStatus] = None
    scheduled_date: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None


class Workout(WorkoutCreate):
    id: str
    status: WorkoutStatus
    started_at: Optional[str]
    completed_at: Optional[str]


class WorkoutSetCreate(DocumentModel):
    workout_id: str
    exercise_id: str
    set_number: Number
    target_reps: Number
    target_weight: Number


class WorkoutSetUpdate(DocumentModel):
    target_reps: Optional[Number] = None
    target_weight: Optional[Number] = None
    actual_reps: Optional[Number] = None
    actual_weight: Optional[Number] = None
    status: Optional[WorkoutSetStatus] = None


class WorkoutSet(WorkoutSetCreate):
    id: str
    actual_reps: Optional[Number]
    actual_weight: Optional[Number]
    status: WorkoutSetStatus


class CompletedSetRow(DocumentModel):
    """One completed set joined with its parent workout."""

    workout_id: str
    exercise_id: str
    set_number: Number
    actual_weight: Number
    actual_reps: Number
    scheduled_date: str
    completed_at: Optional[str]
    week_number: Number
    mesocycle_id: str
