from typing import List, Literal, Optional

from pydantic import Field

from .common import CamelDocumentModel, Number

CyclingActivityType = Literal["vo2max", "threshold", "fun", "recovery", "unknown"]
CYCLING_ACTIVITY_TYPES = ("vo2max", "threshold", "fun", "recovery", "unknown")
# Types written by earlier app versions, mapped onto the current set on read.
LEGACY_ACTIVITY_TYPES = {"virtual": "unknown"}


class CyclingActivityCreate(CamelDocumentModel):
    strava_id: Number
    user_id: str
    date: str
    duration_minutes: Number
    avg_power: Number
    normalized_power: Number
    max_power: Number
    avg_heart_rate: Number
    max_heart_rate: Number
    tss: Number
    intensity_factor: Number
    type: CyclingActivityType
    source: Literal["strava"] = "strava"
    ef: Optional[Number] = None
    peak5_min_power: Optional[Number] = Field(default=None, alias="peak5MinPower")
    peak20_min_power: Optional[Number] = Field(default=None, alias="peak20MinPower")
    hr_completeness: Optional[Number] = None
    created_at: str


class CyclingActivityUpdate(CamelDocumentModel):
    type: Optional[CyclingActivityType] = None
    ef: Optional[Number] = None
    peak5_min_power: Optional[Number] = Field(default=None, alias="peak5MinPower")
    peak20_min_power: Optional[Number] = Field(default=None, alias="peak20MinPower")
    hr_completeness: Optional[Number] = None


class CyclingActivity(CyclingActivityCreate):
    id: str


class ActivityStreamsInput(CamelDocumentModel):
    activity_id: str
    strava_activity_id: Number
    sample_count: Number
    watts: Optional[List[Number]] = None
    heartrate: Optional[List[Number]] = None
    time: Optional[List[Number]] = None
    cadence: Optional[List[Number]] = None


class ActivityStreams(ActivityStreamsInput):
    created_at: str


class DeleteCyclingActivityResult(CamelDocumentModel):
    deleted: bool
    had_streams: bool
