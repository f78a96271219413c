from typing import List, Literal, Optional

from pydantic import Field, StrictBool

from .common import CamelDocumentModel, Number

BodyRegion = Literal["neck", "shoulders", "back", "hip_flexors", "glutes", "hamstrings", "quads", "calves"]
BODY_REGIONS = ("neck", "shoulders", "back", "hip_flexors", "glutes", "hamstrings", "quads", "calves")


class StretchDefinition(CamelDocumentModel):
    id: str
    name: str
    description: str
    bilateral: StrictBool
    image: Optional[str] = None


class StretchRegionCreate(CamelDocumentModel):
    region: BodyRegion
    display_name: str
    icon_name: str
    stretches: List[StretchDefinition]


class StretchRegionUpdate(CamelDocumentModel):
    display_name: Optional[str] = None
    icon_name: Optional[str] = None
    stretches: Optional[List[StretchDefinition]] = None


class StretchRegion(StretchRegionCreate):
    id: str
    created_at: str = Field(alias="created_at")
    updated_at: str = Field(alias="updated_at")


class CompletedStretch(CamelDocumentModel):
    region: BodyRegion
    stretch_id: str
    stretch_name: str
    duration_seconds: Number
    skipped_segments: Number


class StretchSessionCreate(CamelDocumentModel):
    completed_at: str
    total_duration_seconds: Number
    regions_completed: Number
    regions_skipped: Number
    stretches: List[CompletedStretch]


class StretchSession(StretchSessionCreate):
    id: str
