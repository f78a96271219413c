from typing import List, Literal, Optional

from pydantic import Field, StrictBool

from .common import CamelDocumentModel, Number

SegmentPhase = Literal["opening", "teachings", "closing"]
SEGMENT_PHASES = ("opening", "teachings", "closing")


class GuidedMeditationSegmentInput(CamelDocumentModel):
    start_seconds: Number
    text: str
    phase: SegmentPhase


class GuidedMeditationSegment(GuidedMeditationSegmentInput):
    id: str


class GuidedMeditationInterjection(CamelDocumentModel):
    window_start_seconds: Number
    window_end_seconds: Number
    text_options: List[str]


class GuidedMeditationScriptCreate(CamelDocumentModel):
    category: str
    title: str
    subtitle: str
    order_index: Number
    duration_seconds: Number
    segments: List[GuidedMeditationSegmentInput]
    interjections: List[GuidedMeditationInterjection]


class GuidedMeditationScriptUpdate(CamelDocumentModel):
    category: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    order_index: Optional[Number] = None
    duration_seconds: Optional[Number] = None
    segments: Optional[List[GuidedMeditationSegmentInput]] = None
    interjections: Optional[List[GuidedMeditationInterjection]] = None


class GuidedMeditationListing(CamelDocumentModel):
    """Script header without segments or interjections, for category listings."""

    id: str
    category: str
    title: str
    subtitle: str
    order_index: Number
    duration_seconds: Number
    created_at: str = Field(alias="created_at")
    updated_at: str = Field(alias="updated_at")


class GuidedMeditationScript(GuidedMeditationListing):
    segments: List[GuidedMeditationSegment]
    interjections: List[GuidedMeditationInterjection]


class GuidedMeditationCategory(CamelDocumentModel):
    id: str
    name: str
    script_count: int


class MeditationSessionCreate(CamelDocumentModel):
    completed_at: str
    session_type: str
    planned_duration_seconds: Number
    actual_duration_seconds: Number
    completed_fully: StrictBool


class MeditationSession(MeditationSessionCreate):
    id: str


class MeditationStats(CamelDocumentModel):
    total_sessions: int
    total_minutes: int
