"""Booking assistant request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SlotRequest(BaseModel):
    destination_address: str = Field(..., description="Address of the job site.")
    required_skill: str = Field(..., description="Skill (pest type) the technician must have.")
    duration_minutes: int = Field(..., description="Length of the visit in minutes (30-480).")
    search_start_date: Optional[date] = Field(
        default=None,
        description="First calendar day to search. Defaults to today in the facility timezone.",
    )
    technician_ids: Optional[List[str]] = Field(
        default=None,
        description="Restrict the search to these technicians.",
    )


class TeamSlotRequest(BaseModel):
    destination_address: str
    required_skill: str
    duration_minutes: int
    search_start_date: Optional[date] = None
    team_size: int = Field(default=2, description="Number of technicians needed simultaneously.")


class SuggestionModel(BaseModel):
    technician_id: str
    technician_name: str
    start_time: datetime
    end_time: datetime
    travel_time_minutes: int
    is_first_job: bool
    travel_time_home_minutes: Optional[int] = None
    efficiency_score: int
    efficiency_label: str
    origin_description: str


class TeamMemberModel(BaseModel):
    id: str
    name: str
    travel_time_minutes: int
    origin_description: str


class TeamSuggestionModel(BaseModel):
    technicians: List[TeamMemberModel]
    start_time: datetime
    end_time: datetime
    efficiency_score: int


class SlotResponse(BaseModel):
    suggestions: List[SuggestionModel]
    metadata: dict


class TeamSlotResponse(BaseModel):
    suggestions: List[TeamSuggestionModel]
    metadata: dict
