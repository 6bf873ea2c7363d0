"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from tripshare.domain.enums import MembershipStatus


# ── Requests ──────────────────────────────────────────────────────────


class TripRef(BaseModel):
    """Identifies a trip by id, or by the legacy (name, destination) pair."""

    trip_id: Optional[int] = None
    trip_name: Optional[str] = None
    destination: Optional[str] = None


class MemberDecisionRequest(TripRef):
    user_id: int = Field(..., description="Applicant to accept or decline.")


# ── Responses ─────────────────────────────────────────────────────────


class TripResponse(BaseModel):
    id: int
    user_id: int
    user_name: str
    trip_name: str
    destination: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    amount: Optional[float] = None
    details: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MemberResponse(BaseModel):
    id: int
    user_id: int
    trip_id: int
    user_name: str
    status: MembershipStatus

    model_config = {"from_attributes": True}


class ApiResponse(BaseModel):
    status: bool = True
    loggedIn: bool = True


class LoginStatusResponse(BaseModel):
    status: bool = True
    loggedIn: bool
    name: Optional[str] = None


class TripCreatedResponse(ApiResponse):
    tripId: int


class TripListResponse(ApiResponse):
    trips: list[TripResponse] = []


class UserStatusResponse(ApiResponse):
    userStatus: MembershipStatus


class MemberListResponse(ApiResponse):
    users: list[MemberResponse] = []
