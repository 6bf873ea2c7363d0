"""
Travel endpoints
================

POST /api/travel/addTrip            -- create a trip (multipart, optional ``image``)
GET  /api/travel/trips              -- first ``trip_list_limit`` trips
GET  /api/travel/hostedTrips        -- trips hosted by the caller
GET  /api/travel/specificTrip       -- trips with a given name and destination
GET  /api/travel/searchTrip         -- case-insensitive search on name / destination
GET  /api/travel/userStatus         -- caller's membership status for a trip
POST /api/travel/applyToJoin        -- new -> applied
POST /api/travel/addUserToTrip      -- applied -> joined   (trip admin only)
POST /api/travel/declineUserToTrip  -- applied -> declined (trip admin only)
GET  /api/travel/appliedUsers|joinedUsers|declinedUsers

Membership routes take a trip reference: ``trip_id``, or ``trip_name`` plus
``destination`` when that pair names exactly one trip.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.api.dependencies import get_db, require_user
from tripshare.api.middleware import RATE_LIMIT, limiter
from tripshare.api.schemas import (
    ApiResponse,
    MemberDecisionRequest,
    MemberListResponse,
    MemberResponse,
    TripCreatedResponse,
    TripListResponse,
    TripRef,
    TripResponse,
    UserStatusResponse,
)
from tripshare.config import settings
from tripshare.domain.entities import UserIdentity
from tripshare.domain.enums import MembershipStatus
from tripshare.infrastructure.uploads import discard_upload, save_upload
from tripshare.services.catalog import TripCatalog
from tripshare.services.membership import MembershipWorkflow

router = APIRouter(prefix="/api/travel", tags=["travel"])


def trip_ref_query(
    trip_id: Optional[int] = None,
    trip_name: Optional[str] = None,
    destination: Optional[str] = None,
) -> TripRef:
    return TripRef(trip_id=trip_id, trip_name=trip_name, destination=destination)


def _trips(rows) -> TripListResponse:
    return TripListResponse(trips=[TripResponse.model_validate(r) for r in rows])


def _members(rows) -> MemberListResponse:
    return MemberListResponse(users=[MemberResponse.model_validate(r) for r in rows])


# ── Trip Catalog ──────────────────────────────────────────────────────


@router.post(
    "/addTrip",
    response_model=TripCreatedResponse,
    summary="Create a trip; the caller becomes its admin",
)
@limiter.limit(RATE_LIMIT)
async def add_trip(
    request: Request,
    tripName: str = Form(...),
    destination: str = Form(...),
    startDate: Optional[date] = Form(None),
    endDate: Optional[date] = Form(None),
    amount: Optional[float] = Form(None),
    details: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user: UserIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    image_url = None
    if image is not None and image.filename:
        image_url = await save_upload(image, settings.upload_dir)

    try:
        trip = await TripCatalog(db).create(
            user,
            trip_name=tripName,
            destination=destination,
            start_date=startDate,
            end_date=endDate,
            amount=amount,
            details=details,
            image_url=image_url,
        )
        await db.commit()
    except Exception:
        if image_url is not None:
            await discard_upload(image_url, settings.upload_dir)
        raise
    return TripCreatedResponse(tripId=trip.id)


@router.get("/trips", response_model=TripListResponse, summary="List trips")
@limiter.limit(RATE_LIMIT)
async def list_trips(request: Request, db: AsyncSession = Depends(get_db)):
    return _trips(await TripCatalog(db).list_trips())


@router.get(
    "/hostedTrips",
    response_model=TripListResponse,
    summary="Trips hosted by the caller",
)
@limiter.limit(RATE_LIMIT)
async def hosted_trips(
    request: Request,
    user: UserIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return _trips(await TripCatalog(db).list_by_owner(user.id))


@router.get(
    "/specificTrip",
    response_model=TripListResponse,
    summary="Trips matching a name and destination",
)
@limiter.limit(RATE_LIMIT)
async def specific_trip(
    request: Request,
    trip_name: str,
    destination: str,
    db: AsyncSession = Depends(get_db),
):
    return _trips(
        await TripCatalog(db).find_by_name_and_destination(trip_name, destination)
    )


@router.get("/searchTrip", response_model=TripListResponse, summary="Search trips")
@limiter.limit(RATE_LIMIT)
async def search_trip(
    request: Request,
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    return _trips(await TripCatalog(db).search(search))


# ── Membership Workflow ───────────────────────────────────────────────


@router.get(
    "/userStatus",
    response_model=UserStatusResponse,
    summary="Caller's membership status for a trip",
)
@limiter.limit(RATE_LIMIT)
async def user_status(
    request: Request,
    ref: TripRef = Depends(trip_ref_query),
    user: UserIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    trip = await TripCatalog(db).resolve(ref.trip_id, ref.trip_name, ref.destination)
    status = await MembershipWorkflow(db).status_of(trip.id, user.id)
    return UserStatusResponse(userStatus=status)


@router.post("/applyToJoin", response_model=ApiResponse, summary="Apply to join a trip")
@limiter.limit(RATE_LIMIT)
async def apply_to_join(
    request: Request,
    body: TripRef,
    user: UserIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    trip = await TripCatalog(db).resolve(body.trip_id, body.trip_name, body.destination)
    await MembershipWorkflow(db).apply(trip, user)
    return ApiResponse()


@router.post(
    "/addUserToTrip",
    response_model=UserStatusResponse,
    summary="Accept an applicant (trip admin only)",
)
@limiter.limit(RATE_LIMIT)
async def add_user_to_trip(
    request: Request,
    body: MemberDecisionRequest,
    user: UserIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    trip = await TripCatalog(db).resolve(body.trip_id, body.trip_name, body.destination)
    await MembershipWorkflow(db).accept(trip, body.user_id, user)
    return UserStatusResponse(userStatus=MembershipStatus.JOINED)


@router.post(
    "/declineUserToTrip",
    response_model=UserStatusResponse,
    summary="Decline an applicant (trip admin only)",
)
@limiter.limit(RATE_LIMIT)
async def decline_user_to_trip(
    request: Request,
    body: MemberDecisionRequest,
    user: UserIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    trip = await TripCatalog(db).resolve(body.trip_id, body.trip_name, body.destination)
    await MembershipWorkflow(db).decline(trip, body.user_id, user)
    return UserStatusResponse(userStatus=MembershipStatus.DECLINED)


async def _members_with_status(
    db: AsyncSession, ref: TripRef, status: MembershipStatus
) -> MemberListResponse:
    trip = await TripCatalog(db).resolve(ref.trip_id, ref.trip_name, ref.destination)
    return _members(await MembershipWorkflow(db).members_with_status(trip.id, status))


@router.get("/appliedUsers", response_model=MemberListResponse, summary="Pending applicants")
@limiter.limit(RATE_LIMIT)
async def applied_users(
    request: Request,
    ref: TripRef = Depends(trip_ref_query),
    db: AsyncSession = Depends(get_db),
):
    return await _members_with_status(db, ref, MembershipStatus.APPLIED)


@router.get("/joinedUsers", response_model=MemberListResponse, summary="Accepted members")
@limiter.limit(RATE_LIMIT)
async def joined_users(
    request: Request,
    ref: TripRef = Depends(trip_ref_query),
    db: AsyncSession = Depends(get_db),
):
    return await _members_with_status(db, ref, MembershipStatus.JOINED)


@router.get("/declinedUsers", response_model=MemberListResponse, summary="Declined applicants")
@limiter.limit(RATE_LIMIT)
async def declined_users(
    request: Request,
    ref: TripRef = Depends(trip_ref_query),
    db: AsyncSession = Depends(get_db),
):
    return await _members_with_status(db, ref, MembershipStatus.DECLINED)
