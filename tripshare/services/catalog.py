"""
Trip Catalog
============

Creates and queries trips.  Creating a trip also grants its owner the
``admin`` membership inside the same unit of work, so the two rows commit
or roll back together.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.config import settings
from tripshare.domain.entities import UserIdentity
from tripshare.domain.errors import AmbiguousTrip, NotFound
from tripshare.infrastructure.models import TripModel
from tripshare.infrastructure.repositories import TripRepository
from tripshare.services.membership import MembershipWorkflow

logger = logging.getLogger(__name__)


class TripCatalog:
    def __init__(self, db: AsyncSession):
        self.repo = TripRepository(db)
        self.memberships = MembershipWorkflow(db)

    async def create(
        self,
        owner: UserIdentity,
        *,
        trip_name: str,
        destination: str,
        start_date: date | None = None,
        end_date: date | None = None,
        amount: float | None = None,
        details: str | None = None,
        image_url: str | None = None,
    ) -> TripModel:
        trip = await self.repo.create_trip(
            user_id=owner.id,
            user_name=owner.name,
            trip_name=trip_name,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            amount=amount,
            details=details,
            image_url=image_url,
        )
        await self.memberships.grant_admin(trip, owner)
        logger.info("User %d created trip %d (%s)", owner.id, trip.id, trip_name)
        return trip

    async def list_trips(self, limit: int | None = None) -> list[TripModel]:
        return await self.repo.list_all(limit or settings.trip_list_limit)

    async def list_by_owner(self, user_id: int) -> list[TripModel]:
        return await self.repo.list_by_owner(user_id)

    async def find_by_name_and_destination(
        self, trip_name: str, destination: str
    ) -> list[TripModel]:
        return await self.repo.find_by_name_and_destination(trip_name, destination)

    async def search(self, term: str) -> list[TripModel]:
        return await self.repo.search(term)

    async def get(self, trip_id: int) -> TripModel:
        trip = await self.repo.get_by_id(trip_id)
        if trip is None:
            raise NotFound("Trip not found")
        return trip

    async def resolve(
        self,
        trip_id: int | None = None,
        trip_name: str | None = None,
        destination: str | None = None,
    ) -> TripModel:
        """Find one trip by id, or by its (name, destination) pair."""
        if trip_id is not None:
            return await self.get(trip_id)
        if not trip_name or not destination:
            raise NotFound("Pass trip_id, or trip_name and destination")

        matches = await self.repo.find_by_name_and_destination(trip_name, destination)
        if not matches:
            raise NotFound("Trip not found")
        if len(matches) > 1:
            raise AmbiguousTrip()
        return matches[0]
