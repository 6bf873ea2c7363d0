"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Nothing here commits; the request-scoped
session dependency owns the transaction.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import MembershipModel, TripModel, UserModel
from tripshare.domain.enums import MembershipStatus


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(
        self, *, email: str, name: str, password_hash: str
    ) -> UserModel:
        user = UserModel(email=email, name=name, password_hash=password_hash)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()


class TripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_trip(
        self,
        *,
        user_id: int,
        user_name: str,
        trip_name: str,
        destination: str,
        start_date: date | None = None,
        end_date: date | None = None,
        amount: float | None = None,
        details: str | None = None,
        image_url: str | None = None,
    ) -> TripModel:
        trip = TripModel(
            user_id=user_id,
            user_name=user_name,
            trip_name=trip_name,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            amount=amount,
            details=details,
            image_url=image_url,
        )
        self.session.add(trip)
        await self.session.flush()
        return trip

    async def get_by_id(self, trip_id: int) -> Optional[TripModel]:
        return await self.session.get(TripModel, trip_id)

    async def list_all(self, limit: int) -> list[TripModel]:
        result = await self.session.execute(select(TripModel).limit(limit))
        return list(result.scalars().all())

    async def list_by_owner(self, user_id: int) -> list[TripModel]:
        result = await self.session.execute(
            select(TripModel).where(TripModel.user_id == user_id)
        )
        return list(result.scalars().all())

    async def find_by_name_and_destination(
        self, trip_name: str, destination: str
    ) -> list[TripModel]:
        result = await self.session.execute(
            select(TripModel).where(
                TripModel.trip_name == trip_name,
                TripModel.destination == destination,
            )
        )
        return list(result.scalars().all())

    async def search(self, term: str) -> list[TripModel]:
        """Case-insensitive substring match on trip name or destination."""
        needle = term.lower()
        result = await self.session.execute(
            select(TripModel).where(
                or_(
                    func.lower(TripModel.trip_name).contains(needle, autoescape=True),
                    func.lower(TripModel.destination).contains(needle, autoescape=True),
                )
            )
        )
        return list(result.scalars().all())


class MembershipRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_membership(
        self,
        *,
        user_id: int,
        trip_id: int,
        user_name: str,
        status: MembershipStatus,
    ) -> MembershipModel:
        membership = MembershipModel(
            user_id=user_id, trip_id=trip_id, user_name=user_name, status=status
        )
        self.session.add(membership)
        await self.session.flush()
        return membership

    async def get(self, trip_id: int, user_id: int) -> Optional[MembershipModel]:
        result = await self.session.execute(
            select(MembershipModel).where(
                MembershipModel.trip_id == trip_id,
                MembershipModel.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_status(
        self, trip_id: int, status: MembershipStatus
    ) -> list[MembershipModel]:
        result = await self.session.execute(
            select(MembershipModel).where(
                MembershipModel.trip_id == trip_id,
                MembershipModel.status == status,
            )
        )
        return list(result.scalars().all())
