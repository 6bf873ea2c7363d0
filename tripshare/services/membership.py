"""
Membership Workflow
===================

Owns the per (user, trip) status rows and drives them through the state
machine in ``tripshare.domain.enums.MEMBERSHIP_TRANSITIONS``:

    (trip created) -> admin
    new     -- apply   --> applied
    applied -- accept  --> joined
    applied -- decline --> declined

A pair without a row is ``new``.  Any existing row blocks a new application,
so declined and joined users cannot apply again.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.domain.entities import Membership, UserIdentity
from tripshare.domain.enums import MembershipStatus
from tripshare.domain.errors import DuplicateEntity, NotAuthorized, NotFound
from tripshare.infrastructure.models import MembershipModel, TripModel
from tripshare.infrastructure.repositories import MembershipRepository

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "You have already applied to join this trip."


class MembershipWorkflow:
    def __init__(self, db: AsyncSession):
        self.repo = MembershipRepository(db)

    async def grant_admin(self, trip: TripModel, owner: UserIdentity) -> MembershipModel:
        return await self.repo.create_membership(
            user_id=owner.id,
            trip_id=trip.id,
            user_name=owner.name,
            status=MembershipStatus.ADMIN,
        )

    async def status_of(self, trip_id: int, user_id: int) -> MembershipStatus:
        row = await self.repo.get(trip_id, user_id)
        if row is None:
            return MembershipStatus.NEW
        return MembershipStatus(row.status)

    async def apply(self, trip: TripModel, user: UserIdentity) -> MembershipModel:
        if await self.repo.get(trip.id, user.id) is not None:
            raise DuplicateEntity(ALREADY_APPLIED)

        membership = Membership(user_id=user.id, trip_id=trip.id, user_name=user.name)
        membership.transition_to(MembershipStatus.APPLIED)
        try:
            async with self.repo.session.begin_nested():
                row = await self.repo.create_membership(
                    user_id=membership.user_id,
                    trip_id=membership.trip_id,
                    user_name=membership.user_name,
                    status=membership.status,
                )
        except IntegrityError as exc:
            # lost the race against a concurrent application
            raise DuplicateEntity(ALREADY_APPLIED) from exc

        logger.info("User %d applied to trip %d", user.id, trip.id)
        return row

    async def accept(
        self, trip: TripModel, user_id: int, actor: UserIdentity
    ) -> MembershipModel:
        return await self._resolve(trip, user_id, actor, MembershipStatus.JOINED)

    async def decline(
        self, trip: TripModel, user_id: int, actor: UserIdentity
    ) -> MembershipModel:
        return await self._resolve(trip, user_id, actor, MembershipStatus.DECLINED)

    async def members_with_status(
        self, trip_id: int, status: MembershipStatus
    ) -> list[MembershipModel]:
        return await self.repo.list_by_status(trip_id, status)

    async def _resolve(
        self,
        trip: TripModel,
        user_id: int,
        actor: UserIdentity,
        target: MembershipStatus,
    ) -> MembershipModel:
        if trip.user_id != actor.id:
            raise NotAuthorized()

        row = await self.repo.get(trip.id, user_id)
        if row is None:
            raise NotFound("This user has not applied to join the trip")

        membership = Membership(
            id=row.id,
            user_id=row.user_id,
            trip_id=row.trip_id,
            user_name=row.user_name,
            status=MembershipStatus(row.status),
        )
        membership.transition_to(target)
        row.status = membership.status
        await self.repo.session.flush()

        logger.info(
            "Trip %d: user %d is now %s (by %d)",
            trip.id, user_id, target.value, actor.id,
        )
        return row
