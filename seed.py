"""
Seed script -- populates the database with sample data for local development.

Run after migrations:
    python seed.py

Creates:
  - 6 sample users (password: ``password123``)
  - 4 sample trips, each with its owner as admin
  - join requests in every state (applied, joined, declined)
"""

import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.config import settings
from tripshare.domain.entities import UserIdentity
from tripshare.domain.security import hash_password
from tripshare.infrastructure.database import async_session_factory, engine
from tripshare.infrastructure.models import UserModel
from tripshare.infrastructure.repositories import UserRepository
from tripshare.services.catalog import TripCatalog
from tripshare.services.membership import MembershipWorkflow

SEED_PASSWORD = "password123"

USERS = [
    {"name": "Ann Keller", "email": "ann@example.com"},
    {"name": "Ben Ortiz", "email": "ben@example.com"},
    {"name": "Chloe Martin", "email": "chloe@example.com"},
    {"name": "Dev Raman", "email": "dev@example.com"},
    {"name": "Elif Yilmaz", "email": "elif@example.com"},
    {"name": "Femi Adeyemi", "email": "femi@example.com"},
]

TRIPS = [
    # owner index, trip fields
    (0, {"trip_name": "Alps Trek", "destination": "Alps", "amount": 1200.0,
         "details": "Hut-to-hut hike, ten days."}),
    (1, {"trip_name": "Island Hopping", "destination": "Cyclades", "amount": 900.0,
         "details": "Ferries between five islands."}),
    (2, {"trip_name": "Northern Lights", "destination": "Tromso", "amount": 1500.0,
         "details": "Winter week chasing aurora."}),
    (3, {"trip_name": "Desert Camp", "destination": "Wadi Rum", "amount": 700.0,
         "details": "Two nights in a Bedouin camp."}),
]

# (trip index, applicant index, decision) -- decision None leaves it applied
REQUESTS = [
    (0, 1, "accept"),
    (0, 2, "decline"),
    (0, 3, None),
    (1, 0, "accept"),
    (2, 4, None),
    (3, 5, "accept"),
]


async def seed(session: AsyncSession) -> bool:
    """Insert the sample data; returns False when the database is not empty."""
    result = await session.execute(select(func.count()).select_from(UserModel))
    if result.scalar() > 0:
        print("Database already seeded. Skipping.")
        return False

    # ── Users ─────────────────────────────────────────────────────────
    users = UserRepository(session)
    password_hash = await hash_password(SEED_PASSWORD, settings.bcrypt_rounds)
    identities = []
    for u in USERS:
        m = await users.create_user(
            email=u["email"], name=u["name"], password_hash=password_hash
        )
        identities.append(UserIdentity(id=m.id, email=m.email, name=m.name))
    print(f"  Created {len(identities)} users")

    # ── Trips (owner becomes admin) ───────────────────────────────────
    catalog = TripCatalog(session)
    trips = []
    for owner_idx, fields in TRIPS:
        trips.append(await catalog.create(identities[owner_idx], **fields))
    print(f"  Created {len(trips)} trips")

    # ── Join requests ─────────────────────────────────────────────────
    workflow = MembershipWorkflow(session)
    for trip_idx, user_idx, decision in REQUESTS:
        trip = trips[trip_idx]
        owner = identities[TRIPS[trip_idx][0]]
        applicant = identities[user_idx]
        await workflow.apply(trip, applicant)
        if decision == "accept":
            await workflow.accept(trip, applicant.id, owner)
        elif decision == "decline":
            await workflow.decline(trip, applicant.id, owner)
    print(f"  Created {len(REQUESTS)} join requests")

    await session.commit()
    print("\nSeed complete!")
    return True


async def main():
    print("Seeding database...")
    async with async_session_factory() as session:
        await seed(session)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
