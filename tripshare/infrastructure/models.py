"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``users``        -- registered travellers (email is the login identifier)
* ``trips``        -- trips hosted by a user
* ``memberships``  -- per (user, trip) join-request status

Indexes
-------
* **Unique** on ``users.email`` and on ``memberships (user_id, trip_id)``;
  the latter closes the duplicate-apply race.
* **B-Tree** on ``trips.user_id``, ``trips (trip_name, destination)`` and
  ``memberships (trip_id, status)`` for the listing endpoints.
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from .database import Base
from tripshare.domain.enums import MembershipStatus


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TripModel(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # Owner name is denormalized so listings need no join
    user_name = Column(String(120), nullable=False)

    trip_name = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    amount = Column(Float, nullable=True)
    details = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_trips_owner", "user_id"),
        Index("idx_trips_name_destination", "trip_name", "destination"),
    )


class MembershipModel(Base):
    __tablename__ = "memberships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False)
    user_name = Column(String(120), nullable=False)
    status = Column(
        Enum(
            MembershipStatus,
            name="membershipstatus",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "trip_id", name="uq_membership_user_trip"),
        Index("idx_memberships_trip_status", "trip_id", "status"),
    )
