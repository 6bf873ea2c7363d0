"""Domain enumerations and state-transition rules."""

import enum


class MembershipStatus(str, enum.Enum):
    NEW = "new"  # no membership row exists
    ADMIN = "admin"
    APPLIED = "applied"
    JOINED = "joined"
    DECLINED = "declined"


# State machine: maps current status -> set of valid next statuses.
# ADMIN is assigned on trip creation only and never reached by a transition.
MEMBERSHIP_TRANSITIONS: dict[MembershipStatus, set[MembershipStatus]] = {
    MembershipStatus.NEW: {MembershipStatus.APPLIED},
    MembershipStatus.APPLIED: {MembershipStatus.JOINED, MembershipStatus.DECLINED},
    MembershipStatus.ADMIN: set(),
    MembershipStatus.JOINED: set(),
    MembershipStatus.DECLINED: set(),
}
