"""Pure role policy decisions for house membership.

No I/O happens here; callers load the memberships and act on the answers.
"""

from collections.abc import Iterable
from typing import Final, Literal

from homeboard.domain.house import Membership, Role


REMOVED: Final = "removed"

MembershipChange = Role | Literal["removed"]

# Extend together with Role when a new tier is introduced
ROLE_RANK: dict[Role, int] = {
    Role.OWNER: 2,
    Role.MEMBER: 1,
}


def has_required_role(role: Role, required: Role) -> bool:
    """Return True if ``role`` ranks at or above ``required``."""
    return ROLE_RANK[role] >= ROLE_RANK[required]


def can_moderate_house(role: Role) -> bool:
    """Owners alone may edit or delete a house and manage its members."""
    return has_required_role(role, Role.OWNER)


def count_owners(memberships: Iterable[Membership]) -> int:
    return sum(1 for membership in memberships if membership.role == Role.OWNER)


def would_violate_last_owner(
    memberships: Iterable[Membership],
    target_membership_id: str,
    change: MembershipChange,
) -> bool:
    """Decide whether removing or re-roling a member would leave the house without an owner.

    Args:
        memberships: Every membership of the house
        target_membership_id: Membership being removed or re-roled
        change: The new role, or ``REMOVED`` for removal

    Returns:
        True when the target is currently an owner, the change takes that role
        away, and no other owner remains
    """
    memberships = list(memberships)
    target = next((m for m in memberships if m.id == target_membership_id), None)
    if target is None or target.role != Role.OWNER:
        return False

    if change == Role.OWNER:
        return False

    return count_owners(memberships) <= 1
