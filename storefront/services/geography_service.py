from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.constants import GODOWN_AREA, GODOWN_MICRO
from storefront.models.godown import Godown, GodownLocalBody, GodownWard
from storefront.models.profile import Profile


def micro_godown_ids(db: Session, local_body_id, ward_number) -> set[int]:
    stmt = (
        select(GodownWard.godown_id)
        .join(Godown, Godown.id == GodownWard.godown_id)
        .where(
            GodownWard.local_body_id == local_body_id,
            GodownWard.ward_number == ward_number,
            Godown.godown_type == GODOWN_MICRO,
            Godown.is_active.is_(True),
        )
    )
    return set(db.execute(stmt).scalars().all())


def area_godown_ids(db: Session, local_body_id) -> set[int]:
    stmt = (
        select(GodownLocalBody.godown_id)
        .join(Godown, Godown.id == GodownLocalBody.godown_id)
        .where(
            GodownLocalBody.local_body_id == local_body_id,
            Godown.godown_type == GODOWN_AREA,
            Godown.is_active.is_(True),
        )
    )
    return set(db.execute(stmt).scalars().all())


def resolve_eligible_godown_ids(db: Session, local_body_id, ward_number) -> set[int]:
    """Godowns allowed to serve a customer living in (local body, ward).

    Micro godowns must cover the exact ward; area godowns only need the local
    body. Local godowns are backstock and never serve customers directly.
    """
    if not local_body_id or not ward_number:
        return set()
    return micro_godown_ids(db, local_body_id, ward_number) | area_godown_ids(db, local_body_id)


def get_profile(db: Session, user_id):
    return db.execute(select(Profile).where(Profile.user_id == user_id)).scalars().first()


def eligible_godown_ids_for_user(db: Session, user_id) -> set[int]:
    profile = get_profile(db, user_id)
    if profile is None:
        return set()
    return resolve_eligible_godown_ids(db, profile.local_body_id, profile.ward_number)


__all__ = [
    "area_godown_ids",
    "eligible_godown_ids_for_user",
    "get_profile",
    "micro_godown_ids",
    "resolve_eligible_godown_ids",
]
