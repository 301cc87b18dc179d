import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.constants import GODOWN_MICRO, GODOWN_TYPES
from storefront.core.errors import NotFound, ValidationFailed
from storefront.models.godown import Godown, GodownLocalBody, GodownWard
from storefront.models.locations import LocalBody

logger = logging.getLogger(__name__)


def create_godown(db: Session, name: str, godown_type: str) -> Godown:
    name = (name or "").strip()
    if not name:
        raise ValidationFailed("Godown name is required")
    if godown_type not in GODOWN_TYPES:
        raise ValidationFailed("Unknown godown type: {}".format(godown_type))
    godown = Godown(name=name, godown_type=godown_type)
    db.add(godown)
    db.commit()
    db.refresh(godown)
    return godown


def _require_godown(db: Session, godown_id) -> Godown:
    godown = db.get(Godown, godown_id)
    if godown is None:
        raise NotFound("Godown {} not found".format(godown_id))
    return godown


def _require_local_body(db: Session, local_body_id) -> LocalBody:
    local_body = db.get(LocalBody, local_body_id)
    if local_body is None:
        raise NotFound("Local body {} not found".format(local_body_id))
    return local_body


def assign_micro_wards(db: Session, godown_id, local_body_id, ward_numbers=None, *, all_wards=False):
    """Bind a micro godown to one local body and replace its ward list."""
    godown = _require_godown(db, godown_id)
    if godown.godown_type != GODOWN_MICRO:
        raise ValidationFailed("Ward coverage applies to micro godowns only")
    local_body = _require_local_body(db, local_body_id)

    if all_wards:
        wards = list(range(1, (local_body.ward_count or 0) + 1))
    else:
        wards = sorted({int(ward) for ward in (ward_numbers or [])})
    if not wards:
        raise ValidationFailed("Select at least one ward")
    out_of_range = [ward for ward in wards if ward < 1 or ward > (local_body.ward_count or 0)]
    if out_of_range:
        raise ValidationFailed(
            "Ward(s) {} outside 1..{} for {}".format(
                ", ".join(str(ward) for ward in out_of_range),
                local_body.ward_count,
                local_body.name,
            )
        )

    bound_elsewhere = db.execute(
        select(GodownLocalBody.local_body_id).where(
            GodownLocalBody.godown_id == godown.id,
            GodownLocalBody.local_body_id != local_body.id,
        )
    ).first()
    if bound_elsewhere is not None:
        raise ValidationFailed("A micro godown serves a single local body")

    try:
        existing = db.execute(
            select(GodownLocalBody).where(
                GodownLocalBody.godown_id == godown.id,
                GodownLocalBody.local_body_id == local_body.id,
            )
        ).scalars().first()
        if existing is None:
            db.add(GodownLocalBody(godown_id=godown.id, local_body_id=local_body.id))

        db.execute(
            delete(GodownWard).where(
                GodownWard.godown_id == godown.id,
                GodownWard.local_body_id == local_body.id,
            )
        )
        db.add_all(
            GodownWard(godown_id=godown.id, local_body_id=local_body.id, ward_number=ward)
            for ward in wards
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ward assignment failed for godown %s", godown.id)
        raise

    logger.info(
        "Godown %s covers %d ward(s) of local body %s",
        godown.id,
        len(wards),
        local_body.id,
        extra={"godown_id": godown.id},
    )
    return wards


def assign_local_bodies(db: Session, godown_id, local_body_ids):
    """Add local-body coverage to a local or area godown; returns new ids."""
    godown = _require_godown(db, godown_id)
    if godown.godown_type == GODOWN_MICRO:
        raise ValidationFailed("Micro godowns are assigned by ward")
    requested = list(dict.fromkeys(local_body_ids or []))
    if not requested:
        raise ValidationFailed("Select at least one panchayath")
    for local_body_id in requested:
        _require_local_body(db, local_body_id)

    existing_ids = set(
        db.execute(
            select(GodownLocalBody.local_body_id).where(GodownLocalBody.godown_id == godown.id)
        ).scalars()
    )
    new_ids = [local_body_id for local_body_id in requested if local_body_id not in existing_ids]
    if not new_ids:
        raise ValidationFailed("All selected panchayaths are already assigned")

    try:
        db.add_all(GodownLocalBody(godown_id=godown.id, local_body_id=lb_id) for lb_id in new_ids)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Local body assignment failed for godown %s", godown.id)
        raise
    return new_ids


def remove_coverage(db: Session, binding_id) -> None:
    binding = db.get(GodownLocalBody, binding_id)
    if binding is None:
        raise NotFound("Coverage {} not found".format(binding_id))
    try:
        db.execute(
            delete(GodownWard).where(
                GodownWard.godown_id == binding.godown_id,
                GodownWard.local_body_id == binding.local_body_id,
            )
        )
        db.delete(binding)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Removing coverage %s failed", binding_id)
        raise


def list_godowns(db: Session, godown_type=None, *, active_only=False):
    stmt = select(Godown).order_by(Godown.name)
    if godown_type:
        stmt = stmt.where(Godown.godown_type == godown_type)
    if active_only:
        stmt = stmt.where(Godown.is_active.is_(True))
    return list(db.execute(stmt).scalars().all())


__all__ = [
    "assign_local_bodies",
    "assign_micro_wards",
    "create_godown",
    "list_godowns",
    "remove_coverage",
]
