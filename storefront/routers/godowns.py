from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.constants import GODOWN_MICRO
from storefront.core.errors import StorefrontError, ValidationFailed
from storefront.dependencies import get_db, http_error, require_auth
from storefront.models.godown import Godown
from storefront.schemas.godown import CoverageRequest, EligibleGodownsRead, GodownCreate
from storefront.schemas.stock import GodownRead
from storefront.services.geography_service import resolve_eligible_godown_ids
from storefront.services.godown_service import (
    assign_local_bodies,
    assign_micro_wards,
    create_godown,
    list_godowns,
    remove_coverage,
)

router = APIRouter(prefix="/godowns", tags=["Godowns"])


@router.get("", response_model=List[GodownRead])
def get_godowns(
    godown_type: Optional[str] = Query(None),
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return list_godowns(db, godown_type, active_only=active_only)


@router.post("", response_model=GodownRead, status_code=201)
def add_godown(
    payload: GodownCreate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return create_godown(db, payload.name, payload.godown_type)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


@router.get("/eligible", response_model=EligibleGodownsRead)
def eligible_godowns(
    local_body_id: Optional[int] = Query(None),
    ward_number: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    godown_ids = resolve_eligible_godown_ids(db, local_body_id, ward_number)
    return EligibleGodownsRead(
        local_body_id=local_body_id,
        ward_number=ward_number,
        godown_ids=sorted(godown_ids),
    )


@router.post("/{godown_id}/coverage")
def add_coverage(
    godown_id: int,
    payload: CoverageRequest,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        godown = db.get(Godown, godown_id)
        if godown is not None and godown.godown_type == GODOWN_MICRO:
            if payload.local_body_id is None:
                raise ValidationFailed("Select a panchayath")
            wards = assign_micro_wards(
                db,
                godown_id,
                payload.local_body_id,
                payload.ward_numbers,
                all_wards=payload.all_wards,
            )
            return {"godown_id": godown_id, "local_body_id": payload.local_body_id, "ward_numbers": wards}
        local_body_ids = payload.local_body_ids or (
            [payload.local_body_id] if payload.local_body_id is not None else []
        )
        added = assign_local_bodies(db, godown_id, local_body_ids)
        return {"godown_id": godown_id, "local_body_ids": added}
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


@router.delete("/coverage/{binding_id}", status_code=204)
def delete_coverage(
    binding_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        remove_coverage(db, binding_id)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


__all__ = ["router"]
