from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.constants import GODOWN_TYPES, STOCK_STATUSES
from storefront.core.errors import StorefrontError, ValidationFailed
from storefront.dependencies import get_db, http_error, require_auth
from storefront.schemas.stock import (
    DemandRankingRead,
    PurchaseRequest,
    PurchaseResult,
    StockBatchRead,
    StockBatchUpdate,
    StockControlRead,
    StockHistoryRead,
)
from storefront.services.demand_service import most_demanded, slow_movers
from storefront.services.report_service import build_stock_workbook
from storefront.services.stock_service import (
    delete_batch,
    load_stock_aggregates,
    purchase_history,
    record_purchase,
    stock_control,
    update_batch,
)

router = APIRouter(prefix="/stock", tags=["Stock"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _stock_filters(
    search: Optional[str] = Query(None, description="Product name contains"),
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="in_stock | low_stock | out_of_stock"),
    godown_type: Optional[str] = Query(None, description="micro | local | area"),
    godown_id: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None, description="Batches received on or after"),
    date_to: Optional[date] = Query(None, description="Batches received on or before"),
):
    if status and status not in STOCK_STATUSES:
        raise http_error(ValidationFailed("Unknown stock status: {}".format(status)))
    if godown_type and godown_type not in GODOWN_TYPES:
        raise http_error(ValidationFailed("Unknown godown type: {}".format(godown_type)))
    return {
        "search": search,
        "category": category,
        "status": status,
        "godown_type": godown_type,
        "godown_id": godown_id,
        "date_from": date_from,
        "date_to": date_to,
    }


@router.get("/control", response_model=StockControlRead)
def get_stock_control(
    filters: dict = Depends(_stock_filters),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    result = stock_control(db, **filters)
    return StockControlRead.model_validate(result, from_attributes=True)


@router.get("/demand", response_model=DemandRankingRead)
def get_demand_rankings(
    size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    aggregates = load_stock_aggregates(db)
    result = {
        "most_demanded": most_demanded(aggregates, size),
        "slow_movers": slow_movers(aggregates, size),
    }
    return DemandRankingRead.model_validate(result, from_attributes=True)


@router.get("/export")
def export_stock(
    filters: dict = Depends(_stock_filters),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    result = stock_control(db, **filters)
    content = build_stock_workbook(result["items"], result["stats"])
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="stock-control.xlsx"'},
    )


@router.post("/purchases", response_model=PurchaseResult, status_code=201)
def create_purchase(
    payload: PurchaseRequest,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return record_purchase(
            db,
            payload.godown_ids,
            payload.items,
            purchase_number=payload.purchase_number,
        )
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


@router.get("/purchases/history", response_model=List[StockHistoryRead])
def get_purchase_history(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    godown_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return purchase_history(
        db,
        date_from=date_from,
        date_to=date_to,
        godown_id=godown_id,
        limit=limit,
    )


@router.patch("/batches/{batch_id}", response_model=StockBatchRead)
def edit_batch(
    batch_id: int,
    payload: StockBatchUpdate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return update_batch(db, batch_id, payload.model_dump(exclude_unset=True))
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


@router.delete("/batches/{batch_id}", status_code=204)
def remove_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        delete_batch(db, batch_id)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


__all__ = ["router"]
