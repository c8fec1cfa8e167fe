from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stockwise.api.v1.endpoints.restaurant import get_restaurant_or_404
from stockwise.core.db import get_db
from stockwise.models.models import ConsumptionHistory, InventoryItem
from stockwise.schemas.inventory import (
    ConsumptionCreate,
    ConsumptionRead,
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
)


router = APIRouter()


def _get_item_or_404(db: Session, id: int) -> InventoryItem:
    item = db.query(InventoryItem).filter(InventoryItem.id == id).first()
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return item


@router.get("/", response_model=list[InventoryItemRead])
def list_items(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return (
        db.query(InventoryItem)
        .filter(InventoryItem.restaurant_id == restaurant_id)
        .order_by(InventoryItem.id)
        .all()
    )


@router.get("/{id}", response_model=InventoryItemRead)
def get_item(id: int, db: Session = Depends(get_db)):
    return _get_item_or_404(db, id)


@router.post("/", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
def create_item(data: InventoryItemCreate, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, data.restaurant_id)

    item = InventoryItem(**data.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{id}", response_model=InventoryItemRead)
def update_item(id: int, data: InventoryItemUpdate, db: Session = Depends(get_db)):
    item = _get_item_or_404(db, id)

    update_data = data.model_dump(exclude_unset=True)
    min_stock = update_data.get("min_stock", item.min_stock)
    max_stock = update_data.get("max_stock", item.max_stock)
    if max_stock is not None and max_stock < min_stock:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="max_stock must be greater than or equal to min_stock",
        )

    for field, value in update_data.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(id: int, db: Session = Depends(get_db)):
    item = _get_item_or_404(db, id)

    db.query(ConsumptionHistory).filter(ConsumptionHistory.item_id == id).delete()
    db.delete(item)
    db.commit()
    return None


@router.post("/{id}/consumption", response_model=ConsumptionRead, status_code=status.HTTP_201_CREATED)
def record_consumption(id: int, data: ConsumptionCreate, db: Session = Depends(get_db)):
    """Log a consumption and take it out of the item's current stock."""

    item = _get_item_or_404(db, id)

    record = ConsumptionHistory(
        restaurant_id=item.restaurant_id,
        item_id=item.id,
        consumed_on=data.consumed_on or datetime.now(timezone.utc).date(),
        quantity=data.quantity,
    )
    item.current_stock = max(float(item.current_stock or 0) - data.quantity, 0.0)

    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@router.get("/{id}/consumption", response_model=list[ConsumptionRead])
def list_consumption(id: int, db: Session = Depends(get_db)):
    _get_item_or_404(db, id)
    return (
        db.query(ConsumptionHistory)
        .filter(ConsumptionHistory.item_id == id)
        .order_by(ConsumptionHistory.consumed_on, ConsumptionHistory.id)
        .all()
    )
