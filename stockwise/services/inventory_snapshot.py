from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from stockwise.core.forecasting.domain import ConsumptionRecord, ProductState
from stockwise.models.models import ConsumptionHistory, InventoryItem


def load_product_states(db: Session, restaurant_id: int) -> list[ProductState]:
    items = (
        db.query(InventoryItem)
        .filter(InventoryItem.restaurant_id == restaurant_id)
        .order_by(InventoryItem.id)
        .all()
    )

    return [
        ProductState(
            product_id=item.id,
            name=item.name,
            current_stock=float(item.current_stock or 0),
            min_stock=float(item.min_stock or 0),
            max_stock=float(item.max_stock) if item.max_stock is not None else None,
            unit=item.unit,
            cost_per_unit=float(item.cost_per_unit or 0),
            expiry_date=item.expiry_date,
        )
        for item in items
    ]


def load_consumption_records(
    db: Session,
    restaurant_id: int,
    start_date: date,
    end_date: date,
) -> list[ConsumptionRecord]:
    """Consumption rows in ``[start_date, end_date]``, oldest first."""

    rows = (
        db.query(ConsumptionHistory.item_id, ConsumptionHistory.consumed_on, ConsumptionHistory.quantity, InventoryItem.name)
        .join(InventoryItem, InventoryItem.id == ConsumptionHistory.item_id)
        .filter(
            ConsumptionHistory.restaurant_id == restaurant_id,
            ConsumptionHistory.consumed_on >= start_date,
            ConsumptionHistory.consumed_on <= end_date,
        )
        .order_by(ConsumptionHistory.consumed_on, ConsumptionHistory.id)
        .all()
    )

    return [
        ConsumptionRecord(
            product_id=item_id,
            date=consumed_on,
            quantity=float(quantity or 0),
            product_name=name,
        )
        for item_id, consumed_on, quantity, name in rows
    ]
