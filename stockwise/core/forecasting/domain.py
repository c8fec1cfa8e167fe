from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Hashable, Optional


NO_PROJECTION = -1
"""Sentinel for ``days_until_stockout`` when consumption is zero."""


@dataclass(frozen=True)
class ConsumptionRecord:
    """One observed consumption of a product on a given day.

    Several records for the same product and day are summed by the forecaster.
    """

    product_id: Hashable
    """Opaque product identifier supplied by the caller."""

    date: date
    """Calendar day of the consumption."""

    quantity: float
    """Non-negative quantity consumed on that day."""

    product_name: Optional[str] = None
    """Optional display name, used when no explicit name mapping is given."""


@dataclass(frozen=True)
class ProductState:
    """Current stock snapshot of a single inventory item."""

    product_id: Hashable
    name: str
    current_stock: float
    min_stock: float
    max_stock: Optional[float] = None
    unit: str = "un"
    cost_per_unit: float = 0.0
    expiry_date: Optional[date] = None
