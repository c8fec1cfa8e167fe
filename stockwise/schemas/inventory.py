from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class RestaurantRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class InventoryItemBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    unit: str = "un"
    current_stock: float = Field(default=0, ge=0)
    min_stock: float = Field(default=0, ge=0)
    max_stock: float | None = Field(default=None, ge=0)
    cost_per_unit: float = Field(default=0, ge=0)
    expiry_date: date | None = None


class InventoryItemCreate(InventoryItemBase):
    restaurant_id: int

    @model_validator(mode="after")
    def check_stock_bounds(self) -> "InventoryItemCreate":
        if self.max_stock is not None and self.max_stock < self.min_stock:
            raise ValueError("max_stock must be greater than or equal to min_stock")
        return self


class InventoryItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    unit: str | None = None
    current_stock: float | None = Field(default=None, ge=0)
    min_stock: float | None = Field(default=None, ge=0)
    max_stock: float | None = Field(default=None, ge=0)
    cost_per_unit: float | None = Field(default=None, ge=0)
    expiry_date: date | None = None

    @model_validator(mode="after")
    def check_required_not_null(self) -> "InventoryItemUpdate":
        # max_stock and expiry_date may be cleared; the rest are NOT NULL columns
        for field in ("name", "unit", "current_stock", "min_stock", "cost_per_unit"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class InventoryItemRead(InventoryItemBase):
    id: int
    restaurant_id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ConsumptionCreate(BaseModel):
    quantity: float = Field(gt=0)
    consumed_on: date | None = None


class ConsumptionRead(BaseModel):
    id: int
    restaurant_id: int
    item_id: int
    consumed_on: date
    quantity: float

    model_config = ConfigDict(from_attributes=True)
