"""Pydantic models for 5Post SDK."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models sent to the API with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to the mapping the API expects."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ==================== ORDERS ====================


class Barcode(WireModel):
    """Barcode printed on a cargo place."""

    value: str = Field(..., min_length=1, description="Barcode value")


class ProductValue(WireModel):
    """One product line inside a cargo."""

    name: str = Field(..., min_length=1, description="Product name")
    value: int = Field(..., ge=1, description="Quantity")
    price: float = Field(..., ge=0, description="Unit price")
    currency: str = Field(default="RUB", description="Price currency")
    vat: int = Field(default=20, description="VAT rate in percent")
    vendor_code: str | None = Field(None, description="Seller article")
    barcode: str | None = Field(None, description="Product barcode")
    code_gtd: str | None = Field(None, alias="codeGTD", description="Customs declaration number")
    code_tnved: str | None = Field(None, alias="codeTNVED", description="Customs commodity code")


class Cargo(WireModel):
    """A physical cargo place of an order. Dimensions in millimetres, weight in grams."""

    sender_cargo_id: str = Field(..., min_length=1, description="Cargo ID on the sender side")
    barcodes: list[Barcode] = Field(default_factory=list, description="Cargo barcodes")
    height: int = Field(..., gt=0, description="Height in mm")
    length: int = Field(..., gt=0, description="Length in mm")
    width: int = Field(..., gt=0, description="Width in mm")
    weight: int = Field(..., gt=0, description="Weight in grams")
    price: float = Field(..., ge=0, description="Declared value")
    currency: str = Field(default="RUB", description="Declared value currency")
    vat: int = Field(default=20, description="VAT rate in percent")
    product_values: list[ProductValue] = Field(
        default_factory=list, description="Products packed in the cargo"
    )


class OrderCost(WireModel):
    """Money part of an order."""

    delivery_cost: float = Field(default=0, ge=0, description="Delivery cost for the client")
    delivery_cost_currency: str = Field(default="RUB")
    payment_value: float = Field(default=0, ge=0, description="Amount collected on delivery")
    payment_currency: str = Field(default="RUB")
    payment_type: Literal["CASH", "CASHLESS", "PREPAYMENT"] = Field(
        default="PREPAYMENT", description="How the client pays at the pickup point"
    )
    price: float = Field(..., ge=0, description="Declared order value")
    price_currency: str = Field(default="RUB")


class Order(WireModel):
    """A partner order submitted for delivery."""

    sender_order_id: str = Field(..., min_length=1, description="Order ID on the sender side")
    client_order_id: str | None = Field(None, description="Order number shown to the client")
    brand_name: str | None = Field(None, description="Shop brand shown to the client")
    client_name: str = Field(..., min_length=1, description="Recipient full name")
    client_phone: str = Field(..., min_length=1, description="Recipient phone")
    client_email: str | None = Field(None, description="Recipient e-mail")
    receiver_location: str = Field(..., description="Pickup point ID")
    sender_location: str = Field(..., description="Partner warehouse location ID")
    undeliverable_option: Literal["RETURN", "UTILIZATION"] = Field(
        default="RETURN", description="What to do when the order is not collected"
    )
    sender_create_date: datetime | None = Field(None, description="Order creation time")
    shipment_date: datetime | None = Field(None, description="Planned handover to 5Post")
    planned_receive_date: datetime | None = Field(None, description="Expected delivery")
    cost: OrderCost
    cargoes: list[Cargo] = Field(..., min_length=1, description="Cargo places")


# ==================== WAREHOUSES ====================


class WorkingHours(WireModel):
    """Opening hours for one day of the week (1 is Monday)."""

    day_number: int = Field(..., ge=1, le=7)
    time_from: str = Field(..., description="Opening time, HH:MM:SS")
    time_till: str = Field(..., description="Closing time, HH:MM:SS")


class Warehouse(WireModel):
    """Partner warehouse where 5Post collects orders."""

    name: str = Field(..., min_length=1)
    partner_name: str = Field(..., min_length=1)
    partner_location_id: str = Field(..., min_length=1, description="Warehouse ID on the partner side")
    region_code: int
    federal_district: str
    region: str
    index: str = Field(..., description="Postal code")
    town: str
    street: str
    house_number: str
    coordinates: str = Field(..., description="Latitude and longitude, comma separated")
    contact_phone_number: str
    time_zone: str = Field(..., description="UTC offset, e.g. +03:00")
    working_time: list[WorkingHours] = Field(default_factory=list)


# ==================== STATUS QUERIES ====================


class OrderIdentifier(BaseModel):
    """Order reference used by status queries.

    ``order_id`` is the sender's own ID, ``vendor_id`` is the ID assigned
    by 5Post. Empty strings count as absent.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    order_id: str | None = None
    vendor_id: str | None = None

    @classmethod
    def coerce(cls, value: OrderIdentifier | Mapping[str, Any]) -> OrderIdentifier:
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"Expected a mapping or OrderIdentifier, got {type(value).__name__}")
        return cls(order_id=value.get("order_id"), vendor_id=value.get("vendor_id"))

    def is_empty(self) -> bool:
        return not self.order_id and not self.vendor_id

    def to_params(self) -> dict[str, str]:
        """Map to the wire keys, emitting only the identifiers that are set."""
        params: dict[str, str] = {}
        if self.vendor_id:
            params["orderId"] = self.vendor_id
        if self.order_id:
            params["senderOrderId"] = self.order_id
        return params
