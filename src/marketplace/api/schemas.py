"""Pydantic request/response schemas for the Marketplace API.

These are external contracts, kept apart from the internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class OpenStorefrontRequest(BaseModel):
    owner_id: str
    skus: list[str] = Field(min_length=1)
    unit_prices: list[float]
    operator_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "owner_id": "owner-001",
                    "skus": ["01500", "02500", "03150", "04100", "05100"],
                    "unit_prices": [0.1, 0.1, 0.1, 0.1, 0.1],
                }
            ]
        }
    }


class RegisterMemberRequest(BaseModel):
    identity: str
    label: str = Field(min_length=1, max_length=100)


class CreateOrderRequest(BaseModel):
    quantities: list[int]
    payment: float = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "quantities": [3, 5, 0, 3, 0],
                    "payment": 1.0,
                }
            ]
        }
    }


class DiscrepancyRequest(BaseModel):
    verification: str
    observations: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StorefrontIdResponse(BaseModel):
    storefront_id: str


class MemberIdResponse(BaseModel):
    identity: str


class OrderIdResponse(BaseModel):
    order_id: str


class SettlementResponse(BaseModel):
    order_id: str
    settled_amount: float


class StatusResponse(BaseModel):
    status: str = "ok"


class LineItemResponse(BaseModel):
    position: int
    sku: str
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    order_id: str
    exists: bool = True
    client_id: str
    items: list[LineItemResponse]
    items_quantity: int
    total_price: float
    status: str
    verification: str
    observations: str | None = None
    prepared_by: str | None = None
    delivered_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    sku: str
    quantity: int


class MemberResponse(BaseModel):
    identity: str
    role: str | None = None
    claimed_order_id: str | None = None


class QueueResponse(BaseModel):
    name: str
    size: int
    contains: bool | None = None


class EscrowResponse(BaseModel):
    escrow_id: str
    order_id: str
    client_id: str
    amount: float
    surplus: float
    status: str
    beneficiary_id: str | None = None
    transfer_id: str | None = None


class BalanceResponse(BaseModel):
    operator_id: str
    settled_balance: float


class TimelineEntryResponse(BaseModel):
    event_type: str
    description: str
    occurred_at: datetime
