"""FastAPI routes for the Marketplace domain.

The submitting identity travels in the ``X-Caller-Id`` header. Commands go
through ``marketplace.submission.submit`` so they are processed one at a time.
"""

import json

from fastapi import APIRouter, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from protean.utils.globals import current_domain

from marketplace.access.registration import RegisterClient, RegisterDispatcherWorker, RegisterWarehouseWorker
from marketplace.api.schemas import (
    BalanceResponse,
    CreateOrderRequest,
    DiscrepancyRequest,
    EscrowResponse,
    LineItemResponse,
    MemberIdResponse,
    MemberResponse,
    OpenStorefrontRequest,
    OrderIdResponse,
    OrderResponse,
    ProductResponse,
    QueueResponse,
    RegisterMemberRequest,
    SettlementResponse,
    StatusResponse,
    StorefrontIdResponse,
    TimelineEntryResponse,
)
from marketplace.errors import (
    AlreadyRegistered,
    AlreadySettled,
    Forbidden,
    InvalidState,
    MarketplaceError,
    NoValidOrder,
    OrderNotFound,
    StorefrontAlreadyOpen,
    Unauthorized,
)
from marketplace.order import lookup
from marketplace.order.cancellation import CancelOrder
from marketplace.order.creation import CreateOrder
from marketplace.order.dispatch import DeliverOrder, DispatchOrder
from marketplace.order.preparation import AddOrderToPreparationStage, MoveOrderToDeliverStage
from marketplace.order.verification import MarkOrderAsReceivedWithDiscrepancy, VerifyOrder
from marketplace.storefront.opening import OpenStorefront
from marketplace.storefront.storefront import Storefront
from marketplace.submission import submit

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
_STATUS_CODES = {
    Unauthorized: 401,
    Forbidden: 403,
    InvalidState: 409,
    NoValidOrder: 409,
    AlreadyRegistered: 409,
    AlreadySettled: 409,
    StorefrontAlreadyOpen: 409,
}


def _marketplace_error_handler(status_code: int):
    async def handler(request: Request, exc: MarketplaceError) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": exc.messages})

    return handler


async def _order_not_found_handler(request: Request, exc: OrderNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": {"order_id": [exc.message]}})


def register_marketplace_exception_handlers(app: FastAPI) -> None:
    """Protean's handlers plus status codes for specific marketplace errors."""
    register_exception_handlers(app)
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _marketplace_error_handler(status_code))
    app.add_exception_handler(OrderNotFound, _order_not_found_handler)


# ---------------------------------------------------------------------------
# Storefront and members
# ---------------------------------------------------------------------------
@router.post("/storefront", status_code=201, response_model=StorefrontIdResponse)
async def open_storefront(body: OpenStorefrontRequest) -> StorefrontIdResponse:
    command = OpenStorefront(
        owner_id=body.owner_id,
        skus=json.dumps(body.skus),
        unit_prices=json.dumps(body.unit_prices),
        operator_id=body.operator_id,
    )
    return StorefrontIdResponse(storefront_id=submit(command))


@router.get("/storefront/balance", response_model=BalanceResponse)
async def get_balance() -> BalanceResponse:
    storefront = current_domain.repository_for(Storefront).current()
    return BalanceResponse(operator_id=str(storefront.operator_id), settled_balance=lookup.settled_balance())


_REGISTRATIONS = {
    "clients": RegisterClient,
    "warehouse-workers": RegisterWarehouseWorker,
    "dispatcher-workers": RegisterDispatcherWorker,
}


@router.post("/members/{kind}", status_code=201, response_model=MemberIdResponse)
async def register_member(
    kind: str,
    body: RegisterMemberRequest,
    caller_id: str = Header(alias="X-Caller-Id"),
) -> MemberIdResponse:
    command_class = _REGISTRATIONS.get(kind)
    if command_class is None:
        raise HTTPException(status_code=404, detail=f"Unknown member kind {kind}")
    command = command_class(caller_id=caller_id, identity=body.identity, label=body.label)
    return MemberIdResponse(identity=submit(command))


@router.get("/members/{identity}", response_model=MemberResponse)
async def get_member(identity: str) -> MemberResponse:
    role = lookup.role_of(identity)
    claim = lookup.warehouse_claim(identity) or lookup.dispatcher_claim(identity)
    return MemberResponse(identity=identity, role=role.value if role else None, claimed_order_id=claim)


# ---------------------------------------------------------------------------
# Order lifecycle
# ---------------------------------------------------------------------------
@router.post("/orders", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest, caller_id: str = Header(alias="X-Caller-Id")) -> OrderIdResponse:
    command = CreateOrder(caller_id=caller_id, quantities=json.dumps(body.quantities), payment=body.payment)
    return OrderIdResponse(order_id=submit(command))


@router.put("/orders/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, caller_id: str = Header(alias="X-Caller-Id")) -> StatusResponse:
    submit(CancelOrder(caller_id=caller_id, order_id=order_id))
    return StatusResponse()


@router.post("/preparation", response_model=OrderIdResponse)
async def add_order_to_preparation_stage(caller_id: str = Header(alias="X-Caller-Id")) -> OrderIdResponse:
    return OrderIdResponse(order_id=submit(AddOrderToPreparationStage(caller_id=caller_id)))


@router.post("/preparation/complete", response_model=OrderIdResponse)
async def move_order_to_deliver_stage(caller_id: str = Header(alias="X-Caller-Id")) -> OrderIdResponse:
    return OrderIdResponse(order_id=submit(MoveOrderToDeliverStage(caller_id=caller_id)))


@router.post("/dispatch", response_model=OrderIdResponse)
async def dispatch_order(caller_id: str = Header(alias="X-Caller-Id")) -> OrderIdResponse:
    return OrderIdResponse(order_id=submit(DispatchOrder(caller_id=caller_id)))


@router.post("/dispatch/deliver", response_model=OrderIdResponse)
async def deliver_order(caller_id: str = Header(alias="X-Caller-Id")) -> OrderIdResponse:
    return OrderIdResponse(order_id=submit(DeliverOrder(caller_id=caller_id)))


@router.put("/orders/{order_id}/verify", response_model=SettlementResponse)
async def verify_order(order_id: str, caller_id: str = Header(alias="X-Caller-Id")) -> SettlementResponse:
    amount = submit(VerifyOrder(caller_id=caller_id, order_id=order_id))
    return SettlementResponse(order_id=order_id, settled_amount=amount)


@router.put("/orders/{order_id}/discrepancy", response_model=StatusResponse)
async def mark_order_as_received_with_discrepancy(
    order_id: str,
    body: DiscrepancyRequest,
    caller_id: str = Header(alias="X-Caller-Id"),
) -> StatusResponse:
    command = MarkOrderAsReceivedWithDiscrepancy(
        caller_id=caller_id,
        order_id=order_id,
        verification=body.verification,
        observations=body.observations,
    )
    submit(command)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Read surface
# ---------------------------------------------------------------------------
@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = lookup.get_order(order_id)
    return OrderResponse(
        order_id=str(order.id),
        client_id=str(order.client_id),
        items=[
            LineItemResponse(position=item.position, sku=item.sku, quantity=item.quantity, unit_price=item.unit_price)
            for item in order.line_items()
        ],
        items_quantity=order.items_quantity,
        total_price=order.total_price,
        status=order.status,
        verification=order.verification,
        observations=order.observations,
        prepared_by=str(order.prepared_by) if order.prepared_by else None,
        delivered_by=str(order.delivered_by) if order.delivered_by else None,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


@router.get("/orders/{order_id}/products", response_model=list[ProductResponse])
async def get_products(order_id: str) -> list[ProductResponse]:
    return [ProductResponse(sku=sku, quantity=quantity) for sku, quantity in lookup.products_for_order(order_id)]


@router.get("/orders/{order_id}/escrow", response_model=EscrowResponse)
async def get_escrow(order_id: str) -> EscrowResponse:
    escrow = lookup.escrow_for(order_id)
    return EscrowResponse(
        escrow_id=str(escrow.id),
        order_id=str(escrow.order_id),
        client_id=str(escrow.client_id),
        amount=escrow.amount,
        surplus=escrow.surplus or 0.0,
        status=escrow.status,
        beneficiary_id=str(escrow.beneficiary_id) if escrow.beneficiary_id else None,
        transfer_id=escrow.transfer_id,
    )


@router.get("/orders/{order_id}/timeline", response_model=list[TimelineEntryResponse])
async def get_timeline(order_id: str) -> list[TimelineEntryResponse]:
    return [
        TimelineEntryResponse(event_type=entry.event_type, description=entry.description, occurred_at=entry.occurred_at)
        for entry in lookup.timeline_for(order_id)
    ]


@router.get("/queues/{name}", response_model=QueueResponse)
async def get_queue(name: str, order_id: str | None = None) -> QueueResponse:
    contains = lookup.queue_contains(name, order_id) if order_id else None
    return QueueResponse(name=name, size=lookup.queue_size(name), contains=contains)
