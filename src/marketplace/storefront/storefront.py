"""Storefront aggregate: the catalog and the operator's settlement account.

A deployment has exactly one storefront. It fixes the SKU catalog at opening
time (position in the list is the SKU index used by orders), names the
registry owner who may register members, and accumulates the funds released
from escrow to the operator.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.errors import InvalidSKU, StorefrontNotOpen
from marketplace.storefront.events import OperatorCredited, StorefrontOpened


@marketplace.entity(part_of="Storefront")
class CatalogEntry:
    """A SKU at a fixed catalog position with its unit price."""

    position = Integer(required=True, min_value=0)
    sku = String(required=True, max_length=100)
    unit_price = Float(required=True, min_value=0.0)


@marketplace.aggregate
class Storefront:
    owner_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    catalog = HasMany(CatalogEntry)
    settled_balance = Float(default=0.0)
    opened_at = DateTime()

    @classmethod
    def open(cls, owner_id: str, skus: list[str], unit_prices: list[float], operator_id: str | None = None):
        """Open the storefront with a fixed, position-indexed catalog."""
        if not skus:
            raise ValidationError({"skus": ["Catalog must contain at least one SKU"]})
        if len(skus) != len(unit_prices):
            raise ValidationError({"unit_prices": ["Exactly one unit price is required per SKU"]})

        now = datetime.now(UTC)
        storefront = cls(
            owner_id=owner_id,
            operator_id=operator_id or owner_id,
            settled_balance=0.0,
            opened_at=now,
        )
        for position, (sku, unit_price) in enumerate(zip(skus, unit_prices, strict=True)):
            storefront.add_catalog(CatalogEntry(position=position, sku=sku, unit_price=float(unit_price)))

        storefront.raise_(
            StorefrontOpened(
                storefront_id=str(storefront.id),
                owner_id=owner_id,
                operator_id=storefront.operator_id,
                skus=json.dumps(list(skus)),
                sku_count=len(skus),
                opened_at=now,
            )
        )
        return storefront

    # -------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------
    def entries(self) -> list[CatalogEntry]:
        return sorted(self.catalog or [], key=lambda entry: entry.position)

    def entry_at(self, sku_index: int) -> CatalogEntry:
        entries = self.entries()
        if sku_index < 0 or sku_index >= len(entries):
            raise InvalidSKU(f"SKU index {sku_index} is outside the catalog (0..{len(entries) - 1})")
        return entries[sku_index]

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

    def price_of(self, sku_index: int, quantity: int) -> float:
        """Price ``quantity`` units of the SKU at ``sku_index``."""
        self._check_quantity(quantity)
        return self.entry_at(sku_index).unit_price * quantity

    def quote(self, quantities: list[int]) -> tuple[list[dict], float]:
        """Price an order given one quantity per SKU index.

        Returns the priced line items (zero quantities are dropped) and the
        order total. Every index is checked against the catalog, even those
        with a zero quantity.
        """
        lines = []
        total = 0.0
        for sku_index, quantity in enumerate(quantities):
            self._check_quantity(quantity)
            entry = self.entry_at(sku_index)
            if quantity == 0:
                continue
            lines.append(
                {
                    "position": sku_index,
                    "sku": entry.sku,
                    "quantity": quantity,
                    "unit_price": entry.unit_price,
                }
            )
            total += entry.unit_price * quantity
        return lines, total

    # -------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------
    def is_owner(self, identity: str) -> bool:
        return str(self.owner_id) == str(identity)

    # -------------------------------------------------------------------
    # Settlement
    # -------------------------------------------------------------------
    def credit_operator(self, order_id: str, amount: float) -> None:
        """Add funds released from an order's escrow to the operator balance."""
        if amount < 0:
            raise ValidationError({"amount": ["Credited amount cannot be negative"]})

        now = datetime.now(UTC)
        self.settled_balance = (self.settled_balance or 0.0) + amount
        self.raise_(
            OperatorCredited(
                storefront_id=str(self.id),
                operator_id=str(self.operator_id),
                order_id=order_id,
                amount=amount,
                settled_balance=self.settled_balance,
                credited_at=now,
            )
        )


@marketplace.repository(part_of=Storefront)
class StorefrontRepository:
    def current(self) -> Storefront:
        """Return the deployment's storefront."""
        results = self._dao.query.all()
        if not results or not results.items:
            raise StorefrontNotOpen("The storefront has not been opened yet")
        return results.first

    def is_open(self) -> bool:
        results = self._dao.query.all()
        return bool(results and results.items)
