from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Mapping, Optional, Tuple

from shopgenie.constants import KEY_CART
from shopgenie.models import CartLine, CartTotals, Order, Product
from shopgenie.services.pricing import build_line, cart_totals, line_key
from shopgenie.state.base import Store
from shopgenie.utils.validators import require_positive_quantity

logger = logging.getLogger(__name__)

CartSnapshot = Tuple[CartLine, ...]


class CartStore(Store[CartSnapshot]):
    """Ordered cart lines, at most one line per identity key."""

    key = KEY_CART

    def default(self) -> CartSnapshot:
        return ()

    def encode(self, snapshot: CartSnapshot) -> List[dict]:
        return [line.to_dict() for line in snapshot]

    def decode(self, raw: Any) -> CartSnapshot:
        lines = self.decode_rows(raw, CartLine.from_dict)
        # старые снимки могли содержать дубли ключей: склеиваем
        merged: dict[str, CartLine] = {}
        for line in lines:
            if line.line_id in merged:
                prev = merged[line.line_id]
                merged[line.line_id] = prev.with_quantity(prev.quantity + line.quantity)
            else:
                merged[line.line_id] = line
        return tuple(merged.values())

    @property
    def lines(self) -> CartSnapshot:
        return self.snapshot

    def get(self, line_id: str) -> Optional[CartLine]:
        for line in self.snapshot:
            if line.line_id == line_id:
                return line
        return None

    def count(self) -> int:
        return sum(line.quantity for line in self.snapshot)

    def totals(self) -> CartTotals:
        return cart_totals(self.snapshot)

    def add(
        self,
        product: Product,
        selected_options: Optional[Mapping[str, str]] = None,
        quantity: int = 1,
    ) -> CartLine:
        require_positive_quantity(quantity)
        line = self._merge(build_line(product, selected_options, quantity))
        logger.debug("cart add %s x%d -> qty %d", line.line_id, quantity, line.quantity)
        return line

    def update_quantity(self, line_id: str, delta: int) -> Optional[CartLine]:
        existing = self.get(line_id)
        if existing is None:
            return None
        line = existing.with_quantity(max(1, existing.quantity + delta))
        if line.quantity != existing.quantity:
            self._commit(tuple(line if it.line_id == line_id else it for it in self.snapshot))
        return line

    def remove(self, line_id: str) -> bool:
        if self.get(line_id) is None:
            return False
        self._commit(tuple(it for it in self.snapshot if it.line_id != line_id))
        return True

    def clear(self) -> None:
        self._commit(())

    def reorder(self, order: Order) -> CartSnapshot:
        """
        Replay a past order into the cart. Lines keep the unit price recorded
        in the order; options are taken as given, the live catalog is not
        consulted.
        """
        for item in order.items:
            key = line_key(item.product.id, item.selected_options)
            self._merge(replace(item, line_id=key))
        logger.debug("reordered %s (%d items)", order.id, len(order.items))
        return self.snapshot

    def _merge(self, line: CartLine) -> CartLine:
        existing = self.get(line.line_id)
        if existing is None:
            self._commit(self.snapshot + (line,))
            return line
        merged = existing.with_quantity(existing.quantity + line.quantity)
        self._commit(tuple(merged if it.line_id == line.line_id else it for it in self.snapshot))
        return merged
