from __future__ import annotations

import logging
from typing import Any, List, Tuple

from shopgenie.constants import KEY_WISHLIST
from shopgenie.models import Product, products_to_list
from shopgenie.state.base import Store

logger = logging.getLogger(__name__)


class WishlistStore(Store[Tuple[Product, ...]]):
    key = KEY_WISHLIST

    def default(self) -> Tuple[Product, ...]:
        return ()

    def encode(self, snapshot: Tuple[Product, ...]) -> List[dict]:
        return products_to_list(snapshot)

    def decode(self, raw: Any) -> Tuple[Product, ...]:
        seen = set()
        rows = []
        for p in self.decode_rows(raw, Product.from_dict):
            if p.id not in seen:
                seen.add(p.id)
                rows.append(p)
        return tuple(rows)

    @property
    def products(self) -> Tuple[Product, ...]:
        return self.snapshot

    def contains(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self.snapshot)

    def toggle(self, product: Product) -> bool:
        """Add or remove `product`; returns True when it is now saved."""
        if self.contains(product.id):
            self._commit(tuple(p for p in self.snapshot if p.id != product.id))
            logger.debug("wishlist -%s", product.id)
            return False
        self._commit(self.snapshot + (product,))
        logger.debug("wishlist +%s", product.id)
        return True
