from __future__ import annotations

from typing import Any, List, Tuple

from shopgenie.constants import HISTORY_LIMIT, KEY_HISTORY
from shopgenie.models import Product, products_to_list
from shopgenie.state.base import Store


class HistoryStore(Store[Tuple[Product, ...]]):
    """Recently viewed products, newest first, no duplicate ids."""

    key = KEY_HISTORY
    limit = HISTORY_LIMIT

    def default(self) -> Tuple[Product, ...]:
        return ()

    def encode(self, snapshot: Tuple[Product, ...]) -> List[dict]:
        return products_to_list(snapshot)

    def decode(self, raw: Any) -> Tuple[Product, ...]:
        rows: List[Product] = []
        for p in self.decode_rows(raw, Product.from_dict):
            if all(r.id != p.id for r in rows):
                rows.append(p)
        return tuple(rows[: self.limit])

    @property
    def products(self) -> Tuple[Product, ...]:
        return self.snapshot

    def record_view(self, product: Product) -> Tuple[Product, ...]:
        rest = tuple(p for p in self.snapshot if p.id != product.id)
        return self._commit(((product,) + rest)[: self.limit])
