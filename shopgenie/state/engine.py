from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from shopgenie.catalog import Catalog
from shopgenie.db.sqlite import PersistenceGateway
from shopgenie.models import CartLine, CartTotals, Order, Product, UserIdentity
from shopgenie.state.base import Listener
from shopgenie.state.cart import CartStore
from shopgenie.state.history import HistoryStore
from shopgenie.state.session import SessionStore
from shopgenie.state.wishlist import WishlistStore
from shopgenie.utils.validators import require_valid_selection

logger = logging.getLogger(__name__)


class StateEngine:
    """
    Cart, wishlist, history and session behind one object.

    Build it once at startup, ``open()`` it (loads every store from the
    gateway) and ``close()`` it at shutdown. Works as a context manager.
    """

    def __init__(
        self,
        gateway: Optional[PersistenceGateway] = None,
        catalog: Optional[Catalog] = None,
    ) -> None:
        self.gateway = gateway or PersistenceGateway()
        self.catalog = catalog or Catalog()
        self.cart = CartStore(self.gateway)
        self.wishlist = WishlistStore(self.gateway)
        self.history = HistoryStore(self.gateway)
        self.session = SessionStore(self.gateway)
        self._opened = False
        self._closed = False

    @property
    def stores(self) -> tuple:
        return (self.cart, self.wishlist, self.history, self.session)

    def open(self) -> "StateEngine":
        if self._closed:
            raise RuntimeError("engine is closed")
        if self._opened:
            return self
        if not self.gateway.init_db():
            logger.warning("persistence unavailable, starting with empty state")
        for store in self.stores:
            store.load()
        self._opened = True
        logger.info(
            "state loaded: cart=%d wishlist=%d history=%d signed_in=%s",
            len(self.cart.lines),
            len(self.wishlist.products),
            len(self.history.products),
            self.session.signed_in,
        )
        return self

    def close(self) -> None:
        for store in self.stores:
            store.clear_listeners()
        self._opened = False
        self._closed = True

    def __enter__(self) -> "StateEngine":
        return self.open()

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _check(self) -> None:
        if self._closed:
            raise RuntimeError("engine is closed")
        if not self._opened:
            raise RuntimeError("engine is not open")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Listen to every store; returns a single unsubscribe callable."""
        self._check()
        unsubs: List[Callable[[], None]] = [s.subscribe(listener) for s in self.stores]

        def unsubscribe() -> None:
            for u in unsubs:
                u()

        return unsubscribe

    # ---------------- cart ----------------

    def add_to_cart(
        self,
        product: Product,
        selected_options: Optional[Mapping[str, str]] = None,
        quantity: int = 1,
    ) -> CartLine:
        self._check()
        require_valid_selection(product, selected_options)
        return self.cart.add(product, selected_options, quantity)

    def update_quantity(self, line_id: str, delta: int) -> Optional[CartLine]:
        self._check()
        return self.cart.update_quantity(line_id, delta)

    def remove_from_cart(self, line_id: str) -> bool:
        self._check()
        return self.cart.remove(line_id)

    def clear_cart(self) -> None:
        self._check()
        self.cart.clear()

    def reorder(self, order: Order) -> tuple:
        self._check()
        return self.cart.reorder(order)

    def cart_totals(self) -> CartTotals:
        self._check()
        return self.cart.totals()

    def checkout(self) -> Optional[CartTotals]:
        """Stub checkout: nothing is charged, the cart is emptied."""
        self._check()
        if not self.cart.lines:
            return None
        totals = self.cart.totals()
        self.cart.clear()
        logger.info("checkout done, total %.2f", totals.total)
        return totals

    # ---------------- wishlist / history ----------------

    def toggle_wishlist(self, product: Product) -> bool:
        self._check()
        return self.wishlist.toggle(product)

    def record_view(self, product: Product) -> tuple:
        self._check()
        return self.history.record_view(product)

    def view_product(self, product_id: str) -> Optional[Product]:
        self._check()
        product = self.catalog.get_product(product_id)
        if product is None:
            logger.debug("product %s not found", product_id)
            return None
        self.history.record_view(product)
        return product

    # ---------------- session ----------------

    def sign_in(self, identity: Optional[UserIdentity] = None) -> UserIdentity:
        self._check()
        return self.session.sign_in(identity)

    def sign_out(self) -> None:
        self._check()
        self.session.sign_out()

    def update_profile(self, **fields: Any) -> Optional[UserIdentity]:
        self._check()
        return self.session.update_profile(**fields)
