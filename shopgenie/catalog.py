from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from shopgenie.constants import (
    CATEGORIES,
    ORDER_DELIVERED,
    ORDER_PROCESSING,
    SORT_NEWEST,
    SORT_PRICE_HIGH,
    SORT_PRICE_LOW,
)
from shopgenie.models import CartLine, Order, Product, VariantOption
from shopgenie.services.pricing import build_line


PRODUCTS: Tuple[Product, ...] = (
    Product(
        id="1",
        name="Ultra-Noise Cancelling Headphones",
        price=299.99,
        category=CATEGORIES["ELECTRONICS"],
        image="https://picsum.photos/id/1/600/600",
        description="Experience pure silence with our industry-leading noise cancellation technology. "
        "Perfect for travel and focus.",
        rating=4.8,
        reviews=1240,
        features=("Active Noise Cancellation", "30h Battery Life", "Multipoint Connection"),
    ),
    Product(
        id="2",
        name="Minimalist Smart Watch",
        price=199.50,
        category=CATEGORIES["ELECTRONICS"],
        image="https://picsum.photos/id/119/600/600",
        description="Track your fitness, sleep, and notifications in style. A battery that lasts weeks, not days.",
        rating=4.5,
        reviews=850,
        features=("Heart Rate Monitor", "Sleep Tracking", "Water Resistant 50m"),
    ),
    Product(
        id="3",
        name="Premium Cotton T-Shirt",
        price=29.99,
        category=CATEGORIES["FASHION"],
        image="https://picsum.photos/id/21/600/600",
        description="Soft, breathable, and durable. The perfect staple for your wardrobe.",
        rating=4.7,
        reviews=3200,
        features=("100% Organic Cotton", "Pre-shrunk", "Eco-friendly Dye"),
        options=(
            VariantOption(name="Color", values=("Blue", "Black", "White", "Heather Grey")),
            VariantOption(
                name="Size",
                values=("S", "M", "L", "XL", "XXL"),
                price_modifiers={"XL": 2.0, "XXL": 4.0},
            ),
        ),
    ),
    Product(
        id="4",
        name="Ergonomic Office Chair",
        price=349.00,
        category=CATEGORIES["HOME"],
        image="https://picsum.photos/id/3/600/600",
        description="Say goodbye to back pain. Designed for 8+ hours of comfortable sitting.",
        rating=4.9,
        reviews=540,
        features=("Lumbar Support", "Adjustable Armrests", "Breathable Mesh"),
    ),
    Product(
        id="5",
        name="Professional Chef Knife",
        price=89.95,
        category=CATEGORIES["HOME"],
        image="https://picsum.photos/id/102/600/600",
        description="Razor sharp and perfectly balanced. Elevate your cooking game.",
        rating=4.8,
        reviews=210,
        features=("High Carbon Steel", "Ergonomic Handle", "Lifetime Warranty"),
    ),
    Product(
        id="6",
        name="Trail Running Shoes",
        price=129.99,
        category=CATEGORIES["SPORTS"],
        image="https://picsum.photos/id/103/600/600",
        description="Grip any terrain with confidence. Lightweight and rugged.",
        rating=4.6,
        reviews=890,
        features=("Gore-Tex Waterproofing", "Vibram Sole", "Shock Absorption"),
    ),
    Product(
        id="7",
        name="Yoga Mat Pro",
        price=55.00,
        category=CATEGORIES["SPORTS"],
        image="https://picsum.photos/id/104/600/600",
        description="Non-slip grip for the deepest stretches. Eco-friendly materials.",
        rating=4.9,
        reviews=1500,
        features=("Non-slip Surface", "5mm Cushioning", "Biodegradable"),
    ),
    Product(
        id="8",
        name="Hydrating Face Serum",
        price=42.00,
        category=CATEGORIES["BEAUTY"],
        image="https://picsum.photos/id/64/600/600",
        description="Restore your skin's natural glow with Hyaluronic Acid and Vitamin C.",
        rating=4.7,
        reviews=670,
        features=("Hyaluronic Acid", "Vitamin C", "Cruelty-Free"),
    ),
)


class Catalog:
    """Read-only product list, loaded once."""

    def __init__(self, products: Iterable[Product] = PRODUCTS) -> None:
        self._products: Tuple[Product, ...] = tuple(products)
        ids = [p.id for p in self._products]
        if len(ids) != len(set(ids)):
            raise ValueError("product ids must be unique")
        self._by_id = {p.id: p for p in self._products}

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self):
        return iter(self._products)

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def search_products(
        self,
        query: str = "",
        category: Optional[str] = None,
        sort: str = SORT_NEWEST,
    ) -> List[Product]:
        q = query.strip().lower()
        rows = [
            p
            for p in self._products
            if q in p.name.lower() and (category is None or p.category == category)
        ]
        if sort == SORT_PRICE_LOW:
            rows.sort(key=lambda p: p.price)
        elif sort == SORT_PRICE_HIGH:
            rows.sort(key=lambda p: p.price, reverse=True)
        elif sort != SORT_NEWEST:
            raise ValueError(f"unknown sort mode {sort!r}")
        # newest: товары без даты создания, порядок каталога не меняем
        return rows

    def related_products(self, product: Product, limit: int = 4) -> List[Product]:
        return [p for p in self._products if p.category == product.category and p.id != product.id][:limit]

    def featured(self, category: Optional[str] = None, limit: int = 4) -> List[Product]:
        return self.search_products(category=category)[:limit]


def _order_line(product: Product, quantity: int = 1, selected: Optional[dict] = None) -> CartLine:
    return build_line(product, selected, quantity)


def sample_orders(products: Sequence[Product] = PRODUCTS) -> List[Order]:
    """Demo order history shown on the profile page (source of reorder)."""
    return [
        Order(
            id="ORD-7782",
            date="Oct 24, 2023",
            status=ORDER_DELIVERED,
            total=329.99,
            items=(
                _order_line(products[0]),
                _order_line(products[2], selected={"Color": "Blue", "Size": "M"}),
            ),
        ),
        Order(
            id="ORD-9921",
            date="Just Now",
            status=ORDER_PROCESSING,
            total=245.50,
            items=(
                _order_line(products[1]),
                _order_line(products[7]),
            ),
        ),
    ]
