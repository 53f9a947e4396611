from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from shopgenie.constants import CATEGORIES, ORDER_STATUSES


@dataclass(frozen=True)
class VariantOption:
    name: str
    values: Tuple[str, ...]
    price_modifiers: Optional[Dict[str, float]] = None  # value -> delta

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError(f"option {self.name!r} must have at least one value")

    def delta(self, value: str) -> float:
        if self.price_modifiers is None:
            return 0.0
        return float(self.price_modifiers.get(value, 0.0))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "values": list(self.values)}
        if self.price_modifiers is not None:
            d["priceModifiers"] = dict(self.price_modifiers)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "VariantOption":
        mods = d.get("priceModifiers")
        return cls(
            name=str(d["name"]),
            values=tuple(str(v) for v in d["values"]),
            price_modifiers={str(k): float(v) for k, v in mods.items()} if mods is not None else None,
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    category: str
    image: str = ""
    description: str = ""
    rating: float = 0.0
    reviews: int = 0
    features: Tuple[str, ...] = ()
    options: Optional[Tuple[VariantOption, ...]] = None

    def __post_init__(self) -> None:
        if not self.id or self.id.startswith("["):
            raise ValueError(f"product id must be non-empty and not start with '[': {self.id!r}")
        if self.price < 0:
            raise ValueError(f"price must be >= 0 (product {self.id})")
        if self.category not in CATEGORIES.values():
            raise ValueError(f"unknown category {self.category!r} (product {self.id})")
        if not 0 <= self.rating <= 5:
            raise ValueError(f"rating must be within 0..5 (product {self.id})")
        if self.reviews < 0:
            raise ValueError(f"reviews must be >= 0 (product {self.id})")

    def option(self, name: str) -> Optional[VariantOption]:
        for opt in self.options or ():
            if opt.name == name:
                return opt
        return None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "image": self.image,
            "description": self.description,
            "rating": self.rating,
            "reviews": self.reviews,
            "features": list(self.features),
        }
        if self.options is not None:
            d["options"] = [o.to_dict() for o in self.options]
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Product":
        opts = d.get("options")
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            price=float(d["price"]),
            category=str(d["category"]),
            image=str(d.get("image", "")),
            description=str(d.get("description", "")),
            rating=float(d.get("rating", 0.0)),
            reviews=int(d.get("reviews", 0)),
            features=tuple(str(f) for f in d.get("features", [])),
            options=tuple(VariantOption.from_dict(o) for o in opts) if opts is not None else None,
        )


@dataclass(frozen=True)
class CartLine:
    """
    Одна строка корзины: товар (снимок на момент добавления, price уже
    с учётом модификаторов), выбранные опции и количество.
    """

    line_id: str
    product: Product
    quantity: int = 1
    selected_options: Optional[Dict[str, str]] = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def price(self) -> float:
        return self.product.price

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        d = self.product.to_dict()
        d["cartItemId"] = self.line_id
        d["quantity"] = self.quantity
        if self.selected_options is not None:
            d["selectedOptions"] = dict(self.selected_options)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CartLine":
        selected = d.get("selectedOptions")
        product = Product.from_dict(d)
        return cls(
            line_id=str(d.get("cartItemId") or product.id),
            product=product,
            quantity=int(d.get("quantity", 1)),
            selected_options={str(k): str(v) for k, v in selected.items()} if selected is not None else None,
        )


_PROFILE_FIELDS = ("id", "name", "email", "avatar")


@dataclass(frozen=True)
class UserIdentity:
    id: str
    name: str
    email: str
    avatar: Optional[str] = None

    def merged(self, **fields: Any) -> "UserIdentity":
        unknown = set(fields) - set(_PROFILE_FIELDS)
        if unknown:
            raise TypeError(f"unknown profile fields: {', '.join(sorted(unknown))}")
        return replace(self, **fields)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"id": self.id, "name": self.name, "email": self.email}
        if self.avatar is not None:
            d["avatar"] = self.avatar
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "UserIdentity":
        avatar = d.get("avatar")
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            email=str(d["email"]),
            avatar=str(avatar) if avatar is not None else None,
        )


@dataclass(frozen=True)
class Order:
    id: str
    date: str
    status: str
    total: float
    items: Tuple[CartLine, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.status not in ORDER_STATUSES:
            raise ValueError(f"unknown order status {self.status!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "status": self.status,
            "total": self.total,
            "items": [it.to_dict() for it in self.items],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Order":
        return cls(
            id=str(d["id"]),
            date=str(d["date"]),
            status=str(d["status"]),
            total=float(d["total"]),
            items=tuple(CartLine.from_dict(it) for it in d.get("items", [])),
        )


@dataclass(frozen=True)
class CartTotals:
    subtotal: float
    shipping: float
    total: float

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0


def products_to_list(products) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in products]

