from typing import Mapping, Optional

from shopgenie.models import Product

def require_positive_quantity(v: int, name: str = "quantity") -> None:
    if v < 1:
        raise ValueError(f"{name} must be >= 1")

def require_valid_selection(product: Product, selected: Optional[Mapping[str, str]]) -> None:
    for name, value in (selected or {}).items():
        opt = product.option(name)
        if opt is None:
            raise ValueError(f"{product.id} has no option {name!r}")
        if value not in opt.values:
            raise ValueError(f"{value!r} is not a valid {name} for {product.id}")
