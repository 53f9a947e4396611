from __future__ import annotations

import json
from dataclasses import replace
from typing import Dict, Iterable, Mapping, Optional

from shopgenie.config import settings
from shopgenie.models import CartLine, CartTotals, Product


def effective_price(product: Product, selected: Optional[Mapping[str, str]] = None) -> float:
    """
    Цена за единицу: базовая цена + сумма модификаторов выбранных значений.
    Опции, которых нет у товара, и значения без модификатора дают 0.
    """
    price = product.price
    for name, value in (selected or {}).items():
        opt = product.option(name)
        if opt is not None:
            price += opt.delta(value)
    return round(price, settings.decimals)


def default_selection(product: Product) -> Optional[Dict[str, str]]:
    if not product.options:
        return None
    return {opt.name: opt.values[0] for opt in product.options}


def line_key(product_id: str, selected: Optional[Mapping[str, str]] = None) -> str:
    if selected is None:
        return product_id
    # [id, [[name, value], ...]]: id и опции разделены, коллизий нет
    pairs = sorted([str(k), str(v)] for k, v in selected.items())
    return json.dumps([product_id, pairs], ensure_ascii=False, separators=(",", ":"))


def cart_totals(lines: Iterable[CartLine]) -> CartTotals:
    subtotal = round(sum(line.line_total for line in lines), settings.decimals)
    shipping = 0.0 if subtotal > settings.free_shipping_threshold else settings.shipping_fee
    return CartTotals(
        subtotal=subtotal,
        shipping=shipping,
        total=round(subtotal + shipping, settings.decimals),
    )


def build_line(product: Product, selected: Optional[Mapping[str, str]] = None, quantity: int = 1) -> CartLine:
    """New cart line: product snapshot with the effective price baked in."""
    chosen = dict(selected) if selected is not None else None
    return CartLine(
        line_id=line_key(product.id, chosen),
        product=replace(product, price=effective_price(product, chosen)),
        quantity=quantity,
        selected_options=chosen,
    )
