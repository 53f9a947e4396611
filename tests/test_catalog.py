import pytest

from shopgenie.catalog import PRODUCTS, Catalog, sample_orders
from shopgenie.constants import CATEGORIES, ORDER_STATUSES
from shopgenie.models import Product, VariantOption


def test_lookup_hit_and_miss() -> None:
    catalog = Catalog()
    assert catalog.get_product("5").name == "Professional Chef Knife"
    assert catalog.get_product("missing") is None


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(ValueError):
        Catalog([PRODUCTS[0], PRODUCTS[0]])


def test_search_by_name_and_category() -> None:
    catalog = Catalog()
    assert [p.id for p in catalog.search_products("shoes")] == ["6"]
    assert [p.id for p in catalog.search_products(category=CATEGORIES["HOME"])] == ["4", "5"]
    assert catalog.search_products("headphones", category=CATEGORIES["BEAUTY"]) == []


def test_sort_by_price() -> None:
    catalog = Catalog()
    low = [p.price for p in catalog.search_products(sort="low")]
    high = [p.price for p in catalog.search_products(sort="high")]
    assert low == sorted(low)
    assert high == sorted(high, reverse=True)


def test_newest_keeps_catalog_order() -> None:
    catalog = Catalog()
    assert [p.id for p in catalog.search_products(sort="newest")] == [p.id for p in PRODUCTS]


def test_unknown_sort_mode() -> None:
    with pytest.raises(ValueError):
        Catalog().search_products(sort="popular")


def test_related_and_featured() -> None:
    catalog = Catalog()
    knife = catalog.get_product("5")
    assert [p.id for p in catalog.related_products(knife)] == ["4"]
    assert [p.id for p in catalog.featured()] == ["1", "2", "3", "4"]
    assert [p.id for p in catalog.featured(CATEGORIES["SPORTS"])] == ["6", "7"]


def test_sample_orders_are_well_formed() -> None:
    orders = sample_orders()
    assert [o.id for o in orders] == ["ORD-7782", "ORD-9921"]
    assert all(o.status in ORDER_STATUSES for o in orders)
    assert orders[0].items[1].selected_options == {"Color": "Blue", "Size": "M"}


def test_product_validation() -> None:
    with pytest.raises(ValueError):
        Product(id="x", name="X", price=-1.0, category="Sports")
    with pytest.raises(ValueError):
        Product(id="x", name="X", price=1.0, category="Toys")
    with pytest.raises(ValueError):
        VariantOption(name="Size", values=())


def test_product_id_cannot_look_like_an_encoded_key() -> None:
    with pytest.raises(ValueError):
        Product(id='["x",[["C","R"]]]', name="X", price=1.0, category="Sports")
    with pytest.raises(ValueError):
        Product(id="", name="X", price=1.0, category="Sports")
