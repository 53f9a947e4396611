import pytest

from shopgenie.catalog import Catalog
from shopgenie.db.sqlite import PersistenceGateway
from shopgenie.models import Product, VariantOption
from shopgenie.state.engine import StateEngine


@pytest.fixture
def shirt() -> Product:
    return Product(
        id="shirt",
        name="Premium Cotton T-Shirt",
        price=29.99,
        category="Fashion",
        features=("100% Organic Cotton",),
        options=(
            VariantOption(name="Color", values=("Blue", "Black")),
            VariantOption(name="Size", values=("M", "L", "XL"), price_modifiers={"XL": 2.0}),
        ),
    )


@pytest.fixture
def mug() -> Product:
    return Product(id="mug", name="Stoneware Mug", price=12.5, category="Home & Kitchen")


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "state.db")


@pytest.fixture
def gateway(db_path) -> PersistenceGateway:
    gw = PersistenceGateway(db_path)
    gw.init_db()
    return gw


@pytest.fixture
def engine(db_path):
    eng = StateEngine(gateway=PersistenceGateway(db_path), catalog=Catalog())
    eng.open()
    yield eng
    eng.close()
