import pytest

from pharmacy_inventory.database.repositories.products_repo import DomainError, ProductsRepo
from pharmacy_inventory.modules.orders.catalog import ProductCatalogIndex


def test_seeded_products_listed_by_name(conn):
    names = [p.name for p in ProductsRepo(conn).list_products()]
    assert names == sorted(names, key=str.casefold)
    assert "Ibuprofen 400mg" in names
    assert len(names) == 5


def test_create_and_duplicate_blocked(conn):
    repo = ProductsRepo(conn)
    pid = repo.create("Saline 0.9%", sale_price=2.0, unit_cost=1.2, stock_quantity=30)
    assert repo.get(pid).stock_quantity == 30
    with pytest.raises(DomainError):
        repo.create("saline 0.9%", sale_price=2.0, unit_cost=1.2)


@pytest.mark.parametrize("kwargs", [
    {"name": " ", "sale_price": 1, "unit_cost": 1},
    {"name": "X", "sale_price": -1, "unit_cost": 1},
    {"name": "X", "sale_price": 1, "unit_cost": 1, "stock_quantity": -2},
])
def test_create_rejects_bad_input(conn, kwargs):
    with pytest.raises(DomainError):
        ProductsRepo(conn).create(**kwargs)


def test_catalog_prices_follow_variant(conn):
    repo = ProductsRepo(conn)
    sale = ProductCatalogIndex.from_records(repo.list_catalog("sale"))
    cost = ProductCatalogIndex.from_records(repo.list_catalog("cost"))
    ibu_sale = sale.search("ibuprofen")[0]
    ibu_cost = cost.search("ibuprofen")[0]
    assert ibu_sale.id == ibu_cost.id
    assert ibu_sale.unit_price == pytest.approx(8.75)
    assert ibu_cost.unit_price == pytest.approx(5.25)
    assert ibu_sale.stock_quantity == 120


def test_inactive_products_leave_the_catalog(conn):
    repo = ProductsRepo(conn)
    rows = repo.list_catalog()
    target = next(r for r in rows if r["name"] == "Cetirizine 10mg")
    repo.deactivate(int(target["id"]))
    assert all(r["name"] != "Cetirizine 10mg" for r in repo.list_catalog())
    assert len(repo.list_products(include_inactive=True)) == 5


def test_unknown_catalog_price(conn):
    with pytest.raises(DomainError):
        ProductsRepo(conn).list_catalog("wholesale")
