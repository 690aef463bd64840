import pytest

from config.exceptions import StoreConflictError, TagNotFoundError
from db.db_connector import DBConnector


# -------------------- CategoryStore -------------------- #

def test_category_lookup_is_case_insensitive(categories):
    created = categories.create("Japonês")

    for variant in ["Japonês", "japonês", "JAPONÊS", "  japonês "]:
        found = categories.find_by_name(variant)
        assert found is not None, variant
        assert found.id == created.id
        assert found.name == "Japonês"


def test_category_create_sets_identity_and_timestamps(categories):
    tag = categories.create("  Pizzaria ")
    assert tag.id is not None
    assert tag.name == "Pizzaria"
    assert tag.created_at is not None
    assert tag.updated_at is not None
    assert categories.find_by_id(tag.id).name == "Pizzaria"


def test_category_duplicate_create_conflicts(categories):
    categories.create("Mexicano")
    with pytest.raises(StoreConflictError):
        categories.create("MEXICANO")
    assert len(categories.list_all()) == 1


@pytest.mark.parametrize("name", ["", "   ", "x" * 101])
def test_category_rejects_invalid_names(categories, name):
    with pytest.raises(ValueError):
        categories.create(name)


def test_find_missing(categories):
    assert categories.find_by_name("Árabe") is None
    assert categories.find_by_name("") is None
    assert categories.find_by_id(999) is None


def test_list_all_ordered_by_name(categories):
    for name in ["Pizzaria", "Doceria", "Japonês"]:
        categories.create(name)
    assert [c.name for c in categories.list_all()] == ["Doceria", "Japonês", "Pizzaria"]


def test_get_or_create_is_idempotent(categories):
    first, created_first = categories.get_or_create("Esfiharia")
    second, created_second = categories.get_or_create("esfiharia")
    assert created_first and not created_second
    assert first.id == second.id
    assert len(categories.list_all()) == 1


def test_get_or_create_recovers_from_lost_race(categories, monkeypatch):
    """Another request inserted the tag between our lookup and our insert."""
    winner = categories.create("Japonês")
    real_find = categories.find_by_name
    stale = {"left": 1}

    def find_by_name(name):
        if stale["left"]:
            stale["left"] -= 1
            return None
        return real_find(name)

    monkeypatch.setattr(categories, "find_by_name", find_by_name)

    tag, created = categories.get_or_create("japonês")

    assert not created
    assert tag.id == winner.id
    assert len(categories.list_all()) == 1


def test_rename(categories):
    tag = categories.create("Hamburgueria")
    renamed = categories.rename(tag.id, "Lanchonete")
    assert renamed.name == "Lanchonete"
    assert categories.find_by_name("Hamburgueria") is None
    assert categories.find_by_name("lanchonete").id == tag.id


def test_rename_missing_tag(categories):
    with pytest.raises(TagNotFoundError):
        categories.rename(42, "Qualquer")


def test_rename_onto_existing_name_conflicts(categories):
    categories.create("Japonês")
    other = categories.create("Chinês")
    with pytest.raises(StoreConflictError):
        categories.rename(other.id, "JAPONÊS")


# -------------------- ProductStore -------------------- #

def test_product_create_and_lookup(categories, products):
    tag = categories.create("Japonês")
    product = products.create("Sushi", tag.id)

    found = products.find_by_name("sushi")
    assert found is not None
    assert found.id == product.id
    assert found.tag_id == tag.id
    assert found.category.name == "Japonês"
    assert products.find_by_id(product.id).name == "Sushi"


def test_product_requires_existing_tag(products):
    with pytest.raises(TagNotFoundError):
        products.create("Sushi", 12345)
    assert products.list_all() == []


def test_product_duplicate_create_conflicts(categories, products):
    tag = categories.create("Pizzaria")
    products.create("Pizza", tag.id)
    with pytest.raises(StoreConflictError):
        products.create("PIZZA", tag.id)


def test_product_get_or_create_recovers_from_lost_race(categories, products, monkeypatch):
    pizzaria = categories.create("Pizzaria")
    italiano = categories.create("Italiano")
    winner = products.create("Pizza", pizzaria.id)
    real_find = products.find_by_name
    stale = {"left": 1}

    def find_by_name(name):
        if stale["left"]:
            stale["left"] -= 1
            return None
        return real_find(name)

    monkeypatch.setattr(products, "find_by_name", find_by_name)

    product, created = products.get_or_create("Pizza", italiano.id)

    assert not created
    assert product.id == winner.id
    # The winner keeps its own tag
    assert product.tag_id == pizzaria.id
    assert len(products.list_all()) == 1


def test_product_list_all(categories, products):
    tag = categories.create("Doceria")
    for name in ["Brigadeiro", "Açaí", "Bolo"]:
        products.create(name, tag.id)
    listed = products.list_all()
    assert sorted(p.name for p in listed) == ["Açaí", "Bolo", "Brigadeiro"]
    assert all(p.category.name == "Doceria" for p in listed)


def test_has_schema_tracks_table_creation(tmp_path):
    conn = DBConnector(f"sqlite:///{tmp_path / 'fresh.db'}")
    try:
        assert not conn.has_schema()
        conn.create_schema()
        assert conn.has_schema()
    finally:
        conn.dispose()
