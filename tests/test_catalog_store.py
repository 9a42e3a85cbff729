"""Query functions called directly with a session."""

import pytest
from sqlalchemy import func, select

from petite_treats.catalog import store
from petite_treats.catalog.schemas import ProductQuery
from petite_treats.errors import ProductNotFound
from petite_treats.tables import Product, ProductFlavor


def _add_product(session, **overrides):
    values = {
        "name": "Plain Scone",
        "slug": "plain-scone",
        "price": 4,
        "description": "One homemade scone, served in a small box.",
        "image": "imgs/scone.jpg",
    }
    values.update(overrides)
    session.add(Product(**values))
    session.commit()


class TestListProducts:
    def test_default_query_returns_everything(self, session):
        assert len(store.list_products(session, ProductQuery())) == 15

    def test_empty_tokens_are_ignored(self, session):
        products = store.list_products(session, ProductQuery(contains="-cake--pops-"))
        assert [p.name for p in products] == ["Cake Pops"]


class TestGetProduct:
    def test_display_name(self, session):
        assert store.get_product(session, "Rice Krispies").slug == "rice-krispies"

    def test_not_found(self, session):
        with pytest.raises(ProductNotFound) as exc_info:
            store.get_product(session, "baguette")
        assert exc_info.value.key == "baguette"


class TestProductFlavors:
    def test_product_without_flavors_is_an_empty_list(self, session):
        _add_product(session)
        assert store.get_product_flavors(session, "plain-scone") == []

    def test_unknown_product_raises(self, session):
        with pytest.raises(ProductNotFound):
            store.get_product_flavors(session, "baguette")

    def test_deleting_a_product_removes_its_flavors(self, session):
        product = session.get(Product, "Cookies")
        session.delete(product)
        session.commit()
        remaining = session.scalar(
            select(func.count()).select_from(ProductFlavor).where(ProductFlavor.product == "Cookies")
        )
        assert remaining == 0


class TestCustomDescription:
    def test_derived_from_description(self, session):
        text = store.get_custom_description(session, "Cheesecake", "Caramel", "Bow")
        assert text.split()[2] == "Caramel"
        assert text.split()[-2] == "Bow"

    def test_explicit_template_wins(self, session):
        _add_product(session, description_template="A ${box} box holding one ${flavor} scone.")
        text = store.get_custom_description(session, "plain-scone", "Lemon", "Ribbon")
        assert text == "A Ribbon box holding one Lemon scone."

    def test_short_description(self, session):
        _add_product(session, description="Scone.")
        text = store.get_custom_description(session, "plain-scone", "Lemon", "Ribbon")
        assert set(text.split()) == {"Scone.", "Lemon", "Ribbon"}

    def test_unknown_product(self, session):
        with pytest.raises(ProductNotFound):
            store.get_custom_description(session, "baguette", "Lemon", "Ribbon")


class TestOtherCollections:
    def test_macaron_flavors_by_name(self, session):
        assert [f.name for f in store.list_macaron_flavors(session)] == [
            "Chocolate",
            "Mango",
            "Rose",
            "Vanilla",
        ]

    def test_faq_in_id_order(self, session):
        entries = store.list_faq(session)
        assert entries[-1].question == "Are your products made-to-order?"

    def test_box_decorations_skip_blank_lines(self, tmp_path):
        path = tmp_path / "box-decorations.txt"
        path.write_text("plain\n\nsilver-ribbon\n\n", encoding="utf-8")
        assert store.read_box_decorations(path) == ["Plain", "Silver Ribbon"]


class TestReadFeatured:
    def test_slugs_resolve_to_stored_names(self, session, tmp_path):
        path = tmp_path / "featured.txt"
        path.write_text("macarons-12-pcs\n\ncheesecake\n", encoding="utf-8")
        assert store.read_featured(session, path) == ["Macarons (12 pcs)", "Cheesecake"]

    def test_explicit_slug(self, session, tmp_path):
        _add_product(session, name="Scone (plain)", slug="scone")
        path = tmp_path / "featured.txt"
        path.write_text("scone\n", encoding="utf-8")
        assert store.read_featured(session, path) == ["Scone (plain)"]

    def test_unknown_slug(self, session, tmp_path):
        path = tmp_path / "featured.txt"
        path.write_text("cheesecake\nbaguette\n", encoding="utf-8")
        with pytest.raises(ProductNotFound) as exc_info:
            store.read_featured(session, path)
        assert exc_info.value.key == "baguette"


def test_product_found_by_exact_name(session):
    assert store.get_product(session, "Macarons (12 pcs)").slug == "macarons-12-pcs"


def test_seeding_twice_does_not_duplicate(database, settings):
    assert database.seed(settings.seed_path) == 0
    with database.session() as session:
        assert session.scalar(select(func.count()).select_from(Product)) == 15
