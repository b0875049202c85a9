"""Tests for storeharvest/shopify/csv_exporter.py"""

import pytest

from storeharvest.common.csv_utils import parse_csv
from storeharvest.models import CanonicalProduct, ProductImage, ProductVariant, RawProduct
from storeharvest.normalize import build_canonical
from storeharvest.shopify.csv_exporter import SHOPIFY_FIELDNAMES, ShopifyCSVExporter


@pytest.fixture
def exporter():
    return ShopifyCSVExporter()


def as_dicts(text):
    header, *rows = parse_csv(text)
    return [dict(zip(header, row)) for row in rows]


class TestShopifyFieldnames:
    def test_fieldnames_count(self):
        assert len(SHOPIFY_FIELDNAMES) == 45

    def test_essential_fields_present(self):
        for name in ("Handle", "Title", "Option1 Name", "Variant SKU", "Variant Grams",
                     "Variant Price", "Image Src", "Status"):
            assert name in SHOPIFY_FIELDNAMES

    def test_no_duplicates(self):
        assert len(set(SHOPIFY_FIELDNAMES)) == len(SHOPIFY_FIELDNAMES)


class TestVariantRows:
    def test_tee_example(self, exporter, tee_payload):
        product = build_canonical(RawProduct.from_payload(tee_payload))
        first, second = as_dicts(exporter.render([product]))

        assert first["Option1 Name"] == "Color"
        assert first["Option1 Value"] == "Red"
        assert first["Title"] == "Tee"
        assert first["Published"] == "TRUE"
        assert first["Variant Price"] == "19.99"

        assert second["Option1 Name"] == ""
        assert second["Option1 Value"] == "Blue"
        assert second["Title"] == ""
        assert second["Published"] == ""
        assert second["Handle"] == first["Handle"] == "tee"

    def test_every_row_has_45_fields(self, exporter, sized_product):
        rows = parse_csv(exporter.render([sized_product, CanonicalProduct(id="x")]))
        assert all(len(row) == 45 for row in rows)

    def test_shared_fields_only_on_first_row(self, exporter, sized_product):
        sized_product.vendor = "Acme"
        sized_product.tags = ["a", "b"]
        first, second = exporter.product_to_rows(sized_product)
        assert first["Vendor"] == "Acme"
        assert first["Tags"] == "a,b"
        assert first["Image Src"] == "https://cdn.example.com/shirt.jpg"
        assert first["Image Position"] == "1"
        assert first["Image Alt Text"] == "Shirt"
        assert second["Vendor"] == second["Tags"] == second["Image Src"] == ""
        assert second["Variant SKU"] == "SHIRT-M"
        assert second["Variant Price"] == "22"

    def test_fixed_values(self, exporter, sized_product):
        row = exporter.product_to_rows(sized_product)[1]
        assert row["Variant Inventory Policy"] == "deny"
        assert row["Variant Fulfillment Service"] == "manual"
        assert row["Variant Requires Shipping"] == "TRUE"
        assert row["Variant Taxable"] == "TRUE"
        assert row["Gift Card"] == "FALSE"
        assert row["Status"] == "active"

    def test_unnamed_option_gets_positional_name(self, exporter):
        product = CanonicalProduct(id="p", variants=[ProductVariant(title="Big", option1="Big")])
        assert exporter.product_to_rows(product)[0]["Option1 Name"] == "Option 1"


class TestDefaultVariant:
    def test_title_option(self, exporter):
        product = CanonicalProduct(
            id="poster", title="Poster", price="5",
            images=[ProductImage(src="https://cdn.example.com/p.jpg", position=1)],
        )
        (row,) = exporter.product_to_rows(product)
        assert row["Option1 Name"] == "Title"
        assert row["Option1 Value"] == "Default Title"
        assert row["Variant Image"] == "https://cdn.example.com/p.jpg"
        assert row["Handle"] == "poster"

    def test_price_falls_back_to_zero(self, exporter):
        (row,) = exporter.product_to_rows(CanonicalProduct(id="free"))
        assert row["Variant Price"] == "0"

    def test_compare_at_from_product(self, exporter):
        product = CanonicalProduct(
            id="p", price="10", compare_at_price="12",
            variants=[ProductVariant(title="A", option1="A", price="10")],
        )
        assert exporter.product_to_rows(product)[0]["Variant Compare At Price"] == "12"


class TestWeight:
    def test_pounds_to_grams(self, exporter):
        product = CanonicalProduct(id="p", variants=[ProductVariant(weight=2, weight_unit="lb")])
        row = exporter.product_to_rows(product)[0]
        assert row["Variant Grams"] == "907"
        assert row["Variant Weight Unit"] == "g"

    def test_missing_weight(self, exporter):
        row = exporter.product_to_rows(CanonicalProduct(id="p"))[0]
        assert row["Variant Grams"] == "0"
        assert row["Variant Weight Unit"] == ""


class TestRender:
    def test_idempotent(self, exporter, sized_product, tee_payload):
        products = [sized_product, build_canonical(RawProduct.from_payload(tee_payload))]
        assert exporter.render(products).encode() == exporter.render(products).encode()

    def test_quotes_escaped(self, exporter):
        text = exporter.render([CanonicalProduct(id="p", title='12" Pizza, large')])
        assert '"12"" Pizza, large"' in text
        assert as_dicts(text)[0]["Title"] == '12" Pizza, large'

    def test_empty_product_list_gives_header_only(self, exporter):
        assert parse_csv(exporter.render([]))[0] == SHOPIFY_FIELDNAMES


class TestExport:
    def test_writes_file(self, exporter, sized_product, tmp_path):
        output_path = tmp_path / "out" / "shop-shopify.csv"
        count = exporter.export([sized_product], str(output_path))

        assert count == 2
        assert output_path.read_text(encoding="utf-8") == exporter.render([sized_product])
