"""Tests for storeharvest/woocommerce/csv_exporter.py"""

import pytest

from storeharvest.common.csv_utils import parse_csv
from storeharvest.models import CanonicalProduct, ProductImage, ProductVariant, RawProduct
from storeharvest.normalize import build_canonical
from storeharvest.woocommerce.csv_exporter import (
    WOOCOMMERCE_FIELDNAMES,
    WooCommerceCSVExporter,
    split_prices,
)


@pytest.fixture
def exporter():
    return WooCommerceCSVExporter()


def as_dicts(text):
    header, *rows = parse_csv(text)
    return [dict(zip(header, row)) for row in rows]


class TestWooCommerceFieldnames:
    def test_fieldnames_count(self):
        assert len(WOOCOMMERCE_FIELDNAMES) == 39

    def test_no_duplicates(self):
        assert len(set(WOOCOMMERCE_FIELDNAMES)) == len(WOOCOMMERCE_FIELDNAMES)


class TestVariableProducts:
    def test_attribute_example(self, exporter, woo_attribute_payload):
        product = build_canonical(RawProduct.from_payload(woo_attribute_payload))
        parent, small, medium = as_dicts(exporter.render([product]))

        assert parent["Type"] == "variable"
        assert parent["SKU"] == "77"
        assert parent["Name"] == "Linen Shirt"
        assert parent["Attribute 1 name"] == "Size"
        assert parent["Attribute 1 value(s)"] == "S | M"
        assert parent["Attribute 1 visible"] == "1"
        assert parent["Attribute 1 global"] == "0"
        assert parent["Attribute 2 name"] == "Color"
        assert parent["Attribute 2 value(s)"] == "Red"

        assert small["Type"] == medium["Type"] == "variation"
        assert small["Parent"] == medium["Parent"] == "77"
        assert (small["Attribute 1 value(s)"], small["Attribute 2 value(s)"]) == ("S", "Red")
        assert (medium["Attribute 1 value(s)"], medium["Attribute 2 value(s)"]) == ("M", "Red")
        assert small["SKU"] == "77-s"
        assert small["Regular price"] == "30"

    def test_every_row_has_39_fields(self, exporter, sized_product):
        rows = parse_csv(exporter.render([sized_product, CanonicalProduct(id="x")]))
        assert all(len(row) == 39 for row in rows)

    def test_parent_sku_prefers_product_sku(self, exporter, sized_product):
        rows = exporter.product_to_rows(sized_product)
        assert rows[0]["SKU"] == "SHIRT"
        assert [r["Parent"] for r in rows[1:]] == ["SHIRT", "SHIRT"]
        assert [r["SKU"] for r in rows[1:]] == ["SHIRT-S", "SHIRT-M"]

    def test_variation_image_falls_back_to_product_image(self, exporter, sized_product):
        sized_product.variants[1].image = "https://cdn.example.com/m.jpg"
        rows = exporter.product_to_rows(sized_product)
        assert rows[1]["Images"] == "https://cdn.example.com/shirt.jpg"
        assert rows[2]["Images"] == "https://cdn.example.com/m.jpg"

    def test_variation_stock(self, exporter, sized_product):
        sized_product.variants[0].available = False
        sized_product.variants[1].inventory_quantity = 3
        rows = exporter.product_to_rows(sized_product)
        assert rows[1]["In stock?"] == "0"
        assert rows[2]["In stock?"] == "1"
        assert rows[2]["Stock"] == "3"

    def test_variation_sku_without_option(self, exporter):
        product = CanonicalProduct(id="p", variants=[
            ProductVariant(title="", option2="Red"),
            ProductVariant(title="", option2="Blue"),
        ])
        rows = exporter.product_to_rows(product)
        assert [r["SKU"] for r in rows[1:]] == ["p-v1", "p-v2"]
        assert rows[1]["Attribute 1 name"] == "Option 2"

    def test_any_value_variation_keeps_parent_columns(self, exporter):
        product = build_canonical(RawProduct.from_payload({
            "id": 90,
            "name": "Cap",
            "price": "15",
            "variations": [
                {"attributes": [{"name": "Size", "option": "S"}, {"name": "Color", "option": "Red"}]},
                {"attributes": [{"name": "Size", "option": ""}, {"name": "Color", "option": "Blue"}]},
            ],
        }))
        parent, first, anysize = exporter.product_to_rows(product)

        assert (parent["Attribute 1 name"], parent["Attribute 1 value(s)"]) == ("Size", "S")
        assert (parent["Attribute 2 name"], parent["Attribute 2 value(s)"]) == ("Color", "Red | Blue")
        assert (first["Attribute 1 value(s)"], first["Attribute 2 value(s)"]) == ("S", "Red")
        assert anysize["Attribute 1 name"] == "Size"
        assert anysize["Attribute 1 value(s)"] == ""
        assert anysize["Attribute 2 name"] == "Color"
        assert anysize["Attribute 2 value(s)"] == "Blue"

    def test_variation_columns_match_parent(self, exporter):
        product = CanonicalProduct(id="p", variants=[
            ProductVariant(title="S", option1="S", option1_name="Size", option3_name="Fit"),
            ProductVariant(title="Slim", option3="Slim", option1_name="Size", option3_name="Fit"),
        ])
        parent, *variations = exporter.product_to_rows(product)

        for row in variations:
            for column in (1, 2, 3):
                assert row[f"Attribute {column} name"] == parent[f"Attribute {column} name"]
        assert parent["Attribute 2 name"] == "Fit"
        assert variations[1]["Attribute 2 value(s)"] == "Slim"
        assert variations[1]["Attribute 1 value(s)"] == ""


class TestSimpleProducts:
    def test_simple_row(self, exporter, woo_simple_payload):
        product = build_canonical(RawProduct.from_payload(woo_simple_payload))
        (row,) = as_dicts(exporter.render([product]))

        assert row["Type"] == "simple"
        assert row["ID"] == "88"
        assert row["SKU"] == "TOTE-1"
        assert row["Regular price"] == "25"
        assert row["Sale price"] == "20"
        assert row["Description"] == "Sturdy canvas"
        assert row["Categories"] == "Bags"
        assert row["Tags"] == "eco"
        assert row["Stock"] == "7"
        assert row["In stock?"] == "1"
        assert row["Weight (kg)"] == "0.5"
        assert row["Images"] == "https://cdn.example.com/tote.jpg"
        assert row["Parent"] == ""

    def test_default_values(self, exporter):
        (row,) = exporter.product_to_rows(CanonicalProduct(id="p"))
        assert row["Published"] == "1"
        assert row["Visibility in catalog"] == "visible"
        assert row["Tax status"] == "taxable"
        assert row["Regular price"] == "0"
        assert row["Weight (kg)"] == ""

    def test_pounds_to_kilograms(self, exporter):
        product = CanonicalProduct(id="p", variants=[ProductVariant(weight=2, weight_unit="lb")])
        (row,) = exporter.product_to_rows(product)
        assert row["Weight (kg)"] == "0.907184"

    def test_multiple_images_joined(self, exporter):
        product = CanonicalProduct(id="p", images=[
            ProductImage(src="a.jpg", position=1), ProductImage(src="b.jpg", position=2),
        ])
        (row,) = exporter.product_to_rows(product)
        assert row["Images"] == "a.jpg,b.jpg"


class TestSplitPrices:
    def test_on_sale(self):
        product = CanonicalProduct(id="p", price="20", compare_at_price="25")
        assert split_prices(product, product.variants[0]) == ("25", "20")

    def test_not_on_sale(self):
        product = CanonicalProduct(id="p", price="20", compare_at_price="15")
        assert split_prices(product, product.variants[0]) == ("20", "")

    def test_price_normalized(self):
        product = CanonicalProduct(id="p", price="19.990")
        assert split_prices(product, product.variants[0]) == ("19.99", "")


class TestRender:
    def test_idempotent(self, exporter, sized_product, woo_simple_payload):
        products = [sized_product, build_canonical(RawProduct.from_payload(woo_simple_payload))]
        assert exporter.render(products) == exporter.render(products)

    def test_export_writes_file(self, exporter, sized_product, tmp_path):
        output_path = tmp_path / "shop-woocommerce.csv"
        assert exporter.export([sized_product], str(output_path)) == 3
        assert output_path.read_text(encoding="utf-8").startswith('"ID","Type","SKU"')
