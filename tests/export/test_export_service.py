"""Tests for storeharvest/export/service.py"""

import json

import pytest

from storeharvest.catalog.selection import Selection
from storeharvest.common.csv_utils import parse_csv
from storeharvest.export.service import (
    JSON_MIME_TYPE,
    CatalogExporter,
    ExportFormat,
    ExportStatus,
)
from storeharvest.models import RawProduct
from storeharvest.normalize import build_canonical

STORE = "https://shop.example.com/collections/all"


@pytest.fixture
def exporter():
    return CatalogExporter(STORE)


@pytest.fixture
def catalog(product_factory):
    return [product_factory(i) for i in range(1, 61)]


class TestFreeTier:
    def test_51_products_capped_at_50(self, exporter, product_factory):
        products = [product_factory(i) for i in range(51)]
        result = exporter.export_all(products, products)

        assert result.ok
        assert result.exported == 50
        assert result.total == 51
        assert result.truncated
        assert result.message == "Free plan: Exported first 50 of 51 products. Upgrade for unlimited exports!"
        assert len(parse_csv(result.artifact.content.decode("utf-8"))) == 51

    def test_exactly_50_products_no_notice(self, exporter, product_factory):
        products = [product_factory(i) for i in range(50)]
        result = exporter.export_all(products, products)
        assert result.message == "Exported 50 products successfully!"
        assert not result.truncated

    def test_paid_exports_everything(self, catalog):
        result = CatalogExporter(STORE, paid=True).export_all(catalog, catalog)
        assert result.exported == 60
        assert result.message == "Exported 60 products successfully!"

    def test_selected_notice(self, exporter, catalog):
        selection = Selection(p.id for p in catalog)
        result = exporter.export_selected(catalog, catalog, selection)
        assert result.message == ("Free plan: Exported first 50 of 60 selected products. "
                                  "Upgrade for unlimited exports!")

    def test_custom_limit(self, catalog):
        result = CatalogExporter(STORE, free_tier_limit=10).export_all(catalog, catalog)
        assert result.exported == 10


class TestExportAll:
    def test_empty_view_falls_back_to_full_set(self, catalog):
        result = CatalogExporter(STORE, paid=True).export_all([], catalog)
        assert result.exported == 60

    def test_view_order_preserved(self, exporter, product_factory):
        view = [product_factory(3), product_factory(1)]
        result = exporter.export_all(view, view)
        handles = [row[0] for row in parse_csv(result.artifact.content.decode("utf-8"))[1:]]
        assert handles == ["product-3", "product-1"]

    def test_nothing_to_export(self, exporter):
        result = exporter.export_all([], [])
        assert result.status == ExportStatus.EMPTY
        assert result.message == "No products to export"
        assert result.artifact is None


class TestExportSelected:
    def test_empty_selection(self, exporter, catalog):
        result = exporter.export_selected(catalog, catalog, Selection())
        assert result.status == ExportStatus.EMPTY
        assert result.message == "No products selected"

    def test_selected_products_only(self, exporter, catalog):
        result = exporter.export_selected(catalog, catalog, Selection(["p2", "p5"]))
        assert result.ok
        assert result.exported == 2
        assert result.message == "Exported 2 selected products!"

    def test_selection_hidden_by_filter_not_exported(self, exporter, catalog):
        view = catalog[:2]
        result = exporter.export_selected(view, catalog, Selection(["p1", "p5"]))

        assert result.exported == 1
        assert result.message == "Exported 1 selected products!"
        skus = [row[13] for row in parse_csv(result.artifact.content.decode("utf-8"))[1:]]
        assert skus == ["SKU-1"]

    def test_only_hidden_selection_gives_empty(self, exporter, catalog):
        result = exporter.export_selected(catalog[:2], catalog, Selection(["p40"]))
        assert result.status == ExportStatus.EMPTY
        assert result.message == "No products selected"

    def test_empty_view_resolves_against_full_set(self, exporter, catalog):
        result = exporter.export_selected([], catalog, Selection(["p40"]))
        assert result.exported == 1

    def test_stale_ids_give_empty(self, exporter, catalog):
        result = exporter.export_selected(catalog, catalog, Selection(["gone"]))
        assert result.status == ExportStatus.EMPTY
        assert result.message == "No products selected"


class TestArtifacts:
    @pytest.mark.parametrize("fmt, filename, mime_type", [
        ("shopify", "shop.example.com-shopify.csv", "text/csv;charset=utf-8"),
        ("woocommerce", "shop.example.com-woocommerce.csv", "text/csv;charset=utf-8"),
        ("json", "shop.example.com-products.json", JSON_MIME_TYPE),
    ])
    def test_filename_and_mime_type(self, exporter, product_factory, fmt, filename, mime_type):
        result = exporter.export([product_factory(1)], fmt)
        assert result.artifact.filename == filename
        assert result.artifact.mime_type == mime_type

    def test_relative_store_url_filename(self, product_factory):
        result = CatalogExporter("my shop!").export([product_factory(1)], ExportFormat.SHOPIFY)
        assert result.artifact.filename == "my-shop-shopify.csv"

    def test_json_passes_source_payloads_through(self, exporter, shopify_payload):
        product = build_canonical(RawProduct.from_payload(shopify_payload))
        result = exporter.export([product], ExportFormat.JSON)

        assert json.loads(result.artifact.content.decode("utf-8")) == [shopify_payload]
        assert result.rows == 0

    def test_json_keeps_non_ascii(self, exporter, product_factory):
        result = exporter.export([product_factory(1, title="Café")], "json")
        assert "Café" in result.artifact.content.decode("utf-8")

    def test_woocommerce_row_count(self, exporter, sized_product):
        result = exporter.export([sized_product], "woocommerce")
        assert result.rows == 3
        assert result.exported == 1

    def test_same_input_same_bytes(self, exporter, catalog):
        first = exporter.export_all(catalog, catalog, "woocommerce")
        second = exporter.export_all(catalog, catalog, "woocommerce")
        assert first.artifact.content == second.artifact.content

    def test_write(self, exporter, product_factory, tmp_path):
        result = exporter.export([product_factory(1)], "shopify")
        path = result.artifact.write(str(tmp_path / "out"))

        assert path.endswith("shop.example.com-shopify.csv")
        with open(path, "rb") as f:
            assert f.read() == result.artifact.content

    def test_unknown_format_is_a_status(self, exporter, product_factory):
        result = exporter.export([product_factory(1)], "xml")

        assert result.status == ExportStatus.INVALID
        assert not result.ok
        assert result.message == "Unsupported export format: xml"
        assert result.artifact is None

    def test_unknown_format_through_export_all(self, exporter, catalog):
        result = exporter.export_all(catalog, catalog, "xml")
        assert result.status == ExportStatus.INVALID
