"""Tests for catalog_import/export/catalog_exporter.py"""

import json
from dataclasses import replace

from catalog_import.export import CatalogExporter
from catalog_import.models import SellerInfo


class TestToCatalogEntry:
    def test_full_record(self, full_record):
        entry = CatalogExporter().to_catalog_entry(full_record)

        assert entry["name"] == "Stainless Steel Water Bottle 750ml"
        assert entry["price"] == 25.99
        assert entry["originalPrice"] == 19.99
        assert entry["sourcePrice"] == 19.99
        assert entry["brand"] == "Hydro Goods Store"
        assert entry["rating"] == 4.8
        assert entry["numReviews"] == 1234
        assert entry["countInStock"] == 999
        assert entry["category"] == "Other"
        assert entry["sourceProductId"] == "1005001234567890"
        assert entry["images"] == list(full_record.images)
        source = entry["sourceData"]
        assert source["originalUrl"] == full_record.source_url
        assert source["variants"][0]["skuId"] == "12000001"
        assert source["shippingOptions"] == [{"price": 0.0, "deliveryDays": "15-45"}]
        assert source["confidence"] == "structured"

    def test_brand_defaults_without_seller(self, full_record):
        entry = CatalogExporter().to_catalog_entry(replace(full_record, seller=SellerInfo()))
        assert entry["brand"] == "AliExpress"

    def test_reviews_capped_at_ten(self, full_record):
        reviews = [{"id": i} for i in range(25)]
        entry = CatalogExporter().to_catalog_entry(full_record, reviews)
        assert len(entry["sourceData"]["reviews"]) == 10

    def test_is_json_serializable(self, stub_record):
        json.dumps(CatalogExporter().to_catalog_entry(stub_record))


class TestWrite:
    def test_export_json(self, tmp_path, full_record, stub_record):
        path = tmp_path / "nested" / "catalog.json"

        count = CatalogExporter().export_json([full_record, stub_record], str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert count == 2
        assert [e["sourceData"]["confidence"] for e in data] == ["structured", "stub"]

    def test_append_jsonl(self, tmp_path, full_record, stub_record):
        path = tmp_path / "catalog.jsonl"
        exporter = CatalogExporter()

        exporter.append_jsonl(full_record, str(path))
        exporter.append_jsonl(stub_record, str(path))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["name"] == "Product 1005001234567890"
