"""Unit tests for homerent.processing.read."""

import json

from homerent.config.settings import SEED_CATALOG_FILE
from homerent.processing.read import load_catalog


class TestLoadCatalog:
    def test_plain_list(self, tmp_path, sample_catalog):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(sample_catalog), encoding="utf-8")
        records = load_catalog(path)
        assert [r["id"] for r in records] == ["a1", "a2", "a3", "a4", "a5", "a6"]
        assert records[1]["price"] == 15

    def test_backend_envelope_with_bom(self, tmp_path):
        path = tmp_path / "catalog.json"
        body = {"Appliance": [{"_id": "x", "name": "Fan", "price": 2, "available": True}]}
        path.write_text("\ufeff" + json.dumps(body), encoding="utf-8")
        assert [r["name"] for r in load_catalog(path)] == ["Fan"]

    def test_non_dict_items_skipped(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"name": "Fan"}, "junk", 3]), encoding="utf-8")
        assert len(load_catalog(path)) == 1

    def test_missing_file(self, tmp_path):
        assert load_catalog(tmp_path / "missing.json") == []

    def test_bundled_seed_catalog(self):
        records = load_catalog()
        assert SEED_CATALOG_FILE.exists()
        assert len(records) == 12
        assert all(r["id"] and r["name"] for r in records)
