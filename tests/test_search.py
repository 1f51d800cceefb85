"""Unit tests for homerent.catalog.search."""

from homerent.catalog.search import search, suggest


class TestSearch:
    def test_substring_case_insensitive(self, sample_catalog):
        assert [a["name"] for a in search(sample_catalog, "WASH")] == ["LG Washing Machine", "Bosch Dishwasher"]

    def test_empty_term_returns_all(self, sample_catalog):
        assert search(sample_catalog, "") == sample_catalog
        assert search(sample_catalog, None) == sample_catalog

    def test_term_matched_as_typed(self):
        catalog = [{"name": "Floor Lamp"}, {"name": "Desk Lamp Pro"}]
        assert search(catalog, "lamp ") == [{"name": "Desk Lamp Pro"}]
        assert search(catalog, " ") == catalog

    def test_whitespace_only_term_is_not_empty(self):
        assert search([{"name": "Fan"}], "  ") == []

    def test_no_match(self, sample_catalog):
        assert search(sample_catalog, "sofa") == []

    def test_empty_catalog(self):
        assert search([], "fan") == []


class TestSuggest:
    def test_prefix_only(self, sample_catalog):
        assert suggest(sample_catalog, "lg") == ["LG Washing Machine"]
        assert suggest(sample_catalog, "washing") == []

    def test_limit(self):
        catalog = [{"name": f"Fan {i}"} for i in range(8)]
        assert suggest(catalog, "fan") == [f"Fan {i}" for i in range(5)]
        assert len(suggest(catalog, "fan", limit=2)) == 2

    def test_blank_prefix(self, sample_catalog):
        assert suggest(sample_catalog, "") == []
