"""Unit tests for homerent.recommend.engine."""

import pandas as pd
import pytest

from homerent.processing.clean import clean_catalog
from homerent.processing.validate import BudgetValidationError
from homerent.recommend.engine import get_recommendations, recommend


class TestRecommend:
    def test_budget_50_example(self, fridge_and_lamp):
        results = recommend(50, fridge_and_lamp)
        assert [r["name"] for r in results] == ["Fridge X", "Lamp"]
        assert results[0]["score"] == pytest.approx(5.4)
        assert results[1]["score"] == pytest.approx(2.45)

    def test_empty_catalog(self):
        assert recommend(100, []) == []

    def test_nothing_within_budget(self, sample_catalog):
        assert recommend(1, sample_catalog) == []

    @pytest.mark.parametrize("budget", [0, -10, "", None, "abc", "nan"])
    def test_invalid_budget(self, budget, sample_catalog):
        with pytest.raises(BudgetValidationError):
            recommend(budget, sample_catalog)

    def test_string_budget_accepted(self, fridge_and_lamp):
        assert len(recommend("50", fridge_and_lamp)) == 2

    def test_results_within_budget_and_available(self, sample_catalog):
        results = recommend(16, sample_catalog)
        assert results
        assert all(r["price"] <= 16 and r["available"] for r in results)

    def test_sorted_descending(self, sample_catalog):
        scores = [r["score"] for r in recommend(100, sample_catalog)]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_catalog_order(self):
        a = {"name": "Lamp A", "price": 20, "available": True}
        b = {"name": "Lamp B", "price": 20, "available": True}
        assert [r["name"] for r in recommend(50, [a, b])] == ["Lamp A", "Lamp B"]
        assert [r["name"] for r in recommend(50, [b, a])] == ["Lamp B", "Lamp A"]

    def test_top_twelve(self):
        catalog = [{"name": f"Item {i}", "price": i + 1, "available": True} for i in range(20)]
        assert len(recommend(100, catalog)) == 12

    def test_breakdown_included(self, fridge_and_lamp):
        result = recommend(50, fridge_and_lamp)[0]
        assert result["score_breakdown"]["ratio_band"] == "high_value"

    def test_wire_ids_normalized(self, sample_catalog):
        result = recommend(100, sample_catalog)
        assert all(r["id"] for r in result)

    def test_accepts_dataframe(self, fridge_and_lamp):
        assert len(recommend(50, pd.DataFrame(fridge_and_lamp))) == 2


class TestGetRecommendations:
    def test_metadata(self, fridge_and_lamp):
        df = get_recommendations(clean_catalog(fridge_and_lamp), 50.0)
        assert df.attrs["budget"] == 50.0
        assert df.attrs["price_range"] == (40.0, 45.0)
        assert df.attrs["avg_score"] == pytest.approx((5.4 + 2.45) / 2)

    def test_empty_result_has_score_column(self, fridge_and_lamp):
        df = get_recommendations(clean_catalog(fridge_and_lamp), 10.0)
        assert df.empty
        assert "score" in df.columns

    def test_top_n(self, sample_catalog):
        df = get_recommendations(clean_catalog(sample_catalog), 100.0, top_n=2)
        assert len(df) == 2

    def test_input_not_modified(self, fridge_and_lamp):
        df = clean_catalog(fridge_and_lamp)
        get_recommendations(df, 50.0)
        assert "score" not in df.columns
