import pytest

from trend_sheets.normalize import (
    filter_by_category,
    filter_valid_records,
    find_by_query,
    is_valid_record,
    normalize_trending_now_response,
)


def _make_entry(query="ipl", search_volume=50000, categories=None,
                increase_percentage=300):
    entry = {"query": query, "search_volume": search_volume,
             "increase_percentage": increase_percentage}
    if categories is not None:
        entry["categories"] = categories
    return entry


def _record(query="ipl", search_volume=50000, categories=None,
            increase_percentage=0):
    return {
        "query": query,
        "search_volume": search_volume,
        "categories": categories or [],
        "increase_percentage": increase_percentage,
    }


class TestNormalizeEmptyInputs:
    def test_empty_response(self):
        assert normalize_trending_now_response({}) == []

    def test_none_trending_searches(self):
        assert normalize_trending_now_response({"trending_searches": None}) == []

    def test_empty_trending_searches(self):
        assert normalize_trending_now_response({"trending_searches": []}) == []


class TestNormalizeEntries:
    def test_single_entry(self):
        resp = {"trending_searches": [_make_entry(
            categories=[{"id": 17, "name": "Sports"}],
        )]}
        records = normalize_trending_now_response(resp)

        assert records == [{
            "query": "ipl",
            "search_volume": 50000,
            "categories": [{"name": "Sports"}],
            "increase_percentage": 300,
        }]

    def test_order_preserved(self):
        resp = {"trending_searches": [
            _make_entry("first"), _make_entry("second"), _make_entry("third"),
        ]}
        queries = [r["query"] for r in normalize_trending_now_response(resp)]
        assert queries == ["first", "second", "third"]

    def test_categories_without_name_dropped(self):
        resp = {"trending_searches": [_make_entry(categories=[
            {"id": 1, "name": "Sports"}, {"id": 2}, None, {"name": ""},
            {"name": "News"},
        ])]}
        rec = normalize_trending_now_response(resp)[0]
        assert rec["categories"] == [{"name": "Sports"}, {"name": "News"}]


class TestNormalizeDefaults:
    def test_missing_fields_use_defaults(self):
        records = normalize_trending_now_response({"trending_searches": [
            {"query": "x"},
        ]})
        rec = records[0]
        assert rec["search_volume"] == 0
        assert rec["categories"] == []
        assert rec["increase_percentage"] == 0

    def test_missing_query_defaults_to_empty(self):
        records = normalize_trending_now_response({"trending_searches": [
            {"search_volume": 10},
        ]})
        assert records[0]["query"] == ""


class TestRecordFilter:
    @pytest.mark.parametrize("record", [
        _record(search_volume=0),
        _record(query=""),
        _record(query="   "),
        _record(query="", search_volume=0),
    ])
    def test_invalid_records(self, record):
        assert is_valid_record(record) is False

    def test_valid_record(self):
        assert is_valid_record(_record()) is True

    def test_filter_drops_invalid_and_keeps_order(self):
        records = [
            _record("a", 10), _record("", 10), _record("b", 0),
            _record("c", 5), _record("  ", 99), _record("d", 1),
        ]
        kept = filter_valid_records(records)
        assert [r["query"] for r in kept] == ["a", "c", "d"]
        assert all(r["search_volume"] > 0 and r["query"].strip() for r in kept)

    def test_filter_accepts_generator(self):
        kept = filter_valid_records(_record(str(i), i) for i in range(3))
        assert [r["query"] for r in kept] == ["1", "2"]


class TestQueryHelpers:
    def test_find_by_query_case_insensitive(self):
        records = [_record("IPL Final"), _record("Budget")]
        assert find_by_query(records, "ipl final")["query"] == "IPL Final"

    def test_find_by_query_missing(self):
        assert find_by_query([_record("Budget")], "ipl") is None

    def test_filter_by_category_substring(self):
        records = [
            _record("a", categories=[{"name": "Sports"}]),
            _record("b", categories=[{"name": "Politics"}]),
            _record("c", categories=[{"name": "News"}, {"name": "E-sports"}]),
            _record("d"),
        ]
        matched = filter_by_category(records, "SPORT")
        assert [r["query"] for r in matched] == ["a", "c"]
