import json

from trend_sheets.export import (
    save_trends_json,
    summarize_trends,
    trends_to_json,
)


def _record(query, search_volume, categories=None, increase_percentage=0):
    return {
        "query": query,
        "search_volume": search_volume,
        "categories": categories or [],
        "increase_percentage": increase_percentage,
    }


RECORDS = [
    _record("budget", 2000, [{"name": "Politics"}]),
    _record("ipl", 50000, [{"name": "Sports"}, {"name": "News"}], 300),
    _record("monsoon", 900),
]


class TestJsonExport:
    def test_round_trips_fields(self):
        data = json.loads(trends_to_json(RECORDS))
        assert [d["query"] for d in data] == ["budget", "ipl", "monsoon"]
        assert data[1]["categories"] == [{"name": "Sports"}, {"name": "News"}]
        assert data[1]["increase_percentage"] == 300

    def test_numbers_keep_their_type(self):
        records = [_record("ipl", 50000, increase_percentage=300),
                   _record("monsoon", 900, increase_percentage=12.5)]
        text = trends_to_json(records)
        data = json.loads(text)
        assert isinstance(data[0]["increase_percentage"], int)
        assert data[0]["increase_percentage"] == 300
        assert data[1]["increase_percentage"] == 12.5
        assert "300.0" not in text

    def test_non_ascii_kept(self):
        query = "\u0915\u094d\u0930\u093f\u0915\u0947\u091f"
        assert query in trends_to_json([_record(query, 10)])

    def test_save_creates_parent_dirs(self, tmp_path):
        path = save_trends_json(RECORDS, tmp_path / "out" / "trends.json")
        assert path.exists()
        assert len(json.loads(path.read_text(encoding="utf-8"))) == 3


class TestSummary:
    def test_ranked_by_volume(self):
        df = summarize_trends(RECORDS)
        assert list(df["query"]) == ["ipl", "budget", "monsoon"]
        assert list(df.index) == [1, 2, 3]

    def test_category_names_joined(self):
        df = summarize_trends(RECORDS)
        assert df.loc[1, "categories"] == "Sports, News"
        assert df.loc[3, "categories"] == "No categories"

    def test_empty(self):
        assert summarize_trends([]).empty
