import asyncio
import time

from conftest import FakeQueryGenerator, FakeVideoSearch, make_video

from app.services.recommendations import (
    RecommendationAggregator,
    dedupe_videos,
    normalize_queries,
    parse_query_output,
    strip_json_fences,
)


def _ids(items):
    return [item.video_id for item in items]


# ── Query parsing ─────────────────────────────────────────────

class TestQueryParsing:
    def test_list_passthrough(self):
        assert parse_query_output([" a ", "", "b", 3]) == ["a", "b"]

    def test_json_array(self):
        assert parse_query_output('["vectors intro", "dot product"]') == ["vectors intro", "dot product"]

    def test_fenced_json(self):
        raw = '```json\n["vectors intro", "dot product"]\n```'
        assert strip_json_fences(raw) == '["vectors intro", "dot product"]'
        assert parse_query_output(raw) == ["vectors intro", "dot product"]

    def test_line_fallback(self):
        raw = "Here you go:\n- vectors intro\n2. dot product\n\n* matrix rank"
        assert parse_query_output(raw) == ["Here you go:", "vectors intro", "dot product", "matrix rank"]

    def test_none(self):
        assert parse_query_output(None) == []

    def test_normalize_caps_and_dedupes_after_capping(self):
        queries = ["x" * 100, "x" * 90, "short"]
        assert normalize_queries(queries, max_queries=5, max_length=80) == ["x" * 80, "short"]

    def test_normalize_keeps_first_n(self):
        queries = [f"q{i}" for i in range(8)]
        assert normalize_queries(queries, max_queries=5, max_length=80) == ["q0", "q1", "q2", "q3", "q4"]


class TestDedupe:
    def test_first_occurrence_wins(self):
        items = [make_video("a", "first"), make_video("b"), make_video("a", "second")]
        unique = dedupe_videos(items)
        assert _ids(unique) == ["a", "b"]
        assert unique[0].title == "first"

    def test_idempotent(self):
        items = [make_video("a"), make_video("b"), make_video("a"), make_video("c"), make_video("b")]
        once = dedupe_videos(items)
        assert dedupe_videos(once) == once


# ── Aggregation ───────────────────────────────────────────────

class TestAggregator:
    def test_duplicate_queries_and_videos_collapse(self):
        generator = FakeQueryGenerator(reply=["a", "a", "b"])
        search = FakeVideoSearch(results={
            "a": [make_video("x"), make_video("x")],
            "b": [make_video("y")],
        })
        result = asyncio.run(RecommendationAggregator(generator, search).build("some text"))

        assert result.queries == ["a", "b"]
        assert search.calls.count("a") == 1
        assert _ids(result.items) == ["x", "y"]

    def test_per_query_cap_and_query_order(self):
        generator = FakeQueryGenerator(reply=["q1", "q2"])
        search = FakeVideoSearch(results={
            "q1": [make_video("a"), make_video("b"), make_video("c")],
            "q2": [make_video("b"), make_video("d")],
        })
        result = asyncio.run(RecommendationAggregator(generator, search, per_query=2).build("text"))
        assert _ids(result.items) == ["a", "b", "d"]

    def test_slow_first_query_keeps_order(self):
        class SlowFirstSearch:
            def search_videos(self, query):
                if query == "q1":
                    time.sleep(0.05)
                    return [make_video("slow")]
                return [make_video("fast")]

        generator = FakeQueryGenerator(reply=["q1", "q2"])
        result = asyncio.run(RecommendationAggregator(generator, SlowFirstSearch()).build("text"))
        assert _ids(result.items) == ["slow", "fast"]

    def test_failing_query_is_skipped(self):
        generator = FakeQueryGenerator(reply=["broken", "ok"])
        search = FakeVideoSearch(results={"ok": [make_video("d")]}, failing=["broken"])
        result = asyncio.run(RecommendationAggregator(generator, search).build("text"))
        assert result.queries == ["broken", "ok"]
        assert _ids(result.items) == ["d"]

    def test_all_searches_failing_keeps_queries(self):
        generator = FakeQueryGenerator(reply=["q1"])
        search = FakeVideoSearch(failing=["q1"])
        result = asyncio.run(RecommendationAggregator(generator, search).build("text"))
        assert result.queries == ["q1"]
        assert result.items == []

    def test_generator_failure_yields_nothing(self):
        generator = FakeQueryGenerator(error=RuntimeError("model unavailable"))
        search = FakeVideoSearch()
        result = asyncio.run(RecommendationAggregator(generator, search).build("text"))
        assert result is None
        assert search.calls == []

    def test_empty_generator_reply_yields_nothing(self):
        generator = FakeQueryGenerator(reply=[])
        assert asyncio.run(RecommendationAggregator(generator, FakeVideoSearch()).build("text")) is None

    def test_no_signal_skips_generation(self):
        generator = FakeQueryGenerator()
        result = asyncio.run(RecommendationAggregator(generator, FakeVideoSearch()).build("  ", []))
        assert result is None
        assert generator.calls == []

    def test_topic_hints_alone_are_enough(self):
        generator = FakeQueryGenerator(reply=["eigenvalues"])
        search = FakeVideoSearch(results={"eigenvalues": [make_video("e")]})
        result = asyncio.run(
            RecommendationAggregator(generator, search).build("", ["Eigenvalues", ""])
        )
        assert generator.calls == [("", ["Eigenvalues"])]
        assert _ids(result.items) == ["e"]

    def test_raw_text_reply_is_parsed(self):
        generator = FakeQueryGenerator(reply='```json\n["q1", "q2"]\n```')
        search = FakeVideoSearch(results={"q2": [make_video("z")]})
        result = asyncio.run(RecommendationAggregator(generator, search).build("text"))
        assert result.queries == ["q1", "q2"]
        assert _ids(result.items) == ["z"]
