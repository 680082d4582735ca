"""Tests for core.render_feed – latest render and SSE fan-out."""

from cards.renderer import RenderResult, ViewKind
from core.render_feed import RenderFeed


class TestRenderFeed:
    def test_latest_per_board(self):
        feed = RenderFeed()
        feed.publish("a", RenderResult(ViewKind.LOADING))
        feed.listener("b")(RenderResult(ViewKind.EMPTY, message="No cards"))
        assert feed.get_latest("a")["kind"] == "loading"
        assert feed.get_latest("b")["board"] == "b"
        assert set(feed.get_latest()) == {"a", "b"}
        assert feed.get_latest("missing") is None

    def test_stream_receives_renders(self):
        feed = RenderFeed()
        stream = feed.stream(timeout=0.01)
        assert next(stream) == ("keepalive", None)
        assert feed.client_count == 1

        feed.publish("a", RenderResult(ViewKind.LOADING))
        board_id, payload = next(stream)
        assert board_id == "a"
        assert payload["kind"] == "loading"

        stream.close()
        assert feed.client_count == 0
