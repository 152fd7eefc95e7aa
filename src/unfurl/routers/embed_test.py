"""Tests for the embed router."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from ..config import Settings
from ..main import app
from .embed import encoded_slash_post_id


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def tweet_payload(media=None, text='Hello "world"'):
    if media is None:
        media = [
            {
                "type": "video",
                "preview_image_url": "p.jpg",
                "width": 640,
                "height": 360,
                "variants": [
                    {"content_type": "video/mp4", "bit_rate": 800, "url": "a.mp4"},
                    {"content_type": "video/mp4", "bit_rate": 2000, "url": "b.mp4"},
                ],
            }
        ]
    return {
        "data": {"id": "123", "text": text, "author_id": "1"},
        "includes": {
            "users": [{"id": "1", "name": "Ada", "username": "ada"}],
            "media": media,
        },
    }


class FakeTwitter:
    def __init__(self):
        self.response = httpx.Response(200, json=tweet_payload())
        self.exc = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture(autouse=True)
def fake_twitter():
    """Point the app at a fake Twitter API for every test, then clean up."""
    fake = FakeTwitter()
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    app.state.settings = Settings(twitter_bearer_token="testtoken")
    app.state.http = http
    yield fake
    for attr in ("settings", "http"):
        try:
            delattr(app.state, attr)
        except AttributeError:
            pass
    asyncio.run(http.aclose())
    assert http.is_closed


@pytest.fixture
def client():
    return TestClient(app)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_end_to_end_example(client, fake_twitter):
    resp = client.get("/embed/123")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")

    body = resp.text
    assert '<meta name="twitter:player" content="b.mp4">' in body
    assert '<meta property="og:video:width" content="640">' in body
    assert '<meta property="og:description" content="Hello &quot;world&quot;">' in body
    assert "url=https://twitter.com/ada/status/123" in body
    assert len(fake_twitter.requests) == 1
    assert fake_twitter.requests[0].url.path.endswith("/tweets/123")


@pytest.mark.parametrize("post_id", ["abc", "12a", "a12", "1.5", "-1", "１２３", "12%2034", "%20123"])
def test_invalid_id_returns_400_without_lookup(client, fake_twitter, post_id):
    resp = client.get(f"/embed/{post_id}")
    assert resp.status_code == 400
    assert resp.text == "Invalid Tweet ID format."
    assert fake_twitter.requests == []


@pytest.mark.parametrize("post_id", ["123", "abc"])
def test_missing_token_returns_500_without_lookup(client, fake_twitter, post_id):
    app.state.settings = Settings(twitter_bearer_token=None)
    resp = client.get(f"/embed/{post_id}")
    assert resp.status_code == 500
    assert "Missing Twitter API Bearer Token" in resp.text
    assert fake_twitter.requests == []


def test_no_video_returns_404(client, fake_twitter):
    fake_twitter.response = httpx.Response(
        200, json=tweet_payload(media=[{"type": "photo", "url": "x.jpg"}])
    )
    resp = client.get("/embed/123")
    assert resp.status_code == 404
    assert resp.text == "This Tweet does not contain a processable video."
    assert "<meta" not in resp.text


def test_no_mp4_variant_returns_404(client, fake_twitter):
    media = [
        {
            "type": "video",
            "variants": [{"content_type": "application/x-mpegURL", "url": "x.m3u8"}],
        }
    ]
    fake_twitter.response = httpx.Response(200, json=tweet_payload(media=media))
    resp = client.get("/embed/123")
    assert resp.status_code == 404
    assert resp.text == "No MP4 video variant found for this Tweet."


def test_missing_media_include_returns_404(client, fake_twitter):
    payload = tweet_payload()
    del payload["includes"]["media"]
    fake_twitter.response = httpx.Response(200, json=payload)
    resp = client.get("/embed/123")
    assert resp.status_code == 404
    assert resp.text == "Could not find a video in this Tweet."


def test_upstream_error_status_returns_500(client, fake_twitter):
    fake_twitter.response = httpx.Response(503, text="over capacity")
    resp = client.get("/embed/123")
    assert resp.status_code == 500
    assert resp.text == "Failed to fetch Tweet data from the API."
    assert len(fake_twitter.requests) == 1


def test_upstream_timeout_returns_500(client, fake_twitter):
    fake_twitter.exc = httpx.ConnectTimeout("slow")
    resp = client.get("/embed/123")
    assert resp.status_code == 500
    assert resp.text == "Failed to fetch Tweet data from the API."


def test_same_upstream_data_gives_identical_html(client):
    first = client.get("/embed/123")
    second = client.get("/embed/123")
    assert first.status_code == second.status_code == 200
    assert first.content == second.content


def test_user_markup_is_escaped(client, fake_twitter):
    fake_twitter.response = httpx.Response(
        200, json=tweet_payload(text="<img src=x onerror=alert(1)>")
    )
    resp = client.get("/embed/123")
    assert resp.status_code == 200
    assert "<img" not in resp.text
    assert "&lt;img src=x onerror=alert(1)&gt;" in resp.text


def test_trailing_slash_serves_embed(client, fake_twitter):
    resp = client.get("/embed/123/")
    assert resp.status_code == 200
    assert '<meta name="twitter:player" content="b.mp4">' in resp.text
    assert len(fake_twitter.requests) == 1


def test_head_request_is_answered(client, fake_twitter):
    resp = client.head("/embed/123")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert len(fake_twitter.requests) == 1


@pytest.mark.parametrize("path", ["/embed/12%2F3", "/embed/12%2f3/"])
def test_encoded_slash_in_id_returns_400(client, fake_twitter, path):
    resp = client.get(path)
    assert resp.status_code == 400
    assert resp.text == "Invalid Tweet ID format."
    assert fake_twitter.requests == []


def test_encoded_slash_still_checks_token_first(client, fake_twitter):
    app.state.settings = Settings(twitter_bearer_token=None)
    resp = client.get("/embed/12%2F3")
    assert resp.status_code == 500
    assert fake_twitter.requests == []


def test_nested_embed_path_serves_index_page(client, fake_twitter):
    resp = client.get("/embed/12/3")
    assert resp.status_code == 200
    assert "<meta name=\"twitter:player\"" not in resp.text
    assert fake_twitter.requests == []


class TestEncodedSlashPostId:
    def test_decodes_encoded_slash(self):
        assert encoded_slash_post_id(b"/embed/12%2F3") == "12/3"

    def test_ignores_query_string(self):
        assert encoded_slash_post_id(b"/embed/12%2F3?x=1") == "12/3"

    def test_real_nested_path_is_not_an_id(self):
        assert encoded_slash_post_id(b"/embed/12/3") is None

    def test_other_paths_are_ignored(self):
        assert encoded_slash_post_id(b"/about") is None
        assert encoded_slash_post_id(b"/embed/") is None
        assert encoded_slash_post_id(None) is None
