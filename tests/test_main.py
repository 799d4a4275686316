"""Tests for the HTTP routes with the content service swapped for a scripted one."""

import httpx
import pytest
from fastapi.testclient import TestClient

from content_studio.generation import ContentService, get_content_service
from content_studio.main import app
from conftest import FakeLLMClient, make_settings

DASHED_NEWSLETTER = "Title: Weekly Notes\n---\nIntroduction: Hello readers.\n---\nCall to Action: Reply to this email."


@pytest.fixture
def client(service):
    app.dependency_overrides[get_content_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(fake_client, store):
    service = ContentService(client=fake_client, settings=make_settings(openai_api_key=None), store=store)
    app.dependency_overrides[get_content_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestGeneratePost:
    def test_requires_type_and_topic(self, client):
        response = client.post("/api/generatePost", json={"postType": "linkedin"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Post type and topic are required"}

    def test_standard_post(self, client, fake_client):
        fake_client.replies = ["Hello LinkedIn"]
        response = client.post("/api/generatePost", json={"postType": "linkedin", "topic": "Rust"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "content": "Hello LinkedIn"}

    def test_thread(self, client, fake_client):
        fake_client.replies = ["First tweet with enough characters\n---\nSecond tweet with enough characters"]
        body = client.post("/api/generatePost", json={"postType": "thread", "topic": "Rust"}).json()

        assert body["isThread"] is True
        assert body["content"][0] == {
            "content": "First tweet with enough characters",
            "characterCount": 34,
            "index": 1,
        }

    def test_unparseable_thread_is_a_server_error(self, client, fake_client):
        fake_client.replies = ["nope"]
        response = client.post("/api/generatePost", json={"postType": "thread", "topic": "Rust"})
        assert response.status_code == 500
        assert response.json()["error"].startswith("Could not generate a valid thread")

    def test_missing_api_key(self, unconfigured_client):
        response = unconfigured_client.post("/api/generatePost", json={"postType": "linkedin", "topic": "Rust"})
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "OpenAI API key is not configured"}


class TestStream:
    def test_event_stream(self, client, fake_client):
        fake_client.stream_chunks = ["Hel", "lo"]
        response = client.post("/api/generatePost/stream", json={"postType": "linkedin", "topic": "Rust"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert 'data: {"content": "Hel"}' in response.text
        assert response.text.endswith("data: [DONE]\n\n")

    def test_missing_api_key_fails_before_streaming(self, unconfigured_client):
        response = unconfigured_client.post("/api/generatePost/stream", json={"postType": "x", "topic": "Rust"})
        assert response.status_code == 500


class TestImages:
    def test_requires_prompt_or_content(self, client):
        response = client.post("/api/generateImage", json={"prompt": "  "})
        assert response.status_code == 400
        assert response.json()["error"] == "Prompt is required"

    def test_generate_image(self, client, fake_client):
        body = client.post("/api/generateImage", json={"prompt": "A red fox"}).json()
        assert body["success"] is True
        assert body["imageUrl"] == fake_client.image_url
        assert body["proxyUrl"].startswith("/api/images/")

    def test_proxy_unknown_image(self, client):
        response = client.get("/api/images/unknown")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Image not found"}

    def test_proxy_image(self, client, store, monkeypatch):
        image_id = store.register("https://img.example.com/fox.png")

        async def fake_fetch(requested_id, **kwargs):
            assert requested_id == image_id
            return b"png-bytes", "image/png"

        monkeypatch.setattr(store, "fetch", fake_fetch)
        response = client.get(f"/api/images/{image_id}")

        assert response.status_code == 200
        assert response.content == b"png-bytes"
        assert response.headers["content-type"] == "image/png"

    def test_proxy_upstream_failure(self, client, store, monkeypatch):
        image_id = store.register("https://img.example.com/fox.png")

        async def failing_fetch(requested_id, **kwargs):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(store, "fetch", failing_fetch)
        response = client.get(f"/api/images/{image_id}")
        assert response.status_code == 502
        assert response.json()["error"] == "Failed to fetch image"


class TestPoll:
    def test_requires_topic(self, client):
        response = client.post("/api/generate-poll", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Poll topic is required"

    def test_poll(self, client, fake_client):
        fake_client.replies = ["1. Tabs or spaces?\n2. Tabs\n3. Spaces\n4. Both"]
        body = client.post("/api/generate-poll", json={"topic": "Indentation"}).json()
        assert body["success"] is True
        assert body["question"] == "Tabs or spaces?"
        assert body["options"] == ["Tabs", "Spaces", "Both"]


class TestNewsletter:
    def test_blank_topic(self, client):
        response = client.post("/api/generate-newsletter", json={"topic": "   "})
        assert response.status_code == 400
        assert response.json()["error"] == "Topic is required"

    def test_invalid_type(self, client):
        response = client.post("/api/generate-newsletter", json={"topic": "AI", "type": "gossip"})
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["details"][0]["loc"] == ["body", "type"]

    def test_newsletter(self, client, fake_client):
        fake_client.replies = [DASHED_NEWSLETTER]
        body = client.post("/api/generate-newsletter", json={"topic": "AI", "length": "short"}).json()

        assert body["success"] is True
        assert body["metadata"]["title"] == "Weekly Notes"
        assert body["metadata"]["length"] == "short"
        assert [s["title"] for s in body["sections"]] == ["Introduction", "Call to Action"]
        assert body["usage"]["totalTokens"] == 200
        assert body["usage"]["promptTokens"] == 120

    def test_render_html(self, client):
        response = client.post("/api/newsletter/html", json={"content": DASHED_NEWSLETTER})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<h1>Weekly Notes</h1>" in response.text

    def test_render_html_escapes_generated_markup(self, client):
        content = "Title: Weekly Notes\n---\nIntroduction: <script>alert(1)</script> [x](javascript:alert(2))"
        response = client.post("/api/newsletter/html", json={"content": content})

        assert response.status_code == 200
        assert "<script>alert(1)" not in response.text
        assert "&lt;script&gt;alert(1)" in response.text
        assert 'href="javascript' not in response.text

    def test_render_html_requires_content(self, client):
        response = client.post("/api/newsletter/html", json={"content": " "})
        assert response.status_code == 400


class TestPromptTools:
    def test_preview(self, client):
        response = client.post("/api/prompts/preview", json={"contentType": "poll", "topic": "Remote work"})
        body = response.json()
        assert response.status_code == 200
        assert "Remote work" in body["prompt"]
        assert body["temperature"] == 0.8
        assert body["estimatedTokens"] > 0
        assert "systemPrompt" in body

    def test_preview_requires_topic(self, client):
        response = client.post("/api/prompts/preview", json={"topic": " "})
        assert response.status_code == 400

    def test_estimate(self, client):
        body = client.post("/api/tokens/estimate", json={"text": "a" * 400, "model": "gpt-4"}).json()
        assert body["tokens"] == 100
        assert body["estimatedCost"] == pytest.approx(0.036)

    def test_platform_info(self, client):
        body = client.get("/api/platforms/Twitter").json()
        assert body["characterLimit"] == 280
        assert body["pollOptionLimit"] == 25
        assert body["constraints"]["maxHashtags"] == 5

    def test_models(self, client):
        names = [model["name"] for model in client.get("/api/models").json()["models"]]
        assert "dall-e-3" in names
        assert "gpt-4o-mini" in names


class TestHealthAndErrors:
    def test_health_ok(self, client):
        assert client.get("/health").json() == {"status": "ok", "openai": "configured"}

    def test_health_unreachable(self, client, fake_client):
        fake_client.healthy = False
        assert client.get("/health").json() == {"status": "degraded", "openai": "unreachable"}

    def test_health_without_key(self, unconfigured_client):
        assert unconfigured_client.get("/health").json() == {"status": "degraded", "openai": "missing"}

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}
