import unittest
from importlib import import_module
from types import SimpleNamespace
from unittest.mock import patch

_FASTAPI_AVAILABLE = __import__("importlib").util.find_spec("fastapi") is not None


def _client():
    TestClient = import_module("fastapi.testclient").TestClient
    from embedref.main import app

    return TestClient(app)


def _config(disabled_kinds: frozenset[str] = frozenset(), max_urls: int = 50):
    return SimpleNamespace(
        max_scan_chars=50_000,
        max_urls=max_urls,
        log_level="INFO",
        disabled_kinds=disabled_kinds,
    )


@unittest.skipUnless(_FASTAPI_AVAILABLE, "fastapi unavailable")
class APITests(unittest.TestCase):
    def test_health(self) -> None:
        response = _client().get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_classify_social_post(self) -> None:
        response = _client().post(
            "/api/v1/embeds/classify", json={"url": "https://x.com/alice/status/12345"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "url": "https://x.com/alice/status/12345",
                "kind": "social-post",
                "enabled": True,
                "embed": {"type": "social-post", "username": "alice", "postId": "12345"},
            },
        )

    def test_classify_tag_only_and_unknown(self) -> None:
        client = _client()
        pdf = client.post("/api/v1/embeds/classify", json={"url": "https://host/a.pdf"}).json()
        self.assertEqual((pdf["kind"], pdf["enabled"], pdf["embed"]), ("document", True, None))

        other = client.post("/api/v1/embeds/classify", json={"url": "not a url"}).json()
        self.assertEqual((other["kind"], other["enabled"], other["embed"]), (None, False, None))

    def test_classify_rejects_missing_url(self) -> None:
        response = _client().post("/api/v1/embeds/classify", json={})
        self.assertEqual(response.status_code, 422)

    def test_disabled_kind_is_reported_without_embed(self) -> None:
        with patch("embedref.main.config", _config(frozenset({"video"}))):
            body = _client().post(
                "/api/v1/embeds/classify", json={"url": "https://youtu.be/abc"}
            ).json()
            kinds = _client().get("/api/v1/embed-kinds").json()["items"]
        self.assertEqual(body["kind"], "video")
        self.assertFalse(body["enabled"])
        self.assertIsNone(body["embed"])
        self.assertEqual(kinds[0], {"kind": "video", "enabled": False})
        self.assertTrue(all(item["enabled"] for item in kinds[1:]))

    def test_scan_message(self) -> None:
        response = _client().post(
            "/api/v1/embeds/scan",
            json={
                "text": "look https://open.spotify.com/track/5F and https://youtu.be/abc?t=3!"
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["kinds"], ["video", "media-entity"])
        self.assertEqual(
            body["embeds"][0]["embed"], {"type": "media-entity", "entityKind": "track", "id": "5F"}
        )
        self.assertEqual(
            body["embeds"][1],
            {
                "url": "https://youtu.be/abc?t=3",
                "kind": "video",
                "embed": {"type": "video", "videoId": "abc", "startTime": 3},
            },
        )

    def test_scan_kind_filter_and_disabled_kinds(self) -> None:
        text = "https://youtu.be/abc https://x.com/a/status/1 https://host/p.pdf"
        client = _client()

        filtered = client.post(
            "/api/v1/embeds/scan", params={"kind": "document"}, json={"text": text}
        ).json()
        self.assertEqual(filtered["kinds"], ["document"])
        self.assertEqual(filtered["embeds"][0]["embed"], None)

        with patch("embedref.extra_routes.config", _config(frozenset({"video"}), max_urls=2)):
            limited = client.post("/api/v1/embeds/scan", json={"text": text}).json()
        self.assertEqual(limited["kinds"], ["social-post"])

        invalid = client.post(
            "/api/v1/embeds/scan", params={"kind": "gif"}, json={"text": text}
        )
        self.assertEqual(invalid.status_code, 400)
        self.assertEqual(invalid.json()["detail"], "invalid_kind")

    def test_oversized_start_time_and_nested_chart_spec(self) -> None:
        client = _client()
        url = "https://youtu.be/abc?t=" + "1" * 5000

        scanned = client.post("/api/v1/embeds/scan", json={"text": url})
        self.assertEqual(scanned.status_code, 200)
        self.assertEqual(scanned.json()["embeds"][0]["embed"]["videoId"], "abc")

        classified = client.post("/api/v1/embeds/classify", json={"url": url})
        self.assertEqual(classified.status_code, 200)
        self.assertEqual(classified.json()["kind"], "video")

        nested = client.post(
            "/api/v1/chart-specs/check", json={"code": "[" * 100_000 + "]" * 100_000}
        )
        self.assertEqual(nested.status_code, 200)
        self.assertEqual(nested.json(), {"isChartSpec": False})

    def test_chart_spec_check(self) -> None:
        client = _client()
        yes = client.post(
            "/api/v1/chart-specs/check", json={"code": '{"mark":"bar","data":{"values":[]}}'}
        )
        no = client.post("/api/v1/chart-specs/check", json={"code": "not json"})
        self.assertEqual(yes.json(), {"isChartSpec": True})
        self.assertEqual(no.json(), {"isChartSpec": False})


if __name__ == "__main__":
    _ = unittest.main()
