from fastapi.testclient import TestClient

from folio.settings import Settings
from folio.web.app import create_app


def _write_articles(directory) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "k8s.md").write_text(
        "---\ntitle: AI on Kubernetes\ndate: 2024-01-20\nauthor: Jane\ntags: [kubernetes]\n---\nBody\n",
        encoding="utf-8",
    )
    (directory / "linux.md").write_text(
        "---\ntitle: Linux Performance\ndate: 2023-11-08\nauthor: Jane\ntags: [linux]\n---\nBody\n",
        encoding="utf-8",
    )
    (directory / "broken.md").write_text("---\ntitle: Broken\n", encoding="utf-8")


def test_articles_endpoints(tmp_path) -> None:
    _write_articles(tmp_path)
    app = create_app(Settings(content_dir=tmp_path))

    with TestClient(app) as client:
        response = client.get("/articles", params={"sort_order": "asc"})
        assert response.status_code == 200
        payload = response.json()
        assert payload["total_count"] == 2
        assert [item["metadata"]["slug"] for item in payload["articles"]] == [
            "linux-performance",
            "ai-on-kubernetes",
        ]

        detail = client.get("/articles/ai-on-kubernetes")
        assert detail.status_code == 200
        assert detail.json()["content"].startswith("Body")
        assert detail.json()["metadata"]["date"] == "2024-01-20"

        assert client.get("/articles/missing").status_code == 404

        navigation = client.get("/articles/ai-on-kubernetes/navigation").json()
        assert navigation["previous"] is None
        assert navigation["next"]["slug"] == "linux-performance"

        tags = client.get("/tags").json()
        assert {"tag": "kubernetes", "count": 1} in tags

        recent = client.get("/articles/recent", params={"limit": 1}).json()
        assert len(recent) == 1

        settings = client.get("/settings").json()
        assert settings["config"]["articles_per_page"] == 10


def test_reload_reports_skips_and_failures(tmp_path) -> None:
    content_dir = tmp_path / "articles"
    _write_articles(content_dir)
    app = create_app(Settings(content_dir=content_dir))

    with TestClient(app) as client:
        response = client.post("/articles/reload")
        assert response.status_code == 200
        body = response.json()
        assert body["loaded"] == 2
        assert [item["document_id"] for item in body["skipped"]] == ["broken.md"]

        for path in content_dir.iterdir():
            path.unlink()
        content_dir.rmdir()

        failed = client.post("/articles/reload")
        assert failed.status_code == 503
        assert client.get("/articles").json()["total_count"] == 0


def test_invalid_page_is_rejected(tmp_path) -> None:
    app = create_app(Settings(content_dir=tmp_path))
    with TestClient(app) as client:
        assert client.get("/articles", params={"page": 0}).status_code == 422
