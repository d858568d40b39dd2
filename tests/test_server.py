"""Tests for the standalone dev server app and logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi.testclient import TestClient

from vigil.config import VigilConfig
from vigil.logging import get_logger, parse_level
from vigil.server import create_app


def site(tmp_path: Path) -> Path:
    tmp_path.mkdir(parents=True, exist_ok=True)
    (tmp_path / "index.html").write_text(
        '<html><head><script src="/vigil/inject.js"></script></head></html>',
        encoding="utf-8",
    )
    (tmp_path / "app.css").write_text("body {}", encoding="utf-8")
    return tmp_path


class TestCreateApp:
    def test_dev_serves_decorated_pages(self, tmp_path: Path) -> None:
        root = site(tmp_path)
        app = create_app(VigilConfig(environment="dev", project_root=str(root)))

        with TestClient(app) as client:
            response = client.get("/")
            assert response.status_code == 200
            assert "/vigil/inject.js" in response.text
            assert response.headers["x-vigil-active"] == "true"

            css = client.get("/app.css")
            assert css.status_code == 200
            assert "x-vigil-active" not in css.headers

            assert client.get("/vigil/status").status_code == 200

    def test_head_probe_sees_headers(self, tmp_path: Path) -> None:
        app = create_app(VigilConfig(environment="dev", project_root=str(site(tmp_path))))

        response = TestClient(app).head("/")

        assert response.headers["x-vigil-script-path"] == "/vigil/dev-reload.js"

    def test_prod_serves_plain_pages(self, tmp_path: Path) -> None:
        app = create_app(VigilConfig(environment="prod", project_root=str(site(tmp_path))))
        client = TestClient(app)

        response = client.get("/")
        assert response.status_code == 200
        assert "x-vigil-active" not in response.headers
        assert client.get("/vigil/status").status_code == 404

    def test_separate_static_dir(self, tmp_path: Path) -> None:
        public = site(tmp_path / "public")
        app = create_app(VigilConfig(environment="dev", project_root=str(tmp_path)), public)

        assert TestClient(app).get("/index.html").status_code == 200

    def test_missing_static_dir(self, tmp_path: Path) -> None:
        app = create_app(
            VigilConfig(environment="dev", project_root=str(tmp_path)), tmp_path / "missing"
        )
        assert TestClient(app).get("/vigil/inject.js").status_code == 200


class TestLogging:
    def test_child_logger(self) -> None:
        assert get_logger("watching").name == "vigil.watching"
        assert get_logger().name == "vigil"

    def test_parse_level(self) -> None:
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARN") == logging.WARNING
        assert parse_level(None) == logging.INFO
        assert parse_level("nonsense") == logging.INFO
