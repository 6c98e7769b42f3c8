"""Tests for the FastAPI service mode."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from rulegen.config import RuleGenConfig
from rulegen.corpus.tree import LocalFileTree
from rulegen.pipeline import ConversionPipeline
from rulegen.service import create_app

PASCAL = "You should always use PascalCase for React components"


class _PipelineFactory:
    def __init__(self) -> None:
        self.roots: list[Path] = []

    def __call__(self, tree: LocalFileTree, config: RuleGenConfig) -> ConversionPipeline:
        self.roots.append(tree.root)
        return ConversionPipeline(
            tree, config, clock=lambda: datetime(2024, 5, 17, tzinfo=timezone.utc)
        )


@pytest.fixture
def factory() -> _PipelineFactory:
    return _PipelineFactory()


@pytest.fixture
def client(factory: _PipelineFactory) -> TestClient:
    return TestClient(create_app(factory))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_classify_endpoint(client: TestClient) -> None:
    response = client.post("/classify", json={"text": PASCAL})

    assert response.status_code == 200
    data = response.json()
    assert data["is_convention"] is True
    assert data["category"] == "naming"
    assert data["suggested_file_name"] == "naming"
    assert "react" in data["keywords"]


def test_convert_dry_run_endpoint(
    client: TestClient, factory: _PipelineFactory, tmp_path: Path
) -> None:
    response = client.post(
        "/convert",
        json={
            "path": str(tmp_path),
            "comments": [
                {"id": "c1", "author": "octocat", "content": PASCAL},
                {"id": "c2", "author": "hubot", "content": "LGTM"},
            ],
            "pr_number": 9,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["dry_run"] is True
    assert data["rejected"] == ["c2"]
    assert data["failures"] == []
    [result] = data["results"]
    assert result["file_path"] == ".claude/rules/naming.md"
    assert result["project_type"] == "claude-code"
    assert result["is_update"] is False
    assert "created_at: 2024-05-17" in result["content"]
    assert factory.roots == [tmp_path.resolve()]
    assert not (tmp_path / ".claude").exists()


def test_convert_writes_files(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/convert",
        json={
            "path": str(tmp_path),
            "comments": [{"id": "c1", "author": "octocat", "content": PASCAL}],
            "dry_run": False,
        },
    )

    assert response.status_code == 200
    written = tmp_path / ".claude" / "rules" / "naming.md"
    assert written.read_text(encoding="utf-8") == response.json()["results"][0]["content"]


def test_convert_missing_path_returns_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/convert", json={"path": str(tmp_path / "missing"), "comments": []}
    )

    assert response.status_code == 404
    assert "Repository path not found" in response.json()["detail"]


def test_convert_unknown_mode_returns_400(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/convert", json={"path": str(tmp_path), "comments": [], "mode": "bulk"}
    )

    assert response.status_code == 400
    assert "Unknown conversion mode" in response.json()["detail"]


def test_convert_invalid_config_returns_400(client: TestClient, tmp_path: Path) -> None:
    (tmp_path / ".rulegen.yml").write_text("storage: [unclosed\n", encoding="utf-8")

    response = client.post("/convert", json={"path": str(tmp_path), "comments": []})

    assert response.status_code == 400
    assert "Failed to parse" in response.json()["detail"]
