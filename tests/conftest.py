from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import pytest

from rulegen.models import Comment, RepositoryRef


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to a known date so generated headers are stable."""
    return lambda: datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def repository() -> RepositoryRef:
    return RepositoryRef(owner="acme", name="webapp", branch="main", pr_number=42)


@pytest.fixture
def make_comment() -> Callable[..., Comment]:
    def _make(content: str, comment_id: str = "c1", **overrides: object) -> Comment:
        fields = {
            "id": comment_id,
            "author": "octocat",
            "content": content,
            "created_at": "2024-05-16T12:00:00Z",
            "platform": "github",
            "url": f"https://github.com/acme/webapp/pull/42#discussion_{comment_id}",
        }
        fields.update(overrides)
        return Comment(**fields)  # type: ignore[arg-type]

    return _make
