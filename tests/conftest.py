"""Shared fixtures for the render pipeline tests."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def instance_payload() -> dict[str, Any]:
    return {
        "id": "instance-1",
        "chartDefinitionId": "chart-1",
        "title": "Test Instance",
        "ownerUserId": "user-1",
        "subjects": [],
        "effectiveDateTimes": {"natal": "1990-01-01T12:00:00Z"},
        "layers": [{"key": "natal", "kind": "natal", "dateTimeSource": "subject"}],
    }


@pytest.fixture
def two_ring_template() -> dict[str, Any]:
    return {
        "id": "wheel-1",
        "name": "Test Wheel",
        "radius": {"inner": 0, "outer": 100},
        "rings": [
            {"key": "signs", "kind": "signs"},
            {"key": "houses", "kind": "houses"},
        ],
    }
