"""Shared fixtures for equitree tests.

This module provides:
1. A small ownership payload shaped like the demo data
2. Lazily loaded child payloads for it
"""

from __future__ import annotations

from typing import Any

import pytest

from equitree import StaticChildrenSource, normalize_tree

# =============================================================================
# Payloads
# =============================================================================


def make_payload() -> dict[str, Any]:
    """Root with one lazy child, one plain leaf and one materialized branch."""
    return {
        "name": "山东映客科技有限责任公司",
        "id": "company-main",
        "value": 100,
        "children": [
            {
                "name": "山东第一有限罗技科服务有限公司",
                "id": "company-1",
                "value": 100,
                "percentage": 100,
                "hasChildren": True,
                "children": [],
            },
            {
                "name": "山东第二有限罗技科技有限公司",
                "id": "company-2",
                "percentage": 60,
                "children": [],
            },
            {
                "name": "山东第四有限罗技科技发展有限公司",
                "id": "company-4",
                "percentage": 100,
                "children": [
                    {
                        "name": "山东第一达科技物联网智能分析仪器有限公司",
                        "id": "company-4-1",
                        "percentage": 51,
                        "children": [],
                    },
                    {
                        "name": "山东第二达科技有限公司",
                        "id": "company-4-2",
                        "percentage": 49,
                        "children": [],
                    },
                ],
            },
        ],
    }


LAZY_CHILDREN: dict[str, list[dict[str, Any]]] = {
    "company-1": [
        {"name": "山东第一子公司A", "id": "company-1-a", "percentage": 75, "hasChildren": False, "children": []},
        {"name": "山东第一子公司B", "id": "company-1-b", "percentage": 60, "hasChildren": True, "children": []},
    ],
    "company-1-b": [
        {"name": "山东一级孙公司X", "id": "company-1-b-x", "percentage": 100, "hasChildren": False, "children": []},
    ],
}


@pytest.fixture
def payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture
def tree(payload):
    return normalize_tree(payload)


@pytest.fixture
def source() -> StaticChildrenSource:
    return StaticChildrenSource(children=LAZY_CHILDREN)


@pytest.fixture
def lazy_children() -> dict[str, list[dict[str, Any]]]:
    return LAZY_CHILDREN
