"""Pytest configuration and fixtures."""

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from core import usda


@pytest.fixture
def client() -> TestClient:
    """
    Test client without the lifespan hook, so no database pool is opened.

    Usage:
        def test_endpoint(client: TestClient):
            response = client.get("/health")
            assert response.status_code == 200
    """
    from main import app

    return TestClient(app)


class FakeNutrientTable:
    """In-memory stand-in for the `nutrients` table with the same upsert rules."""

    def __init__(self) -> None:
        self.rows: dict[str, dict] = {}
        self.calls: list[str] = []
        self.fail_names: set[str] = set()

    async def upsert_nutrient(self, *, name, unit, category, usda_number, is_visible, sort_order) -> None:
        self.calls.append(name)
        if name in self.fail_names:
            raise RuntimeError(f"constraint violation for {name}")

        existing = self.rows.get(name)
        if existing is None:
            self.rows[name] = {
                "name": name,
                "unit": unit,
                "category": category,
                "usda_nutrient_number": usda_number,
                "is_visible": is_visible,
                "sort_order": sort_order,
            }
            return
        existing.update(unit=unit, category=category, sort_order=sort_order)


@pytest.fixture
def nutrient_table(monkeypatch) -> FakeNutrientTable:
    from nutrients import repository

    table = FakeNutrientTable()
    monkeypatch.setattr(repository, "upsert_nutrient", table.upsert_nutrient)
    return table


@pytest.fixture
def usda_upstream(monkeypatch) -> Callable[[Callable[[httpx.Request], httpx.Response]], None]:
    """
    Route the USDA client through an in-process handler instead of the network.
    """
    real_client = httpx.AsyncClient

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> None:
        def factory(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr(usda.httpx, "AsyncClient", factory)

    return install
