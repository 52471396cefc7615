from __future__ import annotations

import pytest


class _FakeSessionContext:
    async def __aenter__(self) -> object:
        return object()

    async def __aexit__(self, exc_type, exc, tb) -> bool:  # noqa: ANN001
        return False


class FakeSessionLocal:
    def __call__(self) -> _FakeSessionContext:
        return _FakeSessionContext()

    def begin(self) -> _FakeSessionContext:
        return _FakeSessionContext()


@pytest.fixture
def fake_session_local(monkeypatch: pytest.MonkeyPatch) -> FakeSessionLocal:
    factory = FakeSessionLocal()
    monkeypatch.setattr("app.api.routes.games.SessionLocal", factory)
    monkeypatch.setattr("app.api.routes.leaderboard.SessionLocal", factory)
    monkeypatch.setattr("app.api.routes.health.SessionLocal", factory)
    return factory
