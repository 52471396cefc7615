from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import make_url

TEST_DB_MARKER = "test"
LOCAL_DB_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "mathstorm_postgres"})


@dataclass(frozen=True, slots=True)
class IntegrationDbTarget:
    backend: str
    database_name: str
    host: str

    @property
    def unsafe_reason(self) -> str | None:
        if self.backend != "postgresql":
            return "only PostgreSQL databases are supported"
        if not self.database_name:
            return "database name is empty"
        if TEST_DB_MARKER not in self.database_name.lower():
            return f"database name must contain '{TEST_DB_MARKER}'"
        if self.host not in LOCAL_DB_HOSTS:
            return f"host '{self.host}' is not a local test host"
        return None


def describe_integration_db(database_url: str) -> IntegrationDbTarget:
    parsed = make_url(database_url)
    return IntegrationDbTarget(
        backend=parsed.get_backend_name(),
        database_name=(parsed.database or "").strip(),
        host=(parsed.host or "").strip().lower(),
    )


def assert_safe_integration_db(database_url: str) -> None:
    target = describe_integration_db(database_url)
    reason = target.unsafe_reason
    if reason is None:
        return
    raise RuntimeError(
        f"Refusing to reset leaderboard tables on db='{target.database_name}' "
        f"host='{target.host}': {reason}. Point DATABASE_URL at e.g. 'mathstorm_test'."
    )
