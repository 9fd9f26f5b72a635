# tests/unit/test_dsn_normalize.py
import pytest

from bundle_sources.db.session import normalize_async_dsn


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("sqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
        ("sqlite+aiosqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
        ("postgres://u:p@h:5432/db", "postgresql+psycopg://u:p@h:5432/db"),
        ("postgresql://u:p@h:5432/db", "postgresql+psycopg://u:p@h:5432/db"),
        ("postgresql+asyncpg://u:p@h:5432/db", "postgresql+psycopg://u:p@h:5432/db"),
        ('"postgresql+psycopg://u:p@h/db"', "postgresql+psycopg://u:p@h/db"),
        ("", "sqlite+aiosqlite:///./bundle_sources.db"),
    ],
)
def test_normalize_async_dsn(raw, expected):
    assert normalize_async_dsn(raw) == expected
