import pytest

from budget_ledger.core.config import Settings


def test_database_url_from_parts():
    s = Settings(db_user="u", db_password="p", db_host="h", db_port=5433, db_name="n")
    assert s.database_url == "postgresql+asyncpg://u:p@h:5433/n"


def test_database_url_override_wins():
    s = Settings(database_url_override="postgresql+asyncpg://x@y/z")
    assert s.database_url == "postgresql+asyncpg://x@y/z"


def test_default_password_rejected_outside_debug():
    with pytest.raises(ValueError):
        Settings(debug=False, db_password="CHANGE_ME").validate_secrets()


def test_invalid_cors_origin_rejected():
    s = Settings(debug=False, db_password="s3cret", cors_allowed_origins="ftp://example.com")
    with pytest.raises(ValueError):
        s.validate_secrets()


def test_debug_skips_checks():
    Settings(debug=True, db_password="CHANGE_ME").validate_secrets()
