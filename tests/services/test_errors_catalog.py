import pytest

from pgcloudops.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("missing_setting", key="PROD_POSTGRES_HOST")

    assert message.startswith("Set PROD_POSTGRES_HOST in .env.")
    assert "Suggested action:" in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError):
        actionable_error("not_a_code")
