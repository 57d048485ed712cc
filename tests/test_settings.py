from backend.app.core.settings import get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Invoice Generator"
    assert settings.environment == "development"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert isinstance(settings.database_url, str) and settings.database_url


def test_invoice_defaults():
    settings = get_settings()
    assert settings.default_hours_per_day == 8.0
    assert settings.default_currency == "USD"
    assert settings.default_payment_terms == "NET_30"
    assert settings.status_log_page_size == 50


def test_settings_is_singleton():
    assert get_settings() is get_settings()
