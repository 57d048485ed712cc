import os


class Settings:
    def __init__(self):
        self.app_name = "Invoice Generator"
        self.api_version = "1.0.0"
        self.environment = os.getenv("INVOICE_APP_ENVIRONMENT", "development")
        self.secret_key = os.getenv("INVOICE_APP_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("INVOICE_APP_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("INVOICE_APP_DATABASE_URL", "sqlite:///./invoice_generator.db")
        self.log_level = os.getenv("INVOICE_APP_LOG_LEVEL", "INFO")
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("INVOICE_APP_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
            if origin.strip()
        ]

        # Invoice defaults
        self.default_hours_per_day = 8.0
        self.default_currency = "USD"
        self.default_payment_terms = "NET_30"
        self.default_page_size = "A4"
        self.status_log_page_size = 50
        self.max_folder_depth = 64


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
