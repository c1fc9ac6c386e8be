import os
from pathlib import Path


def _default_database_url() -> str:
    return f"sqlite:///{Path.home() / '.hours' / 'db'}"


class Settings:
    def __init__(self):
        self.app_name = "Hours Ledger"
        self.api_version = "1.0.0"
        self.environment = os.getenv("HOURS_ENV", "development")
        self.database_url = os.getenv("HOURS_DATABASE_URL") or _default_database_url()
        self.invoice_output_dir = Path(os.getenv("HOURS_INVOICE_DIR") or Path.home() / "Downloads")
        self.default_due_days = int(os.getenv("HOURS_DEFAULT_DUE_DAYS", "30"))
        self.log_level = os.getenv("HOURS_LOG_LEVEL", "INFO")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
