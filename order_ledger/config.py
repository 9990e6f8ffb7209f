import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Force-load .env from the project root
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./orders.db")
    payment_failure_rate: float = float(os.getenv("PAYMENT_FAILURE_RATE", "0.25"))
    duplicate_payment_window_seconds: int = int(
        os.getenv("DUPLICATE_PAYMENT_WINDOW_SECONDS", "30")
    )
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
