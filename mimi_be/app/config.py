import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

# Prefer loading environment variables from a .env file when one is found
_env_path = find_dotenv(usecwd=True)
if _env_path:
    load_dotenv(_env_path, override=False)

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    # Shared with the frontend asset folder in deployments
    PRODUCT_IMAGE_DIR: str = os.getenv("PRODUCT_IMAGE_DIR", str(BASE_DIR / "media" / "products"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    SEED_DEFAULT_DATA: bool = bool(int(os.getenv("SEED_DEFAULT_DATA", "1")))
    # Off by default: any status may follow any other
    ENFORCE_ORDER_TRANSITIONS: bool = bool(int(os.getenv("ENFORCE_ORDER_TRANSITIONS", "0")))
    ORPHAN_IMAGE_GRACE_MINUTES: int = int(os.getenv("ORPHAN_IMAGE_GRACE_MINUTES", "60"))
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origins(self):
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings():
    return Settings()
