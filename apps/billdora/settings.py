from pydantic_settings import BaseSettings
from pydantic import Field
import os
from pathlib import Path
import dotenv

# Always load apps/.env (relative to this file), regardless of where the process is started.
_APPS_DIR = Path(__file__).resolve().parents[1]
dotenv.load_dotenv(dotenv_path=_APPS_DIR / ".env", override=False)


class Settings(BaseSettings):
    APP_HOST: str = Field(default=os.getenv("APP_HOST", "0.0.0.0"))
    APP_PORT: int = Field(default=int(os.getenv("APP_PORT", "8000")))
    API_BASE_URL: str = Field(default=os.getenv("API_BASE_URL", "http://localhost:8000"))
    FRONTEND_BASE_URL: str = Field(default=os.getenv("FRONTEND_BASE_URL", "http://localhost:5173"))

    # Comma-separated list of extra origins allowed by CORS (marketing site, collaborator portal).
    CORS_ORIGINS: str = Field(default=os.getenv("CORS_ORIGINS", "http://localhost:3000"))

    LOG_LEVEL: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))

    # Quote editor defaults
    DEFAULT_TAX_RATE: float = Field(default=float(os.getenv("DEFAULT_TAX_RATE", "8.25")))

    # Proposal links expire after this many days unless the quote carries valid_until.
    PROPOSAL_VALIDITY_DAYS: int = Field(default=int(os.getenv("PROPOSAL_VALIDITY_DAYS", "30")))

    # Gantt bars narrower than this (percent of the chart) are widened for display.
    TIMELINE_MIN_BAR_WIDTH_PERCENT: float = Field(
        default=float(os.getenv("TIMELINE_MIN_BAR_WIDTH_PERCENT", "8"))
    )

    class Config:
        env_file = ".env"
        extra = "ignore"  # Ignore frontend-only keys like VITE_SUPABASE_URL

    def cors_origins(self) -> list[str]:
        extra = [o.strip() for o in (self.CORS_ORIGINS or "").split(",") if o.strip()]
        return [self.FRONTEND_BASE_URL.rstrip("/"), *extra]


settings = Settings()
