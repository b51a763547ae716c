from pathlib import Path

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

ENV_FILE = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=ENV_FILE)


class Settings(BaseSettings):
    # DocuExtract gateway
    GATEWAY_URL: str = "http://localhost:3000"
    GATEWAY_TIMEOUT_MS: int = 30000

    # Reporting
    DEFAULT_CLIENT_ID: str = "default"

    LOG_LEVEL: str = "INFO"

    @property
    def gateway_base_url(self) -> str:
        configured_url = (self.GATEWAY_URL or "").strip()
        if not configured_url:
            raise ValueError(
                "Gateway configuration is missing. Set GATEWAY_URL or leave it unset "
                "to use http://localhost:3000."
            )
        return configured_url.rstrip("/")

    @property
    def gateway_timeout_seconds(self) -> float:
        return max(int(self.GATEWAY_TIMEOUT_MS or 0), 0) / 1000.0

    class Config:
        env_file = str(ENV_FILE)
        extra = "ignore"


settings = Settings()
