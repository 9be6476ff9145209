"""Project configuration loaded from environment variables."""

from dataclasses import dataclass
from typing import Annotated, Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(case_sensitive=False)

    api_key: str
    secret_key: str
    secret_keys: Annotated[List[str], NoDecode] = []
    token_audience: str = "check_scam"
    token_issuer: str = "check_scam"
    token_ttl_hours: int = 1
    numverify_api_key: str = ""
    veriphone_api_key: str = ""
    numverify_url: str = "http://apilayer.net/api/validate"
    veriphone_url: str = "https://api.veriphone.io/v2/verify"
    gemini_url: str = "https://api.gemini.ai/v1/generate"
    gemini_enabled: bool = True
    country_code: str = "84"
    provider_timeout: float = 5.0
    db_path: str = "check_scam.sqlite"
    pg_host: str = ""
    pg_port: str = "5432"
    pg_db: str = "checkscam"
    pg_user: str = "postgres"
    pg_password: str = "postgres"
    page_size: int = 10
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    log_file: str | None = None
    log_json: bool = False
    log_max_bytes: int = 1048576
    log_backup_count: int = 3

    @field_validator("secret_keys", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            return [item for item in v.split(",") if item]
        return list(v) if v else []

    def model_post_init(self, __context: Any) -> None:  # type: ignore[override]
        if not self.secret_keys:
            self.secret_keys = [self.secret_key]
        elif self.secret_key not in self.secret_keys:
            self.secret_keys.insert(0, self.secret_key)

    @property
    def pg_dsn(self) -> str:
        return (
            f"postgresql+psycopg2://{self.pg_user}:{self.pg_password}"
            f"@{self.pg_host}:{self.pg_port}/{self.pg_db}"
        )


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable settings handed to the risk aggregator and its providers."""

    numverify_api_key: str = ""
    veriphone_api_key: str = ""
    numverify_url: str = "http://apilayer.net/api/validate"
    veriphone_url: str = "https://api.veriphone.io/v2/verify"
    gemini_url: str = "https://api.gemini.ai/v1/generate"
    country_code: str = "84"
    timeout: float = 5.0

    @classmethod
    def from_settings(cls, s: Settings) -> "ProviderConfig":
        return cls(
            numverify_api_key=s.numverify_api_key,
            veriphone_api_key=s.veriphone_api_key,
            numverify_url=s.numverify_url,
            veriphone_url=s.veriphone_url,
            gemini_url=s.gemini_url,
            country_code=s.country_code,
            timeout=s.provider_timeout,
        )

    @property
    def has_keys(self) -> bool:
        return bool(self.numverify_api_key) and bool(self.veriphone_api_key)


try:
    settings = Settings()
except Exception as exc:  # ValidationError or others
    raise RuntimeError(
        "API_KEY and SECRET_KEY environment variables are required"
    ) from exc

if not settings.api_key or not settings.secret_key:
    raise RuntimeError("API_KEY and SECRET_KEY environment variables are required")
