"""Глобальные настройки Decker Eligibility.

Настройки разделены по доменам (Helius, Solana RPC, кеш, вайтлисты, рефералка),
поэтому отдельные возможности можно включать и выключать без правки кода.
Вся конфигурация загружается из переменных окружения через Pydantic Settings,
сервис одинаково запускается локально, в Docker и на PaaS.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    Field,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
ACCESSIBLE_ENV_FILE = BASE_DIR / "config" / "runtime.env"
DEFAULT_ENV_FILE = BASE_DIR / ".env"
ENV_FILE = ACCESSIBLE_ENV_FILE if ACCESSIBLE_ENV_FILE.exists() else DEFAULT_ENV_FILE


class HeliusSettings(BaseModel):
    """Доступ к Helius Enhanced Transactions API."""

    api_key: SecretStr = Field(..., description="API-ключ Helius (обязателен)")
    base_url: AnyHttpUrl = Field(
        "https://api.helius.xyz/v0",
        description="Базовый URL REST API Helius",
    )
    page_limit: PositiveInt = Field(100, le=100, description="Транзакций на страницу")

    @field_validator("api_key")
    @classmethod
    def _not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("HELIUS__API_KEY пустой")
        return value


class SolanaSettings(BaseModel):
    """Публичный RPC Solana для проверки подписей."""

    rpc_url: AnyHttpUrl = "https://api.mainnet-beta.solana.com"
    request_timeout_sec: PositiveFloat = 10.0


class FetcherSettings(BaseModel):
    """Пагинация истории и политика повторов."""

    max_pages: PositiveInt = Field(10, le=50, description="Верхняя граница страниц")
    max_attempts: PositiveInt = 5
    backoff_base_sec: float = Field(0.5, ge=0.0, description="Пауза = base * attempt")
    request_timeout_sec: PositiveFloat = 15.0


class PricingSettings(BaseModel):
    """Фиксированный курс конвертации (оракул цен сознательно не используется)."""

    native_to_usd: PositiveFloat = 100.0
    lamports_per_native: PositiveInt = 1_000_000_000


class CacheSettings(BaseModel):
    """Срок жизни кеша транзакций в БД."""

    ttl_hours: PositiveInt = 24
    purge_interval_sec: PositiveInt = 600


class DatabaseSettings(BaseModel):
    """SQLModel + aiosqlite (по умолчанию) и готовность к Postgres."""

    dsn: str = Field(
        "sqlite+aiosqlite:///./decker.db",
        description="Строка подключения SQLAlchemy/SQLModel",
    )
    echo: bool = False


class AllowlistSettings(BaseModel):
    """Источники CSV вайтлистов: локальный путь или http(s) URL."""

    og_source: str = ""
    degen_source: str = ""
    role_source: str = ""
    request_timeout_sec: PositiveFloat = 15.0


class ReferralSettings(BaseModel):
    """Реферальная программа."""

    bonus_amount: PositiveInt = 300


class FeatureSettings(BaseModel):
    """Опциональные возможности единого хендлера eligibility."""

    referrals_enabled: bool = True
    degen_bonus_enabled: bool = True


class ApiSettings(BaseModel):
    """HTTP-сервер FastAPI."""

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    admin_token: SecretStr | None = Field(
        None, description="Токен для /admin эндпоинтов (без него они выключены)"
    )


class AppSettings(BaseSettings):
    """Главный контейнер настроек Decker Eligibility."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["dev", "prod"] = "dev"
    helius: HeliusSettings
    solana: SolanaSettings = SolanaSettings()
    fetcher: FetcherSettings = FetcherSettings()
    pricing: PricingSettings = PricingSettings()
    cache: CacheSettings = CacheSettings()
    database: DatabaseSettings = DatabaseSettings()
    allowlists: AllowlistSettings = AllowlistSettings()
    referral: ReferralSettings = ReferralSettings()
    features: FeatureSettings = FeatureSettings()
    api: ApiSettings = ApiSettings()

    @property
    def is_production(self) -> bool:
        """True, если сервис запущен в продовой среде."""

        return self.environment == "prod"


# Ленивый синглтон (избегаем глобальных переменных в модулях).
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Возвращает единый экземпляр настроек.

    Значения кэшируются, поэтому .env читается ровно один раз за процесс.
    Отсутствие HELIUS__API_KEY приводит к ValidationError при первом вызове.
    """

    global _settings
    if _settings is None:
        _settings = AppSettings()  # type: ignore[call-arg]
    return _settings


__all__ = [
    "AllowlistSettings",
    "ApiSettings",
    "AppSettings",
    "CacheSettings",
    "DatabaseSettings",
    "FeatureSettings",
    "FetcherSettings",
    "HeliusSettings",
    "PricingSettings",
    "ReferralSettings",
    "SolanaSettings",
    "get_settings",
]
