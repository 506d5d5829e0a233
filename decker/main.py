"""Entry point for Decker Eligibility API."""

from __future__ import annotations

import uvicorn
from loguru import logger
from pydantic import ValidationError

from config.settings import AppSettings, get_settings
from .exceptions import ConfigurationError
from .logging_config import setup_logging
from .web.app import create_app


def load_settings() -> AppSettings:
    """Загружает настройки; любая ошибка валидации фатальна для старта."""

    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Некорректная конфигурация: {exc}") from exc


def main() -> None:
    setup_logging()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        # Без ключа Helius и корректной конфигурации стартовать нельзя.
        logger.critical("{error}", error=exc)
        raise SystemExit(1) from exc

    setup_logging(
        json=settings.is_production,
        level="INFO" if settings.is_production else "DEBUG",
    )
    admin_token = settings.api.admin_token.get_secret_value() if settings.api.admin_token else None
    app = create_app(cors_origins=settings.api.cors_origins, admin_token=admin_token)
    logger.info(
        "Decker стартует в окружении {env} на {host}:{port}",
        env=settings.environment,
        host=settings.api.host,
        port=settings.api.port,
    )
    uvicorn.run(app, host=settings.api.host, port=settings.api.port, log_level="info")


if __name__ == "__main__":
    main()
