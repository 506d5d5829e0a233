"""Конфигурация Decker Eligibility."""
