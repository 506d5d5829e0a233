"""Decker Eligibility: агрегация активности кошелька и расчёт наград."""
