"""Ядро расчёта eligibility."""
