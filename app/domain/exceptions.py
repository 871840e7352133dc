from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class AmmStatsInputError(DomainError):
    """Invalid parameters for AMM statistics queries."""
