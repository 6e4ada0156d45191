"""Portfolio entry record."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PortfolioEntry:
    """User-held amount of one coin. At most one entry exists per coin id."""
    coin_id: str
    amount: float
