"""Displayed summary metric."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Statistic:
    """A title/value pair with an optional percentage change."""
    title: str
    value: str
    percentage_change: Optional[float] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'value': self.value,
            'percentage_change': self.percentage_change
        }
