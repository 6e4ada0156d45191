"""
Portfolio persistence.

Entries are kept in a small CSV file (``coin_id,amount``) read and
written with pandas. A missing file is an empty portfolio.
"""

import math
import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from ..models import Coin, PortfolioEntry
from ..reactive import Publisher

logger = logging.getLogger(__name__)


class PortfolioStore:
    """CSV-backed storage of portfolio entries."""

    COLUMNS = ['coin_id', 'amount']

    def __init__(self, path: Union[str, Path]):
        """
        Initialize portfolio store.

        Args:
            path: CSV file location
        """
        self.path = Path(path)

    def load(self) -> List[PortfolioEntry]:
        """
        Load saved entries.

        Rows without a coin id or amount are skipped; when an id repeats
        the last row wins.

        Returns:
            List of entries (empty when the file is missing or unreadable)
        """
        if not self.path.exists():
            logger.debug(f"No portfolio at {self.path}")
            return []

        try:
            # Coin ids such as "null" or "nan" are real ids, not missing values
            df = pd.read_csv(
                self.path,
                dtype={'coin_id': str},
                keep_default_na=False,
                na_values={'amount': ['']}
            )
        except pd.errors.EmptyDataError:
            return []
        except (OSError, pd.errors.ParserError) as e:
            logger.error(f"Error loading {self.path}: {e}")
            return []

        missing = [col for col in self.COLUMNS if col not in df.columns]
        if missing:
            logger.error(f"Portfolio file {self.path} missing columns: {missing}")
            return []

        df['amount'] = pd.to_numeric(df['amount'], errors='coerce')
        df = df.dropna(subset=self.COLUMNS)
        df = df[df['coin_id'] != '']
        df = df.drop_duplicates(subset='coin_id', keep='last')

        return [
            PortfolioEntry(coin_id=row.coin_id, amount=float(row.amount))
            for row in df.itertuples(index=False)
        ]

    def save(self, entries: List[PortfolioEntry]) -> Path:
        """
        Save entries to the CSV file.

        Args:
            entries: Entries to persist

        Returns:
            Path to saved file
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        df = pd.DataFrame(
            [{'coin_id': e.coin_id, 'amount': e.amount} for e in entries],
            columns=self.COLUMNS
        )
        df.to_csv(self.path, index=False)

        logger.debug(f"Saved {len(entries)} portfolio entries to {self.path}")

        return self.path


class PortfolioDataService:
    """Publishes saved portfolio entries and applies holding updates."""

    def __init__(self, store: PortfolioStore):
        self.store = store
        self.saved_entries = Publisher(store.load())

    def update_portfolio(self, coin: Union[Coin, str], amount: float) -> None:
        """
        Set the held amount of a coin.

        An existing entry is updated when ``amount`` is positive and
        removed otherwise; a new entry is added only for a positive amount.

        Raises:
            ValueError: If amount is NaN
        """
        coin_id = coin.id if isinstance(coin, Coin) else coin
        if amount is None or math.isnan(amount):
            raise ValueError(f"Invalid amount for {coin_id}: {amount}")

        entries: Dict[str, PortfolioEntry] = {
            entry.coin_id: entry for entry in self.saved_entries.value or []
        }

        if coin_id in entries:
            if amount > 0:
                entries[coin_id] = PortfolioEntry(coin_id=coin_id, amount=float(amount))
                logger.info(f"Updated {coin_id} holding to {amount}")
            else:
                del entries[coin_id]
                logger.info(f"Removed {coin_id} from portfolio")
        elif amount > 0:
            entries[coin_id] = PortfolioEntry(coin_id=coin_id, amount=float(amount))
            logger.info(f"Added {coin_id} to portfolio ({amount})")
        else:
            return

        self._apply_changes(list(entries.values()))

    def _apply_changes(self, entries: List[PortfolioEntry]) -> None:
        self.store.save(entries)
        self.saved_entries.send(self.store.load())
