"""
Configuration management module.

Provides centralized configuration loading and validation.
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass
class APIConfig:
    """CoinGecko API settings."""
    base_url: str
    timeout: int = 30
    max_retries: int = 1
    backoff_factor: float = 2.0
    rate_limit_delay: float = 0.0
    api_key: Optional[str] = None


@dataclass
class MarketQueryConfig:
    """Parameters for the coin markets request."""
    vs_currency: str = "usd"
    per_page: int = 250
    page: int = 1
    sparkline: bool = True


class Config:
    """
    Central configuration manager.

    Loads configuration from YAML file and provides typed access
    to all settings with validation.
    """

    REQUIRED_SECTIONS = ['api', 'market', 'portfolio']

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path)
        self._raw_config: Dict[str, Any] = {}
        self._load_config()
        self._setup_logging()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._raw_config = yaml.safe_load(f) or {}

        logger.info(f"Configuration loaded from {self.config_path}")

    def _setup_logging(self) -> None:
        """Configure logging based on settings."""
        log_config = self._raw_config.get('logging', {})
        log_level = getattr(logging, log_config.get('level', 'INFO'))
        log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
        log_file = log_config.get('file')

        handlers = [logging.StreamHandler()]
        if log_file:
            # Create logs directory
            os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
            handlers.insert(0, logging.FileHandler(log_file))

        # Configure root logger
        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=handlers
        )

    def _validate_config(self) -> None:
        """Validate configuration values."""
        for section in self.REQUIRED_SECTIONS:
            if section not in self._raw_config:
                raise ValueError(f"Missing required config section: {section}")

        if 'coingecko' not in self._raw_config['api']:
            raise ValueError("Missing api.coingecko settings")

        if 'path' not in self._raw_config['portfolio']:
            raise ValueError("Missing portfolio path")

        if self.debounce_seconds < 0:
            raise ValueError(f"Debounce window must be >= 0, got {self.debounce_seconds}")

        logger.info("Configuration validation passed")

    # ==========================================================================
    # API Configuration
    # ==========================================================================

    @property
    def api_config(self) -> APIConfig:
        """Get CoinGecko API configuration."""
        api = self._raw_config['api']['coingecko']

        return APIConfig(
            base_url=api.get('base_url', 'https://api.coingecko.com/api/v3'),
            timeout=api.get('timeout', 30),
            max_retries=api.get('max_retries', 1),
            backoff_factor=api.get('backoff_factor', 2.0),
            rate_limit_delay=api.get('rate_limit_delay', 0.0),
            api_key=os.getenv('COINGECKO_API_KEY') or api.get('api_key')
        )

    # ==========================================================================
    # Market Configuration
    # ==========================================================================

    @property
    def market_query(self) -> MarketQueryConfig:
        """Get coin markets query configuration."""
        market = self._raw_config['market']

        return MarketQueryConfig(
            vs_currency=market.get('vs_currency', 'usd'),
            per_page=market.get('per_page', 250),
            page=market.get('page', 1),
            sparkline=market.get('sparkline', True)
        )

    # ==========================================================================
    # Portfolio Configuration
    # ==========================================================================

    @property
    def portfolio_path(self) -> Path:
        return Path(self._raw_config['portfolio']['path'])

    # ==========================================================================
    # Home Screen Configuration
    # ==========================================================================

    @property
    def debounce_seconds(self) -> float:
        return float(self._raw_config.get('home', {}).get('debounce_seconds', 0.5))

    @property
    def default_sort(self) -> str:
        return self._raw_config.get('home', {}).get('default_sort', 'holdings')

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    def create_directories(self) -> None:
        """Create all required directories."""
        self.portfolio_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Portfolio directory ready")

    def __repr__(self) -> str:
        return f"Config(path={self.config_path}, portfolio={self.portfolio_path})"


# Convenience function for loading config
def load_config(config_path: str = "config/config.yaml") -> Config:
    """Load configuration from file."""
    return Config(config_path)
