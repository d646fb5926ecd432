"""Configuration management for the deals application."""

import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.debug = os.getenv('DEBUG', 'false').lower() == 'true'


class CatalogConfig:
    """Catalog engine configuration."""

    def __init__(self):
        self.default_page_size = int(os.getenv('DEALS_DEFAULT_PAGE_SIZE', '10'))
        self.user_page_size = int(os.getenv('DEALS_USER_PAGE_SIZE', '20'))
        self.max_page_size = int(os.getenv('DEALS_MAX_PAGE_SIZE', '100'))
        self.auto_read_rate = float(os.getenv('DEALS_AUTO_READ_RATE', '0.6'))
        self.manual_read_rate = float(os.getenv('DEALS_MANUAL_READ_RATE', '0.7'))
        # Bounds for the store-follower placeholder estimate
        self.follower_estimate_min = int(os.getenv('DEALS_FOLLOWER_ESTIMATE_MIN', '50'))
        self.follower_estimate_max = int(os.getenv('DEALS_FOLLOWER_ESTIMATE_MAX', '500'))
        self.seed_file: Optional[str] = os.getenv('DEALS_SEED_FILE') or None
        self.admin_id = os.getenv('DEALS_ADMIN_ID', 'admin-1')


# Global configuration instances
app_config = AppConfig()
catalog_config = CatalogConfig()


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging from the application config."""
    level_name = (level or app_config.log_level).upper()
    if app_config.debug:
        level_name = 'DEBUG'
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
