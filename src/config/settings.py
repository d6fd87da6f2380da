# src/config/settings.py

"""Central configuration for the QuickCart inventory engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the QuickCart inventory engine."""

    # --- Catalog view ---
    DEFAULT_PAGE_SIZE: int = 8          # Products per catalog page
    PAGE_SIZE_OPTIONS: list[int] = [4, 8, 12, 16, 24]

    # --- Inventory ---
    LOW_STOCK_THRESHOLD: int = 10       # Below this a product is "low"
    UNCATEGORIZED_LABEL: str = "Uncategorized"

    # --- Images ---
    MAX_PRODUCT_IMAGES: int = 5
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024

    # --- Reports ---
    CURRENCY_LABEL: str = os.getenv("QUICKCART_CURRENCY", "Rs.")
    REPORT_TITLE: str = "QuickCart Inventory Report"
    REPORT_SUBTITLE: str = (
        "Comprehensive product inventory summary with live analytics"
    )
    STORE_NAME: str = "QuickCart Grocery Store"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("QUICKCART_DATA_DIR", str(BASE_DIR / "data"))
    )
    DB_PATH: Path = DATA_DIR / "quickcart.db"
    IMAGES_DIR: Path = DATA_DIR / "images"
    REPORTS_DIR: Path = DATA_DIR / "reports"
    CART_PATH: Path = DATA_DIR / "cart.json"
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("QUICKCART_LOG_LEVEL", "WARNING")
    MAX_LOG_FILES: int = 20             # Older run logs are pruned
