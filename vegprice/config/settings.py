# vegprice/config/settings.py

"""Central configuration for the vegprice collector and API."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the vegprice collector and API."""

    # --- Source ---
    SOURCE_PAGE_URL: str = os.getenv(
        "VEGPRICE_SOURCE_PAGE_URL",
        "https://www.city.example.lg.jp/shijo/yasai_kakaku.html",
    )
    SITE_BASE_URL: str = os.getenv(
        "VEGPRICE_SITE_BASE_URL",
        "https://www.city.example.lg.jp",
    )
    # href must contain "_res", then "yasai", then end in .xls/.xlsx
    DOWNLOAD_HREF_PATTERN: str = r".*_res.*yasai.*\.xlsx?$"

    # --- Fetching ---
    REQUEST_DELAY: float = 1.0          # Seconds before each request
    REQUEST_TIMEOUT: int = 30           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "ja,en-US;q=0.8,en;q=0.6",
    }

    # --- Calendar ---
    ERA_NAME: str = "令和"
    ERA_OFFSET_YEAR: int = 2018         # 令和1年 == 2019

    # --- Sheet layout (1-indexed rows / columns) ---
    WEEKDAY_SHEETS: list[str] = [
        "月曜日",
        "火曜日",
        "水曜日",
        "木曜日",
        "金曜日",
        "土曜日",
    ]
    SHEET_DATE_CELL: tuple[int, int] = (2, 1)
    SHEET_DATA_START_ROW: int = 5
    SHEET_SEQ_COL: int = 1
    SHEET_ITEM_COL: int = 2
    SHEET_PRICE_COL: int = 6

    # --- Store ---
    STORE_HEADER: tuple[str, str, str] = ("日付", "品目名", "平均価格")

    # --- Query API ---
    HISTORY_WINDOW_DAYS: int = 30
    DEFAULT_QUERY_PATH: str = "vegetables-history"
    API_HOST: str = os.getenv("VEGPRICE_API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("VEGPRICE_API_PORT", "8000"))

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = BASE_DIR / "logs"
    PRICE_DB_PATH: Path = Path(
        os.getenv("VEGPRICE_DB_PATH", str(DATA_DIR / "prices.db"))
    )
