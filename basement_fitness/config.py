import os
from dataclasses import dataclass

from dotenv import load_dotenv
load_dotenv()


DEFAULT_STORE_PATH = os.getenv("BASEMENT_STORE_PATH", os.path.join("data", "basement.json"))
DEFAULT_HISTORY_LIMIT = int(os.getenv("HABIT_HISTORY_LIMIT", "120"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

PLAN_WINDOW_DAYS = 14


@dataclass
class AppConfig:
    store_path: str = DEFAULT_STORE_PATH
    habit_history_limit: int = DEFAULT_HISTORY_LIMIT
    log_level: str = LOG_LEVEL
