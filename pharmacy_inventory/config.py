import logging
import os
from pathlib import Path

from .constants import DATA_DIR, DB_FILE_NAME, DB_PATH_ENV, LOG_FILE_NAME, LOG_LEVEL_ENV

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = BASE_DIR / DATA_DIR
DB_PATH = Path(os.environ[DB_PATH_ENV]) if os.environ.get(DB_PATH_ENV) else DATA_PATH / DB_FILE_NAME
LOG_PATH = DATA_PATH / LOG_FILE_NAME

# e.g. PHARMACY_INVENTORY_LOG_LEVEL=DEBUG shows every recompute
LOG_LEVEL = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO)
