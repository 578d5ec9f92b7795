# pharmacy_inventory/constants.py
APP_NAME = "MediStock"

DATA_DIR = "data"
DB_FILE_NAME = "pharmacy.db"
DB_PATH_ENV = "PHARMACY_INVENTORY_DB"

# stock labels shown beside lookup results (inclusive upper bounds)
STOCK_LOW = 5
STOCK_MEDIUM = 15

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1"

LOG_FILE_NAME = "pharmacy.log"
LOG_LEVEL_ENV = "PHARMACY_INVENTORY_LOG_LEVEL"
