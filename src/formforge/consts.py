"""Constants for formforge"""

# ==================== File Paths ====================
DATABASE_PATH = "data/formforge.db"
LOG_FILE_DEFAULT = "data/formforge.log"
CONFIG_FILE_DEFAULT = "config.toml"

# ==================== Environment ====================
ENV_PREFIX = "FORMFORGE_"
ENV_CONFIG_FILE = "FORMFORGE_CONFIG_FILE"
ENV_DB_PATH = "FORMFORGE_DB_PATH"

# ==================== Versioning ====================
FIRST_VERSION = 1
VERSION_MAX_RETRIES = 5
VERSION_RETRY_DELAY = 0.05  # seconds

# ==================== Export ====================
EXPORT_INDENT = 2

# ==================== Database Configuration ====================
DB_MAX_CONNECTIONS = 20
DB_STALE_TIMEOUT = 300  # 5 minutes
DB_JOURNAL_MODE = "wal"
DB_SYNCHRONOUS = "NORMAL"
DB_BUSY_TIMEOUT = 5000  # 5 seconds
DB_CACHE_SIZE = -64 * 1000  # 64MB

# ==================== Database Pragmas ====================
DB_PRAGMAS = {
    "journal_mode": DB_JOURNAL_MODE,
    "synchronous": DB_SYNCHRONOUS,
    "busy_timeout": DB_BUSY_TIMEOUT,
    "foreign_keys": 1,
    "cache_size": DB_CACHE_SIZE,
}
