import os
from pathlib import Path

# Directory holding config.py (src/)
APP_DIR = Path(__file__).parent
# Root directory of the project
ROOT_DIR = APP_DIR.parent

# Data paths
DATA_DIR = Path(os.environ.get("ORDER_DATA_DIR", ROOT_DIR / "data"))
DATA_FILE = DATA_DIR / "data.json"
BACKUP_DIR = DATA_DIR / "backups"
DEFAULT_PRICES_FILE = DATA_DIR / "default-material-prices.json"

# Application Settings
APP_NAME = "生产订单管理系统"
VERSION = "1.0.0"

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", 3000))
MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10mb request bodies

# Persistence
MAX_BACKUPS = 50
LOCK_TIMEOUT = 10

# Logging
LOG_DIR = ROOT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.log"

# 各部门前端页面
DEPARTMENT_PAGES = [
    ("工程部", "engineering.html"),
    ("啤机部", "injection.html"),
    ("搪胶部", "slush.html"),
    ("喷油部", "spray.html"),
    ("原料仓库", "warehouse.html"),
]
