"""
Data Service Module
Handles persistence of the whole order document: loading, atomic saving,
backups and the shared ID counter.
"""

import json
import shutil
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Any, Iterator, Optional
from pathlib import Path

from config import DATA_FILE, BACKUP_DIR, DEFAULT_PRICES_FILE, MAX_BACKUPS, LOCK_TIMEOUT
from core.enums import DataCategory
from core.constants import NEXT_ID_KEY
from core.exceptions import DataStoreError
from utils.file_lock import file_lock

logger = logging.getLogger(__name__)


class DataService:
    """Service for managing the JSON order document."""

    def __init__(self,
                 data_file: Optional[Path] = None,
                 backup_dir: Optional[Path] = None,
                 default_prices_file: Optional[Path] = None,
                 max_backups: int = MAX_BACKUPS,
                 lock_timeout: float = LOCK_TIMEOUT):
        self.data_file = Path(data_file) if data_file else DATA_FILE
        self.backup_dir = Path(backup_dir) if backup_dir else self.data_file.parent / BACKUP_DIR.name
        self.default_prices_file = Path(default_prices_file) if default_prices_file else DEFAULT_PRICES_FILE
        self.max_backups = max_backups
        self.lock_timeout = lock_timeout

        # 同一进程内的请求线程互斥；跨进程由 file_lock 保证
        self._lock = threading.RLock()
        self._default_prices = self._load_default_prices()

    # -------------------- 初始数据 --------------------

    def _load_default_prices(self) -> List[Dict[str, Any]]:
        """读取默认原料价格表"""
        try:
            with open(self.default_prices_file, 'r', encoding='utf-8') as f:
                prices = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Default price file not found ({self.default_prices_file}), starting with empty prices")
            return []
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Default price file is not valid JSON ({self.default_prices_file}): {e}")
            return []

        if not isinstance(prices, list):
            logger.error(f"Default price file must contain a list: {self.default_prices_file}")
            return []
        return prices

    def get_default_prices(self) -> List[Dict[str, Any]]:
        """返回默认价格表副本"""
        return [dict(p) if isinstance(p, dict) else p for p in self._default_prices]

    def get_initial_data(self) -> Dict[str, Any]:
        """返回初始数据结构"""
        data: Dict[str, Any] = {category.value: [] for category in DataCategory}
        data[DataCategory.MATERIAL_PRICES.value] = self.get_default_prices()
        data[NEXT_ID_KEY] = 1
        return data

    def _ensure_data_structure(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """补齐旧版数据文件缺失的集合与计数器"""
        for category in DataCategory:
            if data.get(category.value) is None:
                if category is DataCategory.MATERIAL_PRICES:
                    data[category.value] = self.get_default_prices()
                else:
                    data[category.value] = []

        max_id = self._max_entity_id(data)
        next_id = data.get(NEXT_ID_KEY)
        if not isinstance(next_id, int) or isinstance(next_id, bool) or next_id <= max_id:
            if next_id is not None:
                logger.warning(f"Counter {NEXT_ID_KEY}={next_id!r} is behind stored ids, resetting to {max_id + 1}")
            data[NEXT_ID_KEY] = max_id + 1
        return data

    @staticmethod
    def _max_entity_id(data: Dict[str, Any]) -> int:
        """Largest integer id across every collection, ignoring non-integer ids."""
        ids = [0]
        for category in DataCategory:
            collection = data.get(category.value)
            if not isinstance(collection, list):
                continue
            for entity in collection:
                if not isinstance(entity, dict):
                    continue
                val = entity.get("id")
                if isinstance(val, int) and not isinstance(val, bool):
                    ids.append(val)
                elif isinstance(val, str) and val.isdigit():
                    ids.append(int(val))
        return max(ids)

    # -------------------- 读写 --------------------

    def load_data(self) -> Dict[str, Any]:
        """Load the document from disk; missing or unreadable files give a fresh document."""
        if not self.data_file.exists():
            return self.get_initial_data()

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("Data format is incorrect (not a dict)")
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
            logger.error(f"Data file {self.data_file} is unreadable ({e}); starting from a fresh document")
            self._quarantine_corrupt_file()
            return self.get_initial_data()

        return self._ensure_data_structure(data)

    def _quarantine_corrupt_file(self) -> Optional[Path]:
        """Copy an unreadable data file aside so the next save does not destroy it."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        target = self.data_file.with_name(f"{self.data_file.stem}.corrupt-{timestamp}.json")
        try:
            shutil.copy2(self.data_file, target)
        except OSError as e:
            logger.error(f"Failed to preserve corrupt data file: {e}")
            return None
        logger.error(f"Corrupt data file preserved as {target}")
        return target

    def save_data(self, data: Dict[str, Any]) -> bool:
        """Save data to JSON file with atomic write and locking."""
        with self._lock:
            with file_lock(self.data_file, timeout=self.lock_timeout):
                self._write_data(data)
        return True

    def _write_data(self, data: Dict[str, Any]) -> None:
        """Backup, write to temp file, then atomically replace. Caller holds the locks."""
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)

            # 1. Backup previous version
            self.create_backup()

            # 2. Atomic Write
            temp_file = self.data_file.with_name(self.data_file.name + '.tmp')
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())

            # 3. Atomic Replace
            os.replace(temp_file, self.data_file)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save data: {e}")
            raise DataStoreError(f"数据保存失败: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Run one load-mutate-save cycle atomically.

        The document is saved when the block exits normally and left untouched
        on disk when it raises.
        """
        with self._lock:
            with file_lock(self.data_file, timeout=self.lock_timeout):
                data = self.load_data()
                yield data
                self._write_data(data)

    @staticmethod
    def next_id(data: Dict[str, Any]) -> int:
        """Draw the next id from the shared counter."""
        new_id = data[NEXT_ID_KEY]
        data[NEXT_ID_KEY] = new_id + 1
        return new_id

    # -------------------- 备份 --------------------

    def create_backup(self) -> Optional[Path]:
        """Copy the current data file into the backup directory."""
        if not self.data_file.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_file = self.backup_dir / f"data_backup_{timestamp}.json"

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.data_file, backup_file)
        except OSError as e:
            logger.error(f"Backup creation failed: {e}")
            return None

        self._cleanup_old_backups()
        logger.info(f"Backup created: {backup_file}")
        return backup_file

    def _cleanup_old_backups(self) -> None:
        """Remove old backups to save space."""
        backup_files = sorted(self.backup_dir.glob("data_backup_*.json"))
        for file in backup_files[:-self.max_backups]:
            try:
                file.unlink()
            except OSError as e:
                logger.warning(f"Failed to remove old backup {file}: {e}")

    def get_collection_counts(self) -> Dict[str, Any]:
        """各集合条目数，供管理命令检查数据文件"""
        data = self.load_data()
        counts: Dict[str, Any] = {category.value: len(data[category.value]) for category in DataCategory}
        counts[NEXT_ID_KEY] = data[NEXT_ID_KEY]
        return counts
