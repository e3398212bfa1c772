#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Habit Database
JSON file storage for habits with atomic saves and gzip backups

Version: 1.0.0
"""

import json
import gzip
import shutil
import threading
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass

from habitcheck.core.exceptions import DatabaseCorruptionError, DatabaseError, HabitNotFoundError, ValidationError
from habitcheck.core.models import HABIT_NAME_MAX_LENGTH, Habit, validate_icon, validate_text
from habitcheck.utils.datetime_utils import validate_date_string

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

# ===== HELPER CLASSES =====

@dataclass
class DatabaseStats:
    """Database statistics"""
    total_habits: int = 0
    total_entries: int = 0
    last_save: Optional[str] = None
    last_backup: Optional[str] = None
    save_count: int = 0
    load_count: int = 0
    error_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_habits': self.total_habits,
            'total_entries': self.total_entries,
            'last_save': self.last_save,
            'last_backup': self.last_backup,
            'save_count': self.save_count,
            'load_count': self.load_count,
            'error_count': self.error_count
        }


class BackupManager:
    """Gzip backups of the database file"""

    def __init__(self, backup_dir: Path, max_backups: int = 10):
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def create_backup(self, source_file: Path) -> Optional[Path]:
        """Create a compressed backup, returns None when there is nothing to back up"""
        if not source_file.exists():
            logger.warning(f"Source file {source_file} does not exist for backup")
            return None

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        backup_path = self.backup_dir / f"backup_{timestamp}.json.gz"

        with open(source_file, 'rb') as f_in:
            with gzip.open(backup_path, 'wb') as f_out:
                shutil.copyfileobj(f_in, f_out)

        logger.info(f"Backup created: {backup_path}")
        self._cleanup_old_backups()
        return backup_path

    def restore_backup(self, backup_path: Path, target_file: Path) -> bool:
        """Restore target_file from a backup; a backup that does not parse is rejected"""
        if not backup_path.exists():
            logger.error(f"Backup file {backup_path} does not exist")
            return False

        try:
            with gzip.open(backup_path, 'rb') as f_in:
                payload = f_in.read()
            json.loads(payload.decode('utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Backup {backup_path.name} is unreadable: {e}")
            return False

        with open(target_file, 'wb') as f_out:
            f_out.write(payload)

        logger.info(f"Backup restored from {backup_path} to {target_file}")
        return True

    def list_backups(self) -> List[Dict[str, Any]]:
        """Backups, newest first"""
        backups = []
        for backup_file in self.backup_dir.glob("backup_*.json.gz"):
            stat = backup_file.stat()
            backups.append({
                'name': backup_file.name,
                'path': str(backup_file),
                'size_mb': stat.st_size / (1024 * 1024),
                'created': datetime.fromtimestamp(stat.st_mtime).isoformat()
            })
        # File names embed the timestamp, so they sort chronologically
        return sorted(backups, key=lambda x: x['name'], reverse=True)

    def _cleanup_old_backups(self) -> None:
        backups = sorted(self.backup_dir.glob("backup_*.json.gz"), key=lambda p: p.name, reverse=True)
        for backup in backups[self.max_backups:]:
            backup.unlink()
            logger.info(f"Removed old backup: {backup}")

# ===== DATABASE =====

class HabitDatabase:
    """
    Habit storage scoped by user.

    The whole document lives in memory and is rewritten atomically after each
    mutation. All mutations hold one lock, so toggles on different dates of the
    same habit never overwrite each other.
    """

    def __init__(self, data_file: Path, backup_dir: Optional[Path] = None, max_backups: int = 10):
        self.data_file = Path(data_file)
        self.backup_manager = BackupManager(backup_dir or self.data_file.parent / "backups", max_backups)
        self.file_lock = threading.RLock()
        self.stats = DatabaseStats()
        self._habits: Dict[str, Habit] = {}

        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        self._load()

    # ===== LOAD / SAVE =====

    def _load(self) -> None:
        with self.file_lock:
            if not self.data_file.exists():
                logger.info("Database file does not exist, starting with empty database")
                self.stats.load_count += 1
                return

            try:
                data = self._read_document(self.data_file)
            except DatabaseCorruptionError as e:
                logger.error(f"Database file is corrupted: {e}")
                self._handle_corruption()
                return

            self._habits = self._parse_habits(data)
            self.stats.load_count += 1
            self._update_stats()
            logger.info(f"Loaded {len(self._habits)} habits from database")

    @staticmethod
    def _read_document(path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DatabaseCorruptionError(str(e))
        except OSError as e:
            raise DatabaseError(f"Failed to read database: {e}")

        if not isinstance(data, dict) or not isinstance(data.get("habits", {}), dict):
            raise DatabaseCorruptionError("Unexpected document layout")
        return data

    def _parse_habits(self, data: Dict[str, Any]) -> Dict[str, Habit]:
        habits = {}
        for habit_id, habit_data in data.get("habits", {}).items():
            try:
                habits[habit_id] = Habit.from_dict(habit_data)
            except ValidationError as e:
                logger.warning(f"Failed to load habit {habit_id}: {e}")
                self.stats.error_count += 1
        return habits

    def _handle_corruption(self) -> None:
        """Fall back to the newest readable backup, otherwise start empty"""
        logger.warning("Attempting to recover from database corruption...")

        corrupt_copy = self.data_file.with_suffix('.corrupt')
        shutil.copy2(self.data_file, corrupt_copy)

        for backup in self.backup_manager.list_backups():
            if not self.backup_manager.restore_backup(Path(backup['path']), self.data_file):
                continue
            try:
                data = self._read_document(self.data_file)
            except DatabaseCorruptionError as e:
                logger.warning(f"Backup {backup['name']} has an unexpected layout: {e}")
                continue

            logger.info(f"Successfully restored from backup: {backup['name']}")
            self._habits = self._parse_habits(data)
            self.stats.load_count += 1
            self._update_stats()
            return

        logger.warning(f"Could not restore from any backup, starting with empty database (kept {corrupt_copy})")
        self._habits = {}
        self.stats.error_count += 1

    def _save(self) -> None:
        """Write through a temp file, verify it parses, then replace the database"""
        data = {
            "__version__": SCHEMA_VERSION,
            "habits": {habit_id: habit.to_dict() for habit_id, habit in self._habits.items()},
        }

        with self.file_lock:
            temp_file = self.data_file.with_suffix('.tmp')
            try:
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)

                with open(temp_file, 'r', encoding='utf-8') as f:
                    json.load(f)

                temp_file.replace(self.data_file)
            except (OSError, ValueError) as e:
                if temp_file.exists():
                    temp_file.unlink()
                self.stats.error_count += 1
                raise DatabaseError(f"Failed to save database: {e}")

            self.stats.save_count += 1
            self.stats.last_save = datetime.now().isoformat()
            self._update_stats()

    def _update_stats(self) -> None:
        self.stats.total_habits = len(self._habits)
        self.stats.total_entries = sum(len(h.tracking) for h in self._habits.values())

    # ===== PUBLIC API =====

    def list_habits(self, user_id: str) -> List[Habit]:
        """User's habits, newest first"""
        with self.file_lock:
            habits = [h for h in self._habits.values() if h.user_id == str(user_id)]
        return sorted(habits, key=lambda h: h.created_at, reverse=True)

    def get_habit(self, user_id: str, habit_id: str) -> Habit:
        with self.file_lock:
            habit = self._habits.get(habit_id)
        if habit is None or habit.user_id != str(user_id):
            raise HabitNotFoundError(habit_id)
        return habit

    def create_habit(self, user_id: str, name: str, icon: Optional[str] = None,
                     created_at: Optional[datetime] = None) -> Habit:
        habit = Habit.create(user_id=user_id, name=name, icon=icon, created_at=created_at)
        with self.file_lock:
            self._habits[habit.habit_id] = habit
            try:
                self._save()
            except DatabaseError:
                del self._habits[habit.habit_id]
                raise
        logger.info(f"Created habit {habit.habit_id} for user {habit.user_id}")
        return habit

    def update_habit(self, user_id: str, habit_id: str, name: Optional[str] = None,
                     icon: Optional[str] = None) -> Habit:
        with self.file_lock:
            habit = self.get_habit(user_id, habit_id)
            # Validate both fields before touching the habit
            new_name = habit.name if name is None else validate_text(
                name, min_length=1, max_length=HABIT_NAME_MAX_LENGTH, field_name="Habit name")
            new_icon = habit.icon if icon is None else validate_icon(icon)
            old_name, old_icon = habit.name, habit.icon
            habit.rename(new_name)
            habit.change_icon(new_icon)
            try:
                self._save()
            except DatabaseError:
                habit.name, habit.icon = old_name, old_icon
                raise
        return habit

    def delete_habit(self, user_id: str, habit_id: str) -> None:
        """Delete a habit together with its tracking entries"""
        with self.file_lock:
            habit = self.get_habit(user_id, habit_id)
            del self._habits[habit_id]
            try:
                self._save()
            except DatabaseError:
                self._habits[habit_id] = habit
                raise
        logger.info(f"Deleted habit {habit_id}")

    def toggle_tracking(self, user_id: str, habit_id: str, date: str) -> Tuple[Habit, bool]:
        """Toggle one date of one habit and persist it. Returns the habit and the new flag."""
        validate_date_string(date)

        with self.file_lock:
            habit = self.get_habit(user_id, habit_id)
            existed = date in habit.tracking
            completed = habit.tracking.toggle(date)
            try:
                self._save()
            except DatabaseError:
                # Undo the flip, or drop the entry the toggle just created
                if existed:
                    habit.tracking.toggle(date)
                else:
                    habit.tracking.discard(date)
                raise

        logger.debug(f"Habit {habit_id} on {date}: completed={completed}")
        return habit, completed

    def create_backup(self) -> Optional[Path]:
        with self.file_lock:
            backup = self.backup_manager.create_backup(self.data_file)
        if backup:
            self.stats.last_backup = datetime.now().isoformat()
        return backup

    def get_stats(self) -> Dict[str, Any]:
        with self.file_lock:
            return self.stats.to_dict()

    def shutdown(self) -> None:
        logger.info("Shutting down habit database...")
        with self.file_lock:
            if self._habits:
                self._save()
                self.create_backup()
        logger.info("Habit database shutdown completed")


def create_database(settings) -> HabitDatabase:
    return HabitDatabase(settings.database_path, settings.BACKUP_DIR, settings.MAX_BACKUPS)


__all__ = [
    'DatabaseStats',
    'BackupManager',
    'HabitDatabase',
    'create_database',
]
