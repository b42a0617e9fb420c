"""
score_ledger.py - Persistent per-player score table

Scores are stored as a JSON list of ``{"id": ..., "score": ...}`` records.
Every read and write holds a file lock, and writes go through a temporary
file that replaces the original so a crash never leaves a half-written
ledger behind.
"""

import json
import os
import shutil
from typing import Any, Dict, Hashable, List

import filelock

from connect4bot.debug import debug


def safe_read_json(file_path: str) -> List[Dict]:
    """
    Safely read a JSON file with file locking.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data (empty list if file doesn't exist)
    """
    if not os.path.exists(file_path):
        return []

    with filelock.FileLock(f"{file_path}.lock"):
        try:
            with open(file_path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError:
            debug.error(f"Error decoding JSON from {file_path}", "ledger")
            return []


def safe_write_json(file_path: str, data: Any) -> bool:
    """
    Safely write data to a JSON file with atomic updates.

    Args:
        file_path: Path to JSON file
        data: Data to write

    Returns:
        True if successful, False otherwise
    """
    with filelock.FileLock(f"{file_path}.lock"):
        try:
            temp_file = f"{file_path}.tmp"
            with open(temp_file, 'w') as f:
                json.dump(data, f, indent=2)
            shutil.move(temp_file, file_path)
            return True
        except OSError as e:
            debug.error(f"Error writing to {file_path}: {e}", "ledger")
            return False


class ScoreLedger:
    """Scores keyed by player identity, persisted to a JSON file."""

    def __init__(self, path: str):
        self.path = path
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)

    @staticmethod
    def _key(user_id: Hashable) -> str:
        # JSON has no tuple or int keys; identities are compared as strings
        return str(user_id)

    def all_scores(self) -> Dict[str, int]:
        """All recorded scores, keyed by identity string."""
        return {record['id']: record['score'] for record in safe_read_json(self.path)}

    def get_score(self, user_id: Hashable) -> int:
        """
        Score of ``user_id``; a player seen for the first time is registered with 0.
        """
        key = self._key(user_id)
        records = safe_read_json(self.path)
        for record in records:
            if record['id'] == key:
                return record['score']

        records.append({"id": key, "score": 0})
        if safe_write_json(self.path, records):
            debug.info(f"Registered {key} in score ledger", "ledger")
        return 0

    def add_points(self, user_id: Hashable, points: int = 1) -> bool:
        """
        Add ``points`` to a player's score, registering the player if needed.

        Returns:
            True if the ledger was written, False otherwise
        """
        key = self._key(user_id)
        records = safe_read_json(self.path)
        for record in records:
            if record['id'] == key:
                record['score'] += points
                break
        else:
            records.append({"id": key, "score": points})

        if safe_write_json(self.path, records):
            debug.debug(f"Added {points} point(s) to {key}", "ledger")
            return True

        debug.error(f"Failed to update score of {key}", "ledger")
        return False
