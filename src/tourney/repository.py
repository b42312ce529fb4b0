"""
Tournament storage for the hosting layer.

The engine itself never loads or saves anything. A host keeps
tournaments in a repository and wraps each mutation in mutate(), which
holds the per-tournament lock while the tournament is loaded, changed
and written back.
"""
import logging
import os
import re
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

import yaml
from filelock import FileLock

from .config import DATA_DIR, get_default_settings
from .errors import InvalidInputError, NotFoundError
from .tournament import Tournament

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r'^[A-Za-z0-9_-]+$')


class TournamentRepository:
    """get/put by ID plus a per-ID lock."""

    def get(self, tournament_id) -> Tournament:
        raise NotImplementedError

    def put(self, tournament: Tournament) -> None:
        raise NotImplementedError

    def delete(self, tournament_id) -> None:
        raise NotImplementedError

    def list_ids(self) -> List[str]:
        raise NotImplementedError

    def lock(self, tournament_id):
        raise NotImplementedError

    @contextmanager
    def mutate(self, tournament_id) -> Iterator[Tournament]:
        """Lock, load, yield and save. Nothing is saved if the body raises."""
        with self.lock(tournament_id):
            tournament = self.get(tournament_id)
            yield tournament
            self.put(tournament)


class InMemoryTournamentRepository(TournamentRepository):
    def __init__(self, settings=None):
        self.settings = settings or get_default_settings()
        self._tournaments: Dict[str, dict] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def get(self, tournament_id) -> Tournament:
        data = self._tournaments.get(tournament_id)
        if data is None:
            raise NotFoundError(f"Tournament not found: {tournament_id}")
        # Stored as a snapshot so a failed mutation never leaks into the store
        return Tournament.from_dict(data, settings=self.settings)

    def put(self, tournament: Tournament) -> None:
        self._tournaments[tournament.id] = tournament.to_dict()

    def delete(self, tournament_id) -> None:
        if self._tournaments.pop(tournament_id, None) is None:
            raise NotFoundError(f"Tournament not found: {tournament_id}")

    def list_ids(self) -> List[str]:
        return sorted(self._tournaments)

    def lock(self, tournament_id):
        with self._locks_guard:
            return self._locks.setdefault(tournament_id, threading.Lock())


class YamlTournamentRepository(TournamentRepository):
    """One <id>.yaml file per tournament, guarded by <id>.lock."""

    def __init__(self, data_dir=None, settings=None):
        self.data_dir = data_dir or os.path.join(DATA_DIR, 'tournaments')
        self.settings = settings or get_default_settings()
        os.makedirs(self.data_dir, exist_ok=True)

    def _path(self, tournament_id, extension='yaml') -> str:
        if not _SAFE_ID.match(str(tournament_id)):
            raise InvalidInputError(f"Invalid tournament id: {tournament_id}")
        return os.path.join(self.data_dir, f"{tournament_id}.{extension}")

    def get(self, tournament_id) -> Tournament:
        path = self._path(tournament_id)
        if not os.path.exists(path):
            raise NotFoundError(f"Tournament not found: {tournament_id}")
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if not data:
            raise NotFoundError(f"Tournament file is empty: {path}")
        return Tournament.from_dict(data, settings=self.settings)

    def put(self, tournament: Tournament) -> None:
        path = self._path(tournament.id)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(tournament.to_dict(), f, default_flow_style=False)
        os.replace(tmp_path, path)

    def delete(self, tournament_id) -> None:
        path = self._path(tournament_id)
        if not os.path.exists(path):
            raise NotFoundError(f"Tournament not found: {tournament_id}")
        os.remove(path)

    def list_ids(self) -> List[str]:
        ids = []
        for filename in sorted(os.listdir(self.data_dir)):
            if not filename.endswith('.yaml'):
                continue
            tournament_id = filename[:-len('.yaml')]
            if _SAFE_ID.match(tournament_id):
                ids.append(tournament_id)
            else:
                logger.warning(f"Ignoring unexpected file in {self.data_dir}: {filename}")
        return ids

    def lock(self, tournament_id):
        return FileLock(self._path(tournament_id, 'lock'), timeout=self.settings.get('lock_timeout', 10))
