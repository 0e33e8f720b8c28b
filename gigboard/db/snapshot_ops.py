import copy
import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)

class SnapshotStorage:
    """
    Durable home for store snapshots. A snapshot is a JSON-compatible dict
    kept whole under a single key.
    """

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save(self, key: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

class MemorySnapshotStorage(SnapshotStorage):
    """Keeps snapshots in process memory; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._snapshots: Dict[str, Dict[str, Any]] = copy.deepcopy(initial) if initial else {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        snapshot = self._snapshots.get(key)
        return copy.deepcopy(snapshot) if snapshot is not None else None

    def save(self, key: str, data: Dict[str, Any]) -> None:
        self._snapshots[key] = copy.deepcopy(data)

class FileSnapshotStorage(SnapshotStorage):
    """Writes each snapshot to <directory>/<key>.json, replacing the file atomically."""

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading snapshot '%s' from %s: %s", key, path, e)
            raise

    def save(self, key: str, data: Dict[str, Any]) -> None:
        path = self.path_for(key)
        tmp_path = None
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing snapshot '%s' to %s: %s", key, path, e)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

class FirebaseManager:
    """
    Firebase Admin SDK bootstrap. Reuses an already initialised default app,
    otherwise initialises one from a service account file or, failing that,
    from application default credentials.
    """

    def __init__(self, credentials_path: Optional[str] = None, project_id: Optional[str] = None):
        self.credentials_path = credentials_path
        self.project_id = project_id
        self._db = None

    def initialize_firebase(self):
        try:
            app = firebase_admin.get_app()
            logger.info("Using existing Firebase app")
            return firestore.client(app)
        except ValueError:
            pass # App doesn't exist, so we need to initialize it

        if self.credentials_path and os.path.exists(self.credentials_path):
            cred = credentials.Certificate(self.credentials_path)
            logger.info("Initializing Firebase with service account key from %s", self.credentials_path)
        else:
            cred = credentials.ApplicationDefault()
            logger.info("Initializing Firebase with application default credentials")

        options = {"projectId": self.project_id} if self.project_id else None
        app = firebase_admin.initialize_app(cred, options)
        return firestore.client(app)

    def get_db(self):
        """Get Firestore database client"""
        if self._db is None:
            self._db = self.initialize_firebase()
        return self._db

class FirestoreSnapshotStorage(SnapshotStorage):
    """One Firestore document per snapshot key, in a single collection."""

    def __init__(self, firebase_manager: FirebaseManager, collection_name: str = "snapshots"):
        self.firebase_manager = firebase_manager
        self.collection_name = collection_name

    def _document(self, key: str):
        return self.firebase_manager.get_db().collection(self.collection_name).document(key)

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            doc = self._document(key).get()
        except Exception as e:
            logger.error("Error getting snapshot '%s' from Firestore collection '%s': %s", key, self.collection_name, e)
            raise
        return doc.to_dict() if doc.exists else None

    def save(self, key: str, data: Dict[str, Any]) -> None:
        try:
            self._document(key).set(data)
        except Exception as e:
            logger.error("Error saving snapshot '%s' to Firestore collection '%s': %s", key, self.collection_name, e)
            raise

def get_snapshot_storage(settings) -> SnapshotStorage:
    backend = settings.storage_backend
    if backend == "memory":
        return MemorySnapshotStorage()
    if backend == "file":
        return FileSnapshotStorage(settings.data_dir)
    if backend == "firestore":
        return FirestoreSnapshotStorage(FirebaseManager(settings.firebase_credentials, settings.firebase_project_id))
    raise ValueError(f"Unknown storage backend: {backend!r}")
