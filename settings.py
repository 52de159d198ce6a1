from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Backing store
    backend: str
    data_dir: Path
    storage_file: str

    # Review records
    review_prefix: str

    # Debug
    debug_log_storage: bool
    debug_log_requests: bool

    @property
    def storage_path(self) -> Path:
        return self.data_dir / self.storage_file


def get_settings() -> Settings:
    # Imported lazily so tests can repoint project_root() before settings are read.
    from persistence import paths

    backend = os.getenv("LOCALSTORE_BACKEND", "memory").strip().lower()

    raw_dir = os.getenv("LOCALSTORE_DATA_DIR", "").strip()
    data_dir = Path(raw_dir) if raw_dir else paths.project_root() / "data"
    storage_file = os.getenv("LOCALSTORE_FILE", "localstore.json").strip() or "localstore.json"

    review_prefix = os.getenv("LOCALSTORE_REVIEW_PREFIX", "reviews:")

    debug_log_storage = _env_bool("DEBUG_LOG_STORAGE", False)
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        backend=backend,
        data_dir=data_dir,
        storage_file=storage_file,
        review_prefix=review_prefix,
        debug_log_storage=debug_log_storage,
        debug_log_requests=debug_log_requests,
    )
