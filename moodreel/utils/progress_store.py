"""Side-file persistence of batch progress for resumable jobs."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from moodreel.utils.logger import setup_logger


class ProgressStore:
    """Persist the partial output of a batch job between runs.

    Each job name maps to one JSON file holding a timestamped payload.
    Writes go through a temporary file so an interruption never leaves
    a truncated progress file behind.
    """

    def __init__(
        self,
        directory: Path | None = None,
        prefix: str = "progress",
    ) -> None:
        """Initialize the store.

        Args:
            directory: Directory for progress files.
            prefix: Prefix for progress filenames.
        """
        if directory is None:
            from moodreel.settings import settings

            directory = settings.paths.checkpoints_dir
        self._directory = directory
        self._prefix = prefix
        self._directory.mkdir(parents=True, exist_ok=True)
        self._logger = setup_logger("utils.progress")

    @property
    def directory(self) -> Path:
        """Return progress directory path."""
        return self._directory

    def save(self, name: str, data: dict[str, Any]) -> Path:
        """Write the job payload, replacing any previous one.

        Args:
            name: Job identifier.
            data: JSON-serializable payload.

        Returns:
            Path to the progress file.
        """
        path = self.path_for(name)
        envelope = {"timestamp": datetime.now().isoformat(), "data": data}

        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(envelope, f, indent=2, ensure_ascii=False, default=str)
        os.replace(tmp_path, path)

        self._logger.debug(f"Progress saved: {path.name}")
        return path

    def load(self, name: str) -> dict[str, Any] | None:
        """Load the job payload.

        Args:
            name: Job identifier.

        Returns:
            The saved payload, or None if the job has no progress file.
        """
        path = self.path_for(name)
        if not path.exists():
            return None

        with open(path, encoding="utf-8") as f:
            envelope = json.load(f)
        self._logger.debug(f"Progress loaded: {path.name} ({envelope.get('timestamp')})")
        return envelope.get("data")

    def delete(self, name: str) -> bool:
        """Delete the job's progress file.

        Returns:
            True if deleted, False if not found.
        """
        path = self.path_for(name)
        if not path.exists():
            return False

        path.unlink()
        self._logger.debug(f"Progress deleted: {path.name}")
        return True

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def list_files(self) -> list[Path]:
        """Return every progress file of this store, oldest first."""
        files = self._directory.glob(f"{self._prefix}_*.json")
        return sorted(files, key=lambda p: p.stat().st_mtime)

    def path_for(self, name: str) -> Path:
        """Build the progress file path for a job name."""
        safe_name = name.replace("/", "_").replace("\\", "_")
        return self._directory / f"{self._prefix}_{safe_name}.json"
