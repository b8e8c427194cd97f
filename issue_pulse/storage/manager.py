"""Cache manager for mirrored project data."""

import json
import logging
import time
from pathlib import Path

from pydantic import BaseModel, ValidationError
from rich.console import Console

from ..config import ConfigurationError
from ..github_client.models import GitHubIssue, ProjectMeta
from ..store.project import Project

console = Console()
logger = logging.getLogger(__name__)

META_FILENAME = "meta"


class CacheCorruptionError(ValueError):
    """A cache file exists but cannot be parsed."""


class CacheManager:
    """Manages the on-disk cache of one project.

    Layout: a ``meta`` file with the project's scalar fields, plus one file
    per issue named by its decimal issue number. All files hold indented JSON.
    """

    def __init__(self, base_path: str | Path):
        """Initialize cache manager.

        Args:
            base_path: Cache directory, created if missing
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, issue_number: int) -> Path:
        return self.base_path / str(issue_number)

    @property
    def meta_path(self) -> Path:
        return self.base_path / META_FILENAME

    def _write_json(self, path: Path, model: BaseModel) -> Path:
        data = model.model_dump(mode="json", by_alias=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), "utf-8")
        return path

    def _read_json(self, path: Path) -> object:
        try:
            return json.loads(path.read_text("utf-8"))
        except json.JSONDecodeError as e:
            raise CacheCorruptionError(f"Corrupted cache file {path}: {e}") from e

    def save_meta(self, project: Project) -> Path:
        """Save the project's owner, repo and refresh watermark.

        Returns:
            Path to the metadata file
        """
        path = self._write_json(self.meta_path, project.meta())
        logger.debug("Saved project metadata to %s", path)
        return path

    def save_issue(self, issue: GitHubIssue) -> Path:
        """Save one issue, with its timeline and commits.

        Returns:
            Path to the saved file
        """
        path = self._write_json(self._get_file_path(issue.number), issue)
        logger.debug("Saved issue #%d to %s", issue.number, path)
        return path

    def load_meta(self) -> ProjectMeta | None:
        """Load the metadata file, or None on a first run."""
        if not self.meta_path.exists():
            return None
        data = self._read_json(self.meta_path)
        try:
            return ProjectMeta.model_validate(data)
        except ValidationError as e:
            raise CacheCorruptionError(
                f"Invalid metadata in {self.meta_path}: {e}"
            ) from e

    def load_issue(self, path: Path) -> GitHubIssue:
        data = self._read_json(path)
        try:
            return GitHubIssue.model_validate(data)
        except ValidationError as e:
            raise CacheCorruptionError(f"Invalid issue in {path}: {e}") from e

    def list_issue_files(self) -> list[Path]:
        """Files whose name is a positive decimal issue number."""
        return [
            f
            for f in self.base_path.iterdir()
            if f.is_file()
            and f.name.isascii()
            and f.name.isdigit()
            and int(f.name) > 0
        ]

    def load_all(self, project: Project) -> int:
        """Populate ``project`` from the cache.

        Reads the metadata file when present, then every issue file. Each
        loaded issue is interned and stored.

        Returns:
            Number of issues loaded

        Raises:
            CacheCorruptionError: If any cache file cannot be parsed
            ConfigurationError: If the cache belongs to another project
        """
        meta = self.load_meta()
        if meta is not None:
            if (meta.owner, meta.repo) != (project.owner, project.repo):
                raise ConfigurationError(
                    f"cache {self.base_path} holds {meta.owner}/{meta.repo}, "
                    f"not {project.full_name}; use a separate cache directory"
                )
            project.refreshed_at = meta.refreshed_at

        files = self.list_issue_files()
        if not files:
            return 0

        start = time.monotonic()
        console.print(f"loading {self.base_path} ({len(files)})")
        for path in files:
            issue = self.load_issue(path)
            project.intern_issue(issue)
            project.add_issue(issue)
        console.print(
            f"  done ({len(project.issues)}) {time.monotonic() - start:.1f}s"
        )
        return len(files)

    def get_storage_stats(self) -> dict[str, object]:
        """Get statistics about the cache directory.

        Returns:
            Dictionary with storage statistics
        """
        files = self.list_issue_files()
        total_size = sum(f.stat().st_size for f in files)
        if self.meta_path.exists():
            total_size += self.meta_path.stat().st_size

        return {
            "total_issues": len(files),
            "total_size_bytes": total_size,
            "total_size_mb": round(total_size / (1024 * 1024), 2),
            "storage_path": str(self.base_path.absolute()),
        }
