"""Runtime configuration for issue-pulse."""

import stat
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_PROJECT = "cockroachdb/cockroach"
DEFAULT_CACHE_DIR = Path.home() / ".issue-pulse"
TOKEN_FILENAME = ".github-issue-token"

TOKEN_HELP = (
    "Please create a personal access token at "
    "https://github.com/settings/tokens/new\n"
    "and write it to {path} to use this program.\n"
    "The token only needs the repo scope, or private_repo if you want to\n"
    "view issues for private repositories."
)


class ConfigurationError(ValueError):
    """Invalid user-supplied configuration. Not recoverable."""


def parse_project(project: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its two parts.

    Raises:
        ConfigurationError: If the value is not exactly owner/repo
    """
    parts = project.split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(
            f"invalid project {project!r}: must be owner/repo, "
            "like cockroachdb/cockroach"
        )
    return parts[0], parts[1]


def default_token_file() -> Path:
    return Path.home() / TOKEN_FILENAME


def load_token(path: Path) -> str:
    """Read a personal access token from a file only its owner can access.

    Raises:
        ConfigurationError: If the file is unreadable or group/other accessible
    """
    try:
        data = path.read_text()
    except OSError as e:
        raise ConfigurationError(
            f"reading token: {e}\n\n" + TOKEN_HELP.format(path=path)
        ) from e

    mode = stat.S_IMODE(path.stat().st_mode)
    if mode & 0o077:
        raise ConfigurationError(
            f"reading token: {path} mode is {mode:#o}, want {mode & 0o700:#o}"
        )

    token = data.strip()
    if not token:
        raise ConfigurationError(f"reading token: {path} is empty")
    return token


class PulseConfig(BaseModel):
    """Configuration built once at startup and passed to each component."""

    owner: str
    repo: str
    cache_dir: Path = DEFAULT_CACHE_DIR
    token_file: Path = Field(default_factory=default_token_file)
    refresh: bool = False
    per_page: int = Field(100, ge=1, le=100)
    retry_delay: float = Field(5.0, ge=0)

    @classmethod
    def from_options(
        cls,
        project: str,
        cache_dir: Path | None = None,
        token_file: Path | None = None,
        refresh: bool = False,
    ) -> "PulseConfig":
        """Build a config from CLI options, applying defaults."""
        owner, repo = parse_project(project)
        return cls(
            owner=owner,
            repo=repo,
            cache_dir=(cache_dir or DEFAULT_CACHE_DIR).expanduser(),
            token_file=(token_file or default_token_file()).expanduser(),
            refresh=refresh,
        )

    @property
    def project(self) -> str:
        return f"{self.owner}/{self.repo}"

    def load_token(self) -> str:
        return load_token(self.token_file)
