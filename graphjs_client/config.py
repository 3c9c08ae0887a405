from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from urllib.parse import urlsplit


DEFAULT_BASE_URL = "https://phonetworks.com:1338/"
DEFAULT_PUBLIC_ID = "16D58CF2-FD88-4A49-972B-6F60054BF023"


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class AppSettings:
    base_url: str = DEFAULT_BASE_URL
    public_id: str = DEFAULT_PUBLIC_ID
    timeout_millis: int = 20000
    retry_attempts: int = 1
    backoff_seconds: float = 1.0
    session_ttl_minutes: int = 10
    max_workers: int = 4
    debug_logs: bool = False
    cookie_cache_path: str = ""

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000.0

    @property
    def cookie_key(self) -> str:
        """Public id without dashes, as used in session cookie names."""
        return self.public_id.replace("-", "")

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("GRAPHJS_BASE_URL", DEFAULT_BASE_URL).strip()
        public_id = os.getenv("GRAPHJS_PUBLIC_ID", DEFAULT_PUBLIC_ID).strip()

        timeout_millis = int(os.getenv("GRAPHJS_TIMEOUT_MILLIS", "20000"))
        retry_attempts = int(os.getenv("GRAPHJS_RETRY_ATTEMPTS", "1"))
        backoff_seconds = float(os.getenv("GRAPHJS_BACKOFF_SECONDS", "1.0"))
        session_ttl_minutes = int(os.getenv("GRAPHJS_SESSION_TTL_MINUTES", "10"))
        max_workers = int(os.getenv("GRAPHJS_MAX_WORKERS", "4"))
        debug_logs = _parse_bool(os.getenv("GRAPHJS_DEBUG_LOGS", ""))
        cookie_cache_path = os.getenv("GRAPHJS_COOKIE_CACHE_PATH", "").strip()

        settings = AppSettings(
            base_url=base_url,
            public_id=public_id,
            timeout_millis=timeout_millis,
            retry_attempts=retry_attempts,
            backoff_seconds=backoff_seconds,
            session_ttl_minutes=session_ttl_minutes,
            max_workers=max_workers,
            debug_logs=debug_logs,
            cookie_cache_path=cookie_cache_path,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        problems = []

        parsed = urlsplit(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            problems.append("GRAPHJS_BASE_URL must be an http(s) URL with a host")

        if not self.public_id:
            problems.append("GRAPHJS_PUBLIC_ID must not be empty")

        if self.timeout_millis <= 0:
            problems.append("GRAPHJS_TIMEOUT_MILLIS must be greater than 0")

        if self.retry_attempts < 0:
            problems.append("GRAPHJS_RETRY_ATTEMPTS must be 0 or greater")

        if self.backoff_seconds < 0:
            problems.append("GRAPHJS_BACKOFF_SECONDS must be 0 or greater")

        if self.session_ttl_minutes <= 0:
            problems.append("GRAPHJS_SESSION_TTL_MINUTES must be greater than 0")

        if self.max_workers <= 0:
            problems.append("GRAPHJS_MAX_WORKERS must be greater than 0")

        if problems:
            raise ConfigurationError("Invalid settings: " + "; ".join(problems))


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_files(file_name: str = ".env") -> list[Path]:
    """``GRAPHJS_ENV_FILE`` first, then the working directory, then the project root."""
    explicit = os.getenv("GRAPHJS_ENV_FILE", "").strip()
    candidates = [Path(explicit).expanduser()] if explicit else []
    candidates += [Path.cwd() / file_name, Path(__file__).resolve().parent.parent / file_name]

    unique: dict[Path, Path] = {}
    for path in candidates:
        if path.is_file():
            unique.setdefault(path.resolve(), path)
    return list(unique.values())


def _load_dotenv_if_present() -> None:
    # existing environment variables always win over file values
    for path in _env_files():
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError:
            continue
        for line in lines:
            key, sep, value = line.strip().partition("=")
            key = key.strip()
            if not sep or not key or key.startswith("#"):
                continue
            os.environ.setdefault(key, value.strip().strip('"').strip("'"))
