from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()

FILENAME_STYLES = ("hash", "slug")
DEFAULT_CHROME_FLAGS = "--headless --no-sandbox --disable-cache"


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    name: str
    input_file: str
    reports_dir: str
    report_prefix: str
    filename_style: str
    log_level: str
    audit_command: str
    chrome_flags: str
    view_report: bool
    audit_timeout_seconds: float | None


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{key} must be a boolean, got {raw!r}")


def _env_timeout(key: str) -> float | None:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {raw!r}")
    return value


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


def get_settings(
    *,
    name: str | None = None,
    input_file: str = "urls.txt",
    reports_dir: str = "reports",
    report_prefix: str | None = None,
) -> Settings:
    """Resolve the run settings.

    ``BATCH_ANALYZER_NAME`` and ``BATCH_ANALYZER_REPORT_PREFIX`` take precedence
    over the values passed in from the command line.
    """
    resolved_name = os.getenv("BATCH_ANALYZER_NAME") or name
    if not resolved_name or not resolved_name.strip():
        raise ConfigurationError(
            "name is required: pass --name or set BATCH_ANALYZER_NAME in the environment or a .env file"
        )

    filename_style = os.getenv("BATCH_ANALYZER_FILENAME_STYLE", "hash").strip().lower()
    if filename_style not in FILENAME_STYLES:
        raise ConfigurationError(
            f"BATCH_ANALYZER_FILENAME_STYLE must be one of {', '.join(FILENAME_STYLES)}, got {filename_style!r}"
        )

    return Settings(
        name=resolved_name.strip(),
        input_file=input_file,
        reports_dir=reports_dir,
        report_prefix=os.getenv("BATCH_ANALYZER_REPORT_PREFIX") or report_prefix or "report",
        filename_style=filename_style,
        log_level=get_log_level(),
        audit_command=os.getenv("BATCH_ANALYZER_AUDIT_COMMAND", "lighthouse"),
        chrome_flags=os.getenv("BATCH_ANALYZER_CHROME_FLAGS", DEFAULT_CHROME_FLAGS),
        view_report=_env_bool("BATCH_ANALYZER_VIEW_REPORT", True),
        audit_timeout_seconds=_env_timeout("BATCH_ANALYZER_AUDIT_TIMEOUT_SECONDS"),
    )
