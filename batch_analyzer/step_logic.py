from collections.abc import Generator
import hashlib
import logging
from pathlib import Path
import random
import string
from typing import BinaryIO

from batch_analyzer.schemas import BatchResult


logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 80
HASH_LENGTH = 12
SUFFIX_LENGTH = 6
_SLUG_CHARS = frozenset(string.ascii_letters + string.digits + "-")
_SUFFIX_ALPHABET = string.ascii_letters + string.digits


class DirectoryError(RuntimeError):
    pass


class InputUnavailableError(RuntimeError):
    pass


def derive_filename(url: str, prefix: str, style: str = "hash", rng: random.Random | None = None) -> str:
    """Map a URL to a report file name that is safe to use inside the run directory.

    ``hash`` names are deterministic: ``{prefix}_{sha256(url)[:12]}.html``.
    ``slug`` names keep a readable, truncated form of the URL and add a random
    suffix: ``{prefix}_{slug}__{suffix}.html``.
    """
    if style == "slug":
        return _slug_filename(url, prefix, rng or random.SystemRandom())
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:HASH_LENGTH]
    return f"{prefix}_{digest}.html"


def slugify_url(url: str) -> str:
    for scheme in ("https://", "http://"):
        if url.startswith(scheme):
            url = url[len(scheme):]
            break
    # One underscore per rejected character, runs are not collapsed.
    slug = "".join(char if char in _SLUG_CHARS else "_" for char in url)
    return slug[:MAX_SLUG_LENGTH]


def _slug_filename(url: str, prefix: str, rng: random.Random) -> str:
    suffix = "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}_{slugify_url(url)}__{suffix}.html"


def read_entries(path: str | Path) -> Generator[str, None, None]:
    input_path = Path(path)
    try:
        handle = input_path.open("rb")
    except OSError as exc:
        raise InputUnavailableError(f"could not open or read '{input_path}': {exc.strerror or exc}") from exc
    return _stripped_lines(handle, input_path)


def _stripped_lines(handle: BinaryIO, input_path: Path) -> Generator[str, None, None]:
    with handle:
        try:
            for line_number, raw in enumerate(handle, start=1):
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError as exc:
                    logger.warning("skipping undecodable line %d in %s: %s", line_number, input_path, exc)
                    # Blank keeps line numbering intact; the caller skips it.
                    yield ""
                    continue
                yield line.strip()
        except OSError as exc:
            raise InputUnavailableError(f"could not read '{input_path}': {exc}") from exc


def ensure_output_dir(reports_root: str | Path, name: str, timestamp: str) -> Path:
    root = Path(reports_root)
    output_dir = root / f"{name}_{timestamp}"
    try:
        if not root.exists():
            root.mkdir(parents=True, exist_ok=True)
            logger.info("created reports directory", extra={"reports_dir": str(root)})
        if not output_dir.exists():
            output_dir.mkdir(exist_ok=True)
            logger.info("created output directory", extra={"output_dir": str(output_dir)})
    except OSError as exc:
        raise DirectoryError(f"failed to create output directory '{output_dir}': {exc}") from exc
    if not output_dir.is_dir():
        raise DirectoryError(f"output path '{output_dir}' exists and is not a directory")
    return output_dir


def write_run_info(result: BatchResult, input_file: str) -> Path:
    info_path = result.output_dir / "info.txt"
    rows = {
        "name": result.name,
        "timestamp": result.timestamp,
        "input_file": input_file,
        "attempted": result.attempted,
        "succeeded": result.succeeded,
        "failed": result.failed,
    }
    try:
        with info_path.open("w", encoding="utf-8") as outfile:
            for key, value in rows.items():
                outfile.write(f"{key}={value}\n")
    except OSError as exc:
        raise DirectoryError(f"failed to write run info '{info_path}': {exc}") from exc
    return info_path
