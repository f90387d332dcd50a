import logging
from pathlib import Path
import re

from batch_analyzer.schemas import ReportCollection, ReportRun


logger = logging.getLogger(__name__)

RUN_DIR_PATTERN = re.compile(r"^(?P<name>.+)_(?P<date>\d{8})_(?P<time>\d{6})$")


def parse_run_dir_name(dir_name: str) -> tuple[str, str] | None:
    match = RUN_DIR_PATTERN.match(dir_name)
    if match is None:
        return None
    date, time = match["date"], match["time"]
    timestamp = f"{date[:4]}-{date[4:6]}-{date[6:]} {time[:2]}:{time[2:4]}:{time[4:]}"
    return match["name"], timestamp


def _read_info(run_dir: Path) -> str | None:
    info_path = run_dir / "info.txt"
    if not info_path.is_file():
        return None
    try:
        return info_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.warning("could not read run info", extra={"path": str(info_path)})
        return None


def list_runs(reports_root: str | Path) -> list[ReportRun]:
    root = Path(reports_root)
    if not root.is_dir():
        return []

    runs: list[ReportRun] = []
    for run_dir in sorted(root.iterdir()):
        if not run_dir.is_dir():
            continue
        parsed = parse_run_dir_name(run_dir.name)
        if parsed is None:
            continue
        name, timestamp = parsed
        reports = tuple(sorted(path.name for path in run_dir.glob("*.html") if path.is_file()))
        runs.append(
            ReportRun(
                name=name,
                timestamp=timestamp,
                full_name=run_dir.name,
                path=run_dir,
                reports=reports,
                info=_read_info(run_dir),
            )
        )
    return runs


def group_runs(runs: list[ReportRun]) -> list[ReportCollection]:
    collections: dict[str, ReportCollection] = {}
    for run in runs:
        collections.setdefault(run.name, ReportCollection(name=run.name)).runs.append(run)

    for collection in collections.values():
        # "YYYY-MM-DD HH:MM:SS" sorts chronologically as text.
        collection.runs.sort(key=lambda run: run.timestamp, reverse=True)
    return sorted(collections.values(), key=lambda collection: collection.name)
