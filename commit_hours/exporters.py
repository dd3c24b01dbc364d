import csv
import json
from pathlib import Path
from typing import Callable

from commit_hours.data import HOUR_LABELS, Histogram


def export_json(histogram: Histogram, out: Path) -> None:
    with open(out, "w", encoding="utf-8") as f:
        json.dump(dict(zip(HOUR_LABELS, histogram)), f, indent=2)


def export_csv(histogram: Histogram, out: Path) -> None:
    with open(out, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["hour", "commits"])
        writer.writeheader()
        for hour, count in zip(HOUR_LABELS, histogram):
            writer.writerow({"hour": hour, "commits": count})


type ExportFn = Callable[[Histogram, Path], None]
exporters: dict[str, ExportFn] = {"json": export_json, "csv": export_csv}


def export_data(histogram: Histogram, fmt: str, output_file: Path) -> Path:
    """
    Export the hourly histogram as json/csv file

    :param histogram: 24 commit counters
    :param fmt: one of the exporters keys
    :param output_file: target path, the format extension is added if missing
    :return: path actually written
    """
    if fmt not in exporters:
        raise ValueError("Unsupported export file format")
    output_file = Path(output_file)
    if output_file.suffix.lower() != f".{fmt}":
        output_file = output_file.with_name(f"{output_file.name}.{fmt}")
    exporters[fmt](histogram, output_file)
    return output_file
