# site_sweep/report/json_report.py

"""
JSON report for SiteSweep: the visited set serialized as a sorted array.
"""
import json
from pathlib import Path
from typing import Iterable, List


def as_sorted_list(urls: Iterable[str]) -> List[str]:
    return sorted(set(urls))


def render_json(urls: Iterable[str], output_path: Path | str, pretty: bool = True) -> Path:
    """
    Save the crawled addresses as JSON at *output_path*.

    :param urls: addresses returned by a crawl
    :param output_path: path of the JSON file; parent directories are created
    :param pretty: indent the output by 2 spaces
    :return: Path of the written file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("w", encoding="utf-8") as f:
        json.dump(as_sorted_list(urls), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
