"""
Loading and validation of SiteSweep crawl settings.
Pydantic describes the schema; files may be YAML or JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from site_sweep.filters import FILTER_NAMES


class CrawlConfig(BaseModel):
    """Settings for one crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    domain: Optional[str] = Field(None, description="Domain to crawl, without scheme.")
    depth: int = Field(5, ge=0, description="Number of link-following levels.")
    timeout: float = Field(10.0, gt=0, description="Per-request timeout (seconds).")
    user_agent: str = Field("SiteSweep/1.0", min_length=1, description="User-Agent header.")
    retry_times: int = Field(0, ge=0, description="Extra attempts after a transport failure.")
    backoff_base: float = Field(1.0, ge=0, description="First retry delay (seconds), doubled per attempt.")
    fail_fast: bool = Field(True, description="Abort the crawl on the first failed fetch.")
    filters: List[str] = Field(
        default_factory=lambda: ["absolute"], description="Named link filters to apply."
    )

    @field_validator("domain", mode="before")
    def _strip_domain(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            for prefix in ("http://", "https://"):
                if v.lower().startswith(prefix):
                    v = v[len(prefix):]
        return v

    @field_validator("filters")
    def _known_filters(cls, v: List[str]) -> List[str]:
        unknown = [name for name in v if name.strip().lower() not in FILTER_NAMES]
        if unknown:
            raise ValueError(f"unknown filters {unknown}; expected any of {list(FILTER_NAMES)}")
        return v


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> CrawlConfig:
    """
    Read a YAML or JSON file and return a validated CrawlConfig.
    Without a path the defaults are returned; a missing file raises FileNotFoundError.
    """
    if path is None:
        return CrawlConfig()

    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlConfig(**data)


__all__ = ["CrawlConfig", "load_config", "ValidationError"]
