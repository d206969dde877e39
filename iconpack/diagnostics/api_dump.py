"""Missing-icon report against the remote API dump.

The dump only feeds a diagnostic: any failure to fetch or read it is logged
and the report is skipped.
"""

from __future__ import annotations

import logging

import requests
from pydantic import BaseModel, Field, ValidationError

from iconpack.models.mappings import Mappings

logger = logging.getLogger(__name__)


class APIClass(BaseModel):
    name: str = Field(alias="Name")


class APIDump(BaseModel):
    classes: list[APIClass] = Field(default_factory=list, alias="Classes")


def fetch_known_classes(url: str, timeout: float = 10.0) -> list[str] | None:
    """Class names from the API dump, or None if it could not be fetched."""
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        dump = APIDump.model_validate(resp.json())
    except (requests.RequestException, ValueError, ValidationError) as e:
        logger.warning("Couldn't fetch API dump from %s: %s", url, e)
        return None
    return [cls.name for cls in dump.classes]


def missing_icon_report(known_classes: list[str], mappings: Mappings, category: str = "instance") -> list[str]:
    """Known classes with no icon mapping in ``category``, sorted."""
    mapped = mappings.icons.get(category, {})
    return sorted({name for name in known_classes if name not in mapped})


def report_missing_icons(url: str, mappings: Mappings, timeout: float = 10.0) -> list[str] | None:
    known = fetch_known_classes(url, timeout=timeout)
    if known is None:
        return None

    missing = missing_icon_report(known, mappings)
    logger.info("%d missing icons total", len(missing))
    for name in missing:
        logger.info("-> Missing: %s", name)
    return missing
