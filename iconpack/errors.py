"""Exception hierarchy for the icon pack compiler.

Every failure that should abort a run derives from IconPackError so the CLI
can report it and exit non-zero. Icon-level errors carry enough context
(icon name, category, item) to find the offending input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from iconpack.engine.jobs import RenderJob


class IconPackError(Exception):
    """Base class for fatal compiler errors."""


class ConfigError(IconPackError):
    """Unreadable or inconsistent input configuration."""


class TaxonomyError(ConfigError):
    def __init__(self, message: str, source: str = "<text>", line_no: int | None = None) -> None:
        self.source = source
        self.line_no = line_no
        where = f"{source}:{line_no}" if line_no is not None else source
        super().__init__(f"{where}: {message}")


class MissingScalingError(ConfigError):
    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f"No scaling specified for category {category}")


class IconError(IconPackError):
    """Structural problem with one source icon."""

    def __init__(self, icon_name: str | None, message: str) -> None:
        self.icon_name = icon_name
        super().__init__(message)


class IconParseError(IconError):
    def __init__(self, icon_name: str | None, reason: str) -> None:
        self.reason = reason
        super().__init__(icon_name, f"icon {icon_name}: {reason}")


class NoFillError(IconError):
    def __init__(self, icon_name: str | None, element: str = "path") -> None:
        self.element = element
        super().__init__(icon_name, f"icon {icon_name}: no fill found for {element}")


class DuplicateLayerError(IconError):
    def __init__(self, icon_name: str | None, role: str) -> None:
        self.role = role
        super().__init__(icon_name, f"icon {icon_name}: icon has two {role} layers")


class MissingIconError(IconError):
    def __init__(
        self,
        icon_name: str,
        *,
        category: str | None = None,
        item: str | None = None,
        path: str | None = None,
    ) -> None:
        self.category = category
        self.item = item
        self.path = path
        if category is not None:
            message = f"{category}/{item} uses nonexistent icon {icon_name}"
        else:
            message = f"could not find icon {icon_name} at {path}"
        super().__init__(icon_name, message)


class RenderError(IconPackError):
    """Rasterisation or write failure for one render job."""

    def __init__(self, job: RenderJob, cause: BaseException) -> None:
        self.job = job
        self.cause = cause
        super().__init__(f"failed to render {job.describe()}: {cause}")
