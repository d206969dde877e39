"""Render orchestrator: fan every render job out over a worker pool.

All inputs are loaded and validated before the pool starts. The jobs are one
flat list, so the pool balances across palettes, themes, categories and
scales alike. The first failure stops any work not yet started and is
reported with the job that caused it.
"""

from __future__ import annotations

import logging
import shutil
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path

from iconpack.engine.jobs import RenderJob, enumerate_jobs
from iconpack.engine.registry import IconRegistry
from iconpack.engine.resolver import fills_for_item
from iconpack.errors import IconPackError, MissingIconError, RenderError
from iconpack.svg.scene import serialize_scene
from iconpack.utils.rasterizer import render_svg_to_png

logger = logging.getLogger(__name__)

THEME_DESCRIPTOR_NAME = "index.theme"


@dataclass(frozen=True)
class RenderFailure:
    job: RenderJob
    error: BaseException


@dataclass(frozen=True)
class RenderOutcome:
    """Either every job succeeded, or the first failure with its job."""

    total: int
    written: int
    elapsed_ms: float
    failure: RenderFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def raise_for_failure(self) -> None:
        if self.failure is None:
            return
        error = self.failure.error
        if isinstance(error, IconPackError):
            raise error
        raise RenderError(self.failure.job, error) from error


def first_failure(futures: dict[Future, RenderJob]) -> RenderFailure | None:
    """The failed future whose job comes earliest in submission order."""
    for future, job in futures.items():
        if future.done() and not future.cancelled() and future.exception() is not None:
            return RenderFailure(job=job, error=future.exception())
    return None


class RenderOrchestrator:
    def __init__(self, registry: IconRegistry, workers: int | None = None) -> None:
        self.registry = registry
        self.workers = workers

    def render_job(self, job: RenderJob, out_root: Path) -> Path:
        """Resolve fills, build the scene, rasterise and write one PNG."""
        try:
            layers = self.registry.layers_for(job.icon_name)
            if layers is None:
                raise MissingIconError(job.icon_name, category=job.category, item=job.item)

            fills = fills_for_item(job.palette, job.category, job.item, self.registry.tag_system)
            png = render_svg_to_png(serialize_scene(layers, fills), job.scale.pixel_size)

            out_path = job.output_path(out_root)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(png)
        except IconPackError:
            raise
        except Exception as e:
            raise RenderError(job, e) from e

        logger.debug("Rendered %s", job.describe())
        return out_path

    def prepare_output(self, out_root: Path, theme_descriptor: Path | None = None) -> None:
        """Create each palette/theme directory and copy the theme descriptor into it."""
        for palette in self.registry.themed_palettes():
            theme_dir = Path(out_root) / palette.name / palette.theme.value
            theme_dir.mkdir(parents=True, exist_ok=True)
            if theme_descriptor is not None and theme_descriptor.is_file():
                shutil.copyfile(theme_descriptor, theme_dir / THEME_DESCRIPTOR_NAME)

    def run(self, out_root: Path, theme_descriptor: Path | None = None) -> RenderOutcome:
        start = time.perf_counter()

        self.registry.validate()
        jobs = enumerate_jobs(self.registry)
        self.prepare_output(out_root, theme_descriptor)

        logger.info(
            "Rendering %d icons for %d palette themes",
            len(jobs),
            len(self.registry.themed_palettes()),
        )

        failure: RenderFailure | None = None
        pool = ThreadPoolExecutor(max_workers=self.workers)
        futures: dict[Future, RenderJob] = {}
        try:
            futures = {pool.submit(self.render_job, job, out_root): job for job in jobs}
            wait(futures, return_when=FIRST_EXCEPTION)
            failure = first_failure(futures)
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

        written = sum(1 for f in futures if f.done() and not f.cancelled() and f.exception() is None)
        elapsed = (time.perf_counter() - start) * 1000

        if failure is not None:
            logger.error("Rendering FAILED after %d/%d icons: %s", written, len(jobs), failure.error)
        else:
            logger.info("Rendering complete: %d icons in %.0fms", written, elapsed)

        return RenderOutcome(total=len(jobs), written=written, elapsed_ms=elapsed, failure=failure)


def compile_pack(
    registry: IconRegistry,
    out_root: Path,
    workers: int | None = None,
    theme_descriptor: Path | None = None,
) -> RenderOutcome:
    return RenderOrchestrator(registry, workers=workers).run(Path(out_root), theme_descriptor)
