"""Icon pack render engine."""

from iconpack.engine.jobs import RenderJob, enumerate_jobs
from iconpack.engine.orchestrator import RenderOrchestrator, RenderOutcome, compile_pack
from iconpack.engine.registry import IconRegistry
from iconpack.engine.resolver import fills_for_item, resolve_tag_fill

__all__ = [
    "RenderJob",
    "enumerate_jobs",
    "RenderOrchestrator",
    "RenderOutcome",
    "compile_pack",
    "IconRegistry",
    "fills_for_item",
    "resolve_tag_fill",
]
