"""Pipeline orchestrator: runs simplification stages in dependency order."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time
from typing import Collection

from vectoredit.engine.context import SimplifyContext
from vectoredit.engine.registry import StageRegistry, get_registry

logger = logging.getLogger(__name__)

_STAGE_PACKAGES = ["stage0", "stage1", "stage2", "stage3"]


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    for package_name in _STAGE_PACKAGES:
        full_name = f"vectoredit.engine.{package_name}"
        package = importlib.import_module(full_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{full_name}.{module_name}")


class Pipeline:
    """Orchestrates the stage pipeline for one path."""

    def __init__(self, registry: StageRegistry | None = None) -> None:
        if registry is None:
            register_stages()
            registry = get_registry()
        self.registry = registry

    def run(self, ctx: SimplifyContext, stage_ids: Collection[str] | None = None) -> SimplifyContext:
        """Run the selected stages (all by default) and their dependencies.

        A stage that raises is recorded in ``ctx.errors`` and the remaining
        stages still run; callers decide what a failed run means.
        """
        start = time.perf_counter()
        ordered = self.registry.resolve_order(stage_ids)

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
                continue
            ctx.completed_stages.add(spec.id)
            logger.debug("  %s completed in %.1fms", spec.id, (time.perf_counter() - t0) * 1000)

        logger.debug(
            "Pipeline complete: %d/%d stages in %.1fms",
            len(ctx.completed_stages),
            len(ordered),
            (time.perf_counter() - start) * 1000,
        )
        return ctx
