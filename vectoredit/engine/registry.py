"""Stage registry: every simplification stage is a standalone function registered via decorator.

Usage:
    @stage(id="S1.02", phase=Phase.REDUCTION, dependencies=["S1.01"])
    def corner_detection(ctx: SimplifyContext) -> None:
        for sp in ctx.subpaths:
            sp.corner_indices = detect(sp.reduced)

A run can ask for a subset of stages by id; the registry pulls in whatever
those stages depend on and orders the result so every stage runs after its
dependencies, ties broken by phase and then id.
"""

from __future__ import annotations

import enum
import heapq
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Collection

if TYPE_CHECKING:
    from vectoredit.engine.context import SimplifyContext

logger = logging.getLogger(__name__)


class Phase(enum.IntEnum):
    SAMPLING = 0
    REDUCTION = 1
    FITTING = 2
    REPAIR = 3


@dataclass
class StageSpec:
    id: str
    phase: Phase
    fn: Callable[["SimplifyContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""

    @property
    def sort_key(self) -> tuple[int, str]:
        return (int(self.phase), self.id)


class StageRegistry:
    """Stages by id, plus dependency-ordered selection."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def __contains__(self, stage_id: object) -> bool:
        return stage_id in self._stages

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.phase.name)

    def with_dependencies(self, stage_ids: Collection[str]) -> set[str]:
        """The requested ids plus everything they depend on, transitively.

        Raises KeyError for an id that is not registered.
        """
        unknown = sorted(sid for sid in stage_ids if sid not in self._stages)
        if unknown:
            raise KeyError(f"Unknown stage ids: {', '.join(unknown)}")

        selected: set[str] = set()
        pending = list(stage_ids)
        while pending:
            sid = pending.pop()
            if sid in selected or sid not in self._stages:
                continue
            selected.add(sid)
            pending.extend(self._stages[sid].dependencies)
        return selected

    def resolve_order(self, stage_ids: Collection[str] | None = None) -> list[StageSpec]:
        """Stages to run, dependencies first. ``None`` selects every stage.

        Dependencies on stages outside the selection are ignored, so a
        registry can hold a partial pipeline for testing.
        """
        ids = set(self._stages) if stage_ids is None else self.with_dependencies(stage_ids)
        specs = {sid: self._stages[sid] for sid in ids}

        waiting = {sid: sum(dep in specs for dep in spec.dependencies) for sid, spec in specs.items()}
        dependents: dict[str, list[str]] = {sid: [] for sid in specs}
        for sid, spec in specs.items():
            for dep in spec.dependencies:
                if dep in specs:
                    dependents[dep].append(sid)

        ready = [(specs[sid].sort_key, sid) for sid, n in waiting.items() if n == 0]
        heapq.heapify(ready)
        ordered: list[StageSpec] = []
        while ready:
            _, sid = heapq.heappop(ready)
            ordered.append(specs[sid])
            for nxt in dependents[sid]:
                waiting[nxt] -= 1
                if waiting[nxt] == 0:
                    heapq.heappush(ready, (specs[nxt].sort_key, nxt))

        if len(ordered) != len(specs):
            stuck = sorted(set(specs) - {s.id for s in ordered})
            raise ValueError(f"Circular dependency detected among: {stuck}")
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    phase: Phase,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: Callable[["SimplifyContext"], None]):
        _registry.register(
            StageSpec(id=id, phase=phase, fn=fn, dependencies=dependencies or [], description=description)
        )
        return fn

    return decorator
