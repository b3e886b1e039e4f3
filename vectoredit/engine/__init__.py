"""vectoredit path simplification engine."""

from vectoredit.engine.registry import stage, Phase, get_registry
from vectoredit.engine.context import SimplifyContext, SubpathContext
from vectoredit.engine.pipeline import Pipeline, register_stages

__all__ = [
    "stage",
    "Phase",
    "get_registry",
    "SimplifyContext",
    "SubpathContext",
    "Pipeline",
    "register_stages",
]
