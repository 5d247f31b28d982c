"""Fixed five-stage handler pipeline."""

from .binding import Binding
from .router import CallNext, Pipeline, StageRouter

__all__ = [
    "Binding",
    "CallNext",
    "Pipeline",
    "StageRouter",
]
