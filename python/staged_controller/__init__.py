"""Staged middleware for resource controllers.

Public entry points:
- Controller: from staged_controller import StagedController
- Expansion only: from staged_controller.activation import factor, resolve_parameters
"""

from .activation import ActivationOptions, MiddlewareDefinition, factor, resolve_parameters
from .config import ControllerSettings
from .constants import STAGE_ORDER, Cardinality, Stage, Verb
from .controller import StagedController
from .exceptions import (
    ArgumentError,
    ConfigError,
    InvalidMiddlewareTypeError,
    InvalidStageVerbCombinationError,
    MissingStageError,
    StageNotActivatableError,
    UnrecognizedCardinalityError,
    UnrecognizedStageError,
    UnrecognizedVerbError,
)

__version__ = "0.1.0"

__all__ = [
    "STAGE_ORDER",
    "ActivationOptions",
    "ArgumentError",
    "Cardinality",
    "ConfigError",
    "ControllerSettings",
    "InvalidMiddlewareTypeError",
    "InvalidStageVerbCombinationError",
    "MiddlewareDefinition",
    "MissingStageError",
    "Stage",
    "StageNotActivatableError",
    "StagedController",
    "UnrecognizedCardinalityError",
    "UnrecognizedStageError",
    "UnrecognizedVerbError",
    "Verb",
    "factor",
    "resolve_parameters",
]
