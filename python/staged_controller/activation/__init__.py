"""Stage middleware activation: argument resolution and definition factoring."""

from .decorators import create_stage_decorator
from .definitions import ActivationOptions, Handler, Middleware, MiddlewareDefinition
from .factory import factor, resolve_middleware, resolve_stage
from .parameters import parse_activation_arguments, resolve_parameters

__all__ = [
    "ActivationOptions",
    "Handler",
    "Middleware",
    "MiddlewareDefinition",
    "create_stage_decorator",
    "factor",
    "parse_activation_arguments",
    "resolve_middleware",
    "resolve_parameters",
    "resolve_stage",
]
