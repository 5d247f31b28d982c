from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union

from ..constants import Cardinality, Stage, Verb

Handler = Callable[..., Any]
Middleware = Union[Handler, Sequence[Handler]]


@dataclass
class ActivationOptions:
    """Named form of one activation call.

    Produced from positional arguments by ``parse_activation_arguments`` (or
    built directly by the named ``activate`` entry point) and consumed once by
    ``factor``. Nothing here is validated yet; ``factor`` does that.

    Attributes:
        middleware: A handler or an ordered sequence of handlers
        stage: Stage the middleware runs in
        how_many: "instance", "collection" or None for both
        verbs: Whitespace separated verb tokens, "*" or None for all verbs
        override: Skip the implicit exclusions and per-verb enablement checks
    """

    middleware: Any
    stage: Optional[Union[Stage, str]] = None
    how_many: Optional[Union[Cardinality, str]] = None
    verbs: Optional[str] = None
    override: bool = False


@dataclass(frozen=True)
class MiddlewareDefinition:
    """One fully resolved (stage, cardinality, verb) binding request.

    Definitions are immutable and compare by value. Two equal definitions
    activated twice produce two bindings.
    """

    stage: Stage
    how_many: Cardinality
    verb: Verb
    middleware: Tuple[Handler, ...]
    override: bool = False
