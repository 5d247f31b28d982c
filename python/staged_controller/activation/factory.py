"""Expansion of activation options into middleware definitions.

``factor`` validates one ``ActivationOptions`` record and expands it into one
``MiddlewareDefinition`` per (verb, cardinality) pair. Missing verbs mean all
five verbs and a missing cardinality means both.

Query-stage middleware never runs for POST (there is no existing resource to
query) nor for a collection-level PUT. Those pairs are dropped silently when
they come from the defaults, so ``controller.query(handler)`` is always safe.
Asking for POST by name at the query stage is a configuration error instead.
Passing ``override=True`` disables both behaviors.
"""

from typing import Any, Iterable, List, Optional, Tuple, Union

from ..constants import (
    ALL_CARDINALITIES,
    ALL_VERBS,
    WILDCARD_VERBS,
    Cardinality,
    Stage,
    Verb,
)
from ..exceptions import (
    InvalidMiddlewareTypeError,
    InvalidStageVerbCombinationError,
    MissingStageError,
    UnrecognizedCardinalityError,
    UnrecognizedStageError,
    UnrecognizedVerbError,
)
from ..logging_config import logger
from .definitions import ActivationOptions, Handler, MiddlewareDefinition


def resolve_stage(stage: Optional[Union[Stage, str]]) -> Stage:
    if not stage:
        logger.error("Stage middleware configured without a stage")
        raise MissingStageError()
    try:
        return Stage(stage.lower() if isinstance(stage, str) else stage)
    except ValueError:
        logger.error(f"Unrecognized stage: {stage!r}")
        raise UnrecognizedStageError(stage) from None


def resolve_verbs(verbs: Optional[Union[str, Iterable[str]]]) -> Tuple[List[Verb], bool]:
    """Parse a verb string into verbs.

    Returns:
        The verbs, plus whether the caller named them explicitly (as opposed
        to leaving them out or passing "*").
    """
    if isinstance(verbs, str):
        tokens = verbs.lower().split()
    elif verbs is None:
        tokens = []
    elif isinstance(verbs, (list, tuple)):
        tokens = [token.lower() if isinstance(token, str) else token for token in verbs]
    else:
        logger.error(f"Unrecognized verbs argument: {verbs!r}")
        raise UnrecognizedVerbError(verbs)

    if not tokens or tokens == [WILDCARD_VERBS]:
        return list(ALL_VERBS), False

    resolved = []
    for token in tokens:
        try:
            resolved.append(Verb(token))
        except ValueError:
            logger.error(f"Unrecognized verb {token!r} in {verbs!r}")
            raise UnrecognizedVerbError(token) from None
    return resolved, True


def resolve_how_many(
    how_many: Optional[Union[Cardinality, str]]
) -> Optional[Cardinality]:
    if how_many is None:
        return None
    try:
        return Cardinality(how_many)
    except ValueError:
        logger.error(f"Unrecognized howMany: {how_many!r}")
        raise UnrecognizedCardinalityError(how_many) from None


def resolve_middleware(middleware: Any) -> Tuple[Handler, ...]:
    """Normalize a handler or a list/tuple of handlers to a tuple."""
    if callable(middleware):
        return (middleware,)
    if isinstance(middleware, (list, tuple)) and all(map(callable, middleware)):
        return tuple(middleware)
    logger.error(f"Invalid middleware type: {type(middleware).__name__}")
    raise InvalidMiddlewareTypeError(middleware)


def is_implicitly_excluded(
    stage: Stage, how_many: Cardinality, verb: Verb, override: bool
) -> bool:
    """Whether a (stage, cardinality, verb) pair is dropped from default expansion."""
    if override or stage is not Stage.QUERY:
        return False
    if verb is Verb.POST:
        return True
    return how_many is Cardinality.COLLECTION and verb is Verb.PUT


def factor(options: ActivationOptions) -> List[MiddlewareDefinition]:
    """Expand activation options into middleware definitions.

    Args:
        options: The activation options to expand

    Returns:
        Definitions ordered by verb, then instance before collection

    Raises:
        MissingStageError: If no stage was given
        UnrecognizedStageError: If the stage is not one of the fixed stages
        UnrecognizedVerbError: If a verb token is not head, get, put, post or del
        UnrecognizedCardinalityError: If howMany is not instance or collection
        InvalidMiddlewareTypeError: If middleware is not a handler or list of handlers
        InvalidStageVerbCombinationError: If POST is named at the query stage
                                          without override
    """
    stage = resolve_stage(options.stage)
    verbs, explicit = resolve_verbs(options.verbs)
    how_many = resolve_how_many(options.how_many)
    middleware = resolve_middleware(options.middleware)
    override = bool(options.override)

    if not override and stage is Stage.QUERY and explicit and Verb.POST in verbs:
        logger.error(
            f"POST requested for the query stage without override: {options.verbs!r}"
        )
        raise InvalidStageVerbCombinationError(stage.value, Verb.POST.value)

    cardinalities = ALL_CARDINALITIES if how_many is None else (how_many,)

    definitions = []
    for verb in verbs:
        for cardinality in cardinalities:
            if is_implicitly_excluded(stage, cardinality, verb, override):
                logger.debug(
                    f"Skipping {stage.value} middleware for {cardinality.value} {verb.value}"
                )
                continue
            definitions.append(
                MiddlewareDefinition(
                    stage=stage,
                    how_many=cardinality,
                    verb=verb,
                    middleware=middleware,
                    override=override,
                )
            )

    logger.debug(
        f"Factored {len(definitions)} {stage.value} middleware definitions"
    )
    return definitions
