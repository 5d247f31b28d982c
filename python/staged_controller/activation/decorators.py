"""Decorator form of stage middleware activation."""

from typing import Any, Callable, Optional, Union

from ..constants import Cardinality, Stage
from ..logging_config import logger


def create_stage_decorator(
    stage: Union[Stage, str],
    activate: Callable[..., Any],
) -> Callable:
    """Create a decorator that activates the decorated function as stage middleware.

    Args:
        stage: The stage the decorated functions run in (e.g. 'request', 'query').
        activate: Named activation entry point, called as
                  ``activate(stage, func, how_many=..., verbs=..., override=...)``.
                  Usually ``StagedController.activate``.

    Returns:
        A decorator that immediately activates the decorated function and
        returns it unchanged.
    """

    def stage_decorator(
        func: Optional[Callable[..., Any]] = None,
        *,
        how_many: Optional[Union[Cardinality, str]] = None,
        verbs: Optional[str] = None,
        override: bool = False,
    ) -> Callable[..., Any]:
        """Activate middleware with optional cardinality, verbs and override.

        Supports both @decorator and @decorator(param=value) syntax.
        """
        # Handle both @decorator and @decorator() syntax
        if func is None:

            def wrapper(f: Callable[..., Any]) -> Callable[..., Any]:
                return stage_decorator(
                    f, how_many=how_many, verbs=verbs, override=override
                )

            return wrapper

        logger.debug(
            "[%s] stage decorator called on function: %s",
            str(getattr(stage, "value", stage)).upper(),
            getattr(func, "__name__", repr(func)),
        )

        activate(stage, func, how_many=how_many, verbs=verbs, override=override)

        logger.info(
            "[%s] Stage middleware activated: %s (howMany=%s, verbs=%s, override=%s)",
            str(getattr(stage, "value", stage)).upper(),
            getattr(func, "__name__", repr(func)),
            how_many,
            verbs,
            override,
        )

        return func

    return stage_decorator
