"""Resolution of positionally optional activation arguments.

Activation calls take up to four positional arguments::

    controller.query(handler)
    controller.query("get", handler)
    controller.query("instance", "get put", handler)
    controller.query(True, "collection", "post", handler)

Optional arguments fill from the right, so the last argument is always the
middleware. A leading bool is the override flag and is never counted as one
of the named arguments.
"""

from typing import Any, Dict, Sequence, Union

from ..constants import ACTIVATION_PARAMETER_NAMES, Stage
from ..exceptions import ArgumentError
from ..logging_config import logger
from .definitions import ActivationOptions


def resolve_parameters(
    args: Sequence[Any],
    names: Sequence[str] = ACTIVATION_PARAMETER_NAMES,
    required: int = 1,
) -> Dict[str, Any]:
    """Bind positional arguments to names, filling from the right.

    Args:
        args: Positional arguments as passed by the caller. None values are
              treated as absent and dropped before binding.
        names: Argument names from lowest to highest priority. The last name
               always receives the last present argument.
        required: Minimum number of present arguments, not counting a
                  leading override flag.

    Returns:
        Dict with an ``override`` key plus one key per bound name. Names left
        unfilled on the left are omitted.

    Raises:
        ArgumentError: If fewer than ``required`` or more than ``len(names)``
                       arguments are present.
    """
    values = list(args)
    override = False
    if values and isinstance(values[0], bool):
        override = values.pop(0)

    present = [value for value in values if value is not None]
    if len(present) < required:
        logger.error(
            f"Too few arguments: expected at least {required}, got {len(present)}"
        )
        raise ArgumentError("Too few arguments")
    if len(present) > len(names):
        logger.error(
            f"Too many arguments: expected at most {len(names)}, got {len(present)}"
        )
        raise ArgumentError("Too many arguments")

    resolved: Dict[str, Any] = dict(zip(names[len(names) - len(present) :], present))
    resolved["override"] = override
    return resolved


def parse_activation_arguments(
    stage: Union[Stage, str], args: Sequence[Any]
) -> ActivationOptions:
    """Turn the positional arguments of an activation call into options."""
    resolved = resolve_parameters(args)
    logger.debug(f"Resolved {stage} activation arguments: {sorted(resolved)}")
    return ActivationOptions(stage=stage, **resolved)
