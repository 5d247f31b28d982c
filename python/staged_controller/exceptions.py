"""Exceptions raised while configuring a staged controller.

Every error here is raised synchronously while the controller is being set
up. None of them are caught inside the package: an invalid pipeline must
never reach the point of serving requests.
"""


class StagedControllerError(Exception):
    """Base class for all staged controller errors."""


class ArgumentError(StagedControllerError, TypeError):
    """Wrong number of positional arguments passed to an activation call."""


class ConfigError(StagedControllerError, ValueError):
    """Base class for invalid stage middleware configuration."""


class MissingStageError(ConfigError):
    """Raised when a stage was not supplied."""

    def __init__(self) -> None:
        super().__init__("Must supply stage")


class UnrecognizedStageError(ConfigError):
    """Raised when a stage name is not one of the fixed stages."""

    def __init__(self, stage: object) -> None:
        self.stage = stage
        super().__init__(f"Unrecognized stage: {stage!r}")


class StageNotActivatableError(ConfigError):
    """Raised when activating middleware on a stage reserved for the controller."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"Stage {stage!r} cannot be activated directly")


class UnrecognizedVerbError(ConfigError):
    """Raised when a verb token is not one of head, get, put, post or del."""

    def __init__(self, verb: str) -> None:
        self.verb = verb
        super().__init__(f"Unrecognized verb: {verb!r}")


class UnrecognizedCardinalityError(ConfigError):
    """Raised when howMany is neither instance nor collection."""

    def __init__(self, how_many: object) -> None:
        self.how_many = how_many
        super().__init__(f"Unrecognized howMany: {how_many!r}")


class InvalidMiddlewareTypeError(ConfigError):
    """Raised when middleware is not a callable or a sequence of callables."""

    def __init__(self, middleware: object) -> None:
        self.middleware = middleware
        super().__init__(
            f"Middleware must be an array or function, got {type(middleware).__name__}"
        )


class InvalidStageVerbCombinationError(ConfigError):
    """Raised when POST is explicitly requested for the query stage without override."""

    def __init__(self, stage: str, verb: str) -> None:
        self.stage = stage
        self.verb = verb
        super().__init__("Query stage not executed for POST")
