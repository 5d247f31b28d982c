"""Resource controller with staged middleware.

A ``StagedController`` organizes the handling of one resource into five
stages that always run in the same order::

    initial -> request -> query -> documents -> finalize

Handlers registered with the generic methods (``use``, ``head``, ``get``,
``post``, ``put``, ``delete``) go to the ``initial`` stage, so they precede
everything activated later. Handlers for the ``request``, ``query`` and
``documents`` stages are activated per verb and per cardinality::

    controller = StagedController(basePath="/vegetables")
    controller.request(check_headers)                   # every verb, both paths
    controller.query("instance", "get put", load_one)   # GET/PUT /vegetables/{id}
    controller.documents(True, "collection", "post", create)

Verbs disabled on the controller (``controller.set_option("post", False)``)
receive no activated middleware unless the activation passes the leading
override flag.
"""

from typing import Any, Callable, Iterable, Optional, Sequence, Union

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import Response

from .activation import (
    ActivationOptions,
    MiddlewareDefinition,
    create_stage_decorator,
    factor,
    parse_activation_arguments,
    resolve_middleware,
    resolve_stage,
)
from .activation.definitions import Handler, Middleware
from .config import ControllerSettings
from .constants import ACTIVATABLE_STAGES, Cardinality, Stage
from .exceptions import ArgumentError, StageNotActivatableError
from .logging_config import logger
from .pipeline import CallNext, Pipeline

ControllerDecorator = Callable[["StagedController"], Any]


def _flatten_handlers(handlers: Sequence[Middleware]) -> list:
    flattened = []
    for handler in handlers:
        flattened.extend(resolve_middleware(handler))
    if not flattened:
        logger.error("No handlers supplied")
        raise ArgumentError("Too few arguments")
    return flattened


class StagedController:
    """Controller that binds handlers into a fixed five-stage pipeline."""

    def __init__(
        self, settings: Optional[ControllerSettings] = None, **options: Any
    ) -> None:
        """Create a controller.

        Args:
            settings: Controller options. When omitted, one is built from
                      ``options`` (and STAGED_CONTROLLER_* environment variables).
            **options: Option values such as ``basePath`` or ``post=False``.
                       Ignored when ``settings`` is given.
        """
        self.settings = settings if settings is not None else ControllerSettings(**options)
        self.pipeline = Pipeline()
        logger.info(
            f"Created staged controller for {self.settings.get_option('basePath')}"
        )

    # __Options__

    def get_option(self, key: str) -> Any:
        return self.settings.get_option(key)

    def set_option(self, key: str, value: Any) -> "StagedController":
        self.settings.set_option(key, value)
        return self

    # __Initial stage registration__

    def on_use(self, *args: Any) -> "StagedController":
        """Bind handlers for every method, with an optional leading path prefix."""
        path = None
        if args and isinstance(args[0], str):
            path, args = args[0], args[1:]
        self.pipeline.stage(Stage.INITIAL).add_middleware(
            _flatten_handlers(args), path=path
        )
        return self

    def on_route(
        self, method: str, path: str, *handlers: Middleware
    ) -> "StagedController":
        self.pipeline.stage(Stage.INITIAL).add_route(
            method, path, _flatten_handlers(handlers)
        )
        return self

    def on_head(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_route("HEAD", path, *handlers)

    def on_get(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_route("GET", path, *handlers)

    def on_post(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_route("POST", path, *handlers)

    def on_put(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_route("PUT", path, *handlers)

    def on_delete(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_route("DELETE", path, *handlers)

    # __Generic registration facade__

    def use(self, *args: Any) -> "StagedController":
        return self.on_use(*args)

    def head(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_head(path, *handlers)

    def get(self, *args: Any) -> Any:
        """Read an option (one argument) or register GET handlers on ``initial``."""
        if len(args) == 1:
            return self.get_option(args[0])
        return self.on_get(*args)

    def post(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_post(path, *handlers)

    def put(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_put(path, *handlers)

    def delete(self, path: str, *handlers: Middleware) -> "StagedController":
        return self.on_delete(path, *handlers)

    # __Activation__

    def activate_definition(self, definition: MiddlewareDefinition) -> None:
        """Bind one definition into its stage, unless its verb is disabled.

        Paths are read from the controller options at call time.
        """
        if not definition.override and not self.settings.is_verb_enabled(definition.verb):
            logger.debug(
                f"[{definition.stage.value.upper()}] Skipping {definition.how_many.value} "
                f"{definition.verb.value}: verb disabled"
            )
            return

        if definition.how_many is Cardinality.INSTANCE:
            path = self.get_option("basePathWithId")
        else:
            path = self.get_option("basePath")

        self.pipeline.stage(definition.stage).add_route(
            definition.verb.http_method, path, definition.middleware
        )
        logger.info(
            f"[{definition.stage.value.upper()}] Activated "
            f"{definition.verb.http_method} {path} ({len(definition.middleware)} handlers)"
        )

    def _activate_options(self, options: ActivationOptions) -> "StagedController":
        for definition in factor(options):
            self.activate_definition(definition)
        return self

    def activate(
        self,
        stage: Union[Stage, str],
        middleware: Middleware,
        *,
        how_many: Optional[Union[Cardinality, str]] = None,
        verbs: Optional[str] = None,
        override: bool = False,
    ) -> "StagedController":
        """Activate middleware for the request, query or documents stage.

        Raises:
            StageNotActivatableError: For the initial and finalize stages
            ConfigError: For any invalid option, see ``factor``
        """
        resolved = resolve_stage(stage)
        if resolved not in ACTIVATABLE_STAGES:
            logger.error(f"Stage {resolved.value!r} cannot be activated directly")
            raise StageNotActivatableError(resolved.value)
        return self._activate_options(
            ActivationOptions(
                middleware=middleware,
                stage=resolved,
                how_many=how_many,
                verbs=verbs,
                override=override,
            )
        )

    def request(self, *args: Any) -> "StagedController":
        """Activate request-stage middleware: ``([override,] [howMany,] [verbs,] middleware)``."""
        return self._activate_options(parse_activation_arguments(Stage.REQUEST, args))

    def query(self, *args: Any) -> "StagedController":
        """Activate query-stage middleware: ``([override,] [howMany,] [verbs,] middleware)``."""
        return self._activate_options(parse_activation_arguments(Stage.QUERY, args))

    def documents(self, *args: Any) -> "StagedController":
        """Activate documents-stage middleware: ``([override,] [howMany,] [verbs,] middleware)``."""
        return self._activate_options(parse_activation_arguments(Stage.DOCUMENTS, args))

    def stage_middleware(self, stage: Union[Stage, str], func: Optional[Handler] = None, **kwargs: Any):
        """Decorator form of ``activate``.

        Usage::

            @controller.stage_middleware("query", verbs="get")
            async def build_query(request, call_next):
                ...
        """
        return create_stage_decorator(stage, self.activate)(func, **kwargs)

    def finalize_with(self, *handlers: Middleware) -> "StagedController":
        """Bind the terminal response senders for every enabled verb and path."""
        options = ActivationOptions(
            middleware=_flatten_handlers(handlers), stage=Stage.FINALIZE
        )
        return self._activate_options(options)

    def apply(self, *decorators: ControllerDecorator) -> "StagedController":
        """Call each controller decorator with this controller, in order."""
        for decorator in decorators:
            logger.debug(
                f"Applying controller decorator {getattr(decorator, '__name__', repr(decorator))}"
            )
            decorator(self)
        return self

    # __Request handling__

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        """HTTP middleware entry point running the staged pipeline."""
        return await self.pipeline.run(request, call_next)

    def install(self, app: FastAPI) -> FastAPI:
        """Register the pipeline as an HTTP middleware on a FastAPI app.

        Note: Only call during startup, before the app starts serving
        """
        app.middleware("http")(self.dispatch)
        logger.info(f"Installed staged controller for {self.get_option('basePath')}")
        return app

    def handlers_for(self, stage: Union[Stage, str]) -> Iterable[Handler]:
        return [binding.handler for binding in self.pipeline.stage(stage).bindings]
