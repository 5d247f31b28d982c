"""Stage routers and the pipeline that chains them."""

import inspect
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from starlette.requests import Request
from starlette.responses import Response

from ..activation.definitions import Handler
from ..constants import STAGE_ORDER, Stage
from ..exceptions import UnrecognizedStageError
from ..logging_config import logger
from .binding import Binding

CallNext = Callable[[Request], Awaitable[Response]]


class StageRouter:
    """Ordered handler bindings for a single stage."""

    def __init__(self, stage: Stage) -> None:
        self.stage = stage
        self._bindings: List[Binding] = []

    def bind(self, binding: Binding) -> None:
        """Append a binding. Bindings run in the order they were added."""
        self._bindings.append(binding)
        logger.debug(
            f"[{self.stage.value.upper()}] Bound "
            f"{binding.method or '*'} {binding.path or '*'} -> "
            f"{getattr(binding.handler, '__name__', repr(binding.handler))}"
        )

    def add_route(
        self, method: Optional[str], path: Optional[str], handlers: Iterable[Handler]
    ) -> None:
        """Bind handlers to an exact method and path."""
        for handler in handlers:
            self.bind(
                Binding(
                    handler=handler,
                    method=method.upper() if method else None,
                    path=path,
                )
            )

    def add_middleware(
        self, handlers: Iterable[Handler], path: Optional[str] = None
    ) -> None:
        """Bind handlers for every method, optionally below a path prefix."""
        if path is not None and path.rstrip("/") == "":
            path = None
        for handler in handlers:
            self.bind(Binding(handler=handler, path=path, prefix=path is not None))

    @property
    def bindings(self) -> Tuple[Binding, ...]:
        return tuple(self._bindings)

    def matching(self, method: str, path: str) -> List[Tuple[Binding, Dict[str, Any]]]:
        matches = []
        for binding in self._bindings:
            path_params = binding.match(method, path)
            if path_params is not None:
                matches.append((binding, path_params))
        return matches

    def clear(self) -> None:
        self._bindings.clear()

    def __len__(self) -> int:
        return len(self._bindings)


class Pipeline:
    """The five stage routers, run one after the other for every request.

    Stage order is fixed by ``STAGE_ORDER``. Within a stage, handlers run in
    the order they were bound. Each handler receives ``(request, call_next)``
    and must await ``call_next(request)`` to continue the chain; once every
    matching handler has continued, the host application's ``call_next``
    runs.
    """

    def __init__(self) -> None:
        self._routers: Dict[Stage, StageRouter] = {
            stage: StageRouter(stage) for stage in STAGE_ORDER
        }

    def stage(self, stage: Union[Stage, str]) -> StageRouter:
        try:
            return self._routers[Stage(stage)]
        except ValueError:
            raise UnrecognizedStageError(stage) from None

    @property
    def routers(self) -> Tuple[StageRouter, ...]:
        return tuple(self._routers[stage] for stage in STAGE_ORDER)

    def matching(self, method: str, path: str) -> List[Tuple[Binding, Dict[str, Any]]]:
        """All bindings that apply to a request, in execution order."""
        matches = []
        for router in self.routers:
            matches.extend(router.matching(method, path))
        return matches

    def clear(self) -> None:
        for router in self.routers:
            router.clear()

    async def run(self, request: Request, call_next: CallNext) -> Response:
        """Run every matching handler for the request, then ``call_next``."""
        chain = self.matching(request.method, request.url.path)
        logger.debug(
            f"{len(chain)} handlers matched {request.method} {request.url.path}"
        )
        original_path_params = request.scope.get("path_params", {})

        async def call_at(index: int, next_request: Request) -> Response:
            if index == len(chain):
                next_request.scope["path_params"] = original_path_params
                return await call_next(next_request)

            binding, path_params = chain[index]
            next_request.scope["path_params"] = path_params
            result: Any = binding.handler(next_request, partial(call_at, index + 1))
            if inspect.isawaitable(result):
                result = await result
            return result

        return await call_at(0, request)
