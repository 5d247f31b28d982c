import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Pattern, Tuple

from starlette.convertors import Convertor
from starlette.routing import compile_path

from ..activation.definitions import Handler


@lru_cache(maxsize=None)
def _compile(path: str, prefix: bool) -> Tuple[Pattern[str], Dict[str, Convertor]]:
    if prefix:
        path = path.rstrip("/")
    path_regex, _, convertors = compile_path(path)
    if prefix:
        # Match the path itself or anything below it
        path_regex = re.compile(path_regex.pattern[:-1] + "(?:/.*)?$")
    return path_regex, convertors


@dataclass(frozen=True)
class Binding:
    """A handler bound into a stage router.

    This immutable dataclass records where a handler applies. Paths use the
    Starlette ``{param}`` syntax (e.g. "/items/{id}", "/items/{id:int}").

    Attributes:
        handler: Callable invoked as ``handler(request, call_next)``
        method: Upper-case HTTP method, or None to match every method
        path: Path template, or None to match every path
        prefix: Match ``path`` as a prefix instead of a full path
    """

    handler: Handler
    method: Optional[str] = None
    path: Optional[str] = None
    prefix: bool = False

    def match(self, method: str, path: str) -> Optional[Dict[str, Any]]:
        """Match a request method and path.

        Returns:
            The converted path parameters when the binding applies, else None.
        """
        if self.method is not None and self.method != method.upper():
            return None
        if self.path is None:
            return {}

        path_regex, convertors = _compile(self.path, self.prefix)
        match = path_regex.match(path)
        if match is None:
            return None
        return {
            key: convertors[key].convert(value)
            for key, value in match.groupdict().items()
        }
