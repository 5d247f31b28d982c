from enum import Enum
from typing import Tuple


# Request processing stages, declared in execution order
class Stage(str, Enum):
    INITIAL = "initial"
    REQUEST = "request"
    QUERY = "query"
    DOCUMENTS = "documents"
    FINALIZE = "finalize"

    @property
    def position(self) -> int:
        return STAGE_ORDER.index(self)


# Whether a request targets a single resource or the resource set
class Cardinality(str, Enum):
    INSTANCE = "instance"
    COLLECTION = "collection"


# HTTP verbs a controller can serve. DELETE is spelled "del" internally.
class Verb(str, Enum):
    HEAD = "head"
    GET = "get"
    PUT = "put"
    POST = "post"
    DEL = "del"

    @property
    def http_method(self) -> str:
        if self is Verb.DEL:
            return "DELETE"
        return self.value.upper()


STAGE_ORDER: Tuple[Stage, ...] = (
    Stage.INITIAL,
    Stage.REQUEST,
    Stage.QUERY,
    Stage.DOCUMENTS,
    Stage.FINALIZE,
)

# Stages callers may activate middleware for. "initial" is filled through the
# generic registration methods and "finalize" is reserved for response senders.
ACTIVATABLE_STAGES: Tuple[Stage, ...] = (Stage.REQUEST, Stage.QUERY, Stage.DOCUMENTS)

# Order used when a verb string is absent or "*"
ALL_VERBS: Tuple[Verb, ...] = (Verb.HEAD, Verb.GET, Verb.POST, Verb.PUT, Verb.DEL)

# Order used when howMany is absent
ALL_CARDINALITIES: Tuple[Cardinality, ...] = (
    Cardinality.INSTANCE,
    Cardinality.COLLECTION,
)

WILDCARD_VERBS = "*"

# Optional activation argument names, lowest priority first
ACTIVATION_PARAMETER_NAMES: Tuple[str, ...] = ("how_many", "verbs", "middleware")
