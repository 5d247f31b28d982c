"""Controller options read by the activation engine."""

import json
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import Verb

STAGED_CONTROLLER_ENV_VAR_PREFIX = "STAGED_CONTROLLER_"


class ControllerSettings(BaseModel):
    """Options owned by a controller.

    Options are addressable by field name or by their camelCase alias
    (``basePath``, ``basePathWithId``, ``del``), which is how handlers and
    activation calls look them up through ``get_option``. Unknown options are
    kept as extras so arbitrary controller options can be stored alongside.
    """

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, validate_assignment=True
    )

    base_path: str = Field(
        default="/",
        alias="basePath",
        description="Path of the resource collection",
    )
    base_path_with_id: Optional[str] = Field(
        default=None,
        alias="basePathWithId",
        description="Path of a single resource; derived from basePath when unset",
    )
    id_param: str = Field(
        default="id",
        alias="idParam",
        description="Name of the path parameter holding the resource identifier",
    )

    # Per-verb enablement
    head: bool = Field(default=True, description="Serve HEAD requests")
    get: bool = Field(default=True, description="Serve GET requests")
    put: bool = Field(default=True, description="Serve PUT requests")
    post: bool = Field(default=True, description="Serve POST requests")
    del_: bool = Field(default=True, alias="del", description="Serve DELETE requests")

    @model_validator(mode="before")
    @classmethod
    def load_from_env_vars(cls, data: Any) -> Dict[str, Any]:
        """Load options from STAGED_CONTROLLER_* environment variables.

        Only defined fields are read from the environment. Values are JSON
        decoded when they parse as JSON and kept as strings otherwise.
        Explicitly provided data takes precedence over environment variables.
        """
        env_config = {}
        for key, val in os.environ.items():
            if not key.startswith(STAGED_CONTROLLER_ENV_VAR_PREFIX):
                continue
            name = cls._field_name(
                key[len(STAGED_CONTROLLER_ENV_VAR_PREFIX) :], case_sensitive=False
            )
            if name is not None:
                env_config[name] = cls._decode(val)

        if isinstance(data, dict):
            provided = {cls._field_name(key) or key: val for key, val in data.items()}
            return {**env_config, **provided}
        return env_config

    @staticmethod
    def _decode(val: str) -> Any:
        try:
            return json.loads(val)
        except json.JSONDecodeError:
            # Bare strings such as /minerals
            return val

    @field_validator("base_path", "base_path_with_id")
    @classmethod
    def ensure_leading_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value.startswith("/"):
            value = "/" + value
        return value

    @classmethod
    def _field_name(cls, key: str, case_sensitive: bool = True) -> Optional[str]:
        for name, info in cls.model_fields.items():
            candidates = [name] if info.alias is None else [name, info.alias]
            if not case_sensitive:
                key, candidates = key.lower(), [c.lower() for c in candidates]
            if key in candidates:
                return name
        return None

    @property
    def instance_path(self) -> str:
        if self.base_path_with_id is not None:
            return self.base_path_with_id
        return f"{self.base_path.rstrip('/')}/{{{self.id_param}}}"

    def get_option(self, key: str) -> Any:
        """Read an option by field name, alias or extra key.

        Returns None for options that were never set.
        """
        name = self._field_name(key)
        if name is None:
            return (self.model_extra or {}).get(key)
        if name == "base_path_with_id":
            return self.instance_path
        return getattr(self, name)

    def set_option(self, key: str, value: Any) -> None:
        """Set an option by field name, alias or extra key."""
        name = self._field_name(key)
        if name is None:
            self.model_extra[key] = value
        else:
            setattr(self, name, value)

    def is_verb_enabled(self, verb: Verb) -> bool:
        return self.get_option(Verb(verb).value) is not False
