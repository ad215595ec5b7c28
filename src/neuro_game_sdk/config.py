from __future__ import annotations

"""Configuration, action schema models, and file-loading utilities."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .utils import jsonio

URL_ENV_VAR = "NEURO_SDK_WS_URL"
DEFAULT_URL = "ws://localhost:8000"


class Action(BaseModel):
    """A registerable command Neuro can execute whenever she wants.

    ``name`` is the unique key and by convention a lowercase string with
    words separated by underscores or dashes. The parameter schema is read
    from and written to the ``schema`` key; in Python it lives on
    ``schema_``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")

    @field_validator("schema_")
    @classmethod
    def _check_schema(cls, value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not value:
            return value
        if value.get("type", "object") != "object":
            raise ValueError("Top-level action schema must have type 'object'")
        try:
            Draft7Validator.check_schema(value)
        except SchemaError as exc:
            raise ValueError(f"Invalid JSON schema: {exc.message}") from exc
        return value

    @property
    def has_schema(self) -> bool:
        return bool(self.schema_)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ActionManifestModel(BaseModel):
    """A file-backed list of actions."""

    actions: List[Action] = Field(default_factory=list)


def _default_url() -> str:
    return os.getenv(URL_ENV_VAR) or DEFAULT_URL


class ClientSettings(BaseModel):
    """Construction-time settings for :class:`~neuro_game_sdk.NeuroClient`."""

    url: str = Field(default_factory=_default_url)
    game: str = Field(min_length=1)
    dev_mode: bool = False
    validate_actions: bool = True
    transport: str = "websocket"
    log_level: str = "INFO"


class SettingsNotFoundError(FileNotFoundError):
    """Raised when a settings file cannot be located."""


class ActionManifestNotFoundError(FileNotFoundError):
    """Raised when an action manifest cannot be located."""


def load_settings(path: Path, **overrides: Any) -> ClientSettings:
    """Load client settings from a YAML or JSON file.

    Keyword overrides whose value is not ``None`` replace file values.
    """

    if not path.exists():
        raise SettingsNotFoundError(f"Settings file not found at {path}")
    data = jsonio.read_structured(path) or {}
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ClientSettings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings in {path}: {exc}") from exc


def load_actions(path: Path) -> List[Action]:
    """Read an action manifest, either a bare list or ``{actions: [...]}``."""

    if not path.exists():
        raise ActionManifestNotFoundError(f"Action manifest not found at {path}")
    data = jsonio.read_structured(path)
    if isinstance(data, list):
        data = {"actions": data}
    try:
        return ActionManifestModel.model_validate(data or {}).actions
    except ValidationError as exc:
        raise ValueError(f"Invalid action manifest in {path}: {exc}") from exc


def find_action(actions: List[Action], name: str) -> Optional[Action]:
    return next((action for action in actions if action.name == name), None)
