# =============================================================================
# core/config/section.py - ConfigSection Base Class
# =============================================================================
# Every block of AppConfig ([server], [database], [cors], ...) is a dataclass
# deriving from ConfigSection. The loader only talks to this interface, so a
# new section needs no change to the merge logic:
#
#   section_name()        - name used in the file, env vars and errors
#   load_from_value(raw)  - lenient merge of a parsed TOML table
#   load_from_env(raw)    - same, from environment variable text
#   validate()            - semantic checks, run once after the merge
#
# Merging is lenient: unknown keys and keys whose value has the
# wrong type are skipped (logged at DEBUG) and the previous value is kept.
# =============================================================================

import json
import logging
import types
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import FrozenInstanceError, asdict, fields
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


def _base_type(hint: Any) -> Any:
    """Strip Annotated[...] and Optional[...] down to the value type."""
    if get_origin(hint) is Annotated:
        hint = get_args(hint)[0]
    if get_origin(hint) in (Union, types.UnionType):
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return _base_type(args[0])
    return hint


def _is_list(hint: Any) -> bool:
    return get_origin(_base_type(hint)) is list


def coerce_env_text(hint: Any, raw: str) -> Any:
    """
    Turn environment variable text into a value for a field of type `hint`.

    Scalars go through pydantic's string parsing (bool words such as "on" or
    "no", integer text, field constraints). Text that can't be converted is
    returned unchanged; the strict type check in load_from_value then drops it.
    """
    if _is_list(hint):
        text = raw.strip()
        if text.startswith("["):
            try:
                return json.loads(text)
            except json.JSONDecodeError:
                return raw
        # Comma-separated: "GET, POST" -> ["GET", "POST"]
        return [item.strip() for item in text.split(",") if item.strip()]

    if _base_type(hint) is str:
        return raw

    try:
        return TypeAdapter(hint).validate_strings(raw.strip())
    except ValidationError:
        return raw


class ConfigSection(ABC):
    """
    Base class for configuration sections.

    Subclasses are dataclasses with a default for every field and a
    `name` class attribute.
    """

    name: ClassVar[str] = ""

    _frozen: ClassVar[bool] = False

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def section_name(self) -> str:
        return self.name

    # -------------------------------------------------------------------------
    # Merging
    # -------------------------------------------------------------------------

    @classmethod
    def _field_types(cls) -> dict[str, Any]:
        hints = get_type_hints(cls, include_extras=True)
        return {f.name: hints[f.name] for f in fields(cls)}

    def load_from_value(self, value: Any) -> None:
        """
        Merge a parsed table into this section.

        Non-mapping input, unknown keys and type-mismatched values are
        ignored. List fields keep only their string items.
        """
        if not isinstance(value, Mapping):
            if value is not None:
                logger.debug(f"[{self.name}] expected a table, got {type(value).__name__}; ignored")
            return

        field_types = self._field_types()
        for key, raw in value.items():
            hint = field_types.get(key)
            if hint is None:
                logger.debug(f"[{self.name}] unknown key '{key}' ignored")
                continue

            if _is_list(hint) and isinstance(raw, list):
                raw = [item for item in raw if isinstance(item, str)]

            try:
                coerced = TypeAdapter(hint).validate_python(raw, strict=True)
            except ValidationError:
                logger.debug(f"[{self.name}] value for '{key}' has the wrong type ({type(raw).__name__}); ignored")
                continue

            setattr(self, key, coerced)

    def load_from_env(self, values: Mapping[str, str]) -> None:
        """Merge environment text, converting each value to its field's type."""
        field_types = self._field_types()
        converted: dict[str, Any] = {}
        for key, raw in values.items():
            hint = field_types.get(key)
            converted[key] = coerce_env_text(hint, raw) if hint is not None else raw
        self.load_from_value(converted)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @abstractmethod
    def validate(self) -> None:
        """
        Check semantic rules. Runs only after merging is complete.

        Raises:
            InvalidConfigError / InvalidValueError
        """

    # -------------------------------------------------------------------------
    # Serialization & lifecycle
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of the section. None values are left out (TOML has no null)."""
        return {
            key: list(value) if isinstance(value, tuple) else value
            for key, value in asdict(self).items()
            if value is not None
        }

    def freeze(self) -> None:
        """Make the section read-only. List fields become tuples."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, list):
                object.__setattr__(self, f.name, tuple(value))
        object.__setattr__(self, "_frozen", True)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __setattr__(self, key: str, value: Any) -> None:
        if self._frozen:
            raise FrozenInstanceError(f"cannot assign to field '{key}' of frozen section [{self.name}]")
        super().__setattr__(key, value)
