"""Transformer interface.

A transformer is any object with a ``name`` and a ``transform(context,
options)`` callable. ``transform`` may be a plain function or a coroutine
function; it mutates the tree exclusively through ``context.fs``.
"""

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel

from stagedfs.fs.async_fs import AsyncFileSystem
from stagedfs.fs.staged import StagedFileSystem

OptionType = Literal["string", "boolean", "number", "array"]

_TRUTHY = ("1", "true", "yes")
_FALSY = ("0", "false", "no")


class TransformerOption(BaseModel):
    """Declaration of one transformer option.

    Attributes:
        description: Help text shown to users
        type: Value type; raw strings from the command line are coerced
        required: Whether the run fails when the option is missing
    """

    description: str = ""
    type: OptionType = "string"
    required: bool = False

    def coerce(self, value: Any) -> Any:
        """Convert ``value`` to this option's type.

        Non-string values are assumed to be typed already and are only
        checked.

        Raises:
            ValueError: If the value cannot be converted
        """
        if self.type == "string":
            if not isinstance(value, str):
                raise ValueError(f"Expected a string, got {value!r}")
            return value

        if self.type == "boolean":
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in _TRUTHY + _FALSY:
                return value.lower() in _TRUTHY
            raise ValueError(f"Expected a boolean, got {value!r}")

        if self.type == "number":
            if isinstance(value, bool):
                raise ValueError(f"Expected a number, got {value!r}")
            if isinstance(value, int | float):
                return value
            try:
                number = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Expected a number, got {value!r}") from exc
            return int(number) if number.is_integer() else number

        # array
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, list | tuple):
            return list(value)
        raise ValueError(f"Expected a list, got {value!r}")


@dataclass
class TransformerContext:
    """What a transformer gets to work with.

    Attributes:
        fs: Staged filesystem every mutation goes through
        cwd: Working root of the run
    """

    fs: StagedFileSystem
    cwd: Path

    @property
    def afs(self) -> AsyncFileSystem:
        """Awaitable view of ``fs``."""
        return self.fs.as_async()


@runtime_checkable
class Transformer(Protocol):
    """A named transformation over a file tree."""

    name: str

    def transform(
        self, context: TransformerContext, options: Mapping[str, Any]
    ) -> Awaitable[None] | None: ...


@dataclass
class FunctionTransformer:
    """Wrap a plain function as a transformer."""

    name: str
    func: Any
    description: str = ""
    options: dict[str, TransformerOption] | None = None

    def transform(
        self, context: TransformerContext, options: Mapping[str, Any]
    ) -> Awaitable[None] | None:
        return self.func(context, options)
