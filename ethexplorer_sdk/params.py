"""
Argument shapes for read-only contract calls.
"""
from dataclasses import dataclass, field
from typing import Any, List, Tuple, Union


@dataclass(frozen=True)
class NoArgs:
    """Call the method without arguments."""

    def as_args(self) -> Tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class PositionalArgs:
    """Spread the values as positional arguments."""
    values: List[Any] = field(default_factory=list)

    def as_args(self) -> Tuple[Any, ...]:
        return tuple(self.values)


@dataclass(frozen=True)
class SingleArg:
    """Pass the value as the only argument, even if it is a list or a dict."""
    value: Any

    def as_args(self) -> Tuple[Any, ...]:
        return (self.value,)


CallParams = Union[NoArgs, PositionalArgs, SingleArg]


def to_call_params(params: Any) -> CallParams:
    """
    Coerce a raw value into a call-argument variant.

    ``None`` becomes ``NoArgs``, a list or tuple becomes ``PositionalArgs``
    and anything else, dicts included, becomes ``SingleArg``. Variants are
    returned unchanged.
    """
    if isinstance(params, (NoArgs, PositionalArgs, SingleArg)):
        return params
    if params is None:
        return NoArgs()
    if isinstance(params, (list, tuple)):
        return PositionalArgs(list(params))
    return SingleArg(params)
