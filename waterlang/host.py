"""Host function descriptions and argument binding.

A host function is a Python callable the embedding program exposes to water
programs by name. Each one is wrapped once, when the registry is built, in a
:class:`HostFunction` describing its shape:

- ``params``: the kinds of its fixed parameters, in order.
- ``variadic``: the kind of every trailing argument, or ``None``.
- ``results``: ``()`` when it returns nothing, ``(K,)`` when it returns one
  value, ``(K, Kind.ERROR)`` when it returns a ``(value, error)`` pair whose
  error is ``None`` on success. Any other shape is rejected when called.

Arguments are checked against that description, never against the Python
types of the callable at call time. A declared kind must match the value's
kind exactly, except that ``ANY`` accepts every value and ``UINT`` accepts a
signed integer, reinterpreted as its 64-bit two's complement.


File: host.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from waterlang.exceptions import BindError, HostError
from waterlang.nodes import RESERVED_WORDS, UINT64_MASK
from waterlang.values import Closure, Kind, kind_of

logger = logging.getLogger(__name__)

UInt = typing.NewType('UInt', int)

_ANNOTATION_KINDS = {
    int: Kind.INT,
    UInt: Kind.UINT,
    str: Kind.STRING,
    bool: Kind.BOOL,
    object: Kind.ANY,
    Any: Kind.ANY,
    Closure: Kind.CLOSURE,
}


def _kind_of_annotation(annotation) -> Kind:
    if annotation is inspect.Parameter.empty:
        return Kind.ANY
    if isinstance(annotation, type) and issubclass(annotation, BaseException):
        return Kind.ERROR
    if typing.get_origin(annotation) is not None:
        args = typing.get_args(annotation)
        if any(isinstance(a, type) and issubclass(a, BaseException) for a in args):
            return Kind.ERROR
    try:
        return _ANNOTATION_KINDS[annotation]
    except (KeyError, TypeError):
        raise ValueError(f"unsupported host annotation: {annotation!r}") from None


def _results_of_annotation(annotation) -> Tuple[Kind, ...]:
    if annotation is inspect.Signature.empty or annotation is None or annotation is type(None):
        return ()
    if typing.get_origin(annotation) is tuple:
        return tuple(_kind_of_annotation(a) for a in typing.get_args(annotation))
    return (_kind_of_annotation(annotation),)


@dataclass(frozen=True)
class HostFunction:
    """
    Closed description of a host callable.
    """
    name: str
    func: Callable
    params: Tuple[Kind, ...] = ()
    variadic: Optional[Kind] = None
    results: Tuple[Kind, ...] = ()

    @property
    def returns_value(self) -> bool:
        return len(self.results) >= 1

    @property
    def returns_error(self) -> bool:
        return len(self.results) == 2 and self.results[1] is Kind.ERROR

    @classmethod
    def from_callable(cls, name: str, func: Callable) -> 'HostFunction':
        """
        Build a description from the annotations of ``func``.

        Parameters map ``int``, :data:`UInt`, ``str``, ``bool``,
        ``object``/``Any`` and :class:`Closure` to kinds; a ``*args``
        parameter is variadic. A ``tuple[T, Exception | None]`` return
        annotation declares the value plus error convention.

        Raises:
            ValueError: If the signature uses keyword-only parameters or
                unsupported annotations.
        """
        signature = inspect.signature(func)
        try:
            hints = typing.get_type_hints(func)
        except (NameError, TypeError):
            hints = {}

        params = []
        variadic = None
        for param in signature.parameters.values():
            annotation = hints.get(param.name, param.annotation)
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                variadic = _kind_of_annotation(annotation)
            elif param.kind in (inspect.Parameter.POSITIONAL_ONLY,
                                inspect.Parameter.POSITIONAL_OR_KEYWORD):
                params.append(_kind_of_annotation(annotation))
            else:
                raise ValueError(f"host function {name} has a keyword parameter: {param.name}")

        results = _results_of_annotation(hints.get('return', signature.return_annotation))
        return cls(name, func, tuple(params), variadic, results)

    def check_arity(self, count: int, line=None, file=None) -> None:
        fixed = len(self.params)
        if self.variadic is not None:
            if count < fixed:
                raise BindError(
                    f"wrong number of args for {self.name}: want at least {fixed}, got {count}",
                    line, file,
                )
        elif count != fixed:
            raise BindError(
                f"wrong number of args for {self.name}: want {fixed}, got {count}", line, file
            )

    def check_results(self, line=None, file=None) -> None:
        if len(self.results) <= 1 or (len(self.results) == 2 and self.returns_error):
            return
        raise BindError(f"can't handle multiple returns from function {self.name}", line, file)

    def coerce(self, kind: Kind, value, line=None, file=None):
        """
        Check one argument value against its declared kind.

        Returns:
            The value to pass to the host callable.

        Raises:
            BindError: On a kind mismatch.
        """
        if kind is Kind.ANY:
            return value
        actual = kind_of(value)
        if kind is Kind.UINT and actual is Kind.INT:
            return value & UINT64_MASK
        if actual is not kind:
            raise BindError(
                f"incorrect argument type for {self.name}, expected {kind}, got {actual}",
                line, file,
            )
        return value

    def invoke(self, args: list, line=None, file=None):
        """
        Call the host function with already bound arguments.

        Returns:
            The single result, or ``None`` when the function returns nothing.

        Raises:
            HostError: If the function reported an error.
        """
        logger.debug("calling host function %s with %d args", self.name, len(args))
        result = self.func(*args)
        if not self.results:
            return None
        if not self.returns_error:
            return result
        value, error = result
        if error is not None:
            cause = error if isinstance(error, BaseException) else None
            raise HostError(self.name, error, line, file) from cause
        return value


Registry = Dict[str, HostFunction]


def build_registry(functions: dict) -> Registry:
    """
    Build a registry from plain callables or ready-made descriptions.

    Raises:
        ValueError: If a name collides with a reserved word.
    """
    registry = {}
    for name, func in functions.items():
        if name in RESERVED_WORDS:
            raise ValueError(f"cannot register host function under reserved name: {name}")
        if isinstance(func, HostFunction):
            registry[name] = func
        else:
            registry[name] = HostFunction.from_callable(name, func)
    return registry
