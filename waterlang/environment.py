"""Environments.

An environment maps names to runtime values and points at the environment
it is nested in. Lookups walk outwards, innermost first. The global
environment also carries the host function registry; nested environments
carry none and defer to their parents.


File: environment.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import Any, Dict, Optional

from waterlang.exceptions import BindError, UndefinedVariableError


class Environment:
    """Lexical environment for variable bindings."""

    def __init__(self, outer: Optional['Environment'] = None, functions: Optional[dict] = None):
        self.bindings: Dict[str, Any] = {}
        self.outer = outer
        self.functions = functions

    def declare(self, name: str, line=None, file=None):
        """Check that ``name`` is not bound in this environment yet."""
        if name in self.bindings:
            raise BindError(f"variable already defined: {name}", line, file)

    def bind(self, name: str, value: Any):
        self.bindings[name] = value

    def define(self, name: str, value: Any, line=None, file=None):
        """Define a new binding in this environment."""
        self.declare(name, line, file)
        self.bind(name, value)

    def scope_of(self, name: str, line=None, file=None) -> 'Environment':
        """
        Return the innermost environment binding ``name``.

        Raises:
            UndefinedVariableError: If no environment in the chain binds it.
        """
        env = self.resolve(name)
        if env is None:
            raise UndefinedVariableError(name, line, file)
        return env

    def assign(self, name: str, value: Any, line=None, file=None):
        """Update the innermost existing binding of ``name``."""
        self.scope_of(name, line, file).bind(name, value)

    def lookup(self, name: str, line=None, file=None) -> Any:
        """Look up a binding."""
        return self.scope_of(name, line, file).bindings[name]

    def resolve(self, name: str) -> Optional['Environment']:
        """Return the innermost environment binding ``name``, if any."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env
            env = env.outer
        return None

    def contains(self, name: str) -> bool:
        return self.resolve(name) is not None

    def find_function(self, name: str):
        """Search the attached host registries, innermost first."""
        env = self
        while env is not None:
            if env.functions is not None and name in env.functions:
                return env.functions[name]
            env = env.outer
        return None

    def __repr__(self):
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"<Environment depth={depth} names={sorted(self.bindings)}>"
