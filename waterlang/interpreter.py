"""Interpreter.

This is a tree-walk interpreter for evaluating the AST produced by the
parser against a registry of host functions.

1. Execution Model
Top-level expressions are evaluated in order by `execute()`. Every value
that is not the unit value is written to the output sink: strings as they
are, anything else followed by a line break. Evaluation itself is a
recursive case analysis over the node type in `eval_node()`.

2. Environment
Each program runs in a global `Environment` seeded with the host registry.
Every closure call pushes a fresh environment whose parent is the
environment the closure captured when it was created, so free variables
in a lambda body resolve lexically, never through the call site.

3. Calls
A call name is resolved against the host registry first and then against a
closure bound to that name. Host calls check arity, argument kinds and
result shape against the function's `HostFunction` description.

4. Error Handling
The first language error aborts the whole program and propagates out of
`execute()` as a `WaterError`. Other exceptions are interpreter bugs and
propagate unchanged.


File: interpreter.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import logging
import sys

from waterlang import nodes
from waterlang.environment import Environment
from waterlang.exceptions import BindError, UndefinedFunctionError
from waterlang.host import HostFunction, build_registry
from waterlang.values import Closure, format_value

logger = logging.getLogger(__name__)


class Interpreter:
    """Tree-walk interpreter for water."""

    def __init__(self, functions: dict | None = None, output=None, file: str = '<stdin>'):
        """
        Initialize the interpreter.

        Parameters:
            functions (dict): Host functions by name, as plain callables or
                `HostFunction` descriptions.
            output: Text sink for printed values, `sys.stdout` by default.
            file (str): The name of the script, used in error messages.
        """
        registry = build_registry(functions or {})
        self.globals = Environment(functions=registry)
        self.output = output if output is not None else sys.stdout
        self.file = file

    def execute(self, program: nodes.Program) -> None:
        """
        Evaluate every top-level expression, printing its value.

        Raises:
            WaterError: On the first failing expression.
        """
        for node in program.children:
            try:
                value = self.eval_node(node, self.globals)
            except RecursionError as e:
                raise BindError(
                    "maximum recursion depth exceeded", getattr(node, 'line', None), self.file
                ) from e
            self.print(value)

    def print(self, value) -> None:
        if value is None:
            return
        if isinstance(value, str):
            self.output.write(value)
            return
        self.output.write(format_value(value) + '\n')

    def eval_node(self, node: nodes.Node, env: Environment):
        """
        Recursively evaluate a node and return its value.

        Parameters:
            node (nodes.Node): The node to evaluate.
            env (Environment): The current environment.

        Returns:
            The value of the node, ``None`` for the unit value.

        Raises:
            BindError: On scope, arity or type errors.
            HostError: If a host function reported an error.
        """
        match node:
            case nodes.Number(value=value) | nodes.Bool(value=value):
                return value
            case nodes.String(text=text):
                return text
            case nodes.Var(name=name, line=line):
                return env.lookup(name, line, self.file)
            case nodes.Define(name=name, value=value_node, line=line):
                env.declare(name, line, self.file)
                env.bind(name, self.eval_node(value_node, env))
                return None
            case nodes.Set(name=name, value=value_node, line=line):
                scope = env.scope_of(name, line, self.file)
                scope.bind(name, self.eval_node(value_node, env))
                return None
            case nodes.If(test=test, conseq=conseq, alt=alt, line=line):
                condition = self.eval_node(test, env)
                if not isinstance(condition, bool):
                    raise BindError("if condition is not a boolean", line, self.file)
                return self.eval_node(conseq if condition else alt, env)
            case nodes.Begin(body=body):
                value = None
                for child in body:
                    value = self.eval_node(child, env)
                return value
            case nodes.Lambda(params=params, body=body):
                return Closure(params, body, env)
            case nodes.Call():
                return self.eval_call(node, env)
        raise TypeError(f"cannot walk the node: {node!r}")

    def eval_call(self, node: nodes.Call, env: Environment):
        """
        Evaluate a call to a host function or a closure.

        Raises:
            UndefinedFunctionError: If the name is neither.
        """
        function = env.find_function(node.name)
        if function is not None:
            return self.call_host(function, node, env)

        scope = env.resolve(node.name)
        if scope is None:
            raise UndefinedFunctionError(node.name, node.line, self.file)
        value = scope.bindings[node.name]
        if not isinstance(value, Closure):
            raise BindError(
                f"the variable {node.name} is not a function, cannot be called",
                node.line, self.file,
            )
        return self.call_closure(value, node, env)

    def call_host(self, function: HostFunction, node: nodes.Call, env: Environment):
        """
        Bind the call's arguments to a host function and invoke it.
        """
        function.check_arity(len(node.args), node.line, self.file)
        function.check_results(node.line, self.file)

        fixed = len(function.params)
        args = []
        for kind, arg in zip(function.params, node.args[:fixed]):
            args.append(function.coerce(kind, self.eval_node(arg, env), node.line, self.file))
        for arg in node.args[fixed:]:
            args.append(
                function.coerce(function.variadic, self.eval_node(arg, env), node.line, self.file)
            )

        return function.invoke(args, node.line, self.file)

    def call_closure(self, closure: Closure, node: nodes.Call, env: Environment):
        """
        Invoke a closure. Arguments are evaluated in the caller's environment,
        the body in a fresh environment nested in the captured one.
        """
        if closure.arity != len(node.args):
            raise BindError(
                f"call doesn't use the correct arity: expected {closure.arity}, "
                f"got {len(node.args)}",
                node.line, self.file,
            )

        frame = Environment(outer=closure.env)
        for param, arg in zip(closure.params, node.args):
            frame.define(param, self.eval_node(arg, env))

        logger.debug("calling closure %s with %d args", node.name, len(node.args))
        return self.eval_call(closure.body, frame)


def evaluate(program: nodes.Program, functions: dict | None = None, output=None,
             file: str = '<stdin>') -> Interpreter:
    """
    Run a parsed program and return the interpreter after execution.
    """
    interpreter = Interpreter(functions, output, file)
    interpreter.execute(program)
    return interpreter
