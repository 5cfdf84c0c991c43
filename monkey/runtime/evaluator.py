"""Tree-walking evaluator for the monkey language.

Evaluation is plain recursion over the AST: every node evaluates to an Object. Domain failures are Error objects, and
they (like ReturnValue) short-circuit every enclosing expression and statement on their way up. Python's own recursion
limit bounds the depth of evaluation; hitting it raises RecursionError, which is not a monkey Error.
"""

import sys
from dataclasses import replace

from monkey.runtime import builtin
from monkey.runtime.environment import Environment
from monkey.runtime.object import (Array, Builtin, Character, Error, FALSE, Float, Function, Integer, NULL, ReturnValue,
                                   String, TRUE, is_error, is_truthy, native_bool, new_array)
from monkey.runtime.operator import eval_infix, eval_prefix
from monkey.syntax import ast


class Evaluator:
    """Evaluates AST nodes against an Environment. Holds no state between runs other than its output streams.

    stdout and stderr are where `print` and `eprint` write. warn, if given, is called with a message and the offending
    node's position for suspicious but legal code (such as shadowing a built-in).
    """

    def __init__(self, stdout=None, stderr=None, warn=None):
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.warn = warn

        self._dispatch = {
            ast.Program: self.eval_program,
            ast.BlockStatement: self.eval_block_statement,
            ast.ExpressionStatement: self.eval_expression_statement,
            ast.LetStatement: self.eval_let_statement,
            ast.ReturnStatement: self.eval_return_statement,
            ast.IntegerLiteral: self.eval_integer_literal,
            ast.FloatLiteral: self.eval_float_literal,
            ast.StringLiteral: self.eval_string_literal,
            ast.CharacterLiteral: self.eval_character_literal,
            ast.BooleanLiteral: self.eval_boolean_literal,
            ast.NullLiteral: self.eval_null_literal,
            ast.Identifier: self.eval_identifier,
            ast.PrefixExpression: self.eval_prefix_expression,
            ast.InfixExpression: self.eval_infix_expression,
            ast.IfExpression: self.eval_if_expression,
            ast.FunctionLiteral: self.eval_function_literal,
            ast.CallExpression: self.eval_call_expression,
            ast.ArrayLiteral: self.eval_array_literal,
            ast.IndexExpression: self.eval_index_expression,
        }

    def eval(self, node, env):
        method = self._dispatch.get(type(node))
        if method is None:
            raise TypeError(f"cannot evaluate {type(node).__name__}")
        return method(node, env)

    @staticmethod
    def error(node, msg):
        return Error(msg, node.position)

    @staticmethod
    def locate(result, node):
        """Attaches node's position to an Error produced without one."""
        if is_error(result) and result.position is None:
            return replace(result, position=node.position)
        return result

    # -----------------------------------------------------------------------------------------------------------------
    # statements

    def eval_program(self, program, env):
        result = NULL
        for statement in program.statements:
            result = self.eval(statement, env)
            if isinstance(result, ReturnValue):
                return result.value
            if is_error(result):
                return result
        return result

    def eval_block_statement(self, block, env):
        """Blocks run in the scope they appear in. ReturnValue is passed up unwrapped so that a `return` in a nested
        block leaves the whole function.
        """
        result = NULL
        for statement in block.statements:
            result = self.eval(statement, env)
            if isinstance(result, (ReturnValue, Error)):
                return result
        return result

    def eval_expression_statement(self, statement, env):
        return self.eval(statement.expression, env)

    def eval_let_statement(self, statement, env):
        value = self.eval(statement.value, env)
        if is_error(value):
            return value

        name = statement.name.value
        if self.warn is not None and builtin.lookup(name) is not None:
            self.warn(f"'{name}' shadows a built-in", statement.position)
        env.define(name, value)
        return NULL

    def eval_return_statement(self, statement, env):
        if statement.value is None:
            return ReturnValue(NULL)
        value = self.eval(statement.value, env)
        if is_error(value):
            return value
        return ReturnValue(value)

    # -----------------------------------------------------------------------------------------------------------------
    # literals and names

    def eval_integer_literal(self, node, env):
        return Integer(node.value)

    def eval_float_literal(self, node, env):
        return Float(node.value)

    def eval_string_literal(self, node, env):
        return String(node.value)

    def eval_character_literal(self, node, env):
        return Character(node.value)

    def eval_boolean_literal(self, node, env):
        return native_bool(node.value)

    def eval_null_literal(self, node, env):
        return NULL

    def eval_identifier(self, node, env):
        value = env.get(node.value)
        if value is not None:
            return value
        value = builtin.lookup(node.value)
        if value is not None:
            return value
        return self.error(node, f"identifier not found: {node.value}")

    # -----------------------------------------------------------------------------------------------------------------
    # operators

    def eval_prefix_expression(self, node, env):
        right = self.eval(node.right, env)
        if is_error(right):
            return right
        return self.locate(eval_prefix(node.operator, right), node)

    def eval_infix_expression(self, node, env):
        if node.operator in ("&&", "||"):
            return self.eval_logical_expression(node, env)

        left = self.eval(node.left, env)
        if is_error(left):
            return left
        right = self.eval(node.right, env)
        if is_error(right):
            return right
        return self.locate(eval_infix(node.operator, left, right), node)

    def eval_logical_expression(self, node, env):
        """&& and || only evaluate their right operand when the left one does not decide the result."""
        left = self.eval(node.left, env)
        if is_error(left):
            return left
        if node.operator == "&&" and not is_truthy(left):
            return FALSE
        if node.operator == "||" and is_truthy(left):
            return TRUE

        right = self.eval(node.right, env)
        if is_error(right):
            return right
        return native_bool(is_truthy(right))

    def eval_if_expression(self, node, env):
        condition = self.eval(node.condition, env)
        if is_error(condition):
            return condition

        if is_truthy(condition):
            return self.eval(node.consequence, env)
        if node.alternative is not None:
            return self.eval(node.alternative, env)
        return NULL

    # -----------------------------------------------------------------------------------------------------------------
    # functions

    def eval_function_literal(self, node, env):
        return Function(node.parameters, node.body, env)

    def eval_call_expression(self, node, env):
        function = self.eval(node.function, env)
        if is_error(function):
            return function

        arguments = self.eval_expressions(node.arguments, env)
        if is_error(arguments):
            return arguments
        return self.apply_function(function, arguments, node)

    def eval_expressions(self, expressions, env):
        """Evaluates expressions left to right. Returns the list of values, or the first Error."""
        values = []
        for expression in expressions:
            value = self.eval(expression, env)
            if is_error(value):
                return value
            values.append(value)
        return values

    def apply_function(self, function, arguments, node):
        if isinstance(function, Builtin):
            return self.locate(function.fn(self, *arguments), node)

        if not isinstance(function, Function):
            return self.error(node, f"not a function: {function.type}")

        if len(arguments) != len(function.parameters):
            msg = f"wrong number of arguments: want={len(function.parameters)}, got={len(arguments)}"
            return self.error(node, msg)

        call_env = Environment(outer=function.env)
        for param, argument in zip(function.parameters, arguments):
            call_env.define(param.value, argument)

        result = self.eval(function.body, call_env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    # -----------------------------------------------------------------------------------------------------------------
    # arrays and indexing

    def eval_array_literal(self, node, env):
        elements = self.eval_expressions(node.elements, env)
        if is_error(elements):
            return elements
        return new_array(elements)

    def eval_index_expression(self, node, env):
        left = self.eval(node.left, env)
        if is_error(left):
            return left
        index = self.eval(node.index, env)
        if is_error(index):
            return index

        if not isinstance(left, (Array, String)):
            return self.error(node, f"index operator not supported: {left.type}")
        if not isinstance(index, Integer):
            return self.error(node, f"index must be an INTEGER, got {index.type}")

        items = left.elements if isinstance(left, Array) else left.value
        if not 0 <= index.value < len(items):
            return NULL
        if isinstance(left, String):
            return Character(items[index.value])
        return items[index.value]
