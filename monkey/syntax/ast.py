"""Abstract syntax tree for the monkey language.

Formally, the syntax the parser accepts can be defined as

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expr> [";"]
               | "return" [<expr>] [";"]
               | <expr> [";"]
<block>      ::= "{" <statement>* "}"
<expr>       ::= <ident> | <int> | <float> | <string> | <charlit> | "true" | "false" | "null"
               | ("-" | "!") <expr>                            ; prefix
               | <expr> <infix-op> <expr>                      ; infix, see parser.PRECEDENCES
               | "(" <expr> ")"
               | "if" "(" <expr> ")" <block> ["else" <block>]
               | "fn" "(" [<ident> ("," <ident>)*] ")" <block>
               | <expr> "(" [<expr> ("," <expr>)*] ")"         ; call
               | "[" [<expr> ("," <expr>)*] "]"                 ; array
               | <expr> "[" <expr> "]"                         ; index
```

Nodes compare structurally (source positions are ignored), and `str(node)` renders a canonical, fully parenthesized
source form that parses back into an equal tree.
"""

from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import List, Optional

from monkey.syntax.lexical import ESCAPES
from monkey.syntax.token import Token


UNESCAPES = {char: "\\" + escape for escape, char in ESCAPES.items() if escape != "'"}
CHAR_UNESCAPES = {char: "\\" + escape for escape, char in ESCAPES.items() if escape != "\""}


class Node:
    """Superclass of every AST node."""

    @property
    def position(self):
        token = getattr(self, "token", None)
        return token.position if token is not None else None

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(
            <field>=<Node>(...),
            <field>=[
                <Node>(...),
            ],
            <field>=<value>
        )
        """
        pad = "    " * indents
        parts = []
        for node_field in fields(self):
            if not node_field.compare:
                continue
            value = getattr(self, node_field.name)
            if isinstance(value, Node):
                parts.append(f"{pad}    {node_field.name}={value.display(indents + 1).lstrip()}")
            elif isinstance(value, list) and value and isinstance(value[0], Node):
                items = "".join(f"{item.display(indents + 2)},\n" for item in value)
                parts.append(f"{pad}    {node_field.name}=[\n{items}{pad}    ]")
            else:
                parts.append(f"{pad}    {node_field.name}={value!r}")

        if not parts:
            return f"{pad}{type(self).__name__}()"
        return f"{pad}{type(self).__name__}(\n" + ",\n".join(parts) + f"\n{pad})"


class Statement(Node):
    pass


class Expression(Node):
    pass


def _token():
    return field(default=None, compare=False, repr=False)


# ---------------------------------------------------------------------------------------------------------------------
# expressions

@dataclass
class Identifier(Expression):
    value: str
    token: Optional[Token] = _token()

    def __str__(self):
        return self.value


@dataclass
class IntegerLiteral(Expression):
    value: int
    token: Optional[Token] = _token()

    def __str__(self):
        return str(self.value)


@dataclass
class FloatLiteral(Expression):
    value: float
    token: Optional[Token] = _token()

    def __str__(self):
        literal = repr(self.value)
        if "e" in literal:
            literal = format(Decimal(literal), "f")  # exact digits, the lexer has no exponent syntax
        if "." not in literal:
            literal += ".0"
        return literal


@dataclass
class StringLiteral(Expression):
    value: str
    token: Optional[Token] = _token()

    def __str__(self):
        return "\"" + "".join(UNESCAPES.get(char, char) for char in self.value) + "\""


@dataclass
class CharacterLiteral(Expression):
    value: str
    token: Optional[Token] = _token()

    def __str__(self):
        return "'" + CHAR_UNESCAPES.get(self.value, self.value) + "'"


@dataclass
class BooleanLiteral(Expression):
    value: bool
    token: Optional[Token] = _token()

    def __str__(self):
        return "true" if self.value else "false"


@dataclass
class NullLiteral(Expression):
    token: Optional[Token] = _token()

    def __str__(self):
        return "null"


@dataclass
class PrefixExpression(Expression):
    operator: str
    right: Expression
    token: Optional[Token] = _token()

    def __str__(self):
        return f"({self.operator}{self.right})"


@dataclass
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression
    token: Optional[Token] = _token()

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class IfExpression(Expression):
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None
    token: Optional[Token] = _token()

    def __str__(self):
        result = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result


@dataclass
class FunctionLiteral(Expression):
    parameters: List[Identifier]
    body: "BlockStatement"
    token: Optional[Token] = _token()

    def __str__(self):
        return f"fn({', '.join(str(param) for param in self.parameters)}) {self.body}"


@dataclass
class CallExpression(Expression):
    function: Expression
    arguments: List[Expression]
    token: Optional[Token] = _token()

    def __str__(self):
        return f"{self.function}({', '.join(str(arg) for arg in self.arguments)})"


@dataclass
class ArrayLiteral(Expression):
    elements: List[Expression]
    token: Optional[Token] = _token()

    def __str__(self):
        return f"[{', '.join(str(element) for element in self.elements)}]"


@dataclass
class IndexExpression(Expression):
    left: Expression
    index: Expression
    token: Optional[Token] = _token()

    def __str__(self):
        return f"({self.left}[{self.index}])"


# ---------------------------------------------------------------------------------------------------------------------
# statements

@dataclass
class LetStatement(Statement):
    name: Identifier
    value: Expression
    token: Optional[Token] = _token()

    def __str__(self):
        return f"let {self.name} = {self.value}"


@dataclass
class ReturnStatement(Statement):
    value: Optional[Expression] = None
    token: Optional[Token] = _token()

    def __str__(self):
        return "return" if self.value is None else f"return {self.value}"


@dataclass
class ExpressionStatement(Statement):
    expression: Expression
    token: Optional[Token] = _token()

    def __str__(self):
        return str(self.expression)


@dataclass
class BlockStatement(Statement):
    statements: List[Statement]
    token: Optional[Token] = _token()

    def __str__(self):
        if not self.statements:
            return "{ }"
        return "{ " + "; ".join(str(statement) for statement in self.statements) + " }"


@dataclass
class Program(Node):
    statements: List[Statement]

    def __str__(self):
        return ";\n".join(str(statement) for statement in self.statements)
