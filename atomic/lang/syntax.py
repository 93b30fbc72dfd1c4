"""Syntax tree for the Atomic language and the parser that builds it. An Atomic program is flat: a list of statements,
executed in order, with no nesting. Operands of arithmetic statements are Values, which are resolved against an
Environment only at execution time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from atomic.lang import numerical
from atomic.lang.error import GenericException
from atomic.lang.lexical import TokenType, debug_str


class Value(ABC):
    """Operand of an arithmetic statement: a literal Number or a Variable reference."""

    @abstractmethod
    def resolve(self, environment):
        """Returns the int this Value stands for in environment."""


@dataclass(frozen=True)
class Number(Value):
    value: int

    def resolve(self, environment):
        return self.value

    def __repr__(self):
        return f"Number({self.value})"


@dataclass(frozen=True)
class Variable(Value):
    name: str

    def resolve(self, environment):
        return environment.get(self.name)

    def __repr__(self):
        return f"Variable({debug_str(self.name)})"


class Statement(ABC):
    """Superclass representing any executable statement in an Atomic program."""
    line_num: int

    @abstractmethod
    def execute(self, environment):
        """Executes this statement against environment and returns the line of output it produces. Raises a
        GenericException if the statement cannot be executed; environment is left untouched in that case.
        """

    def error(self, msg, exprs=None):
        return GenericException(msg, exprs, label=GenericException.RUNTIME, line_num=self.line_num)


@dataclass(frozen=True)
class Print(Statement):
    text: str
    line_num: int = field(default=None, compare=False)

    def execute(self, environment):
        return self.text

    def __repr__(self):
        return f"Print({debug_str(self.text)})"


@dataclass(frozen=True)
class Let(Statement):
    name: str
    value: int
    line_num: int = field(default=None, compare=False)

    def execute(self, environment):
        environment.assign(self.name, self.value)
        return f"Variable {self.name} set to {self.value}"

    def __repr__(self):
        return f"Let({debug_str(self.name)}, {self.value})"


@dataclass(frozen=True)
class BinaryOp(Statement):
    """Superclass for arithmetic statements. Subclasses set SYMBOL and OPERATION, and ZERO_ERROR if a zero right operand
    is an error.
    """
    left: Value
    right: Value
    line_num: int = field(default=None, compare=False)

    SYMBOL = None
    OPERATION = None
    ZERO_ERROR = None

    def execute(self, environment):
        left = self.left.resolve(environment)
        right = self.right.resolve(environment)

        if right == 0 and self.ZERO_ERROR:
            raise self.error(self.ZERO_ERROR)

        return f"{left} {self.SYMBOL} {right} = {type(self).OPERATION(left, right)}"

    def __repr__(self):
        return f"{type(self).__name__}({repr(self.left)}, {repr(self.right)})"


class Add(BinaryOp):
    SYMBOL = "+"
    OPERATION = numerical.add


class Subtract(BinaryOp):
    SYMBOL = "-"
    OPERATION = numerical.subtract


class Multiply(BinaryOp):
    SYMBOL = "*"
    OPERATION = numerical.multiply


class Divide(BinaryOp):
    SYMBOL = "/"
    OPERATION = numerical.divide
    ZERO_ERROR = "Division by zero"


class Modulus(BinaryOp):
    SYMBOL = "%"
    OPERATION = numerical.modulus
    ZERO_ERROR = "Modulus by zero"


OPERATIONS = {
    TokenType.ADD: Add,
    TokenType.SUBTRACT: Subtract,
    TokenType.MULTIPLY: Multiply,
    TokenType.DIVIDE: Divide,
    TokenType.MODULUS: Modulus,
}


class Parser:
    """Single forward pass over a token list. Malformed statements are dropped and parsing resumes at the next unconsumed
    token.
    """

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.pos = 0
        self.program = []
        self.errors = []

    def next(self):
        """Consumes and returns the next token, or None at end of input."""
        if self.pos >= len(self.tokens):
            return None
        self.pos += 1
        return self.tokens[self.pos - 1]

    def peek(self, offset=0):
        if self.pos + offset >= len(self.tokens):
            return None
        return self.tokens[self.pos + offset]

    def error(self, token, msg, exprs=None):
        self.errors.append(GenericException(msg, exprs, label=GenericException.SYNTAX, line_num=token.line_num))

    def parse(self):
        """Returns (program, errors); never raises."""
        token = self.next()
        while token is not None:
            if token.type is TokenType.PRINT:
                self.parse_print(token)
            elif token.type is TokenType.LET:
                self.parse_let(token)
            elif token.type in OPERATIONS:
                self.parse_operation(token)
            # anything else at the start of a statement is ignored

            token = self.next()

        return self.program, self.errors

    def parse_print(self, keyword):
        text = self.next()
        if text is not None and text.type is TokenType.STRING:
            self.program.append(Print(text.value, keyword.line_num))
        else:
            self.error(keyword, "expected a string after '{}'", keyword.keyword)

    def parse_let(self, keyword):
        """Only consumes the name and value if both are there, so a dangling 'let' doesn't swallow the next statement."""
        name, value = self.peek(), self.peek(1)
        if name is not None and name.type is TokenType.IDENTIFIER and value is not None and \
                value.type is TokenType.NUMBER:
            self.pos += 2
            self.program.append(Let(name.value, value.value, keyword.line_num))
        else:
            self.error(keyword, "expected variable name and value after '{}'", keyword.keyword)

    def parse_operation(self, keyword):
        operands = [self.next(), self.next()]

        values = []
        for operand in operands:
            if operand is not None and operand.type is TokenType.NUMBER:
                values.append(Number(operand.value))
            elif operand is not None and operand.type is TokenType.IDENTIFIER:
                values.append(Variable(operand.value))
            else:
                self.error(keyword, "expected a number or variable after '{}'", keyword.keyword)
                return

        self.program.append(OPERATIONS[keyword.type](*values, keyword.line_num))


def parse(tokens):
    """Returns (program, errors) for tokens. errors are non-fatal GenericExceptions for dropped statements."""
    return Parser(tokens).parse()
