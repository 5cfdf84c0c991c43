"""Session control for the monkey language: drives source text through the lexer, parser and evaluator, either for a
whole file or one input at a time from the shell.
"""

from monkey.lang.error import GenericException, ParseException, RuntimeException, literal
from monkey.runtime.environment import Environment
from monkey.runtime.evaluator import Evaluator
from monkey.runtime.object import NULL, is_error
from monkey.syntax import ast
from monkey.syntax.lexical import Lexer, tokenize
from monkey.syntax.parser import Parser
from monkey.syntax.token import TokenKind


OPENERS = (TokenKind.LPAREN, TokenKind.LBRACKET, TokenKind.LBRACE)
CLOSERS = (TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE)


class Session:
    """Governs a monkey session. The global environment lives as long as the session, so definitions made by one shell
    input are visible to the next.
    """
    SH_FILE = "<in>"      # command-line interpreter filename
    EVAL_FILE = "<eval>"  # filename for source passed with -e

    def __init__(self, error_handler, path, cmd_line, source=None, stdout=None, stderr=None, dump_tokens=False,
                 dump_ast=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.stdout = stdout
        self.dump_tokens = dump_tokens
        self.dump_ast = dump_ast

        self.env = Environment()
        self.evaluator = Evaluator(stdout, stderr, warn=self._warn)
        self.to_exec = {}  # dict of line num: (source, Program) to execute
        self.results = []  # rendered results, oldest first
        self._running = None  # (source, line num) being evaluated

        if self.cmd_line:
            self.error_handler.fatal = False

        if path == Session.EVAL_FILE:
            self.add(source or "", 1)

        elif path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)
            self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Preprocesses an input from the command-line. Returns the input without trailing whitespace and whether it
        needs a continuation line: an input is incomplete while it has more (, [ or { than closing delimiters.
        """
        line = line.rstrip()
        depth = 0
        for token in Lexer(line):
            if token.kind in OPENERS:
                depth += 1
            elif token.kind in CLOSERS:
                depth -= 1
        return line, depth > 0

    def add(self, source, line_num):
        """Parses source, whose first line is line line_num, and queues it for execution. Nothing is queued if source
        holds any syntax error: a ParseException carrying all of them is raised instead.
        """
        self.error_handler.register_line(self.path, first_line(source), line_num)  # in case error is raised

        if self.dump_tokens:
            self._print(" ".join(str(token) for token in tokenize(source)))

        parser = Parser(Lexer(source))
        program = parser.parse_program()
        if parser.errors:
            raise ParseException(self.path, [
                (line_num + error.token.line - 1,
                 self._exception(GenericException, error.msg, source, error.position, len(error.token.literal)))
                for error in parser.errors
            ])

        if self.dump_ast:
            self._print(program.display())

        self.to_exec[line_num] = (source, program)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates the queued programs in order. A program evaluating to an Error raises a RuntimeException.

        Results are rendered into self.results, except for programs ending in a `let` statement. Outside of
        command-line mode null results are not kept either.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, first_line(source), line_num)
            self._running = (source, line_num)

            try:
                result = self.evaluator.eval(program, self.env)
            finally:
                self._running = None
                if self.cmd_line:
                    del self.to_exec[line_num]

            if is_error(result):
                if result.position is not None:
                    self._locate(source, line_num, result.position)
                raise self._exception(RuntimeException, result.message, source, result.position)

            if self._echoes(program, result):
                self.results.append(result.inspect())

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Returns the oldest rendered result."""
        return self.results.pop(0)

    def _echoes(self, program, result):
        if program.statements and isinstance(program.statements[-1], ast.LetStatement):
            return False
        return self.cmd_line or result is not NULL

    def _locate(self, source, line_num, position):
        """Points the traceback at the source line holding position."""
        self.error_handler.register_line(self.path, line_at(source, position[0]), line_num + position[0] - 1)

    @staticmethod
    def _exception(cls, msg, source, position, length=1):
        """Builds a cls exception for msg, diagnosed at position ((line, col) relative to source) if known."""
        if position is None:
            return cls(literal(msg), diagnosis=False)

        line, col = position
        return cls(literal(msg), line_at(source, line), start=col - 1, end=col - 1 + max(length, 1))

    def _warn(self, msg, position):
        """Warning hook of the evaluator."""
        if self._running is None or position is None:
            self.error_handler.warn(literal(msg), diagnosis=False)
            return

        source, line_num = self._running
        line, col = position
        self._locate(source, line_num, position)
        self.error_handler.warn(literal(msg), line_at(source, line), start=col - 1, end=col + 2)
        self.error_handler.register_line(self.path, first_line(source), line_num)

    def _print(self, text):
        print(text, file=self.stdout)


def line_at(source, line):
    """Returns line number line (1-based) of source, or "" if there is no such line."""
    lines = source.splitlines()
    return lines[line - 1] if 0 < line <= len(lines) else ""


def first_line(source):
    lines = source.strip().splitlines()
    return lines[0] if lines else ""
