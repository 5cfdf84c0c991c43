"""Error reporting for the monkey front end. Only GenericExceptions (and subclasses) should reach ErrorHandler during a
run: any other Python exception that makes it there is assumed to be an internal issue.

Note that the interpreter core never raises for monkey-level failures. Parse errors are collected by the parser and
runtime errors are Error objects; Session converts both into the exceptions below once a run is over.
"""

import sys

from termcolor import colored


def literal(text):
    """Escapes text so that GenericException does not treat its braces as placeholders."""
    return text.replace("{", "{{").replace("}", "}}")


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a monkey error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """msg is formatted with exprs (bolded). exprs[0], if any, is the offending source line, and start/end delimit
        the offending part of it.
        """
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal


class ParseException(GenericException):
    """All the errors collected while parsing one input."""

    def __init__(self, path, errors):
        """errors is a list of (line_num, GenericException) pairs, line_num being the absolute line of the error."""
        super().__init__(f"{len(errors)} parse error{'s' if len(errors) != 1 else ''}", diagnosis=False)
        self.path = path
        self.errors = errors


class RuntimeException(GenericException):
    """Raised when a program evaluates to an Error object."""


class ErrorHandler:
    """Context manager that turns errors raised inside it into colored monkey errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stdout)

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        for file, (__, line_num) in self.traceback.items():
            if line_num is not None:
                return f"{file}:{line_num}: "
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints a warning message based on args."""
        error = GenericException(*args, **kwargs)

        warning_msg = colored(self._location(), attrs=["bold"])
        warning_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        self._print(warning_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Prints error (a GenericException) with the traceback registered so far. Exits if self.fatal."""
        if isinstance(error, ParseException):
            for line_num, parse_error in error.errors:
                self.register_line(error.path, parse_error.expr, line_num)
                self._report(parse_error)
        else:
            self._report(error)

        if self.fatal:
            sys.exit(1)
        self.traceback = {key: (None, None) for key in self.traceback}

    def _report(self, error):
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(literal(f"unknown error: '{exc_type.__name__}: {exc_val}'"), internal=True))
            do_exit = True

        return not do_exit
