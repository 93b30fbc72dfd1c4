"""Error handling for the Atomic language. Lexing, parsing and executing never stop on a bad statement: they produce
GenericExceptions, which are reported through an ErrorHandler and then skipped. Only fatal errors (such as an
unreadable source file) are raised all the way up to the ErrorHandler context manager. If another type of error makes
it to the ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be reported as an Atomic diagnostic. Each '{}' in msg is filled with
    the matching entry of exprs, which is displayed in bold.
    """
    SYNTAX = "syntax error"
    RUNTIME = "runtime error"
    FATAL = "error"

    def __init__(self, msg, exprs=None, label=FATAL, line_num=None, source="", start=0, end=-1, diagnosis=True,
                 internal=False):
        """source is the offending source line and [start:end] the offending part of it (needed for error display)."""
        if exprs is None:
            exprs = []
        if not isinstance(exprs, (list, tuple)):
            exprs = [exprs]

        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)
        self._template = msg

        self.label = label
        self.line_num = line_num
        self.source = source
        self.start = start
        self.end = end if end != -1 else len(self.source)

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def colored_msg(self):
        """self.msg with expr snippets bolded."""
        return self._template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))

    def __repr__(self):
        return f"GenericException('{self.msg}', line_num={self.line_num})"


class ErrorHandler:
    """Reports diagnostics to stderr. Also a context manager that will silently suppress Python errors and turn them
    into fatal Atomic errors.
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, path=None, fatal=True, stream=None):
        self.path = path
        self.fatal = fatal
        self.stream = stream
        self.reported = []  # every diagnostic reported so far, in order

    @property
    def _stream(self):
        return self.stream if self.stream is not None else sys.stderr

    def register_file(self, path):
        """Registers path as the file diagnostics refer to."""
        self.path = path

    @staticmethod
    def diagnose(error, color=ERROR):
        """Returns offending part of error.source highlighted and bolded, with a marker underneath."""
        diagnosis = "  " + error.source[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.source[error.start:end], color, attrs=["bold"])
        diagnosis += error.source[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        location = self.path if self.path else "<in>"
        if error.line_num is not None:
            location += f":{error.line_num}"
        return colored(f"{location}: ", attrs=["bold"])

    def _display(self, error, color):
        error_msg = self._location(error)
        if error.internal:
            error_msg += colored("[internal] ", color, attrs=["bold"])

        error_msg += colored(f"{error.label}: ", color, attrs=["bold"]) + error.colored_msg()
        print(error_msg, file=self._stream)

        if not error.internal and error.source and error.diagnosis:
            print(ErrorHandler.diagnose(error, color), file=self._stream)

        self.reported.append(error)

    def warn(self, error):
        """Reports a non-fatal diagnostic. The statement it belongs to has already been skipped by the caller."""
        self._display(error, ErrorHandler.WARNING if error.label == GenericException.SYNTAX else ErrorHandler.ERROR)

    def warn_all(self, errors):
        for error in errors:
            self.warn(error)

    def throw(self, error):
        """Reports error and, if this handler is fatal, exits with status 1."""
        self._display(error, ErrorHandler.ERROR)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is GenericException:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", [exc_type.__name__, exc_val], internal=True))
            do_exit = True

        return not do_exit
