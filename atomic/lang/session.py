"""Session control for the Atomic language. Runs the whole pipeline (lex, parse, execute) over one source file or
string, reporting every diagnostic to the session's ErrorHandler.
"""

from atomic.lang.error import GenericException
from atomic.lang.lexical import lex
from atomic.lang.runtime import Environment, execute
from atomic.lang.syntax import parse


class Session:
    """Governs one run of an Atomic program. After run, tokens, program and environment hold the result of each
    stage.
    """
    STR_FILE = "<in>"  # filename used when source is given directly

    def __init__(self, error_handler, path=None, source=None, debug=True):
        self.error_handler = error_handler
        self.path = path if path is not None else Session.STR_FILE
        self.error_handler.register_file(self.path)

        self.debug = debug  # whether or not to dump tokens and syntax tree before executing

        if source is None:
            if path is None:
                raise GenericException("either a path or source must be given", internal=True)
            source = Session.read(path)
        self.source = source

        self.tokens = []
        self.program = []
        self.environment = Environment()

    @staticmethod
    def read(path):
        """Returns contents of path. Raises a fatal GenericException if it can't be read."""
        try:
            with open(path, "r") as file:
                return file.read()
        except (OSError, UnicodeDecodeError):
            raise GenericException("'{}' could not be opened", path, diagnosis=False)

    def run(self):
        """Lexes, parses and executes self.source. Malformed or failing statements are reported and skipped."""
        self.tokens, errors = lex(self.source)
        self.error_handler.warn_all(errors)
        if self.debug:
            print(f"Tokens: {self.tokens}")

        self.program, errors = parse(self.tokens)
        self.error_handler.warn_all(errors)
        if self.debug:
            print(f"AST: {self.program}")

        self.environment = Environment()
        execute(self.program, self.environment, self.error_handler)

    @property
    def diagnostics(self):
        return self.error_handler.reported
