"""Direct execution of Atomic programs."""

from atomic.lang.error import GenericException


class Environment:
    """Variable table of one execution pass: name -> last assigned int. Unassigned names read as DEFAULT."""
    DEFAULT = 0

    def __init__(self):
        self.variables = {}

    def assign(self, name, value):
        self.variables[name] = value

    def get(self, name):
        return self.variables.get(name, Environment.DEFAULT)

    def __contains__(self, name):
        return name in self.variables

    def __getitem__(self, name):
        return self.variables[name]

    def __len__(self):
        return len(self.variables)

    def __eq__(self, other):
        if isinstance(other, Environment):
            return self.variables == other.variables
        return self.variables == other

    def __repr__(self):
        return f"Environment({self.variables})"


def execute(program, environment, error_handler):
    """Runs each statement of program in order against environment, printing its output. A statement that fails is
    reported to error_handler and skipped.
    """
    for statement in program:
        try:
            output = statement.execute(environment)
        except GenericException as error:
            error_handler.warn(error)
        else:
            print(output)
