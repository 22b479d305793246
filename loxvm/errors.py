"""
Exceptions raised inside the interpreter.

Compile errors are not exceptions: the compiler reports them as it goes
and only returns whether any occurred. Runtime errors unwind the VM's
dispatch loop and are turned back into an InterpretResult by the VM.
"""


class LoxError(Exception):
    pass


class LoxRuntimeError(LoxError):
    """
    A user visible error found while executing a chunk, e.g. a type error.

    The line is the source line of the failing instruction.
    """

    def __init__(self, message, line):
        super(LoxRuntimeError, self).__init__(message)
        self.message = message
        self.line = line

    def format(self):
        return "%s\n[line %d] in script" % (self.message, self.line)


class LoxInternalError(LoxError):
    """
    A broken invariant inside the interpreter itself, such as an unknown
    opcode or reading a value's payload as the wrong type. Never caused by
    the user's program, so never reported as a runtime error.
    """
