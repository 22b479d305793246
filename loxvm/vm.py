import logging
import math
import sys

from loxvm.chunk import Chunk
from loxvm.compiler import Compiler
from loxvm.debug import disassemble_instruction, format_stack
from loxvm.errors import LoxInternalError, LoxRuntimeError
from loxvm.opcodes import OpCode
from loxvm.value import (FALSE, NIL, TRUE, bool_value, is_falsey,
                         number_value, values_equal)

logger = logging.getLogger(__name__)


class InterpretResultCode:
    """
    What became of one call to VM.interpret
    """

    INTERPRET_OK = 0
    INTERPRET_COMPILE_ERROR = 1
    INTERPRET_RUNTIME_ERROR = 2


InterpretResultToName = {getattr(InterpretResultCode, op): op
                         for op in dir(InterpretResultCode) if op.startswith('INTERPRET_')}


class VM(object):
    STACK_MAX_SIZE = 256

    chunk = None
    stack = None
    stack_top = 0

    # Instruction Pointer (or Program Counter)
    # points to the next instruction to be executed
    ip = 0

    # The value the last successful run returned
    last_value = None

    def __init__(self, trace=False, print_code=False, out=None, err=None):
        self.debug_trace = trace
        self.print_code = print_code
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self._reset_stack()

    def _reset_stack(self):
        self.stack = [NIL] * self.STACK_MAX_SIZE
        self.stack_top = 0

    def _stack_push(self, value):
        if self.stack_top >= self.STACK_MAX_SIZE:
            self._runtime_error("Stack overflow.")
        self.stack[self.stack_top] = value
        self.stack_top += 1

    def _stack_pop(self):
        assert self.stack_top > 0, "pop from an empty stack"
        self.stack_top -= 1
        return self.stack[self.stack_top]

    def _stack_peek(self, distance):
        return self.stack[self.stack_top - 1 - distance]

    def _run(self):
        while True:
            if self.debug_trace:
                self.out.write(format_stack(self.stack, self.stack_top) + "\n")
                line, _ = disassemble_instruction(self.chunk, self.ip)
                self.out.write(line + "\n")
            instruction = self._read_byte()

            if instruction == OpCode.OP_RETURN:
                self.last_value = self._stack_pop()
                self.out.write("%s\n" % self.last_value)
                return InterpretResultCode.INTERPRET_OK
            elif instruction == OpCode.OP_CONSTANT:
                self._stack_push(self._read_constant())
            elif instruction == OpCode.OP_NIL:
                self._stack_push(NIL)
            elif instruction == OpCode.OP_TRUE:
                self._stack_push(TRUE)
            elif instruction == OpCode.OP_FALSE:
                self._stack_push(FALSE)
            elif instruction == OpCode.OP_EQUAL:
                b = self._stack_pop()
                a = self._stack_pop()
                self._stack_push(bool_value(values_equal(a, b)))
            elif instruction == OpCode.OP_GREATER:
                self._binary_op(self._stack_greater, bool_value)
            elif instruction == OpCode.OP_LESS:
                self._binary_op(self._stack_less, bool_value)
            elif instruction == OpCode.OP_ADD:
                self._binary_op(self._stack_add, number_value)
            elif instruction == OpCode.OP_SUBTRACT:
                self._binary_op(self._stack_subtract, number_value)
            elif instruction == OpCode.OP_MULTIPLY:
                self._binary_op(self._stack_multiply, number_value)
            elif instruction == OpCode.OP_DIVIDE:
                self._binary_op(self._stack_divide, number_value)
            elif instruction == OpCode.OP_NOT:
                self._stack_push(bool_value(is_falsey(self._stack_pop())))
            elif instruction == OpCode.OP_NEGATE:
                if not self._stack_peek(0).is_number():
                    self._runtime_error("Operand must be a number.")
                operand = self._stack_pop().as_number()
                self._stack_push(number_value(-operand))
            else:
                raise LoxInternalError("Unknown opcode %d at offset %d" % (instruction, self.ip - 1))

    @staticmethod
    def _stack_add(op1, op2):
        return op1 + op2

    @staticmethod
    def _stack_subtract(op1, op2):
        return op1 - op2

    @staticmethod
    def _stack_multiply(op1, op2):
        return op1 * op2

    @staticmethod
    def _stack_divide(op1, op2):
        # python raises on float division by zero, IEEE 754 doesn't
        if op2 == 0.0:
            if op1 == 0.0 or math.isnan(op1):
                return math.nan
            return math.copysign(math.inf, op1) * math.copysign(1.0, op2)
        return op1 / op2

    @staticmethod
    def _stack_greater(op1, op2):
        return op1 > op2

    @staticmethod
    def _stack_less(op1, op2):
        return op1 < op2

    def interpret(self, source):
        self._reset_stack()
        chunk = Chunk()
        compiler = Compiler(source, chunk, print_code=self.print_code,
                            out=self.out, err=self.err)
        if compiler.compile():
            return self.interpret_chunk(chunk)
        else:
            return InterpretResultCode.INTERPRET_COMPILE_ERROR

    def interpret_chunk(self, chunk):
        if self.debug_trace:
            self.out.write("== VM TRACE ==\n")
        self.chunk = chunk
        self.ip = 0
        self._reset_stack()
        try:
            return self._run()
        except LoxRuntimeError as e:
            logger.debug("Runtime error on line %d: %s", e.line, e.message)
            self.err.write(e.format() + "\n")
            self._reset_stack()
            return InterpretResultCode.INTERPRET_RUNTIME_ERROR

    def _read_byte(self):
        instruction = self.chunk.code[self.ip]
        self.ip += 1
        return instruction

    def _read_constant(self):
        constant_index = self._read_byte()
        return self.chunk.constants[constant_index]

    def _runtime_error(self, message):
        # ip has already moved past the failing instruction's opcode
        line = self.chunk.lines[self.ip - 1]
        raise LoxRuntimeError(message, line)

    def _binary_op(self, operator, wrap):
        if not self._stack_peek(0).is_number() or not self._stack_peek(1).is_number():
            self._runtime_error("Operands must be numbers.")
        op2 = self._stack_pop().as_number()
        op1 = self._stack_pop().as_number()
        self._stack_push(wrap(operator(op1, op2)))


def interpret(source, trace=False, print_code=False, out=None, err=None):
    """Compile and run source on a fresh VM."""
    vm = VM(trace=trace, print_code=print_code, out=out, err=err)
    return vm.interpret(source)
