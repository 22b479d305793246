# coding=utf-8
import logging
import sys

from loxvm.chunk import Chunk, MAX_CONSTANTS
from loxvm.opcodes import OpCode
from loxvm.scanner import Scanner, TokenTypes
from loxvm.value import number_value

logger = logging.getLogger(__name__)

# Deepest nesting of sub-expressions one compile accepts
MAX_NESTING = 1024
# Python frames the parser uses per nesting level at most:
# parse_precedence -> grouping -> expression -> parse_precedence
FRAMES_PER_LEVEL = 3


class Parser(object):
    def __init__(self):
        self.had_error = False
        self.panic_mode = False
        self.current = None
        self.previous = None


class Precedence(object):
    NONE = 0
    ASSIGNMENT = 1  # =
    OR = 2          # or
    AND = 3         # and
    EQUALITY = 4    # == !=
    COMPARISON = 5  # < > <= >=
    TERM = 6        # + -
    FACTOR = 7      # * /
    UNARY = 8       # ! -
    CALL = 9        # . ()
    PRIMARY = 10


class ParseRule(object):
    """
    How a token type parses: the names of the Compiler methods that handle
    it in prefix and infix position, and its infix precedence.
    """

    def __init__(self, prefix, infix, precedence):
        self.prefix = prefix
        self.infix = infix
        self.precedence = precedence


# The table that drives our whole parser.
rules = {
    TokenTypes.LEFT_PAREN:    ParseRule('grouping', None,     Precedence.NONE),
    TokenTypes.RIGHT_PAREN:   ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.LEFT_BRACE:    ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.RIGHT_BRACE:   ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.COMMA:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.DOT:           ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.MINUS:         ParseRule('unary',    'binary', Precedence.TERM),
    TokenTypes.PLUS:          ParseRule(None,       'binary', Precedence.TERM),
    TokenTypes.SEMICOLON:     ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.SLASH:         ParseRule(None,       'binary', Precedence.FACTOR),
    TokenTypes.STAR:          ParseRule(None,       'binary', Precedence.FACTOR),
    TokenTypes.BANG:          ParseRule('unary',    None,     Precedence.NONE),
    TokenTypes.BANG_EQUAL:    ParseRule(None,       'binary', Precedence.EQUALITY),
    TokenTypes.EQUAL:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.EQUAL_EQUAL:   ParseRule(None,       'binary', Precedence.EQUALITY),
    TokenTypes.GREATER:       ParseRule(None,       'binary', Precedence.COMPARISON),
    TokenTypes.GREATER_EQUAL: ParseRule(None,       'binary', Precedence.COMPARISON),
    TokenTypes.LESS:          ParseRule(None,       'binary', Precedence.COMPARISON),
    TokenTypes.LESS_EQUAL:    ParseRule(None,       'binary', Precedence.COMPARISON),
    TokenTypes.IDENTIFIER:    ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.STRING:        ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.NUMBER:        ParseRule('number',   None,     Precedence.NONE),
    TokenTypes.AND:           ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.CLASS:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.ELSE:          ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.FALSE:         ParseRule('literal',  None,     Precedence.NONE),
    TokenTypes.FUN:           ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.FOR:           ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.IF:            ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.NIL:           ParseRule('literal',  None,     Precedence.NONE),
    TokenTypes.OR:            ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.PRINT:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.RETURN:        ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.SUPER:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.THIS:          ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.TRUE:          ParseRule('literal',  None,     Precedence.NONE),
    TokenTypes.VAR:           ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.WHILE:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.ERROR:         ParseRule(None,       None,     Precedence.NONE),
    TokenTypes.EOF:           ParseRule(None,       None,     Precedence.NONE),
}

# Operators whose bytecode is one or two opcodes, see Compiler.binary
BINARY_OPS = {
    TokenTypes.PLUS:          (OpCode.OP_ADD,),
    TokenTypes.MINUS:         (OpCode.OP_SUBTRACT,),
    TokenTypes.STAR:          (OpCode.OP_MULTIPLY,),
    TokenTypes.SLASH:         (OpCode.OP_DIVIDE,),
    TokenTypes.EQUAL_EQUAL:   (OpCode.OP_EQUAL,),
    TokenTypes.BANG_EQUAL:    (OpCode.OP_EQUAL, OpCode.OP_NOT),
    TokenTypes.GREATER:       (OpCode.OP_GREATER,),
    TokenTypes.GREATER_EQUAL: (OpCode.OP_LESS, OpCode.OP_NOT),
    TokenTypes.LESS:          (OpCode.OP_LESS,),
    TokenTypes.LESS_EQUAL:    (OpCode.OP_GREATER, OpCode.OP_NOT),
}


class Compiler(object):
    """
    A single pass compiler using Pratt’s parsing technique.
    Note it might be interesting to create a version that
    parses to an AST, then a code generator traverses the AST
    and outputs bytecode.

    Syntax errors are written to ``err`` as they are found, the disassembly
    listing (when ``print_code`` is set) goes to ``out``.
    """

    def __init__(self, source, chunk=None, print_code=False, out=None, err=None):
        self.parser = Parser()
        self.depth = 0
        self.scanner = Scanner(source)
        # The chunk of bytecode we are currently assembling
        self.chunk = chunk if chunk is not None else Chunk()
        self.print_code = print_code
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def compile(self):
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + FRAMES_PER_LEVEL * MAX_NESTING)
        try:
            self.advance()
            self.expression()

            self.consume(TokenTypes.EOF, "Expect end of expression.")
        finally:
            sys.setrecursionlimit(limit)
        self.end_compiler()

        if self.parser.had_error:
            logger.debug("Compilation failed")
        else:
            logger.debug("Compiled %d bytes, %d constants",
                         len(self.chunk.code), len(self.chunk.constants))
        return not self.parser.had_error

    def _error_at(self, token, msg):
        if self.parser.panic_mode:
            # suppress subsequent errors
            return
        self.parser.panic_mode = True

        if token.type == TokenTypes.EOF:
            where = " at end"
        elif token.type == TokenTypes.ERROR:
            where = ""
        else:
            where = " at '%s'" % self.scanner.get_token_string(token)
        self.err.write("[line %d] Error%s: %s\n" % (token.line, where, msg))

        self.parser.had_error = True

    def error_at_current(self, msg):
        self._error_at(self.parser.current, msg)

    def error(self, msg):
        self._error_at(self.parser.previous, msg)

    def end_compiler(self):
        self._emit_return()

        if self.print_code and not self.parser.had_error:
            self.current_chunk().disassemble("code", self.out)

    def advance(self):
        self.parser.previous = self.parser.current

        while True:
            self.parser.current = self.scanner.scan_token()
            if self.parser.current.type != TokenTypes.ERROR:
                break
            self.error_at_current(self.parser.current.message)

    def consume(self, token_type, msg):
        if self.parser.current.type == token_type:
            self.advance()
            return

        self.error_at_current(msg)

    def make_constant(self, value):
        chunk = self.current_chunk()
        constant = chunk.find_constant(value)
        if constant == -1:
            constant = chunk.add_constant(value)
        if constant >= MAX_CONSTANTS:
            self.error("Too many constants in one chunk.")
            return 0
        return constant

    def current_chunk(self):
        return self.chunk

    def emit_byte(self, byte):
        self.current_chunk().write_chunk(byte, self.parser.previous.line)

    def emit_bytes(self, byte_a, byte_b):
        self.emit_byte(byte_a)
        self.emit_byte(byte_b)

    def _emit_constant(self, value):
        self.emit_bytes(OpCode.OP_CONSTANT, self.make_constant(value))

    def _emit_return(self):
        self.emit_byte(OpCode.OP_RETURN)

    def grouping(self):
        self.expression()
        self.consume(TokenTypes.RIGHT_PAREN, "Expect ')' after expression.")

    def unary(self):
        op_type = self.parser.previous.type
        # Compile the operand
        self.parse_precedence(Precedence.UNARY)
        # Emit the operator instruction
        if op_type == TokenTypes.MINUS:
            self.emit_byte(OpCode.OP_NEGATE)
        elif op_type == TokenTypes.BANG:
            self.emit_byte(OpCode.OP_NOT)

    def binary(self):
        op_type = self.parser.previous.type

        # As binary ops are "infix" we've already
        # consumed the left operand.

        # Compile the right operand one level up, so a - b - c
        # groups as (a - b) - c
        rule = self._get_rule(op_type)
        self.parse_precedence(rule.precedence + 1)

        # Emit the operator instruction(s)
        for op in BINARY_OPS[op_type]:
            self.emit_byte(op)

    def literal(self):
        op_type = self.parser.previous.type
        if op_type == TokenTypes.FALSE:
            self.emit_byte(OpCode.OP_FALSE)
        elif op_type == TokenTypes.NIL:
            self.emit_byte(OpCode.OP_NIL)
        elif op_type == TokenTypes.TRUE:
            self.emit_byte(OpCode.OP_TRUE)

    def parse_precedence(self, precedence):
        # parses any expression of a given precedence level or higher
        if self.depth >= MAX_NESTING:
            # Consumes nothing, every enclosing level unwinds and the
            # chunk still ends in a RETURN.
            self.error_at_current("Expression nested too deeply.")
            return
        self.depth += 1

        self.advance()
        prefix_rule = self._get_rule(self.parser.previous.type).prefix
        if prefix_rule is None:
            self.error("Expect expression.")
        else:
            getattr(self, prefix_rule)()

            while precedence <= self._get_rule(self.parser.current.type).precedence:
                self.advance()
                infix_rule = self._get_rule(self.parser.previous.type).infix
                getattr(self, infix_rule)()

        self.depth -= 1

    def number(self):
        value = float(self.scanner.get_token_string(self.parser.previous))
        self._emit_constant(number_value(value))

    def expression(self):
        self.parse_precedence(Precedence.ASSIGNMENT)

    def _get_rule(self, op_type):
        return rules[op_type]


def compile(source, chunk, print_code=False, out=None, err=None):
    """
    Compile source into chunk.

    :return: True if no syntax error was reported
    """
    compiler = Compiler(source, chunk, print_code=print_code, out=out, err=err)
    return compiler.compile()
