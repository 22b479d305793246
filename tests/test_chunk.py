"""Tests for chunks, the line table and the disassembler."""

import io

import pytest

from loxvm.chunk import Chunk, Linesman
from loxvm.debug import disassemble_chunk, dump_tokens, format_stack
from loxvm.opcodes import OpCode
from loxvm.scanner import Scanner
from loxvm.value import NIL, number_value


@pytest.fixture
def constant_chunk():
    chunk = Chunk()
    constant = chunk.add_constant(1.2)
    chunk.write_chunk(OpCode.OP_CONSTANT, 123)
    chunk.write_chunk(constant, 123)
    chunk.write_chunk(OpCode.OP_RETURN, 123)
    return chunk


class TestLinesman:
    def test_lines_are_index_aligned(self):
        lines = Linesman()
        for line in [1, 1, 1, 2, 2, 5]:
            lines.append(line)
        assert len(lines) == 6
        assert [lines[i] for i in range(6)] == [1, 1, 1, 2, 2, 5]
        assert list(lines) == [1, 1, 1, 2, 2, 5]

    def test_stored_run_length_encoded(self):
        lines = Linesman()
        for line in [7, 7, 7, 7]:
            lines.append(line)
        assert lines.rle == [[7, 4]]

    def test_out_of_range(self):
        lines = Linesman()
        lines.append(1)
        with pytest.raises(IndexError):
            lines[1]

    def test_negative_index(self):
        lines = Linesman()
        lines.append(1)
        lines.append(2)
        assert lines[-1] == 2


class TestChunk:
    def test_write_keeps_code_and_lines_aligned(self, constant_chunk):
        assert constant_chunk.code == [OpCode.OP_CONSTANT, 0, OpCode.OP_RETURN]
        assert list(constant_chunk.lines) == [123, 123, 123]
        assert len(constant_chunk) == 3

    def test_add_constant_boxes_and_returns_index(self):
        chunk = Chunk()
        assert chunk.add_constant(1) == 0
        assert chunk.add_constant(None) == 1
        assert chunk.constants[0] == number_value(1)
        assert chunk.constants[1] is NIL

    def test_find_constant(self):
        chunk = Chunk()
        chunk.add_constant(1)
        chunk.add_constant(2)
        assert chunk.find_constant(2) == 1
        assert chunk.find_constant(3) == -1

    def test_rejects_non_bytes(self):
        chunk = Chunk()
        with pytest.raises(AssertionError):
            chunk.write_chunk(256, 1)


class TestDisassembly:
    def test_constant_then_return(self, constant_chunk):
        text = disassemble_chunk(constant_chunk, "test chunk")
        assert text == (
            "== test chunk ==\n"
            "0000  123 OP_CONSTANT         0 '1.2'\n"
            "0002    | OP_RETURN\n"
        )

    @pytest.mark.parametrize("number,text", [
        (3.14159265, "3.14159265"),
        (123456789, "123456789"),
    ])
    def test_constant_shown_in_full(self, number, text):
        chunk = Chunk()
        chunk.write_chunk(OpCode.OP_CONSTANT, 1)
        chunk.write_chunk(chunk.add_constant(number), 1)
        chunk.write_chunk(OpCode.OP_RETURN, 1)
        line = disassemble_chunk(chunk, "c").splitlines()[1]
        assert line == "0000    1 OP_CONSTANT         0 '%s'" % text

    def test_lists_two_instructions(self, constant_chunk):
        lines = disassemble_chunk(constant_chunk, "c").splitlines()[1:]
        assert len(lines) == 2

    def test_disassembly_is_repeatable(self, constant_chunk):
        first = disassemble_chunk(constant_chunk, "c")
        second = disassemble_chunk(constant_chunk, "c")
        assert first == second
        assert constant_chunk.code == [OpCode.OP_CONSTANT, 0, OpCode.OP_RETURN]

    def test_new_line_number_is_printed(self):
        chunk = Chunk()
        chunk.write_chunk(OpCode.OP_NIL, 1)
        chunk.write_chunk(OpCode.OP_NOT, 2)
        chunk.write_chunk(OpCode.OP_RETURN, 2)
        assert disassemble_chunk(chunk, "c").splitlines()[1:] == [
            "0000    1 OP_NIL",
            "0001    2 OP_NOT",
            "0002    | OP_RETURN",
        ]

    def test_unknown_opcode(self):
        chunk = Chunk()
        chunk.write_chunk(200, 1)
        assert "Unknown opcode 200" in disassemble_chunk(chunk, "c")

    def test_chunk_disassemble_writes_to_stream(self, constant_chunk):
        out = io.StringIO()
        constant_chunk.disassemble("test chunk", out)
        assert out.getvalue() == disassemble_chunk(constant_chunk, "test chunk")


class TestTraceHelpers:
    def test_format_stack(self):
        stack = [number_value(1), NIL, number_value(9)]
        assert format_stack(stack, 2) == "          [ 1 ][ nil ]"

    def test_format_empty_stack(self):
        assert format_stack([], 0) == "          "


class TestDumpTokens:
    def test_dump(self):
        text = dump_tokens(Scanner("1 +\n(2)"))
        assert text.splitlines() == [
            "   1 NUMBER        '1'",
            "   | PLUS          '+'",
            "   2 LEFT_PAREN    '('",
            "   | NUMBER        '2'",
            "   | RIGHT_PAREN   ')'",
            "   | EOF           ''",
        ]

    def test_dump_shows_error_message(self):
        text = dump_tokens(Scanner("@"))
        assert "ERROR         'Unexpected character.'" in text
