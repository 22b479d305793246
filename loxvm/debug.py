"""
Human readable listings of chunks, VM stacks and token streams.

Every function here returns text instead of printing it, callers decide
where the text goes. Disassembly never modifies the chunk.
"""
from loxvm.opcodes import OpCode, OpCodeToInstructionName
from loxvm.scanner import TokenTypeToName
from loxvm.value import format_value


def leftpad_string(string, width, char=" "):
    l = len(string)
    if l > width:
        return string
    return char * (width - l) + string


def rightpad_string(string, width, char=" "):
    l = len(string)
    if l > width:
        return string
    return string + char * (width - l)


def format_ip(ip):
    return leftpad_string("%d" % ip, 4, '0')


def format_line(chunk, offset):
    if offset > 0 and chunk.lines[offset] == chunk.lines[offset - 1]:
        return "   |"
    return leftpad_string(str(chunk.lines[offset]), 4)


def get_instruction_name(instruction):
    return OpCodeToInstructionName[instruction]


def simple_instruction(name, offset):
    return name, offset + 1


def constant_instruction(name, chunk, offset):
    constant = chunk.code[offset + 1]
    repr = "%s %s '%s'" % (
        rightpad_string(name, 16),
        leftpad_string("%d" % constant, 4),
        format_value(chunk.constants[constant])
    )
    return repr, offset + 2


def format_instruction(chunk, offset):
    """
    Render the instruction at offset without the offset/line columns.

    :return: (text, offset of the next instruction)
    """
    instruction = chunk.code[offset]
    if instruction not in OpCodeToInstructionName:
        return "Unknown opcode %d" % instruction, offset + 1

    instruction_name = get_instruction_name(instruction)
    if instruction in OpCode.ConstantOps:
        return constant_instruction(instruction_name, chunk, offset)
    return simple_instruction(instruction_name, offset)


def disassemble_instruction(chunk, offset):
    """
    :return: (one listing line without newline, offset of the next instruction)
    """
    repr, next_offset = format_instruction(chunk, offset)
    line = "%s %s %s" % (format_ip(offset), format_line(chunk, offset), repr)
    return line, next_offset


def disassemble_chunk(chunk, name):
    lines = ["== %s ==" % name]
    offset = 0
    while offset < len(chunk.code):
        line, offset = disassemble_instruction(chunk, offset)
        lines.append(line)
    return "\n".join(lines) + "\n"


def format_stack(stack, stack_top):
    slots = "".join("[ %s ]" % format_value(stack[i]) for i in range(stack_top))
    return "          " + slots


def dump_tokens(scanner):
    """
    One line per token up to and including EOF: the line number (or a bar
    when unchanged), the token type name and its lexeme.
    """
    lines = []
    line = -1
    for token in scanner:
        if token.line != line:
            prefix = leftpad_string(str(token.line), 4)
            line = token.line
        else:
            prefix = "   |"
        lines.append("%s %s '%s'" % (
            prefix,
            rightpad_string(TokenTypeToName[token.type], 13),
            scanner.get_token_string(token)
        ))
    return "\n".join(lines) + "\n"
