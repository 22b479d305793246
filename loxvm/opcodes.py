

class OpCode:
    """
    The OpCodes of our language's VM
    """

    OP_CONSTANT = 0
    OP_NIL = 1
    OP_TRUE = 2
    OP_FALSE = 3
    OP_EQUAL = 4
    OP_GREATER = 5
    OP_LESS = 6
    OP_ADD = 7
    OP_SUBTRACT = 8
    OP_MULTIPLY = 9
    OP_DIVIDE = 10
    OP_NOT = 11
    OP_NEGATE = 12
    OP_RETURN = 13

    BinaryOps = {
        OP_ADD: "+",
        OP_SUBTRACT: "-",
        OP_MULTIPLY: "*",
        OP_DIVIDE: "/",
        OP_GREATER: ">",
        OP_LESS: "<",
    }

    # Opcodes followed by a one byte constant pool index
    ConstantOps = (OP_CONSTANT,)


OpCodeToInstructionName = {getattr(OpCode, op): op
                           for op in dir(OpCode) if op.startswith('OP_')}
