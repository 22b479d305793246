from loxvm.chunk import Chunk
from loxvm.opcodes import OpCode
from loxvm.compiler import Compiler, compile
from loxvm.vm import VM, InterpretResultCode, interpret
