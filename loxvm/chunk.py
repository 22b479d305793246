import sys

from loxvm.debug import disassemble_chunk
from loxvm.value import ValueArray, box


# An operand byte can only address this many constants
MAX_CONSTANTS = 256


class Linesman(object):
    """
    A run-length encoding object tracking the source code
    line numbers for all chunk's instructions.

    Behaves like a list with one line per byte of code.
    """
    def __init__(self):
        self.rle = []
        self.count = 0

    def append(self, line):
        if len(self.rle) == 0 or self.rle[-1][0] != line:
            self.rle.append([line, 1])
        else:
            # incr line count
            self.rle[-1][1] += 1
        self.count += 1

    def _index_rle(self, rle, item):
        rle_count = 0
        for line_number, repeats in rle:
            rle_count += repeats
            if rle_count > item:
                return line_number
        raise IndexError("line index out of range")

    def __getitem__(self, item):
        if item < 0:
            item += self.count
        if not 0 <= item < self.count:
            raise IndexError("line index out of range")
        return self._index_rle(self.rle, item)

    def __len__(self):
        return self.count

    def __iter__(self):
        for line_number, repeats in self.rle:
            for _ in range(repeats):
                yield line_number


class Chunk:
    code = None
    constants = None
    lines = None

    def __init__(self):
        self.code = []
        self.lines = Linesman()
        self.constants = ValueArray()

    def write_chunk(self, byte, line):
        assert 0 <= byte <= 255, "not a byte: %r" % byte
        self.code.append(byte)
        self.lines.append(line)

    def __len__(self):
        return len(self.code)

    def __repr__(self):
        return "<Chunk of %d bytes>" % (len(self.code))

    def disassemble(self, name, out=None):
        if out is None:
            out = sys.stdout
        out.write(disassemble_chunk(self, name))

    def add_constant(self, value):
        """
        Append a constant to the pool, boxing plain python values.

        :return: The index of the new constant. It may be past what an
                 operand byte can hold, callers check against MAX_CONSTANTS.
        """
        return self.constants.append(box(value))

    def find_constant(self, value):
        """Index of an equal constant already in the pool, or -1."""
        try:
            return self.constants.index(box(value))
        except ValueError:
            return -1
