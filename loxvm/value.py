from loxvm.errors import LoxInternalError


class ValueType:
    BOOL = 0
    NIL = 1
    NUMBER = 2
    # Reserved for heap allocated objects, nothing produces one yet.
    OBJ = 3


ValueTypeToName = {getattr(ValueType, t): t
                   for t in dir(ValueType) if not t.startswith('_')}


class Value(object):
    """
    Boxing of values.

    A Value is a tagged union: ``type`` is one of ValueType and ``value``
    holds the matching payload (None, a bool or a float). Values are never
    mutated after construction.
    """

    def __init__(self, value_type, value=None):
        self.type = value_type
        self.value = value

    def is_nil(self):
        return self.type == ValueType.NIL

    def is_bool(self):
        return self.type == ValueType.BOOL

    def is_number(self):
        return self.type == ValueType.NUMBER

    def as_bool(self):
        assert self.type == ValueType.BOOL, "not a bool: %r" % self
        return self.value

    def as_number(self):
        assert self.type == ValueType.NUMBER, "not a number: %r" % self
        return self.value

    def debug_repr(self):
        return format_value(self)

    def __str__(self):
        return format_value(self)

    def __repr__(self):
        return "<Value %s: '%s'>" % (ValueTypeToName.get(self.type), self.value)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return values_equal(self, other)

    def __hash__(self):
        return hash((self.type, self.value))


NIL = Value(ValueType.NIL)
TRUE = Value(ValueType.BOOL, True)
FALSE = Value(ValueType.BOOL, False)


def bool_value(b):
    return TRUE if b else FALSE


def number_value(n):
    return Value(ValueType.NUMBER, float(n))


def box(value):
    """Wrap a plain python None, bool or number in a Value."""
    if isinstance(value, Value):
        return value
    if value is None:
        return NIL
    # bool first, it is a subclass of int
    if isinstance(value, bool):
        return bool_value(value)
    if isinstance(value, (int, float)):
        return number_value(value)
    raise LoxInternalError("Can't box %r as a Value" % (value,))


def is_falsey(value):
    # Only nil and false are falsey, 0 is truthy.
    if value.type == ValueType.NIL:
        return True
    if value.type == ValueType.BOOL:
        return not value.value
    if value.type == ValueType.NUMBER:
        return False
    raise LoxInternalError("Unhandled value type %d" % value.type)


def values_equal(a, b):
    if a.type != b.type:
        return False
    if a.type == ValueType.NIL:
        return True
    if a.type == ValueType.BOOL or a.type == ValueType.NUMBER:
        return a.value == b.value
    raise LoxInternalError("Unhandled value type %d" % a.type)


def format_number(number):
    # Shortest text that reads back to the same float, "3" not "3.0"
    text = repr(number)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_value(value):
    if value.type == ValueType.NIL:
        return "nil"
    if value.type == ValueType.BOOL:
        return "true" if value.value else "false"
    if value.type == ValueType.NUMBER:
        return format_number(value.value)
    raise LoxInternalError("Unhandled value type %d" % value.type)


class ValueArray(object):
    def __init__(self):
        self.values = []

    def __getitem__(self, item):
        return self.values[item]

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def index(self, item):
        # Return the index of an equal value already in the array
        for i, value in enumerate(self.values):
            if values_equal(item, value):
                return i
        raise ValueError("Not found")

    def append(self, value):
        """

        :param value: the Value to store
        :return: The index of the added constant/value
        """
        self.values.append(value)
        return len(self.values) - 1
