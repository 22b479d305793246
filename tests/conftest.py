"""Shared test fixtures and helpers."""

import io

import pytest

from loxvm.chunk import Chunk
from loxvm.compiler import Compiler
from loxvm.scanner import Scanner, TokenTypes
from loxvm.vm import VM


class Run(object):
    """The outcome of interpreting one source text."""

    def __init__(self, result, out, err, vm):
        self.result = result
        self.out = out
        self.err = err
        self.vm = vm

    @property
    def value(self):
        return self.vm.last_value


@pytest.fixture
def run():
    """Return a helper that interprets source on a fresh VM, capturing both streams."""

    def _run(source, **kwargs):
        out = io.StringIO()
        err = io.StringIO()
        vm = VM(out=out, err=err, **kwargs)
        result = vm.interpret(source)
        return Run(result, out.getvalue(), err.getvalue(), vm)

    return _run


@pytest.fixture
def compile_source():
    """Return a helper that compiles source and returns (ok, chunk, diagnostics)."""

    def _compile(source):
        err = io.StringIO()
        chunk = Chunk()
        ok = Compiler(source, chunk, err=err).compile()
        return ok, chunk, err.getvalue()

    return _compile


@pytest.fixture
def scan():
    """Return a helper that scans source and returns all tokens (excluding EOF)."""

    def _scan(source):
        scanner = Scanner(source)
        tokens = [t for t in scanner if t.type != TokenTypes.EOF]
        return scanner, tokens

    return _scan


def assert_types(tokens, expected):
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, "Expected %s, got %s" % (expected, actual)
