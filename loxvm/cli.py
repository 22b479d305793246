"""
Command line glue: run a script file or an interactive prompt and turn
interpreter results into process exit codes.
"""
import argparse
import logging
import sys

from loxvm.debug import dump_tokens
from loxvm.scanner import Scanner
from loxvm.vm import VM, InterpretResultCode, InterpretResultToName

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_COMPILE_ERROR = 65
EXIT_RUNTIME_ERROR = 70
EXIT_IO_ERROR = 74

ResultToExitCode = {
    InterpretResultCode.INTERPRET_OK: EXIT_OK,
    InterpretResultCode.INTERPRET_COMPILE_ERROR: EXIT_COMPILE_ERROR,
    InterpretResultCode.INTERPRET_RUNTIME_ERROR: EXIT_RUNTIME_ERROR,
}

LINE_BUFFER_LENGTH = 1024


def build_parser():
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="loxvm",
        description="Bytecode compiler and virtual machine for Lox expressions",
    )
    p.add_argument("path", nargs="?", help="Script to run (default: start a repl)")
    p.add_argument("--trace", action="store_true",
                   help="Print the stack and each instruction as it executes")
    p.add_argument("--print-code", action="store_true",
                   help="Print the disassembled bytecode after compiling")
    p.add_argument("--tokens", action="store_true",
                   help="Print the scanned tokens instead of running")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Enable debug logging")
    return p


def configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_file(filename):
    try:
        with open(filename, 'r', encoding="utf-8") as file:
            return file.read()
    except OSError as e:
        logger.debug("Error opening file: %s", e)
        sys.stderr.write("Could not open file \"%s\".\n" % filename)
        raise SystemExit(EXIT_IO_ERROR)
    except UnicodeDecodeError as e:
        logger.debug("Error decoding file: %s", e)
        sys.stderr.write("Could not read file \"%s\", it is not UTF-8.\n" % filename)
        raise SystemExit(EXIT_IO_ERROR)


def run_file(filename, vm=None):
    logger.debug("run_file called with: %s", filename)

    source = read_file(filename)
    if vm is None:
        vm = VM()
    result = vm.interpret(source)
    logger.debug(InterpretResultToName[result])
    return ResultToExitCode[result]


def repl(stdin, stdout, vm=None):
    if vm is None:
        vm = VM(out=stdout)

    while True:
        stdout.write("> ")
        stdout.flush()
        next_line = stdin.readline(LINE_BUFFER_LENGTH)
        if not next_line:
            stdout.write("\n")
            break
        if not next_line.strip():
            continue

        vm.interpret(next_line)
    return EXIT_OK


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.tokens:
        if args.path is None:
            sys.stderr.write("Usage: loxvm --tokens path\n")
            return EXIT_USAGE
        sys.stdout.write(dump_tokens(Scanner(read_file(args.path))))
        return EXIT_OK

    vm = VM(trace=args.trace, print_code=args.print_code)
    if args.path is not None:
        return run_file(args.path, vm)

    logger.debug("Entering lox repl")
    return repl(sys.stdin, sys.stdout, vm)
