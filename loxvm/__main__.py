"""
The entry point for running on top of python.

"""
import sys

from loxvm.cli import main

if __name__ == '__main__':
    sys.exit(main())
