"""
ares-parse: run the Ares front end over a source file.

Prints the program tree as an S-expression, or the token stream with
--tokens. A scanner or parser error is printed to stderr in the usual
`module:line:column: message` form and the exit status is 1.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .module import Module
from .lexer.scanner import Scanner
from .lexer.errors import CompileError
from .parser.parser import Parser

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ares-parse",
        description="Parse an Ares source file and print its syntax tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    ares-parse main.ares                 # Print the syntax tree
    ares-parse --tokens main.ares        # Print one token per line
    echo 'a = 1 + 2' | ares-parse -      # Read from stdin
        """
    )

    parser.add_argument('source',
                        help="Source file to parse, or '-' for stdin")
    parser.add_argument('--tokens', action='store_true',
                        help='Print the token stream instead of the tree')
    parser.add_argument('--name',
                        help='Module name used in diagnostics (defaults to the path)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging and detailed diagnostics')
    return parser


def _read_source(module: Module) -> str:
    if module.path is None:
        return sys.stdin.read()
    with open(module.path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for ares-parse."""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    name = args.name or ('<stdin>' if args.source == '-' else args.source)
    module = Module(name, path=None if args.source == '-' else args.source)

    try:
        source = _read_source(module)
    except OSError as e:
        print(f"ares-parse: cannot read {args.source}: {e}", file=sys.stderr)
        return 2

    scanner = Scanner(source, module)
    try:
        if args.tokens:
            for token in scanner:
                print(f"{token.line_num}:{token.line_pos}\t{token}")
        else:
            tree = Parser(scanner, module).parse_program()
            print(tree.to_string_tree())
    except CompileError as e:
        if args.verbose:
            print(e.diagnostic.format_detailed(), end='', file=sys.stderr)
        else:
            print(e, file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
