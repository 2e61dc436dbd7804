"""
sprig CLI Entrypoint.

Command-line front end for the sprig parser. Reads source from a `.sp` file
or an inline string, parses it, and prints the resulting AST as JSON.

Features:
    - Read source from `.sp` files or inline strings.
    - Lex and parse into an AST, or dump the raw token stream.
    - Output to console or file, optionally with banners and indentation.

Example usage:
    sprig hello.sp
    sprig -s "def f(int x) { x + 1 }" -p
    sprig prog.sp -o prog.json --indent 2
    sprig -s "a = b = c" --tokens

Functions:
    run_sprig(source: str, is_string: bool = False, out: str | None = None,
              pretty: bool = False, tokens: bool = False, indent: int | None = None) -> None:
        Executes the pipeline (lex -> parse -> serialize -> output).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, runs the pipeline, and reports syntax errors.
"""

import argparse
import json
import sys
from typing import Any

from sprig.sprig_ast import program_to_dicts
from sprig.sprig_lexer import CharacterStream, Lexer
from sprig.sprig_parser import Parser

SOURCE_SUFFIX = ".sp"


def run_sprig(
    source: str,
    is_string: bool = False,
    out: str | None = None,
    pretty: bool = False,
    tokens: bool = False,
    indent: int | None = None,
) -> None:
    """
    Run the sprig front end: lex, parse, and write the JSON result.

    Args:
        source (str): The sprig source code or path to a `.sp` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        out (str | None): Optional path to write the JSON output. If None, prints to stdout.
        pretty (bool): If True, prints banners and indents JSON by 2 unless `indent` is given.
        tokens (bool): If True, outputs the token stream instead of the AST.
        indent (int | None): JSON indentation level.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.sp'.
        SyntaxError: If the source cannot be lexed or parsed.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    token_iter = Lexer(CharacterStream(source)).tokens()

    # 3. Parsing (or token dump)
    payload: Any
    if tokens:
        payload = [
            {
                "kind": tok.kind.value if tok.kind else None,
                "text": tok.text,
                "line": tok.line,
                "col": tok.col,
            }
            for tok in token_iter
        ]
        title = "Tokens"
    else:
        payload = program_to_dicts(Parser(token_iter).parse())
        title = "Parsed AST"

    if indent is None and pretty:
        indent = 2
    text = json.dumps(payload, indent=indent)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        if pretty:
            print(f"[ok] >>> wrote {title.lower()} to {out}")
    elif pretty:
        banner = "=" * 20
        print(f"{banner}\n{title}\n{banner}\n{text}\n{banner}")
    else:
        print(text)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprig", description="Parse sprig source and print its AST as JSON."
    )
    parser.add_argument("source", help=f"{SOURCE_SUFFIX} filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show output with banners"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Dump the token stream instead of the AST"
    )
    parser.add_argument(
        "--indent", type=int, default=None, metavar="N", help="JSON indentation"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the sprig CLI.

    Returns the process exit status: 0 on success, 1 when the source cannot be
    read, has an unsupported extension, or fails to parse.
    """
    args = build_arg_parser().parse_args(argv)
    try:
        run_sprig(
            source=args.source,
            is_string=args.string,
            out=args.out,
            pretty=args.pretty,
            tokens=args.tokens,
            indent=args.indent,
        )
    except (SyntaxError, ValueError, OSError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
