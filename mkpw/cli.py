"""CLI for mkpw — generate passwords to stdout or the clipboard, print shell completions."""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .clipboard import ClipboardError, write_to_clipboard
from .completion import SHELLS, completion_script
from .config import load_config, save_config
from .encoding import check_encoding, decode, encode
from .generator import Classifier, PasswordMaker
from .graphemes import split_graphemes

logger = logging.getLogger(__name__)
err_console = Console(stderr=True)

CLASSES = ("uppercase", "lowercase", "number", "symbol")


def _setup_logging(verbose: bool) -> None:
    pkg_logger = logging.getLogger("mkpw")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=err_console, show_path=False))


def _arg_text(value: str, encoding: str) -> str:
    """Re-decode a command line argument from its raw bytes with the chosen encoding."""
    return decode(os.fsencode(value), encoding)


def _classifier(candidates: str, minimum_count: int) -> Classifier:
    clusters = split_graphemes(candidates)
    # an empty candidate string switches the class off
    return Classifier(tuple(clusters), minimum_count if clusters else 0)


def resolve_settings(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combine parsed arguments with the config defaults into plain settings.
    Candidate arguments given on the command line are decoded with --encoding.
    """
    check_encoding(args.encoding)
    settings: Dict[str, Any] = {
        "length": args.length,
        "count": args.count,
        "exclude_similar": args.exclude_similar,
        "include_whitespace": args.include_whitespace,
        "encoding": args.encoding,
    }
    for name in CLASSES:
        given = getattr(args, f"{name}_candidates")
        settings[f"{name}_candidates"] = cfg[f"{name}_candidates"] if given is None else _arg_text(given, args.encoding)
        settings[f"{name}_minimum_count"] = getattr(args, f"{name}_minimum_count")

    if args.other_candidates is None:
        settings["other_candidates"] = list(cfg["other_candidates"])
    else:
        settings["other_candidates"] = [_arg_text(s, args.encoding) for s in args.other_candidates]
    if args.other_minimum_count is None:
        settings["other_minimum_count"] = list(cfg["other_minimum_count"])
    else:
        settings["other_minimum_count"] = list(args.other_minimum_count)
    return settings


def _pair_others(candidates: List[str], minimum_counts: List[int]) -> List[Tuple[str, int]]:
    candidates = list(candidates)
    minimum_counts = list(minimum_counts)
    # pad the shorter list: missing candidates are empty, missing minimums are 0
    while len(candidates) < len(minimum_counts):
        candidates.append("")
    while len(minimum_counts) < len(candidates):
        minimum_counts.append(0)
    return list(zip(candidates, minimum_counts))


def build_maker(settings: Dict[str, Any]) -> PasswordMaker:
    maker = PasswordMaker(
        length=settings["length"],
        exclude_similar=settings["exclude_similar"],
        include_whitespace=settings["include_whitespace"],
    )
    for name in CLASSES:
        classifier = _classifier(settings[f"{name}_candidates"], settings[f"{name}_minimum_count"])
        setattr(maker, name, classifier)
    maker.others = [
        Classifier.from_text(text, minimum_count)
        for text, minimum_count in _pair_others(settings["other_candidates"], settings["other_minimum_count"])
    ]
    return maker


def generate_passwords(settings: Dict[str, Any]) -> List[str]:
    maker = build_maker(settings)
    return maker.generate_many(settings["count"])


def format_passwords(passwords: List[str], null_separator: bool) -> str:
    separator = "\0" if null_separator else "\n"
    return separator.join(passwords) + separator


def _write_stdout(data: bytes) -> None:
    sys.stdout.flush()
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def _non_negative(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def escape_percent(text: str) -> str:
    # argparse formats help strings with %
    return text.replace("%", "%%")


def build_parser(cfg: Optional[Dict[str, Any]] = None) -> argparse.ArgumentParser:
    cfg = cfg or load_config()
    parser = argparse.ArgumentParser(prog="mkpw", description="Highly customizable password generation tool.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--length", type=_non_negative, default=cfg["length"],
                        help="Length (number of characters) of the password")
    parser.add_argument("--count", type=_non_negative, default=cfg["count"],
                        help="Number of passwords to output")

    for name in CLASSES:
        parser.add_argument(f"--{name}-candidates", type=str, default=None, metavar="CHARS",
                            help=f"Candidates for {name} characters (default: {escape_percent(cfg[name + '_candidates'])!r}). "
                                 "An empty string leaves them out")
        parser.add_argument(f"--{name}-minimum-count", type=_non_negative, default=cfg[f"{name}_minimum_count"],
                            metavar="N", help=f"Number of {name} characters always included")

    parser.add_argument("--other-candidates", action="append", default=None, metavar="CHARS",
                        help="Candidates for other characters; repeat to define several independent groups")
    parser.add_argument("--other-minimum-count", action="append", type=_non_negative, default=None, metavar="N",
                        help="Minimum count for the --other-candidates group in the same position (default 0)")
    parser.add_argument("--exclude-similar", action=argparse.BooleanOptionalAction, default=cfg["exclude_similar"],
                        help="Leave out similar looking characters (i, l, 1, o, 0, O)")
    parser.add_argument("--include-whitespace", action=argparse.BooleanOptionalAction, default=cfg["include_whitespace"],
                        help="Add a space to the candidate characters")
    parser.add_argument("--null", action="store_true", help="Separate passwords with NUL instead of newline")
    parser.add_argument("--clipboard", action="store_true", help="Copy the passwords to the clipboard instead of printing")
    parser.add_argument("--encoding", type=str, default=cfg["encoding"],
                        help="Encoding of the candidate arguments and of the output")
    parser.add_argument("--completion", choices=SHELLS, metavar="SHELL",
                        help=f"Print the completion script for SHELL ({', '.join(SHELLS)}) and exit")
    parser.add_argument("--save-config", action="store_true", help="Store the current settings as the new defaults")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def run(args: argparse.Namespace, parser: argparse.ArgumentParser, cfg: Dict[str, Any]) -> None:
    if args.completion:
        sys.stdout.write(completion_script(parser, args.completion))
        sys.stdout.flush()
        return

    settings = resolve_settings(args, cfg)
    passwords = generate_passwords(settings)

    text = format_passwords(passwords, args.null)
    if args.clipboard:
        write_to_clipboard(text)
        logger.info("Copied %d password(s) to the clipboard", len(passwords))
    else:
        _write_stdout(encode(text, args.encoding))

    # only settings whose output was delivered become the new defaults
    if args.save_config:
        path = save_config(settings)
        err_console.print(f"[green]Saved defaults to:[/green] {escape(path)}", soft_wrap=True)


def main(argv: Optional[List[str]] = None) -> int:
    cfg = load_config()
    parser = build_parser(cfg)
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    try:
        run(args, parser, cfg)
    except (ValueError, ClipboardError, OSError) as e:
        logger.debug("mkpw failed", exc_info=True)
        err_console.print(f"[red]{escape(str(e))}[/red]", soft_wrap=True)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
