"""Entry point — parses args (with .ranoberc support), fetches the latest chapters, lets the user pick one, shows it."""
from __future__ import annotations

import argparse
import configparser
import logging
import sys
from pathlib import Path
from typing import Optional

import pyfiglet
import requests
from rich.console import Console
from rich.text import Text

from .providers.models import ProviderError
from .providers.readlightnovel import PROVIDERS, get_provider
from .utils import open_glow, slugify
from .widgets.fuzzy_select import FuzzySelect
from .widgets.theme import ColorfulTheme, SimpleTheme, Theme

try:
    RANOBE_LOGO = pyfiglet.figlet_format("ranobe", font="slant")
except Exception:
    RANOBE_LOGO = "ranobe"

_DEFAULTS = {
    "provider": "readlightnovel",
    "size": "20",
    "wrap": "80",
    "theme": "colorful",
    "viewer": "glow",
    "output_dir": ".",
}

FLAVORS = [
    "Ice Cream",
    "Vanilla Cupcake",
    "Chocolate Muffin",
    "A Pile of sweet, sweet mustard",
]

err = Console(stderr=True, highlight=False, markup=False)


# ── .ranoberc handler ─────────────────────────────────────────────────────────

def _rc_candidates() -> list[Path]:
    return [Path.home() / ".ranoberc", Path.cwd() / ".ranoberc"]


def load_ranoberc(paths: Optional[list[Path]] = None) -> dict[str, str]:
    """Merge [defaults] from ~/.ranoberc and ./.ranoberc; the later file wins."""
    cfg = configparser.ConfigParser()
    cfg.read([p for p in (paths if paths is not None else _rc_candidates()) if p.exists()])
    rc = dict(_DEFAULTS)
    if cfg.has_section("defaults"):
        rc.update(cfg["defaults"])
    return rc


def make_theme(name: str) -> Theme:
    return SimpleTheme() if name == "simple" else ColorfulTheme()


def build_parser(rc: dict[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ranobe",
        description="ranobe — read light novels with glow in your terminal",
        epilog=(
            "Keys: i to type a filter, Esc/Enter to stop typing, j/k or arrows to move,\n"
            "h/l or left/right to change page, Enter to pick, Esc to cancel.\n"
            "\n"
            "Tip: put defaults in ./.ranoberc or ~/.ranoberc:\n"
            "  [defaults]\n"
            "  size = 15\n"
            "  theme = simple\n"
            "  wrap = 100"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "mode", nargs="?", default="read", choices=["read", "download", "demo"],
        help="read with the viewer, download as markdown, or try the picker (default: %(default)s)",
    )
    parser.add_argument(
        "-r", "--provider", default=rc["provider"], choices=sorted(PROVIDERS),
        help="Light novel provider (default: %(default)s)",
    )
    parser.add_argument(
        "-s", "--size", type=int, default=int(rc["size"]), metavar="N",
        help="Items per page of the list (default: %(default)s)",
    )
    parser.add_argument(
        "-p", "--page", type=int, default=0, metavar="N",
        help="Latest-update page to start from (default: %(default)s)",
    )
    parser.add_argument(
        "-w", "--wrap", type=int, default=int(rc["wrap"]), metavar="COLS",
        help="Maximum text width in the viewer (default: %(default)s)",
    )
    parser.add_argument(
        "-t", "--theme", default=rc["theme"], choices=["colorful", "simple"],
        help="Picker theme (default: %(default)s)",
    )
    parser.add_argument(
        "--viewer", default=rc["viewer"], metavar="CMD",
        help="Markdown pager fed on stdin (default: %(default)s)",
    )
    parser.add_argument(
        "-o", "--output-dir", default=rc["output_dir"], metavar="DIR",
        help="Where download mode writes chapters (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def _fail(theme: Theme, message: str) -> None:
    line = Text()
    theme.format_error(line, message)
    err.print(line)
    sys.exit(1)


# ── main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[list[str]] = None) -> None:
    rc = load_ranoberc()
    args = build_parser(rc).parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            force=True,
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.size < 1:
        err.print("❌  --size must be a positive number")
        sys.exit(2)

    theme = make_theme(args.theme)

    # ── Demo: the flavour picker ──────────────────────────────────────────────
    if args.mode == "demo":
        selection = (
            FuzzySelect.with_theme(theme)
            .with_prompt("Pick your flavor")
            .max_length(args.size)
            .default(0)
            .items(FLAVORS)
            .interact()
        )
        if selection is None:
            print("You didn't select anything")
        else:
            print(f"Enjoy your {FLAVORS[selection]}!")
        return

    err.print(Text(RANOBE_LOGO, style="bold cyan"))

    # ── Fetch the latest list ─────────────────────────────────────────────────
    provider = get_provider(args.provider, page=args.page)
    err.print(f"🔍  Fetching latest updates ({args.provider}, page {args.page}) …")
    try:
        novels = provider.get_latest()
    except (requests.RequestException, ProviderError, ValueError) as exc:
        err.print(f"❌  Fetch failed: {exc}")
        sys.exit(1)

    if not novels:
        _fail(theme, "No novels found.")

    selection = (
        FuzzySelect.with_theme(theme)
        .with_prompt("Pick a chapter")
        .max_length(args.size)
        .default(0)
        .items(novels)
        .interact()
    )
    if selection is None:
        print("You didn't select anything")
        return

    novel = novels[selection]
    try:
        text = provider.get_text(novel.url)
    except (requests.RequestException, ProviderError) as exc:
        err.print(f"❌  Could not load {novel.title}: {exc}")
        sys.exit(1)

    # ── Show or save ──────────────────────────────────────────────────────────
    if args.mode == "download":
        out_dir = Path(args.output_dir).expanduser()
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / f"{slugify(novel.title)}.md"
        path.write_text(text, encoding="utf-8")
        print(path)
        return

    try:
        code = open_glow(text, args.wrap, viewer=args.viewer)
    except FileNotFoundError as exc:
        err.print(
            f"❌  {exc.filename or args.viewer} not found.\n"
            f"    Install glow (https://github.com/charmbracelet/glow) or pass --viewer CMD,\n"
            f"    or save the chapter instead with: ranobe download"
        )
        sys.exit(1)
    except RuntimeError as exc:
        err.print(f"❌  {exc}")
        sys.exit(1)
    sys.exit(code)


def run() -> None:
    try:
        main()
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)


if __name__ == "__main__":
    run()
