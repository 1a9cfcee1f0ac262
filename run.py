"""Burrow CLI entry point.

Provides subcommands for running the terrain HTTP server and for generating a
single level straight to the terminal. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from burrow import __version__

_color_init()

# Glyph colours for `generate`; anything missing prints uncoloured.
_GLYPH_COLORS = {
    "#": Fore.WHITE + Style.DIM,
    "X": Fore.YELLOW + Style.DIM,
    "~": Fore.CYAN,
    "=": Fore.BLUE + Style.BRIGHT,
    "%": Fore.RED,
    "&": Fore.RED + Style.BRIGHT,
    ",": Fore.GREEN,
    '"': Fore.GREEN + Style.BRIGHT,
    "m": Fore.MAGENTA,
    "M": Fore.MAGENTA + Style.BRIGHT,
    ":": Fore.WHITE,
    ";": Fore.WHITE + Style.BRIGHT,
    "o": Fore.YELLOW,
    "*": Fore.RED + Style.BRIGHT,
    "@": Fore.YELLOW + Style.BRIGHT,
    ">": Fore.GREEN + Style.BRIGHT,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Burrow cave terrain generator

    Run the HTTP terrain service or render a single seeded level in the
    terminal. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 5000)
          TERRAIN_MAX_ATTEMPTS    Regeneration bound per level (default: 25)
          TERRAIN_DISABLE_CACHE   Set to 1 to bypass the in-process level cache
          BURROW_LOG_LEVEL        debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py serve

          # Render a fungal cave for a fixed seed
          python run.py generate --seed moss --archetype fungal

          # Dump a level as JSON (same shape as GET /api/terrain)
          python run.py generate --seed 42 --width 60 --height 40 --json

          # Load variables from .env then run the server
          python run.py --env-file .env serve
        """
    )

    parser = argparse.ArgumentParser(
        prog="burrow",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Burrow {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the terrain HTTP server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask terrain API",
    )
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    serve_parser.set_defaults(command="serve")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one level and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Generate a single level and print its glyph map. Spawn is drawn
            as '@' and the exit as '>'.
            """
        ),
    )
    gen_parser.add_argument("--seed", default=None, help="Seed string (default: random)")
    gen_parser.add_argument("--archetype", default="cavern", help="Archetype name (default: cavern)")
    gen_parser.add_argument("--width", type=int, default=80, help="Level width (default: 80)")
    gen_parser.add_argument("--height", type=int, default=50, help="Level height (default: 50)")
    gen_parser.add_argument("--json", action="store_true", help="Print the API JSON payload instead of a map")
    gen_parser.add_argument("--no-color", dest="no_color", action="store_true", help="Disable ANSI colours")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to serve
    if len(argv) == 0:
        argv = ["serve"]

    return parser.parse_args(argv)


def render_map(terrain, color: bool = True) -> str:
    """Glyph map with spawn/exit overlaid, one line per row."""
    rows = [list(r) for r in terrain.grid.to_rows()]
    sx, sy = terrain.spawn_point
    ex, ey = terrain.exit_point
    rows[sy][sx] = "@"
    rows[ey][ex] = ">"
    if not color:
        return "\n".join("".join(r) for r in rows)
    lines = []
    for r in rows:
        lines.append("".join(f"{_GLYPH_COLORS[c]}{c}{Style.RESET_ALL}" if c in _GLYPH_COLORS else c for c in r))
    return "\n".join(lines)


def run_generate(args) -> int:
    from burrow import logging_utils
    from burrow.routes.terrain_api import terrain_to_dict
    from burrow.terrain import RetryLimitExceeded, TerrainSettings, generate, get_archetype

    if args.json:
        # stdout carries the payload only
        logging_utils.set_level("error")

    try:
        params = get_archetype(args.archetype)
        terrain = generate(args.width, args.height, args.seed, params, TerrainSettings.from_env())
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    except RetryLimitExceeded as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(terrain_to_dict(terrain, args.archetype)))
        return 0

    color = not args.no_color and sys.stdout.isatty()
    print(render_map(terrain, color=color))
    summary = (
        f"seed={terrain.seed.raw} archetype={args.archetype} size={terrain.width}x{terrain.height} "
        f"attempts={terrain.attempts} spawn={terrain.spawn_point} exit={terrain.exit_point}"
    )
    print(f"{Fore.CYAN}{summary}{Style.RESET_ALL}" if color else summary)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "serve").lower()
    if mode == "generate":
        return run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    color = sys.stdout.isatty()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    title = f"{Fore.CYAN}{Style.BRIGHT}Burrow Terrain Server{Style.RESET_ALL}" if color else "Burrow Terrain Server"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    cache = "disabled" if os.getenv("TERRAIN_DISABLE_CACHE") == "1" else "enabled"
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        f"  {label('Cache:'):12} {value(cache)}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from burrow.logging_utils import log
    from burrow.server import start_server

    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
