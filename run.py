"""sewergen CLI entry point.

Provides subcommands for generating a sewer level to stdout and for running
the HTTP preview server. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import random
import sys
from textwrap import dedent

from dotenv import load_dotenv

__version__ = "0.1.0"


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Sewer level generator

    Generate a sewer level from a seed and print it, or run the HTTP preview
    server. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                 Bind address for the web server (default: 127.0.0.1)
          PORT                 Port for the web server (default: 5000)
          SEWER_MAX_ATTEMPTS   Cap on whole-pipeline retries (default: unbounded)
          SEWER_LOG_LEVEL      debug | info | warn | error (default: info)

        Examples:
          # Generate a 40x20 sewer with a random seed
          python run.py generate

          # Reproduce a level
          python run.py generate --rng-seed 1234 --width 60 --height 30

          # Emit JSON instead of the text map
          python run.py generate -r 1234 --json

          # Run the preview server
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="sewergen",
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
        version=f"sewergen {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a sewer level and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one sewer level and print it as text or JSON",
    )
    gen_parser.add_argument("-r", "--rng-seed", dest="seed", type=int, default=None, help="rng seed (default: random)")
    gen_parser.add_argument("-x", "--width", type=int, default=40, help="map width (default: 40)")
    gen_parser.add_argument("-y", "--height", type=int, default=20, help="map height (default: 20)")
    gen_parser.add_argument("--json", action="store_true", help="print the level as JSON")
    gen_parser.set_defaults(command="generate")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP preview server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask server exposing /api/sewer/map",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 127.0.0.1)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)
    return args


def cmd_generate(args: argparse.Namespace) -> int:
    from sewergen.sewer import Sewer, SewerConfig, SewerError, SewerSpec, render_text

    seed = args.seed if args.seed is not None else random.randint(0, 2**63 - 1)
    try:
        config = SewerConfig.from_env()
        sewer = Sewer.generate(SewerSpec(args.width, args.height), random.Random(seed), config)
    except SewerError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    if args.json:
        data = sewer.to_dict()
        data["seed"] = seed
        print(json.dumps(data))
    else:
        print(f"RNG Seed: {seed}")
        print(render_text(sewer.map))
        print(f"start={sewer.start} goal={sewer.goal} lights={len(sewer.lights)} attempts={sewer.metrics['attempts']}")
    return 0


def cmd_server(args: argparse.Namespace) -> int:  # pragma: no cover (runtime only)
    from sewergen import create_app

    host = args.host or os.getenv("HOST", "127.0.0.1")
    port = args.port or int(os.getenv("PORT", "5000"))
    create_app().run(host=host, port=port, debug=args.debug)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    if args.env_file:
        load_dotenv(args.env_file, override=True)
    if args.command == "generate":
        return cmd_generate(args)
    return cmd_server(args)


if __name__ == "__main__":
    raise SystemExit(main())
