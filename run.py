"""Catacomb CLI entry point.

Provides subcommands for printing generated chunks, sweeping seeds for
structural violations and launching the interactive explorer. Accepts
configuration via flags and CATACOMB_* environment variables, with optional
.env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from catacomb import __version__

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except (AttributeError, ValueError):  # pragma: no cover - environment dependent
    _COLOR_ENABLED = False


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Catacomb chunked dungeon generator

    Generate and inspect dungeon chunks, sweep seeds for structural problems,
    or walk the world in the terminal explorer. Configuration can be provided
    via CLI flags or environment variables. If both are present, CLI flags
    take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          CATACOMB_SIZE        Chunk / grid edge length (default: 32)
          CATACOMB_MAX_ROOMS   Room placement attempts per grid (default: 8)
          CATACOMB_SEED        World seed (default: random)
          CATACOMB_LOG_LEVEL   debug|info|warn|error (default: warn)
          CATACOMB_LOG_JSON    Emit JSON log lines when set to 1

        Examples:
          # Print a standalone 64x64 grid for seed 42
          python run.py generate --size 64 --seed 42

          # Print chunk (1,-2) of world seed 7 with metrics
          python run.py generate --seed 7 --chunk 1 -2 --metrics

          # Check 200 seeds for invariant violations
          python run.py validate --start 0 --count 200

          # Load variables from .env then explore
          python run.py --env-file .env explore
        """
    )

    parser = argparse.ArgumentParser(
        prog="catacomb",
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
        version=f"Catacomb {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Print a generated grid or chunk as ASCII",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one grid (or one chunk of a world) and print it.",
    )
    gen_parser.add_argument("--size", type=int, default=None, help="Grid edge length (default: env or 32)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed (default: env or random)")
    gen_parser.add_argument(
        "--chunk",
        nargs=2,
        type=int,
        metavar=("CX", "CY"),
        default=None,
        help="Generate this chunk of a world (with edge portals) instead of a standalone grid",
    )
    gen_parser.add_argument("--metrics", action="store_true", help="Print generation metrics as JSON")
    gen_parser.add_argument("--letters", action="store_true", help="Print tile letters (W/R/H/D) instead of glyphs")
    gen_parser.set_defaults(command="generate")

    # validate subcommand
    val_parser = subparsers.add_parser(
        "validate",
        help="Sweep seeds and report grids that violate structural invariants",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    val_parser.add_argument("--start", type=int, default=0, help="First seed (default: 0)")
    val_parser.add_argument("--count", type=int, default=50, help="Number of seeds (default: 50)")
    val_parser.add_argument("--size", type=int, default=None, help="Grid edge length (default: env or 32)")
    val_parser.set_defaults(command="validate")

    # explore subcommand (Textual)
    exp_parser = subparsers.add_parser(
        "explore",
        help="Launch the Textual world explorer",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Walk an observer through the chunked world; out-of-view chunks regenerate.",
    )
    exp_parser.add_argument("--seed", type=int, default=None, help="World seed (default: env or random)")
    exp_parser.set_defaults(command="explore")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]

    return parser.parse_args(argv)


def _config_from(args):
    from catacomb.dungeon.config import DungeonConfig

    overrides = {}
    if getattr(args, "size", None) is not None:
        overrides["size"] = args.size
    if getattr(args, "seed", None) is not None:
        overrides["seed"] = args.seed
    return DungeonConfig.from_env(**overrides)


def label(text: str) -> str:
    return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def value(val) -> str:
    return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)


def banner(mode: str, cfg, seed=None) -> str:
    title = f"{Fore.CYAN}{Style.BRIGHT}Catacomb{Style.RESET_ALL}" if _COLOR_ENABLED else "Catacomb"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title} {__version__}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Size:'):12} {value(cfg.size)}",
        f"  {label('Seed:'):12} {value(seed if seed is not None else cfg.seed)}",
        divider,
    ]
    return "\n".join(lines)


def cmd_generate(args) -> int:
    from catacomb.chunk_store import ChunkStore
    from catacomb.dungeon.cells import grid_to_rows
    from catacomb.dungeon.pipeline import DungeonGenerator

    cfg = _config_from(args)
    if args.chunk is not None:
        store = ChunkStore(cfg)
        print(banner("generate", cfg, store.seed))
        chunk = store.ensure_chunk(*args.chunk)
        grid, metrics, valid = chunk.grid, chunk.metrics, chunk.valid
        print(f"  {label('Chunk:'):12} {value(f'{chunk.key[0]},{chunk.key[1]}')}")
    else:
        gen = DungeonGenerator(cfg)
        print(banner("generate", cfg, gen.seed))
        result = gen.generate()
        grid, metrics, valid = result.grid, result.metrics, result.valid
    print(f"  {label('Valid:'):12} {value(valid)}")
    print("\n".join(grid_to_rows(grid, glyphs=not args.letters)))
    if args.metrics:
        print(json.dumps(metrics, indent=2, sort_keys=True, default=str))
    return 0 if valid else 1


def cmd_validate(args) -> int:
    from catacomb.dungeon.pipeline import DungeonGenerator
    from catacomb.logging_utils import log

    cfg = _config_from(args)
    print(banner("validate", cfg, f"{args.start}..{args.start + args.count - 1}"))
    failures = []
    empty = 0
    for seed in range(args.start, args.start + args.count):
        cfg.seed = seed
        result = DungeonGenerator(cfg).generate()
        if not result.rooms:
            empty += 1
        if not result.valid:
            failures.append(seed)
            log.error(event="invalid_grid", seed=seed, violations=len(result.violations),
                      first=result.violations[0].kind)
    if _COLOR_ENABLED:
        status = f"{Fore.RED}FAIL{Style.RESET_ALL}" if failures else f"{Fore.GREEN}OK{Style.RESET_ALL}"
    else:
        status = "FAIL" if failures else "OK"
    print(f"  {label('Seeds:'):12} {value(args.count)}")
    print(f"  {label('Empty:'):12} {value(empty)}")
    print(f"  {label('Invalid:'):12} {value(len(failures))}")
    print(f"  {label('Result:'):12} {status}")
    return 1 if failures else 0


def cmd_explore(args) -> int:
    from catacomb.explorer_tui import run_explorer

    cfg = _config_from(args)
    run_explorer(cfg, seed=cfg.seed)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()
    # The logger reads its settings at import time; apply env changes from .env
    from catacomb import logging_utils

    logging_utils.configure_from_env()

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "validate":
        return cmd_validate(args)
    if mode == "explore":
        return cmd_explore(args)
    return cmd_generate(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
