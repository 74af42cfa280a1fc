"""Command-line interface: index a corpus, then serve HTTP or run a REPL."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from fakegen.app import build_chain, create_app
from fakegen.config import Settings, settings
from fakegen.services.chain import Chain
from fakegen.utils.logger import configure_root

logger = logging.getLogger(__name__)

PROMPT = "seed> "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fakegen",
        description="Generate text with markov chains",
    )
    parser.add_argument("input", type=Path, metavar="INPUT", help="Corpus file to index, one sentence per line")
    parser.add_argument("-d", "--debug", action="store_true", help="Activate debug mode")
    parser.add_argument("-p", "--port", type=int, default=None, help="Serve HTTP on this port instead of the REPL")
    parser.add_argument("--host", default=None, help="Bind host for HTTP mode")
    parser.add_argument("--target", type=int, default=None, help="Target length for REPL generations")
    parser.add_argument("--unit", choices=["chars", "words"], default=None, help="Unit of the target length")
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings = settings) -> Settings:
    """Overlay CLI flags on the environment settings"""
    overrides = {"CORPUS_PATH": str(args.input)}
    if args.debug:
        overrides["DEBUG"] = True
        overrides["LOG_LEVEL"] = "debug"
    if args.port is not None:
        overrides["PORT"] = args.port
    if args.host is not None:
        overrides["HOST"] = args.host
    if args.target is not None:
        overrides["DEFAULT_TARGET"] = args.target
    if args.unit is not None:
        overrides["LENGTH_UNIT"] = args.unit
    return base.model_copy(update=overrides)


def repl(
    chain: Chain,
    target: int,
    read: Optional[Callable[[str], str]] = None,
    out: Optional[TextIO] = None,
) -> None:
    """
    Interactive loop: read a seed, print the best generation.

    An empty line generates from sentence start. EOF or Ctrl-C exits.
    """
    read = read or input
    out = out or sys.stdout
    while True:
        try:
            seed = read(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print("\nBye!", file=out)
            break

        text = chain.generate(seed.strip() or None, target)
        if text is None:
            print("\n(no result)\n", file=out)
        else:
            print(f"\n{text}\n", file=out)


def serve(cfg: Settings, chain: Chain) -> None:
    import uvicorn

    logger.info(f"Binding server on {cfg.HOST}:{cfg.PORT}")
    uvicorn.run(
        create_app(cfg, chain=chain),
        host=cfg.HOST,
        port=cfg.PORT,
        log_level=cfg.LOG_LEVEL.lower(),
    )


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = settings_from_args(args)
    configure_root(cfg.LOG_LEVEL)

    if cfg.DEBUG:
        logger.debug(f"Config: {cfg.model_dump()}")

    chain = build_chain(cfg)
    try:
        chain.ingest_file(args.input, encoding=cfg.CORPUS_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to index {args.input}: {e}")
        return 1

    if cfg.DEBUG:
        logger.debug(f"Chain sizes: {chain.describe_sizes()}")

    if args.port is not None:
        serve(cfg, chain)
    else:
        repl(chain, cfg.DEFAULT_TARGET)
    return 0


if __name__ == "__main__":
    sys.exit(main())
