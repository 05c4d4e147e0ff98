"""Command line entry point: learn a text file, print generated sentences, save."""

import argparse
import logging
import sys
from pathlib import Path

from .chain import MODEL_SUFFIX, TripletChain
from .exceptions import EmptyModelError, SnapshotError, TriChainError
from .factory import get_tokenizer, list_patterns, list_tokenizers

EXIT_USAGE = 1
EXIT_SNAPSHOT = 2
EXIT_EMPTY_MODEL = 3

log = logging.getLogger("trichain.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trichain",
        description="Learn a text file into a trigram chain and print generated sentences.",
    )
    parser.add_argument("training_file", help="UTF-8 text file to learn from.")
    parser.add_argument(
        "-n",
        "--num-sentences",
        type=int,
        default=10,
        help="Number of sentences to print (default: 10).",
    )
    parser.add_argument(
        "--model",
        type=str,
        default="triplets_db",
        help="Path prefix of the .model/.vocab files to load and update (default: triplets_db).",
    )
    parser.add_argument(
        "--forget",
        type=str,
        default=None,
        help="Text whose tokens are forgotten after the first batch; a second batch is printed.",
    )
    parser.add_argument(
        "--tokenizer",
        choices=list_tokenizers(),
        default="regex",
        help="Tokenizer to use (default: regex).",
    )
    parser.add_argument(
        "--pattern",
        choices=list_patterns(),
        default="words",
        help="Split pattern for the regex tokenizer (default: words).",
    )
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Start from an empty chain when the existing model cannot be read.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress at INFO level."
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.num_sentences < 0:
        log.error("--num-sentences must be non-negative")
        return EXIT_USAGE

    try:
        text = Path(args.training_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.error(f"cannot read training file: {e}")
        return EXIT_USAGE

    try:
        chain = TripletChain(
            get_tokenizer(args.tokenizer, pattern=args.pattern), seed=args.seed
        )
    except TriChainError as e:
        log.error(str(e))
        return EXIT_USAGE

    model_path = Path(args.model).with_suffix(MODEL_SUFFIX)
    if model_path.exists():
        try:
            chain.load(str(model_path))
        except SnapshotError as e:
            if not args.fresh:
                log.error(f"{e}; rerun with --fresh to start a new model")
                return EXIT_SNAPSHOT
            log.warning(f"{e}; starting from an empty chain")

    try:
        chain.learn(text)
    except TriChainError as e:
        log.error(str(e))
        return EXIT_USAGE

    status = 0
    try:
        print("\n".join(chain.generate(args.num_sentences)) + "\n")
        if args.forget:
            chain.remove_triplets(args.forget)
            print("\n".join(chain.generate(args.num_sentences)))
    except EmptyModelError as e:
        log.error(str(e))
        status = EXIT_EMPTY_MODEL
    except TriChainError as e:
        log.error(str(e))
        status = EXIT_USAGE

    try:
        chain.save(args.model)
    except OSError as e:
        log.error(f"cannot save model: {e}")
        return EXIT_USAGE
    return status


if __name__ == "__main__":
    sys.exit(main())
