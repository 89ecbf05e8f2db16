"""Command-line interface for ingesting texts and ghostwriting."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ghostwriter.errors import GhostwriterError
from ghostwriter.models.trigram import TrigramModel
from ghostwriter.utils.engine import GenerationEngine, Ingestor, WriterConfig
from ghostwriter.utils.sampling import TorchSampler


logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO):
    """Configure logging."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def write(text: str) -> None:
    # Tokens keep undecodable input bytes as surrogates; write them back raw.
    sys.stdout.buffer.write(text.encode('utf-8', errors='surrogateescape'))
    sys.stdout.flush()


def ingest(args) -> TrigramModel:
    """Build a model from all input files, in order."""
    model = TrigramModel()
    ingestor = Ingestor(model, max_word_len=args.max_word_len)
    for path in args.files:
        ingestor.ingest_file(path)

    stats = model.stats()
    logger.info(
        f"Model has {stats.num_tokens} tokens, {stats.num_contexts} token pairs "
        f"(tree depth {stats.depth})"
    )
    return model


def ghostwrite(args, model: TrigramModel) -> None:
    """Generate text from a trained model."""
    engine = GenerationEngine(model, TorchSampler(args.seed))
    for step in engine.iter_generate(args.words):
        write(step.text)
    write('\n')


def run(args) -> None:
    model = ingest(args)

    if args.stats:
        stats = model.stats()
        write(f"num_tokens={stats.num_tokens}  vocab={stats.vocabulary}\n")

    if args.dump:
        for line in model.dump():
            write(line + '\n')

    ghostwrite(args, model)


def build_parser() -> argparse.ArgumentParser:
    defaults = WriterConfig()
    parser = argparse.ArgumentParser(
        description='Learn word trigrams from texts and write a new one'
    )
    parser.add_argument(
        'files',
        type=Path,
        nargs='+',
        help='Input text files'
    )
    parser.add_argument(
        '--words',
        type=int,
        default=defaults.num_words,
        help='Approximate number of words to write'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=defaults.seed,
        help='Random seed (default: current time)'
    )
    parser.add_argument(
        '--max-word-len',
        type=int,
        default=defaults.max_word_len,
        help='Longest word accepted in the input'
    )
    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print token and vocabulary counts'
    )
    parser.add_argument(
        '--dump',
        action='store_true',
        help='Print the token table and trigram tree'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log debug messages'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.words < 1:
        parser.error('--words must be at least 1')

    try:
        run(args)
    except GhostwriterError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
