from __future__ import annotations
import argparse
import asyncio
import logging
import random
from typing import List, Optional

import settings
from loader import fetch_sentences, load_sentences, load_sentences_chunked, read_corpus
from markov import MarkovChain, MarkovError


def _cap(value: int) -> Optional[int]:
    # negative means "no cap"
    return None if value < 0 else value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Train a Markov chain on sentences and print generated ones.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--corpus", nargs="+", help="Paths/globs to corpus files (JSON array or one sentence per line)")
    src.add_argument("--url", help="URL serving a JSON array of strings or newline-delimited text")
    ap.add_argument("--count", type=int, default=5, help="Number of sentences to generate")
    ap.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible output")
    ap.add_argument("--max-retries", type=int,
                    default=-1 if settings.MAX_RETRIES is None else settings.MAX_RETRIES,
                    help="Retries before giving up on a new sentence (-1 = unbounded)")
    ap.add_argument("--max-walk", type=int,
                    default=-1 if settings.MAX_WALK is None else settings.MAX_WALK,
                    help="Maximum tokens per walk (-1 = unbounded)")
    ap.add_argument("--timeout", type=float, default=settings.HTTP_TIMEOUT, help="HTTP timeout in seconds for --url")
    ap.add_argument("--chunked", action="store_true", help="Load sentences in time-boxed chunks on an event loop")
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    mc = MarkovChain(
        rng=random.Random(args.seed),
        max_retries=_cap(args.max_retries),
        max_walk=_cap(args.max_walk),
    )
    try:
        if args.url:
            sentences = fetch_sentences(args.url, timeout=args.timeout)
        else:
            sentences = read_corpus(args.corpus)

        if args.chunked:
            asyncio.run(load_sentences_chunked(mc, sentences))
        else:
            load_sentences(mc, sentences)

        for _ in range(args.count):
            print(mc.generate())
    except MarkovError as e:
        raise SystemExit(f"Error: {e}")


if __name__ == "__main__":
    main()
