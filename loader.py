"""
loader.py

Feeds sentences into a MarkovChain from wherever they come from:
- an in-memory list (load_sentences)
- the same, spread over event-loop turns with a time budget (load_sentences_chunked)
- a URL serving a JSON array or newline-delimited text (load_url)
- local corpus files / globs (read_corpus)

Resource problems raise ResourceLoadError before any sentence is trained,
so a failed load never leaves a half-trained model behind.
"""
from __future__ import annotations
import asyncio
import glob
import json
import logging
import time
from typing import Callable, Iterable, List, Optional

import requests

import settings
from markov import MarkovChain, MarkovError

logger = logging.getLogger(__name__)

OnComplete = Optional[Callable[[MarkovChain], None]]


class ResourceLoadError(MarkovError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _finish(model: MarkovChain, accepted: int, total: int, on_complete: OnComplete) -> int:
    logger.info("Trained on %d of %d sentences", accepted, total)
    if total and not accepted:
        logger.warning("No usable sentences in input")
    if on_complete is not None:
        on_complete(model)
    return accepted


def load_sentences(model: MarkovChain, sentences: Iterable[str], on_complete: OnComplete = None) -> int:
    """Train on each sentence in order; returns how many were accepted."""
    accepted = 0
    total = 0
    for sentence in sentences:
        total += 1
        if model.train(sentence):
            accepted += 1
    return _finish(model, accepted, total, on_complete)


async def load_sentences_chunked(
    model: MarkovChain,
    sentences: Iterable[str],
    on_complete: OnComplete = None,
    max_time: float = settings.CHUNK_MAX_TIME,
    wait_time: float = settings.CHUNK_WAIT_TIME,
) -> int:
    """
    Like load_sentences, but gives the event loop a turn every max_time
    seconds so other tasks keep running during a large load. Order is
    preserved, so the resulting model is identical.
    """
    queue = list(sentences)
    accepted = 0
    chunks = 0
    i = 0
    while i < len(queue):
        deadline = time.monotonic() + max_time
        # at least one sentence per chunk so a zero budget still makes progress
        while True:
            if model.train(queue[i]):
                accepted += 1
            i += 1
            if i >= len(queue) or time.monotonic() >= deadline:
                break
        chunks += 1
        if i < len(queue):
            await asyncio.sleep(wait_time)
    logger.debug("Chunked load used %d chunk(s)", chunks)
    return _finish(model, accepted, len(queue), on_complete)


def parse_payload(text: str) -> List[str]:
    # a leading BOM would make valid JSON fall through to the text branch
    if text.startswith("\ufeff"):
        text = text[1:]
    # First try parsing as JSON, otherwise treat as raw text lines
    try:
        data = json.loads(text)
    except ValueError:
        return text.split("\n")
    if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
        raise ResourceLoadError("JSON payload must be an array of strings")
    return data


def fetch_sentences(
    url: str,
    timeout: float = settings.HTTP_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> List[str]:
    getter = session.get if session is not None else requests.get
    try:
        resp = getter(url, timeout=timeout)
    except requests.RequestException as e:
        raise ResourceLoadError(f"Could not fetch {url}: {e}") from e
    if resp.status_code != 200:
        raise ResourceLoadError(
            f"Could not fetch {url}: errored with status code {resp.status_code}",
            status_code=resp.status_code,
        )
    logger.info("Fetched %d bytes from %s", len(resp.content), url)
    return parse_payload(resp.text)


def load_url(
    model: MarkovChain,
    url: str,
    on_complete: OnComplete = None,
    timeout: float = settings.HTTP_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> int:
    sentences = fetch_sentences(url, timeout=timeout, session=session)
    return load_sentences(model, sentences, on_complete)


def read_corpus(paths: Iterable[str]) -> List[str]:
    """
    Expand globs and parse every matching file. Undecodable bytes are dropped
    and unreadable matches (e.g. directories) are skipped with a warning;
    fails only if nothing matches.
    """
    files: List[str] = []
    for spec in paths:
        files.extend(sorted(glob.glob(spec)))
    if not files:
        raise ResourceLoadError("No corpus files found")

    sentences: List[str] = []
    for p in files:
        try:
            with open(p, "r", encoding="utf-8-sig", errors="ignore") as f:
                text = f.read()
        except OSError as e:
            logger.warning("Skipping %s: %s", p, e)
            continue
        sentences.extend(parse_payload(text))
    logger.info("Read %d sentences from %d file(s)", len(sentences), len(files))
    return sentences
