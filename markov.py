from __future__ import annotations
import logging
import random
from typing import Dict, List, Optional, Sequence

import settings

logger = logging.getLogger(__name__)


class MarkovError(Exception):
    """Base class for errors raised while generating or loading."""


class EmptyModelError(MarkovError):
    def __init__(self, message: str = "No strings to generate from (did you forget to train?)"):
        super().__init__(message)


class NoStartTokenError(MarkovError):
    def __init__(self, message: str = "No beginning tokens recorded; model state is inconsistent"):
        super().__init__(message)


class GenerationExhaustedError(MarkovError):
    pass


# Whitespace as JavaScript's \s sees it: includes the BOM, excludes \x1c-\x1f and \x85
WHITESPACE = (
    "\t\n\x0b\x0c\r \xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def tokenize(sentence: str) -> List[str]:
    # Strip the ends only; internal double spaces yield "" tokens on purpose
    trimmed = sentence.strip(WHITESPACE)
    if not trimmed:
        return []
    return trimmed.split(" ")


class MarkovChain:
    """
    First-order word chain built from whole sentences.

    beginning: first token of every trained sentence (repeats kept)
    ending: last token of every trained sentence (repeats kept, not used by generate)
    transitions: Dict[token, List[successor]] with one entry per observed pair
    last_generated: the previous result of generate(), never returned twice in a row

    Repeats in the lists are what weight the uniform choice, so nothing is
    ever deduplicated.
    """
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_retries: Optional[int] = settings.MAX_RETRIES,
        max_walk: Optional[int] = settings.MAX_WALK,
    ):
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be >= 0 or None")
        if max_walk is not None and max_walk < 1:
            raise ValueError("max_walk must be >= 1 or None")
        self.rng = rng or random.Random()
        self.max_retries = max_retries
        self.max_walk = max_walk
        self.beginning: List[str] = []
        self.ending: List[str] = []
        self.transitions: Dict[str, List[str]] = {}
        self.last_generated = ""

    def __len__(self) -> int:
        return len(self.transitions)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(sentences={self.sentence_count}, "
            f"states={len(self.transitions)})"
        )

    @property
    def sentence_count(self) -> int:
        return len(self.beginning)

    def train(self, sentence: str) -> bool:
        """
        Add one sentence to the model.

        Returns False (and changes nothing) when the sentence is empty after
        stripping surrounding whitespace.
        """
        tokens = tokenize(sentence)
        if not tokens:
            logger.debug("Skipping empty sentence %r", sentence)
            return False
        self.train_tokens(tokens)
        return True

    def train_tokens(self, tokens: Sequence[str]):
        if not tokens:
            raise ValueError("tokens must not be empty")
        self.beginning.append(tokens[0])
        self.ending.append(tokens[-1])
        for current, nxt in zip(tokens, tokens[1:]):
            self.transitions.setdefault(current, []).append(nxt)

    def _pick(self, seq: Sequence[str]) -> str:
        return seq[int(len(seq) * self.rng.random())]

    def walk(self) -> List[str]:
        """
        One random walk: a start token, then successors until the current
        token has no entry in transitions. Recorded ending tokens play no part.
        """
        if not self.transitions:
            raise EmptyModelError()
        if not self.beginning:
            raise NoStartTokenError()

        word = self._pick(self.beginning)
        out = [word]
        while word in self.transitions:
            if self.max_walk is not None and len(out) >= self.max_walk:
                raise GenerationExhaustedError(
                    f"Walk exceeded {self.max_walk} tokens without reaching a dead end"
                )
            word = self._pick(self.transitions[word])
            out.append(word)
        return out

    def generate(self) -> str:
        """
        Sample a sentence that is neither empty nor equal to the previous one.

        Raises EmptyModelError if no multi-token sentence was ever trained,
        and GenerationExhaustedError once max_retries candidates have been
        rejected (never, when max_retries is None).
        """
        rejected = 0
        while True:
            candidate = " ".join(self.walk())
            if candidate and candidate != self.last_generated:
                break
            rejected += 1
            logger.debug("Rejected candidate %r (attempt %d)", candidate, rejected)
            if self.max_retries is not None and rejected > self.max_retries:
                raise GenerationExhaustedError(
                    f"No new sentence after {rejected} attempts; "
                    "the model may only produce one distinct string"
                )

        self.last_generated = candidate
        return candidate
