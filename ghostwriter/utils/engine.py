"""Utilities for ingesting text into a trigram model and writing new text."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from ghostwriter.data.tokenizer import ETX, MAX_WORD_LEN, STX, tokenize
from ghostwriter.errors import ContextNotFound, SamplingError, SourceUnavailable
from ghostwriter.models.trigram import TrigramModel


logger = logging.getLogger(__name__)

FULLSTOP = '.'


@dataclass
class WriterConfig:
    """Defaults for a ghostwriting run."""
    num_words: int = 500
    seed: Optional[int] = None
    max_word_len: int = MAX_WORD_LEN


@dataclass
class Step:
    """One generated token and how it was rendered."""
    token_id: int
    token: str
    text: str


def render_token(s: str) -> str:
    """
    Render a token for output.

    Words, numbers and capitalised tokens get a leading space; single
    punctuation characters stick to the previous word. Sentence ends
    break the line.
    """
    if s in (STX, ETX):
        return ''
    out = s
    if len(s) > 1 or '0' <= s[0] <= '9' or s[0] >= 'A':
        out = ' ' + out
    if len(s) == 1 and s in '.!?':
        out += '\n'
    return out


class Ingestor:
    """Feeds token streams into a TrigramModel."""

    def __init__(self, model: TrigramModel, max_word_len: int = MAX_WORD_LEN):
        self.model = model
        self.max_word_len = max_word_len
        self.context = model.start()

    def feed(self, token: str) -> None:
        """Add one token, shifting the context B -> A, C -> B."""
        h = self.model.dictionary.find_or_add(token)
        if token == STX:
            self.context = (h, h)
            return
        self.model.index.record(self.context, h)
        self.context = (self.context[1], h)

    def ingest(self, tokens: Iterable[str]) -> int:
        """Ingest a tokenized stream, returns the number of tokens added."""
        n = 0
        for token in tokens:
            self.feed(token)
            if token != STX:
                n += 1
        return n

    def ingest_file(self, path: Union[str, Path]) -> int:
        path = Path(path)
        try:
            with open(path, 'rb') as f:
                tokens = tokenize(f, self.max_word_len)
        except OSError as e:
            raise SourceUnavailable(path, e.strerror or str(e)) from e

        n = self.ingest(tokens)
        logger.info(f"Ingested {path}: {n} tokens")
        return n


class GenerationEngine:
    """
    Walks the trigram index to write new text.

    Args:
        model: Trained model, only read from
        draw: Returns a uniformly distributed integer in [0, upper)
    """

    def __init__(self, model: TrigramModel, draw: Callable[[int], int]):
        self.model = model
        self.draw = draw
        self.reset()

    def reset(self) -> None:
        self.context = self.model.start()
        self.emitted = 0
        self.etx = self.model.etx
        self.fullstop = self.model.dictionary.find(FULLSTOP)

    def step(self) -> Step:
        """Choose the next token for the current context."""
        node = self.model.index.lookup(self.context)
        if node is None:
            raise ContextNotFound(self.context)

        r = self.draw(node.freq)
        for token_c, freq in node.entries():
            if r < freq:
                break
            r -= freq
        else:
            raise SamplingError(
                f"Draw ran past the successors of {self.context} (total {node.freq})"
            )

        token = self.model.dictionary.resolve(token_c)
        if token_c == self.etx:
            # Each ingested stream restarts at (STX, STX), so (B, ETX) is never a
            # recorded pair. Restart here too rather than shift into it.
            self.context = self.model.start()
        else:
            self.context = (self.context[1], token_c)
        self.emitted += 1
        return Step(token_id=token_c, token=token, text=render_token(token))

    def iter_generate(self, num_words: int) -> Iterator[Step]:
        """Keep going until the word limit, and then the end of a sentence."""
        if num_words < 1:
            raise ValueError(f"num_words must be at least 1, got {num_words}")

        self.reset()
        while True:
            step = self.step()
            yield step
            if self.emitted >= num_words and step.token_id in (self.etx, self.fullstop):
                return

    def generate(self, num_words: int) -> str:
        """Make up a story of approximately num_words tokens."""
        return ''.join(step.text for step in self.iter_generate(num_words))
