"""Token dictionary: a fixed-size open-addressing table of words."""

import logging
from typing import Iterator, List, Optional, Tuple

import torch

from ghostwriter.errors import CapacityExceeded
from ghostwriter.utils.counts import FREQ_MAX, halve_


logger = logging.getLogger(__name__)

MAX_TOKENS = 65536  # fits 16-bit token ids
HASH_SKIP = 17      # MAX_TOKENS / HASH_SKIP must not be whole


def token_bytes(s: str) -> bytes:
    """Raw bytes of a token, as they appeared in the input stream."""
    return s.encode('utf-8', errors='surrogateescape')


def rotxor_hash(s: str) -> int:
    """
    Simple 16-bit hash, distribution not-too-dreadful.

    Shifts by a nibble per byte and folds the overflow back in.
    """
    h = 0
    for c in token_bytes(s):
        h = ((h << 4) ^ (h >> 12) ^ c) & 0xFFFF
    return h


class TokenDictionary:
    """
    Bidirectional word <-> id mapping with observed frequencies.

    The hash table doubles as the id space: a token's id is the slot it
    landed in, so ids are dense 16-bit values that never move or get reused.
    """

    def __init__(self):
        self.strings: List[Optional[str]] = [None] * MAX_TOKENS
        self.freqs = torch.zeros(MAX_TOKENS, dtype=torch.int32)
        self.num_tokens = 0

    def _probe(self, s: str) -> Iterator[int]:
        h0 = rotxor_hash(s)
        h = h0
        while True:
            yield h
            # wrap around at 16 bits
            h = (h + HASH_SKIP) & 0xFFFF
            if h == h0:
                return

    def find_or_add(self, s: str) -> int:
        """Find a token, add it if it doesn't yet exist. Returns its id."""
        for h in self._probe(s):
            slot = self.strings[h]
            if slot is None:
                self.strings[h] = s
                self.freqs[h] = 1
                self.num_tokens += 1
                return h
            if slot == s:
                if int(self.freqs[h]) == FREQ_MAX:
                    # We'd wrap! Scale everything down first.
                    total = halve_(self.freqs)
                    logger.debug(f"Rescaled token frequencies on {s!r}, new total {total}")
                self.freqs[h] += 1
                return h

        raise CapacityExceeded(s, MAX_TOKENS)

    def find(self, s: str) -> Optional[int]:
        """Look up a token without adding or counting it."""
        for h in self._probe(s):
            slot = self.strings[h]
            if slot is None:
                return None
            if slot == s:
                return h
        return None

    def resolve(self, token_id: int) -> str:
        if not 0 <= token_id < MAX_TOKENS:
            raise KeyError(f"Token id {token_id} out of range")
        s = self.strings[token_id]
        if s is None:
            raise KeyError(f"No token with id #{token_id:05d}")
        return s

    def frequency(self, token_id: int) -> int:
        return int(self.freqs[token_id])

    def count_vocabulary(self) -> int:
        """
        Rough count of the author's actual vocabulary.

        Only tokens starting with a lowercase letter are counted, which skips
        punctuation, numbers and most names.
        """
        return sum(1 for s in self.strings if s and 'a' <= s[0] <= 'z')

    def items(self) -> Iterator[Tuple[int, str, int]]:
        """Yield (id, token, frequency) for every live slot in id order."""
        for i, s in enumerate(self.strings):
            if s is not None:
                yield i, s, int(self.freqs[i])

    def __len__(self) -> int:
        return self.num_tokens

    def __contains__(self, s: str) -> bool:
        return self.find(s) is not None
