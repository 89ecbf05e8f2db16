"""Trigram frequency network: token pair -> weighted successor tokens."""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ghostwriter.data.dictionary import TokenDictionary
from ghostwriter.data.tokenizer import ETX, STX
from ghostwriter.utils.counts import FREQ_MAX, halve_


logger = logging.getLogger(__name__)

Context = Tuple[int, int]

NIL = -1  # no child


@dataclass
class TrigramNode:
    """All successors (token C) observed after a token pair (A, B)."""
    key: Context
    freq: int = 0
    successors: List[int] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)
    left: int = NIL
    right: int = NIL

    def add(self, token_c: int) -> None:
        for i, succ in enumerate(self.successors):
            if succ == token_c:
                if self.counts[i] == FREQ_MAX:
                    # We'd wrap! Halve everything and re-tally the pair total.
                    self.freq = halve_(self.counts)
                    logger.debug(f"Rescaled successors of {self.key}, new total {self.freq}")
                self.counts[i] += 1
                self.freq += 1
                return

        self.successors.append(token_c)
        self.counts.append(1)
        self.freq += 1

    def entries(self) -> Iterator[Tuple[int, int]]:
        """(token C, frequency) pairs in first-seen order."""
        return zip(self.successors, self.counts)

    def probabilities(self) -> List[Tuple[int, float]]:
        return [(c, f / self.freq) for c, f in self.entries()]


class TrigramIndex:
    """
    Binary search tree of TrigramNodes ordered by (A, B), A first.

    Nodes live in a flat list and refer to their children by position. There
    is no rebalancing, so the corpus order decides the shape of the tree.
    """

    def __init__(self):
        self.nodes: List[TrigramNode] = []

    def _search(self, key: Context) -> Tuple[int, int]:
        """Return (node, parent) positions; node is NIL if the key is absent."""
        parent = NIL
        i = 0 if self.nodes else NIL
        while i != NIL:
            node = self.nodes[i]
            if node.key == key:
                return i, parent
            parent = i
            i = node.left if key < node.key else node.right
        return NIL, parent

    def record(self, context: Context, token_c: int) -> TrigramNode:
        """Count one occurrence of token_c following context."""
        i, parent = self._search(context)
        if i == NIL:
            node = TrigramNode(key=context)
            self.nodes.append(node)
            if parent != NIL:
                p = self.nodes[parent]
                if context < p.key:
                    p.left = len(self.nodes) - 1
                else:
                    p.right = len(self.nodes) - 1
        else:
            node = self.nodes[i]

        node.add(token_c)
        return node

    def lookup(self, context: Context) -> Optional[TrigramNode]:
        i, _ = self._search(context)
        return None if i == NIL else self.nodes[i]

    def traverse(self) -> Iterator[TrigramNode]:
        """Walk the tree in key order, left first."""
        stack: List[int] = []
        i = 0 if self.nodes else NIL
        while stack or i != NIL:
            while i != NIL:
                stack.append(i)
                i = self.nodes[i].left
            node = self.nodes[stack.pop()]
            yield node
            i = node.right

    def depth(self) -> int:
        if not self.nodes:
            return 0
        deepest = 0
        stack = [(0, 1)]
        while stack:
            i, d = stack.pop()
            deepest = max(deepest, d)
            node = self.nodes[i]
            for child in (node.left, node.right):
                if child != NIL:
                    stack.append((child, d + 1))
        return deepest

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, context: Context) -> bool:
        return self.lookup(context) is not None


@dataclass
class ModelStats:
    num_tokens: int
    vocabulary: int
    num_contexts: int
    depth: int


class TrigramModel:
    """Owns the token dictionary and the trigram index built from it."""

    def __init__(self):
        self.dictionary = TokenDictionary()
        self.index = TrigramIndex()
        self.stx = self.dictionary.find_or_add(STX)

    @property
    def etx(self) -> Optional[int]:
        """Id of the end-of-text token, None until a stream has been ingested."""
        return self.dictionary.find(ETX)

    def start(self) -> Context:
        """The context every stream, and every generated text, starts from."""
        return (self.stx, self.stx)

    def stats(self) -> ModelStats:
        return ModelStats(
            num_tokens=len(self.dictionary),
            vocabulary=self.dictionary.count_vocabulary(),
            num_contexts=len(self.index),
            depth=self.index.depth(),
        )

    def dump(self) -> Iterator[str]:
        """Human-readable listing of the token table and the trigram tree."""
        words = self.dictionary
        yield 'Token hash table:'
        for i, s, freq in words.items():
            yield f"[#{i:05d}]:{freq} {s!r}"

        yield ''
        yield 'Trigram tree:'
        for node in self.index.traverse():
            a, b = node.key
            yield f"[#{a:05d},#{b:05d}] {words.resolve(a)!r} {words.resolve(b)!r}"
            for c, p in node.probabilities():
                yield f"  [{c:05d}] ({p:3.2f}) {words.resolve(c)!r}"
