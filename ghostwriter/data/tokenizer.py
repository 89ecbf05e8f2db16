"""Splitting raw text streams into word and punctuation tokens."""

from typing import BinaryIO, Iterator, List

from ghostwriter.errors import WordTooLong


STX = '\x02'  # start of text
ETX = '\x03'  # end of text

MAX_WORD_LEN = 1024

# Definite word breaks. And yes, we effectively eat ()[]<>
# NUL, STX and ETX break words too, so the sentinels only ever frame a stream.
WORD_BREAKS = frozenset(b' \t\n\r\v"()[]<>\x00\x02\x03')
# Only a token of their own when followed by whitespace or EOF, otherwise they
# may be part of a "...", URL or email address.
PUNCTUATION = frozenset(b'.,!?:;/@-_')
WHITESPACE = frozenset(b' \t\n\v\f\r')


def _decode(word: bytearray) -> str:
    return word.decode('utf-8', errors='surrogateescape')


def tokenize_bytes(data: bytes, max_word_len: int = MAX_WORD_LEN) -> Iterator[str]:
    """
    Yield the tokens of one text, framed by STX and ETX.

    Punctuation followed by whitespace is split off a word of two or more
    characters; a single-character word keeps it (initials, list markers).
    """
    yield STX

    word = bytearray()
    n = len(data)
    for i, c in enumerate(data):
        if c in WORD_BREAKS:
            if word:
                yield _decode(word)
                word.clear()
            continue

        if c in PUNCTUATION and (i + 1 == n or data[i + 1] in WHITESPACE):
            if len(word) >= 2:
                yield _decode(word)
                word.clear()
            word.append(c)
            yield _decode(word)
            word.clear()
            continue

        if len(word) >= max_word_len:
            raise WordTooLong(max_word_len)
        word.append(c)

    if word:
        yield _decode(word)

    yield ETX


def tokenize(stream: BinaryIO, max_word_len: int = MAX_WORD_LEN) -> Iterator[str]:
    """Tokenize everything readable from a binary stream."""
    return tokenize_bytes(stream.read(), max_word_len)


def tokenize_text(text: str, max_word_len: int = MAX_WORD_LEN) -> List[str]:
    return list(tokenize_bytes(text.encode('utf-8'), max_word_len))
