"""
Word phrase codec for binary payloads.

A payload is read as a big-endian unsigned integer and rewritten in base N,
where N is the size of the word list. Each base-N digit becomes one word,
most significant first. A final checksum word is the sum of the word indices
modulo N.

Limitations:
    - Leading zero bytes are not recoverable: decode() returns the shortest
      big-endian form of the integer. Payloads that must round-trip start
      with a non-zero byte.
    - The checksum is additive. It catches accidental corruption (a single
      changed word always changes it) but offers no protection against
      deliberate tampering.
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Sequence

from mnemonic import Mnemonic

from .errors import EmptyInputError, InvalidWordListError, UnknownWordError


@lru_cache(maxsize=None)
def bip39_english() -> tuple[str, ...]:
    """The 2048-word BIP-39 English word list."""
    return tuple(Mnemonic("english").wordlist)


class MnemonicEncoder:
    """
    Encodes bytes as word phrases over a fixed word list.

    The list and its word->index table are built once and never modified,
    so one encoder can be shared between threads.
    """

    def __init__(self, word_list: Sequence[str]):
        self._words = tuple(word_list)

        index = {word: i for i, word in enumerate(self._words)}
        if len(index) != len(self._words):
            raise InvalidWordListError("Word list contains duplicate words")
        self._index = MappingProxyType(index)

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    @property
    def base(self) -> int:
        return len(self._words)

    def _require_words(self) -> None:
        if not self._words:
            raise InvalidWordListError("Word list is empty")

    def index_of(self, word: str) -> int:
        """Position of word in the list."""
        try:
            return self._index[word]
        except KeyError:
            raise UnknownWordError(word) from None

    def encode(self, data: bytes) -> str:
        """
        Encode bytes as a space-separated phrase.

        Args:
            data: Non-empty payload

        Returns:
            Phrase with one word per base-N digit (a zero value encodes as
            the first word of the list)

        Raises:
            EmptyInputError: If data is empty
            InvalidWordListError: If the word list is empty
        """
        if not data:
            raise EmptyInputError("Cannot encode empty data")
        self._require_words()

        value = int.from_bytes(data, byteorder="big")
        base = self.base

        digits = []
        while value > 0:
            value, remainder = divmod(value, base)
            digits.append(self._words[remainder])

        if not digits:
            return self._words[0]

        return " ".join(reversed(digits))

    def decode(self, phrase: str) -> bytes:
        """
        Decode a phrase back to bytes.

        Returns the minimal big-endian form of the encoded integer.

        Raises:
            EmptyInputError: If the phrase is blank
            InvalidWordListError: If the word list is empty
            UnknownWordError: If a word is not in the list
        """
        tokens = phrase.split()
        if not tokens:
            raise EmptyInputError("Cannot decode an empty phrase")
        self._require_words()

        base = self.base
        value = 0
        for token in tokens:
            value = value * base + self.index_of(token)

        return value.to_bytes((value.bit_length() + 7) // 8, byteorder="big")

    def checksum_word(self, phrase: str) -> str:
        """Word whose index is the sum of the phrase's word indices mod N."""
        self._require_words()

        # Unknown words contribute nothing; decode() rejects them later.
        total = sum(self._index.get(token, 0) for token in phrase.split())
        return self._words[total % self.base]

    def add_checksum(self, phrase: str) -> str:
        """Append the checksum word. Blank input yields an empty string."""
        if not phrase.strip():
            return ""
        return f"{phrase} {self.checksum_word(phrase)}"

    def verify_checksum(self, phrase: str) -> tuple[str, bool]:
        """
        Split off and check the trailing checksum word.

        Returns:
            (phrase without its checksum word, whether the checksum matched).
            Phrases of fewer than two words never match.
        """
        tokens = phrase.split()
        if len(tokens) < 2:
            return "", False

        inner = " ".join(tokens[:-1])
        return inner, tokens[-1] == self.checksum_word(inner)
