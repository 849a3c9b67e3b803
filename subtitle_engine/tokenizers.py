"""Word tokenizers used to sub-segment long sentences.

WHY: Cutting a long Chinese sentence at a fixed character count splits
words in half ("房|间"). The segmenter therefore accumulates whole words,
which needs a language-aware tokenizer. The tokenizer is a capability, not
a hard requirement: when the dictionary cannot be loaded, segmentation
must still work, only with per-character tokens.

HOW: WordTokenizer is an ABC with a ``name`` property and ``tokenize()``.
JiebaTokenizer wraps a private ``jieba.Tokenizer`` instance (precise mode,
HMM enabled) and loads its dictionary at construction time.
CharacterTokenizer yields one token per character. create_tokenizer()
picks jieba and falls back to characters if initialization fails.

RULES:
- "".join(tokenize(text)) == text for every tokenizer.
- Loading a jieba dictionary takes about a second, so create_tokenizer()
  builds one JiebaTokenizer per dictionary path and reuses it.
- A JiebaTokenizer is read-only after construction and safe to share
  between threads.
- Initialization failures are logged, never raised from create_tokenizer(),
  and are not cached: the next call tries again.
"""

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import List, Optional

import jieba

logger = logging.getLogger(__name__)

class WordTokenizer(ABC):
    """Abstract base for word tokenizers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier, e.g. 'jieba'."""

    @abstractmethod
    def tokenize(self, text: str) -> List[str]:
        """Split text into word tokens whose concatenation is text."""


class CharacterTokenizer(WordTokenizer):
    """Fallback tokenizer: one token per character."""

    @property
    def name(self) -> str:
        return "character"

    def tokenize(self, text: str) -> List[str]:
        return list(text)


class JiebaTokenizer(WordTokenizer):
    """Chinese word segmentation backed by jieba.

    Args:
        dictionary: Optional path to a custom main dictionary. Defaults to
            jieba's bundled dictionary.

    Raises:
        Exception: Whatever jieba raises while loading the dictionary
            (missing file, unreadable cache). Callers that need graceful
            degradation go through create_tokenizer().
    """

    def __init__(self, dictionary: Optional[str] = None) -> None:
        self._jieba = jieba.Tokenizer(dictionary=dictionary)
        self._jieba.initialize()

    @property
    def name(self) -> str:
        return "jieba"

    def tokenize(self, text: str) -> List[str]:
        return self._jieba.lcut(text, cut_all=False, HMM=True)


@lru_cache(maxsize=None)
def shared_jieba_tokenizer(dictionary: Optional[str] = None) -> JiebaTokenizer:
    """Return the process-wide JiebaTokenizer for a dictionary path.

    lru_cache does not store results of calls that raise, so a failed
    load is retried on the next call.
    """
    return JiebaTokenizer(dictionary=dictionary)


def create_tokenizer(dictionary: Optional[str] = None) -> WordTokenizer:
    """Return a jieba tokenizer, or the character fallback if jieba fails.

    Args:
        dictionary: Optional custom jieba dictionary path. None uses
            jieba's bundled dictionary.

    Returns:
        A ready-to-use WordTokenizer. Jieba tokenizers are shared between
        calls with the same dictionary.
    """
    try:
        return shared_jieba_tokenizer(dictionary)
    except Exception:
        logger.warning(
            "jieba initialization failed, falling back to per-character tokens",
            exc_info=True,
        )
        return CharacterTokenizer()
