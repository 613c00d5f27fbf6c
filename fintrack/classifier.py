"""Naive Bayes text classification and lexical search for financial records.

``NaiveBayesSearcher`` keeps a bag-of-words model per category.  Each
instance owns its model; create one per use (or share one across threads,
since training and classification take an internal lock).

``search`` does not use the trained model at all.  It ranks records by a
simple token overlap score and is kept on the class because callers use
the two features together.
"""

from __future__ import annotations

import logging
import math
import re
import threading
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set, TypeVar, Union

from .models import TrainingItem

logger = logging.getLogger(__name__)

T = TypeVar('T')

_NON_WORD = re.compile(r'[^\w\s]')
_WHITESPACE = re.compile(r'\s+')


def tokenize(text: str) -> List[str]:
    """Lowercase, drop punctuation and split on whitespace."""
    cleaned = _NON_WORD.sub('', str(text).lower())
    return [word for word in _WHITESPACE.split(cleaned) if word]


def _field_value(item: Any, text_field: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(text_field)
    return getattr(item, text_field, None)


class NaiveBayesSearcher:
    """Trainable Naive Bayes classifier with a lexical search helper."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        """Forget everything learned so far."""
        with self._lock:
            self.vocabulary: Set[str] = set()
            self.category_word_counts: Dict[str, Dict[str, int]] = {}
            self.category_counts: Dict[str, int] = {}
            self.total_documents = 0

    @property
    def is_trained(self) -> bool:
        return self.total_documents > 0

    def train(self, training_data: Iterable[Union[TrainingItem, Mapping[str, Any]]]) -> None:
        """Add labelled examples to the model.

        Calls are additive: word counts, category counts and the document
        total all accumulate.  Use ``reset`` to start over.
        """
        items = [item if isinstance(item, TrainingItem) else TrainingItem.from_dict(item) for item in training_data]
        with self._lock:
            for item in items:
                word_counts = self.category_word_counts.setdefault(item.category, {})
                self.category_counts[item.category] = self.category_counts.get(item.category, 0) + 1

                for word in tokenize(item.text):
                    self.vocabulary.add(word)
                    word_counts[word] = word_counts.get(word, 0) + 1

            self.total_documents += len(items)
        logger.debug(
            "Trained on %d documents (%d total, %d categories, vocabulary %d)",
            len(items),
            self.total_documents,
            len(self.category_counts),
            len(self.vocabulary),
        )

    def category_scores(self, text: str) -> Dict[str, float]:
        """Log-probability of ``text`` under every trained category.

        Uses Laplace smoothing so unseen words never zero out a category.
        """
        words = tokenize(text)
        with self._lock:
            vocabulary_size = len(self.vocabulary)
            scores: Dict[str, float] = {}
            for category, count in self.category_counts.items():
                word_counts = self.category_word_counts[category]
                total_words = sum(word_counts.values())
                score = math.log(count / self.total_documents)
                for word in words:
                    probability = (word_counts.get(word, 0) + 1) / (total_words + vocabulary_size)
                    score += math.log(probability)
                scores[category] = score
        return scores

    def classify(self, text: str) -> str:
        """Return the most likely category, or ``''`` for an untrained model."""
        scores = self.category_scores(text)
        if not scores:
            logger.warning("classify called on an untrained model")
            return ''

        best_category = ''
        highest = -math.inf
        for category, score in scores.items():
            if score > highest:
                highest = score
                best_category = category
        return best_category

    def search(self, items: Sequence[T], query: str, text_field: str) -> Sequence[T]:
        """Rank ``items`` by how well ``text_field`` overlaps ``query``.

        Each query token scores 1 for an exact match in the item text and
        0.5 for every item token that contains it or is contained by it.
        Equal scores keep their original order.  An empty query returns
        ``items`` untouched.
        """
        query_words = tokenize(query)
        if not query_words:
            return items

        scored = []
        for item in items:
            value = _field_value(item, text_field)
            item_words = tokenize("" if value is None else str(value))
            score = 0.0
            for query_word in query_words:
                if query_word in item_words:
                    score += 1
                for item_word in item_words:
                    if query_word in item_word or item_word in query_word:
                        score += 0.5
            scored.append((score, item))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [item for _, item in scored]
