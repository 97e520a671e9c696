from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Callable, List, Mapping, Sequence
import logging
import math
from .annotator import Annotator, NounPredicate, Sentence
from .counter import SENTINEL

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredSentence:
    sentence: Sentence
    score: float


def term_frequencies(sentences: Sequence[Sentence]) -> Counter:
    """Occurrences of every token (nouns or not), keyed by exact surface text."""
    tf: Counter = Counter()
    for s in sentences:
        tf.update(tok.text for tok in s.tokens)
    return tf


class Summarizer:
    """
    Extractive summarizer over a corpus document-frequency map.

    weight(t) = (1 + ln tf(t)) * ln(N / df(t)), 0 when df(t) == 0
      - tf comes from the document being summarized, exact case
      - df is looked up lower-cased in the corpus map
      - N is the corpus document count (the sentinel entry)
    A sentence scores the sum of its noun weights.
    """

    def __init__(
        self,
        counts: Mapping[str, int],
        annotator: Annotator,
        is_noun: Callable[[str], bool] = NounPredicate(),
    ):
        self.counts = counts
        self.annotator = annotator
        self.is_noun = is_noun
        self.num_documents = int(counts.get(SENTINEL, 0))

    def weight(self, term: str, tf: Mapping[str, int]) -> float:
        df = self.counts.get(term.lower(), 0)
        freq = tf.get(term, 0)
        if df == 0 or freq == 0 or self.num_documents == 0:
            return 0.0
        return (1.0 + math.log(freq)) * math.log(self.num_documents / df)

    def score(self, sentence: Sentence, tf: Mapping[str, int]) -> float:
        return sum(self.weight(tok.text, tf) for tok in sentence.tokens if self.is_noun(tok.tag))

    def rank(self, sentences: Sequence[Sentence]) -> List[ScoredSentence]:
        tf = term_frequencies(sentences)
        scored = [ScoredSentence(s, self.score(s, tf)) for s in sentences]
        # sorted() is stable with reverse=True: ties keep document order
        return sorted(scored, key=lambda x: x.score, reverse=True)

    def rank_document(self, document: str) -> List[ScoredSentence]:
        return self.rank(self.annotator.annotate(document))

    def select(self, ranked: Sequence[ScoredSentence], num_sentences: int) -> List[ScoredSentence]:
        if num_sentences < 0:
            raise ValueError("num_sentences must not be negative")
        # clamp to the number of sentences available
        return list(ranked[:min(num_sentences, len(ranked))])

    def summarize(self, document: str, num_sentences: int) -> str:
        """Top `num_sentences` sentences in score order, joined by a space."""
        ranked = self.rank_document(document)
        top = self.select(ranked, num_sentences)
        log.debug("Selected %d of %d sentences", len(top), len(ranked))
        return " ".join(item.sentence.text for item in top)
