# planqa/infrastructure/lexical_scorer.py

import re
from dataclasses import dataclass
from typing import List, Tuple

from planqa.domain.lexicon import STOP_WORDS, synonyms_for


PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")

# Tokens this short never count as terms ("of", "an", "is", ...)
MIN_TERM_LENGTH = 3

EXACT_MATCH_WEIGHT = 3
PARTIAL_MATCH_WEIGHT = 1
BIGRAM_BONUS = 5
FULL_PHRASE_BONUS = 10
# The full-phrase bonus only applies to phrases longer than this
MIN_FULL_PHRASE_CHARS = 5


def _tokenize(query: str) -> List[str]:
    cleaned = PUNCTUATION_PATTERN.sub(" ", query.lower())
    return [token for token in cleaned.split() if len(token) >= MIN_TERM_LENGTH]


def original_tokens(query: str) -> List[str]:
    """
    Query tokens as typed (stop words kept, no synonyms).
    Used only for the bigram and full-phrase bonuses.
    """
    return _tokenize(query)


def normalize_query(query: str) -> List[str]:
    """
    Lowercase, strip punctuation, drop short tokens and stop words, then
    expand every surviving term with its synonyms.

    The result is deduplicated and keeps first-occurrence order, so each
    term is scored exactly once.
    """
    expanded: List[str] = []
    for word in _tokenize(query):
        if word in STOP_WORDS:
            continue
        expanded.append(word)
        expanded.extend(synonyms_for(word))
    return list(dict.fromkeys(expanded))


@dataclass(frozen=True)
class LexicalQuery:
    """A query prepared once and scored against many chunks."""
    text: str
    terms: Tuple[str, ...]
    phrase_tokens: Tuple[str, ...]

    @classmethod
    def from_text(cls, query: str) -> "LexicalQuery":
        return cls(
            text=query,
            terms=tuple(normalize_query(query)),
            phrase_tokens=tuple(original_tokens(query)),
        )

    @property
    def is_empty(self) -> bool:
        return not self.terms


def score_text(chunk_text: str, query: LexicalQuery) -> float:
    """
    Unbounded keyword relevance of one chunk.

    Per term: 3 points per whole-word hit, 1 point per additional substring
    hit (e.g. "prevent" inside "prevention"). Then 5 points per consecutive
    pair of query words found verbatim, and 10 more when the whole query
    phrase appears. No IDF or length normalization.
    """
    if query.is_empty:
        return 0.0

    text = chunk_text.lower()
    score = 0

    for term in query.terms:
        exact = len(re.findall(rf"\b{re.escape(term)}\b", text))
        partial = text.count(term)
        score += exact * EXACT_MATCH_WEIGHT
        score += max(partial - exact, 0) * PARTIAL_MATCH_WEIGHT

    tokens = query.phrase_tokens
    for first, second in zip(tokens, tokens[1:]):
        if f"{first} {second}" in text:
            score += BIGRAM_BONUS

    full_phrase = " ".join(tokens)
    if len(full_phrase) > MIN_FULL_PHRASE_CHARS and full_phrase in text:
        score += FULL_PHRASE_BONUS

    return float(score)


class LexicalScorer:
    """Keyword/synonym/phrase scorer for short technical documents."""

    def normalize(self, query: str) -> List[str]:
        return normalize_query(query)

    def prepare(self, query: str) -> LexicalQuery:
        return LexicalQuery.from_text(query)

    def score(self, chunk_text: str, query: str) -> float:
        return score_text(chunk_text, self.prepare(query))
