# planqa/domain/lexicon.py
#
# Static lookup data for keyword scoring. Built once at import time and never
# mutated: stop words are a frozenset, synonyms a read-only mapping of tuples.

from types import MappingProxyType
from typing import Mapping, Tuple


STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "i", "my", "me", "do", "does", "what",
    "how", "when", "where", "why", "can", "could", "should", "would",
})


# Health-plan vocabulary. Keys are normalized query terms; values are added
# alongside the original term, never in place of it.
SYNONYMS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "preventive":  ("preventative", "prevention", "prevent"),
    "preventative": ("preventive", "prevention", "prevent"),
    "visit":       ("visits", "appointment", "appointments", "care", "service", "services"),
    "visits":      ("visit", "appointment", "appointments", "care", "service", "services"),
    "primary":     ("primary", "general", "family"),
    "care":        ("service", "services", "visit", "visits", "treatment"),
    "covered":     ("cover", "coverage", "includes", "include", "provided"),
    "coverage":    ("cover", "covered", "includes", "include"),
    "copay":       ("copayment", "co-pay", "co-payment"),
    "deductible":  ("deductibles",),
    "specialist":  ("specialists", "specialty"),
})


def synonyms_for(term: str) -> Tuple[str, ...]:
    return SYNONYMS.get(term, ())
