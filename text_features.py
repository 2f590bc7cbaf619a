"""Text feature extractors: topics, categories, word frequencies, sentiment.

All extractors are pure functions over plain strings.  Topic extraction
uses an NLTK part-of-speech tagger by default; pass ``tagger=`` to
substitute another one.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections import Counter
from functools import lru_cache
from typing import Callable, Iterable

import nltk
from nltk.corpus import stopwords
from nltk.stem import WordNetLemmatizer
from nltk.tokenize import TreebankWordTokenizer

from reference_data import (
    CATEGORY_KEYWORDS,
    GENERAL_CATEGORY,
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
)
from settings import MAX_TOPICS, MAX_WORDS, TOPIC_TEXT_CHARS

logger = logging.getLogger(__name__)

Tagger = Callable[[str], tuple[list[str], list[str]]]

STOPWORD_LANGUAGES = ("english", "spanish", "portuguese")
DOMAIN_STOP_WORDS = ("chatgpt", "chat", "gpt", "hi", "hello", "hey")

NLTK_RESOURCES = (
    ("taggers/averaged_perceptron_tagger_eng", "averaged_perceptron_tagger_eng"),
    ("corpora/wordnet", "wordnet"),
    ("corpora/stopwords", "stopwords"),
)

_NON_TERM_CHARS = re.compile(r"[^a-z0-9'-]")
_DIGITS = re.compile(r"^\d+$")


@lru_cache(maxsize=1)
def ensure_nltk_data() -> None:
    """Download any missing NLTK data packages used by the extractors.

    Checks once per process; call ``ensure_nltk_data.cache_clear()`` to
    check again.
    """
    for resource, package in NLTK_RESOURCES:
        try:
            nltk.data.find(resource)
        except LookupError:
            logger.info("Downloading NLTK package %s...", package)
            nltk.download(package, quiet=True)


def strip_diacritics(text: str) -> str:
    """Decompose *text* (NFD) and drop combining marks."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_term(term: str) -> str:
    """Lowercase, strip diacritics and drop characters outside [a-z0-9'-]."""
    return _NON_TERM_CHARS.sub("", strip_diacritics(term.lower().strip()))


@lru_cache(maxsize=1)
def default_stop_words() -> frozenset[str]:
    """English, Spanish and Portuguese stop words plus chat filler words."""
    ensure_nltk_data()
    words: set[str] = set()
    for language in STOPWORD_LANGUAGES:
        words.update(strip_diacritics(w.lower()) for w in stopwords.words(language))
    words.update(DOMAIN_STOP_WORDS)
    return frozenset(words)


def _is_candidate(term: str, stop_words: frozenset[str], max_len: int) -> bool:
    if len(term) < 3 or len(term) > max_len:
        return False
    if term in stop_words:
        return False
    return not _DIGITS.match(term)


_tokenizer = TreebankWordTokenizer()


@lru_cache(maxsize=1)
def _lemmatizer() -> WordNetLemmatizer:
    ensure_nltk_data()
    return WordNetLemmatizer()


def nltk_tagger(text: str) -> tuple[list[str], list[str]]:
    """Return (singular nouns, proper-noun phrases) found in *text*.

    Every NN* token is lemmatized to its singular form.  Each maximal run
    of NNP/NNPS tokens is also returned as a space-joined phrase.
    """
    tokens = _tokenizer.tokenize(text)
    if not tokens:
        return [], []
    ensure_nltk_data()
    tagged = nltk.pos_tag(tokens)
    lemmatizer = _lemmatizer()

    nouns: list[str] = []
    phrases: list[str] = []
    run: list[str] = []
    for word, tag in tagged:
        if tag.startswith("NN"):
            nouns.append(lemmatizer.lemmatize(word.lower(), pos="n"))
        if tag in ("NNP", "NNPS"):
            run.append(word)
            continue
        if run:
            phrases.append(" ".join(run))
            run = []
    if run:
        phrases.append(" ".join(run))
    return nouns, phrases


def extract_topics(
    texts: Iterable[str],
    max_topics: int = MAX_TOPICS,
    tagger: Tagger | None = None,
    stop_words: frozenset[str] | None = None,
) -> list[dict]:
    """Rank the nouns and named phrases that recur across *texts*.

    Args:
        texts: Titles and message bodies.  Each is truncated to 500
            characters before tagging.
        max_topics: Maximum number of topics returned.
        tagger: Callable returning (nouns, topic phrases) for a text.
            Defaults to ``nltk_tagger``.
        stop_words: Terms to ignore.  Defaults to ``default_stop_words()``.

    Returns:
        Up to *max_topics* dicts with keys topic and count, most frequent
        first.  Terms seen fewer than 2 times are dropped.
    """
    tagger = tagger or nltk_tagger
    if stop_words is None:
        stop_words = default_stop_words()

    counts: Counter[str] = Counter()
    for text in texts:
        nouns, topics = tagger(text[:TOPIC_TEXT_CHARS])
        for term in [*nouns, *topics]:
            clean = normalize_term(term)
            if _is_candidate(clean, stop_words, max_len=30):
                counts[clean] += 1

    ranked = sorted(
        ({"topic": topic, "count": count} for topic, count in counts.items() if count >= 2),
        key=lambda t: t["count"],
        reverse=True,
    )
    return ranked[:max_topics]


def categorize_conversation(text: str) -> str:
    """Assign one of the fixed categories by keyword substring scoring.

    Multi-word keywords score 3, single words score 1.  The first category
    with the strictly highest score wins; no hits at all gives "General".
    """
    lower = text.lower()
    best_category = GENERAL_CATEGORY
    best_score = 0

    for category, keywords in CATEGORY_KEYWORDS.items():
        score = 0
        for keyword in keywords:
            if keyword in lower:
                score += 3 if " " in keyword else 1
        if score > best_score:
            best_score = score
            best_category = category

    return best_category


def extract_word_frequencies(
    texts: Iterable[str],
    max_words: int = MAX_WORDS,
    stop_words: frozenset[str] | None = None,
) -> list[dict]:
    """Count normalized words across *texts* for a word cloud.

    Returns:
        Up to *max_words* dicts with keys text and value, most frequent
        first.  Words seen fewer than 3 times are dropped.
    """
    if stop_words is None:
        stop_words = default_stop_words()

    counts: Counter[str] = Counter()
    for text in texts:
        for word in text.lower().split():
            clean = normalize_term(word)
            if _is_candidate(clean, stop_words, max_len=20):
                counts[clean] += 1

    ranked = sorted(
        ({"text": word, "value": count} for word, count in counts.items() if count >= 3),
        key=lambda w: w["value"],
        reverse=True,
    )
    return ranked[:max_words]


def analyze_sentiment(text: str) -> float:
    """Score *text* from -1 (negative) to 1 (positive).

    Each whitespace token adds 1 if it contains a positive stem and
    subtracts 1 if it contains a negative stem.  The sum is divided by a
    tenth of the token count (at least 1) and clamped.
    """
    words = text.lower().split()
    score = 0
    for word in words:
        if any(p in word for p in POSITIVE_WORDS):
            score += 1
        if any(n in word for n in NEGATIVE_WORDS):
            score -= 1

    max_possible = max(len(words) * 0.1, 1)
    return max(-1.0, min(1.0, score / max_possible))
