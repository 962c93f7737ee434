"""Text canonicalization, suffix stemming and tokenization.

Every stage works on the output of ``normalize_text`` so that regex rules
and ontology keys never need to special-case punctuation variants such as
"Node.js" vs "nodejs" or "C++" vs "cplusplus".
"""

import re
from collections.abc import Callable

# Applied in order; longer variants before their suffixes (asp.net before .net)
COMPOUND_TERMS: tuple[tuple[str, str], ...] = (
    ("node.js", "nodejs"),
    ("react.js", "reactjs"),
    ("vue.js", "vuejs"),
    ("next.js", "nextjs"),
    ("nuxt.js", "nuxtjs"),
    ("express.js", "expressjs"),
    ("angular.js", "angularjs"),
    ("asp.net", "aspnet"),
    (".net", "dotnet"),
    ("c++", "cplusplus"),
    ("c#", "csharp"),
    ("f#", "fsharp"),
    ("postgre sql", "postgresql"),
    ("mongo db", "mongodb"),
)

MIN_STEM_LENGTH = 2

_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"[A-Za-z0-9_\-.]+")
_EDGE_PUNCT = ".,;:!?()[]\"'"


def normalize_text(text: str) -> str:
    """Lower-case, fold compound terms and collapse whitespace."""
    if not text:
        return ""
    processed = text.lower()
    for variant, canonical in COMPOUND_TERMS:
        processed = processed.replace(variant, canonical)
    return _WHITESPACE.sub(" ", processed).strip()


def _strip(word: str, suffix_len: int) -> str | None:
    stem = word[:-suffix_len]
    return stem if len(stem) >= MIN_STEM_LENGTH else None


def stem(word: str) -> str:
    """Light suffix-stripping stemmer.

    -ing and -ed/-er/-ly/-ment are dropped, -tion becomes -e. A rule only
    applies when the remaining stem keeps at least MIN_STEM_LENGTH chars.
    """
    word = word.lower()
    if word.endswith("ing"):
        candidate = _strip(word, 3)
    elif word.endswith(("ed", "er", "ly")):
        candidate = _strip(word, 2)
    elif word.endswith("tion"):
        candidate = _strip(word, 4)
        candidate = candidate + "e" if candidate else None
    elif word.endswith("ment"):
        candidate = _strip(word, 4)
    else:
        candidate = None
    return candidate or word


def normalized_key(term: str) -> str:
    """Canonical dedup identity of a skill term: normalized text, stemmed per word."""
    words = [w.strip(_EDGE_PUNCT) for w in normalize_text(term).split()]
    return " ".join(stem(w) for w in words if w)


def tokenize(text: str) -> list[str]:
    """Tokens of already-normalized text; each raw token is followed by its stem when it differs."""
    tokens: list[str] = []
    for match in _TOKEN.finditer(text):
        token = match.group()
        tokens.append(token)
        stemmed = stem(token)
        if stemmed != token:
            tokens.append(stemmed)
    return tokens


def raw_tokens(text: str) -> list[tuple[str, int]]:
    """Raw tokens with their offsets, edge punctuation trimmed."""
    found = []
    for match in _TOKEN.finditer(text):
        token = match.group().strip(".-")
        if token:
            found.append((token, match.start()))
    return found


def preprocess(text: str) -> tuple[str, list[str]]:
    """Return (normalized text, token stream)."""
    normalized = normalize_text(text)
    return normalized, tokenize(normalized)


_TECHNICAL_SUFFIX = re.compile(r".*(?:js|py|sql|api|db|framework|library|sdk|cli)$")


def technical_density(tokens: list[str], is_known: Callable[[str], bool]) -> float:
    """Share of tokens that are known skills or look technical by suffix."""
    if not tokens:
        return 0.0
    technical = sum(1 for t in tokens if is_known(t) or _TECHNICAL_SUFFIX.match(t))
    return technical / len(tokens)
