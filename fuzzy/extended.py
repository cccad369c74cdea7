"""
Extended query syntax for endpoints that opt into it.

    brave heart      both tokens must match (fuzzy)
    =Brave Heart     exact match         (quote to keep spaces: ="Brave Heart")
    'courage         value includes the text
    !poison          value does not include the text
    ^bra             value starts with the text
    !^bra            value does not start with the text
    art$             value ends with the text
    !art$            value does not end with the text
    a | b            either group matches

Exact operators score 0.0; bare tokens use the fuzzy scorer and the index threshold.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Tuple

from fuzzy.scoring import DEFAULT_THRESHOLD, FuzzyMatcher

OR_TOKEN = "|"
# Split on spaces that are not inside double quotes.
SPACE_RE = re.compile(r' +(?=(?:[^"]*"[^"]*")*[^"]*$)')

# Order matters: the first pattern that matches a token decides its kind.
_TOKEN_PATTERNS: List[Tuple[str, Tuple[re.Pattern, ...]]] = [
    ("exact", (re.compile(r'^="(.*)"$'), re.compile(r"^=(.*)$"))),
    ("include", (re.compile(r"^'\"(.*)\"$"), re.compile(r"^'(.*)$"))),
    ("prefix", (re.compile(r'^\^"(.*)"$'), re.compile(r"^\^(.*)$"))),
    ("inverse_prefix", (re.compile(r'^!\^"(.*)"$'), re.compile(r"^!\^(.*)$"))),
    ("inverse_suffix", (re.compile(r'^!"(.*)"\$$'), re.compile(r"^!(.*)\$$"))),
    ("suffix", (re.compile(r'^"(.*)"\$$'), re.compile(r"^(.*)\$$"))),
    ("inverse_include", (re.compile(r'^!"(.*)"$'), re.compile(r"^!(.*)$"))),
    ("fuzzy", (re.compile(r'^"(.*)"$'), re.compile(r"^(.*)$"))),
]


class Token(NamedTuple):
    kind: str
    value: str


def parse_token(raw: str) -> Token:
    for kind, patterns in _TOKEN_PATTERNS:
        for pattern in patterns:
            m = pattern.match(raw)
            if m:
                return Token(kind, m.group(1))
    return Token("fuzzy", raw)


def parse_query(query: str) -> List[List[Token]]:
    """Parse into OR groups of AND-ed tokens; tokens with an empty operand are dropped."""
    groups: List[List[Token]] = []
    for part in query.split(OR_TOKEN):
        part = part.strip()
        if not part:
            continue
        tokens = [parse_token(t) for t in SPACE_RE.split(part) if t.strip()]
        tokens = [t for t in tokens if t.value]
        if tokens:
            groups.append(tokens)
    return groups


def _exact_check(kind: str, value: str, text: str) -> bool:
    if kind == "exact":
        return text == value
    if kind == "include":
        return value in text
    if kind == "inverse_include":
        return value not in text
    if kind == "prefix":
        return text.startswith(value)
    if kind == "inverse_prefix":
        return not text.startswith(value)
    if kind == "suffix":
        return text.endswith(value)
    if kind == "inverse_suffix":
        return not text.endswith(value)
    raise ValueError(f"Unknown token kind: {kind}")


class ExtendedMatcher:
    """Matcher for the extended syntax; same `search_in` contract as FuzzyMatcher."""

    def __init__(self, query: str, threshold: float = DEFAULT_THRESHOLD, ignore_location: bool = True):
        self.groups = parse_query(query.lower())
        self._fuzzy = {
            tok.value: FuzzyMatcher(tok.value, threshold, ignore_location)
            for group in self.groups
            for tok in group
            if tok.kind == "fuzzy"
        }

    def _match_token(self, tok: Token, text: str) -> Tuple[bool, float]:
        if tok.kind == "fuzzy":
            return self._fuzzy[tok.value].search_in(text)
        if _exact_check(tok.kind, tok.value, text):
            return True, 0.0
        return False, 1.0

    def search_in(self, text: str) -> Tuple[bool, float]:
        for group in self.groups:
            total = 0.0
            for tok in group:
                is_match, score = self._match_token(tok, text)
                if not is_match:
                    break
                total += score
            else:
                return True, total / len(group)
        return False, 1.0
