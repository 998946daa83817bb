"""
Text processing utilities for the Stanford NER bridge.

Contains the Treebank-style word tokenizer and the token counting used to size
the output expected from the worker for each request.
"""

import re
from typing import List

# Contractions split into two tokens, e.g. "don't" -> "do n't", "cannot" -> "can not"
CONTRACTIONS = [re.compile(pattern, re.IGNORECASE) for pattern in (
    r"(.)('ll|'re|'ve|n't|'s|'m|'d)\b",
    r'\b(can)(not)\b',
    r"\b(d)('ye)\b",
    r'\b(gim)(me)\b',
    r'\b(gon)(na)\b',
    r'\b(got)(ta)\b',
    r'\b(lem)(me)\b',
    r"\b(mor)('n)\b",
    r'\b(t)(is)\b',
    r'\b(t)(was)\b',
    r'\b(wan)(na)\b',
)]

THREE_PART_CONTRACTIONS = [re.compile(pattern, re.IGNORECASE) for pattern in (
    r'\b(whad)(dd)(ya)\b',
    r'\b(wha)(t)(cha)\b',
)]

# Everything but word characters and . ' - / + < > , & stands alone
PUNCTUATION = re.compile(r"([^\w.'\-/+<>,&])")
COMMA = re.compile(r'(,\s)')
SINGLE_QUOTE = re.compile(r"('\s)")
FINAL_PERIOD = re.compile(r'\. *(\n|$)')

# Escaped forms the tagger prints for quotes and brackets
TAGGED_ESCAPES = {
    "``": "'",
    "''": "'",
    "-LRB-": "(",
    "-RRB-": ")",
    "-LSB-": "[",
    "-RSB-": "]",
    "-LCB-": "{",
    "-RCB-": "}",
}

def tokenize(text: str) -> List[str]:
    """Split raw text into Treebank-style word tokens."""
    if not text:
        return []

    for regexp in CONTRACTIONS:
        text = regexp.sub(r'\1 \2', text)
    for regexp in THREE_PART_CONTRACTIONS:
        text = regexp.sub(r'\1 \2 \3', text)

    text = PUNCTUATION.sub(r' \1 ', text)
    text = COMMA.sub(r' \1', text)
    text = SINGLE_QUOTE.sub(r' \1', text)
    text = FINAL_PERIOD.sub(' . ', text)

    return text.split()

def untag_token(token: str) -> str:
    """Return the surface of a `surface/TAG` token with quote and bracket escapes undone."""
    surface = token.split("/")[0]
    return TAGGED_ESCAPES.get(surface, surface)

def count_tokens(text: str, tagged: bool = False) -> int:
    """Count the tokens of a text, ignoring single character tokens.

    With ``tagged`` set the text is one line of tagger output and its tokens are
    taken as-is (split on single spaces) after undoing the tagger's escaping.
    """
    if tagged:
        tokens = [untag_token(token) for token in text.split(" ")]
    else:
        tokens = tokenize(text)

    return len([token for token in tokens if len(token.strip()) > 1])

def normalize_whitespace(text: str) -> str:
    """Collapse line breaks and runs of whitespace into single spaces."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()
