"""
Parser for the tagger's slash-tagged output.

Turns one line of `word/TAG` pairs into a mapping from entity category to the
mentions found in that line.
"""

import re
from typing import Dict, List, Optional, Tuple

TAGGED_TOKEN_PATTERN = re.compile(r'(.+)/([A-Z]+)')

# Tag for tokens outside of any entity
OUTSIDE_TAG = "O"

def parse_tagged_token(token: str) -> Optional[Tuple[str, str]]:
    """Split a `surface/TAG` token into (surface, tag), or None if it is malformed."""
    match = TAGGED_TOKEN_PATTERN.search(token)
    if not match:
        return None
    return match.group(1), match.group(2)

def _flush_mention(entities: Dict[str, List[str]], tag: str, buffer: List[str]):
    entities.setdefault(tag, []).append(" ".join(buffer))

def parse_tagged_line(line: str) -> Dict[str, List[str]]:
    """Group the contiguous non-O tokens of a tagged line into entity mentions.

    Adjacent tokens sharing a tag always form one mention, so two different
    entities of the same category with nothing between them are merged
    (``New/ORGANIZATION York/ORGANIZATION Fed/ORGANIZATION`` gives a single
    ``"New York Fed"``). Tokens that are not of the `surface/TAG` shape are
    skipped.
    """
    tagged = [pair for pair in (parse_tagged_token(token) for token in line.split()) if pair]

    entities: Dict[str, List[str]] = {}
    previous_tag = None
    buffer: List[str] = []

    for surface, tag in tagged:
        if tag == OUTSIDE_TAG:
            if buffer:
                _flush_mention(entities, previous_tag, buffer)
                buffer = []
        elif tag != previous_tag:
            # New entity: close the one in progress under its own tag
            if buffer:
                _flush_mention(entities, previous_tag, buffer)
            buffer = [surface]
        else:
            buffer.append(surface)

        previous_tag = tag

    if buffer:
        _flush_mention(entities, previous_tag, buffer)

    return entities
