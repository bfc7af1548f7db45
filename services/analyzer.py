"""
Heuristic story-element extraction for chapter prose.

A single pass of regular expressions pulls candidate characters, places,
events and items out of a block of text. The result is a suggestion list for
the writer to review, never an authoritative record, so the analyzer does not
fail: bad or empty input simply produces empty lists.

Every pattern is scanned with ``re.finditer``, which yields leftmost,
non-overlapping matches from left to right. Patterns of one category run in
the order they are declared and the first match for a given name wins.
"""

import re
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any

MAX_EVENTS = 10
MAX_NAME_WORDS = 3
MIN_NAME_LENGTH = 4
PLACE_CONTEXT_CHARS = 50
ITEM_CONTEXT_CHARS = 30

# Whitespace as ECMAScript defines it. Python's \s also takes \x1c-\x1f and
# \x85 but not U+FEFF, so it is spelled out instead.
WHITESPACE_CHARS = (
    "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_WS = "[" + WHITESPACE_CHARS + "]+"

_PROPER_NAME = r"[A-Z][a-z]+(?:" + _WS + r"[A-Z][a-z]+)*"
_NOUN_PHRASE = r"[a-zA-Z]+(?:" + _WS + r"[a-zA-Z]+)*"

DIALOGUE_PATTERN = re.compile(
    r'"([^"]+)"' + _WS +
    r"(said|asked|replied|shouted|whispered|exclaimed|muttered|growled|laughed|smiled|frowned|nodded|shook [A-Za-z0-9_]+ head)"
    + _WS + r"(" + _PROPER_NAME + ")"
)

ACTION_PATTERN = re.compile(
    r"(" + _PROPER_NAME + r")" + _WS +
    r"(walked|ran|jumped|sat|stood|looked|turned|grabbed|pushed|pulled|opened|closed)"
)

PLACE_PATTERNS = [
    re.compile(r"(?:in|at|to|from|near|inside|outside|behind|beneath|above|below)" + _WS + "the" + _WS + "(" + _PROPER_NAME + ")"),
    re.compile(r"(?:entered|left|arrived at|departed from)" + _WS + "(" + _PROPER_NAME + ")"),
    re.compile(r"The" + _WS + "(" + _PROPER_NAME + r")" + _WS + "(?:was|were|stood|lay|stretched)"),
]

# Keywords are case-insensitive, the captured phrase is ASCII letters only.
# re.ASCII keeps case folding to A-Z, so "ſ" and the Kelvin sign never match.
ITEM_PATTERNS = [
    re.compile(r"(?i:picked up|grabbed|held|carried|found|discovered)" + _WS + "(?i:a|an|the)" + _WS + "(" + _NOUN_PHRASE + ")", re.ASCII),
    re.compile(r"(?i:a|an|the)" + _WS + "(" + _NOUN_PHRASE + ")" + _WS + "(?i:glowed|shimmered|hummed|pulsed|gleamed)", re.ASCII),
    re.compile(r"(?i:ancient|magical|enchanted|cursed|blessed|legendary)" + _WS + "(" + _NOUN_PHRASE + ")", re.ASCII),
]

EVENT_PATTERNS = [
    re.compile(r"(?:suddenly|then|after|before|when|while|as soon as)", re.IGNORECASE | re.ASCII),
    re.compile(r"(?:discovered|found|realized|learned|understood|saw|heard|felt)", re.IGNORECASE | re.ASCII),
    re.compile(r"(?:attacked|defended|escaped|captured|rescued|saved)", re.IGNORECASE | re.ASCII),
    re.compile(r"(?:arrived|departed|traveled|journeyed|returned)", re.IGNORECASE | re.ASCII),
    re.compile(r"(?:died|born|married|betrayed|revealed)", re.IGNORECASE | re.ASCII),
]

SENTENCE_SPLIT = re.compile(r"[.!?]+")
CAPITALIZED_WORD = re.compile(r"[A-Z][a-z]+")

IMPORTANT_WORDS = (
    "died", "death", "born", "birth", "married", "betrayed", "revealed",
    "discovered", "destroyed", "created", "transformed", "cursed", "blessed",
)

@dataclass
class ExtractedCharacter:
    name: str
    dialogues: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)

@dataclass
class ExtractedPlace:
    name: str
    context: str

@dataclass
class ExtractedEvent:
    text: str
    importance: int

@dataclass
class ExtractedItem:
    name: str
    context: str

@dataclass
class AnalysisResult:
    characters: List[ExtractedCharacter] = field(default_factory=list)
    places: List[ExtractedPlace] = field(default_factory=list)
    events: List[ExtractedEvent] = field(default_factory=list)
    items: List[ExtractedItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return asdict(self)

def analyze(text: Optional[str]) -> AnalysisResult:
    """
    Extract candidate story elements from ``text``.

    Args:
        text: Chapter prose. ``None``, empty strings and non-string values
            are accepted and produce an empty result.

    Returns:
        AnalysisResult with characters, places, events and items. The four
        extractions are independent of each other and the call is a pure
        function of its input.
    """
    if not isinstance(text, str) or not text:
        return AnalysisResult()

    return AnalysisResult(
        characters=extract_characters(text),
        places=extract_places(text),
        events=extract_events(text),
        items=extract_items(text),
    )

def _context(text: str, match: re.Match, radius: int) -> str:
    start = max(0, match.start() - radius)
    end = min(len(text), match.end() + radius)
    return text[start:end]

def _short_name(name: str) -> bool:
    return len(name.split(" ")) <= MAX_NAME_WORDS

def extract_characters(text: str) -> List[ExtractedCharacter]:
    """Characters who speak at least once or act more than once."""
    characters: Dict[str, ExtractedCharacter] = {}

    for match in DIALOGUE_PATTERN.finditer(text):
        name = match.group(3)
        if not _short_name(name):
            continue
        character = characters.setdefault(name, ExtractedCharacter(name=name))
        character.dialogues.append(match.group(1))

    for match in ACTION_PATTERN.finditer(text):
        name = match.group(1)
        if not _short_name(name):
            continue
        character = characters.setdefault(name, ExtractedCharacter(name=name))
        character.actions.append(match.group(0))

    # A single action by a capitalized word is usually noise (sentence starts)
    return [
        character for character in characters.values()
        if character.dialogues or len(character.actions) > 1
    ]

def extract_places(text: str) -> List[ExtractedPlace]:
    places: Dict[str, ExtractedPlace] = {}

    for pattern in PLACE_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(1)
            if name in places or len(name) < MIN_NAME_LENGTH:
                continue
            places[name] = ExtractedPlace(name=name, context=_context(text, match, PLACE_CONTEXT_CHARS))

    return list(places.values())

def score_importance(sentence: str) -> int:
    """
    Rank how significant a sentence is for the plot.

    +2 for every important word contained in the sentence (case-insensitive
    substring), +1 if it has a capitalized word, +1 if it contains ``!``.
    """
    lowered = sentence.lower()
    importance = sum(2 for word in IMPORTANT_WORDS if word in lowered)

    if CAPITALIZED_WORD.search(sentence):
        importance += 1
    if "!" in sentence:
        importance += 1

    return importance

def extract_events(text: str) -> List[ExtractedEvent]:
    """The most important event-like sentences, at most ``MAX_EVENTS``."""
    events: List[ExtractedEvent] = []

    for sentence in SENTENCE_SPLIT.split(text):
        trimmed = sentence.strip(WHITESPACE_CHARS)
        if not trimmed:
            continue

        if not any(pattern.search(trimmed) for pattern in EVENT_PATTERNS):
            continue
        if not CAPITALIZED_WORD.search(trimmed):
            continue
        if len(trimmed.split(" ")) <= 5:
            continue

        events.append(ExtractedEvent(text=trimmed, importance=score_importance(trimmed)))

    # sorted() is stable: equal scores keep reading order
    ranked = sorted(events, key=lambda event: event.importance, reverse=True)
    return ranked[:MAX_EVENTS]

def extract_items(text: str) -> List[ExtractedItem]:
    items: Dict[str, ExtractedItem] = {}

    for pattern in ITEM_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(1).lower()
            if name in items or len(name) < MIN_NAME_LENGTH:
                continue
            items[name] = ExtractedItem(name=name, context=_context(text, match, ITEM_CONTEXT_CHARS))

    return list(items.values())
