r"""
Declarative Pattern Rules

Every text pattern used by the area pipeline (reference prefixes, room and
level tokens, facility and town names) is stored as an ordered list of
PatternRule objects. The extraction code never hand-unrolls a pattern list;
it calls one of the generic procedures below.

Usage:
    from src.area_matching.rules import PatternRule, find_first_match, find_all_matches

    LEVEL_RULES = [
        PatternRule(r'\b(?:level|lvl)\s*(\d+)\b', 'Lvl'),
    ]
    match = find_first_match(LEVEL_RULES, 'ICU Level 3')
    match.render()   # 'Lvl 3'
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class PatternRule:
    """
    A single (pattern, canonical label) rule.

    The pattern is compiled case-insensitively unless flags are given.
    The first capture group, if any, is the rule's value.
    """
    pattern: str
    label: str = ''
    template: str = '{label} {value}'
    flags: int = re.IGNORECASE
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'regex', re.compile(self.pattern, self.flags))


@dataclass(frozen=True)
class RuleMatch:
    """A rule hit within a piece of text."""
    rule: PatternRule
    start: int
    end: int
    text: str
    value: Optional[str] = None

    @property
    def span(self) -> Tuple[int, int]:
        return self.start, self.end

    def render(self) -> str:
        """Render the match through its rule's template."""
        if self.value is None:
            return self.rule.label or self.text
        return self.rule.template.format(label=self.rule.label, value=self.value).strip()


def _to_match(rule: PatternRule, m: re.Match) -> RuleMatch:
    value = m.group(1) if m.re.groups else None
    return RuleMatch(rule=rule, start=m.start(), end=m.end(), text=m.group(0), value=value)


def find_first_match(rules: Sequence[PatternRule], text: str) -> Optional[RuleMatch]:
    """
    Return the first occurrence of the first rule that matches.

    Rule order is priority order: a later rule is only tried when every
    earlier rule failed on the whole text.
    """
    if not text:
        return None

    for rule in rules:
        m = rule.regex.search(text)
        if m:
            return _to_match(rule, m)
    return None


def find_all_matches(rules: Sequence[PatternRule], text: str) -> List[RuleMatch]:
    """
    Return every non-overlapping match of every rule, left to right.

    When two rules hit overlapping spans, the earlier rule in the list keeps
    its match.
    """
    if not text:
        return []

    accepted: List[RuleMatch] = []
    for rule in rules:
        for m in rule.regex.finditer(text):
            if m.start() == m.end():
                continue
            if any(m.start() < other.end and other.start < m.end() for other in accepted):
                continue
            accepted.append(_to_match(rule, m))

    return sorted(accepted, key=lambda match: match.start)


def remove_spans(text: str, spans: Sequence[Tuple[int, int]]) -> str:
    """Cut the given spans out of text, leaving a single space in each gap."""
    if not spans:
        return text

    pieces = []
    cursor = 0
    for start, end in sorted(spans):
        pieces.append(text[cursor:start])
        cursor = max(cursor, end)
    pieces.append(text[cursor:])
    return ' '.join(pieces)


def strip_first_match(rules: Sequence[PatternRule], text: str) -> Tuple[str, Optional[RuleMatch]]:
    """
    Remove the first matching rule's first occurrence from text.

    Returns (remaining_text, match) where match is None if nothing matched.
    """
    match = find_first_match(rules, text)
    if match is None:
        return text, None
    return remove_spans(text, [match.span]), match


def apply_substitutions(rules: Sequence[PatternRule], text: str) -> str:
    """Apply every rule globally in order, replacing hits with the rule label."""
    for rule in rules:
        text = rule.regex.sub(rule.label, text)
    return text
