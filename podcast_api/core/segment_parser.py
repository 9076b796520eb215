# ABOUTME: This file splits a raw model completion into speaker/utterance segments.
# ABOUTME: Lines are matched against an ordered list of notation rules; unmatched lines are dropped.

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from podcast_api.models.responses import Segment


def _segment_from_match(match: re.Match) -> Segment:
    return Segment(speaker=match.group("speaker"), text=match.group("text"))


@dataclass(frozen=True)
class SegmentRule:
    """One recognised "speaker: utterance" notation.

    ``pattern`` must define ``speaker`` and ``text`` groups unless a custom
    ``build`` reads the match differently.
    """
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match], Segment] = _segment_from_match

    def apply(self, line: str) -> Optional[Segment]:
        match = self.pattern.match(line)
        if match is None:
            return None
        return self.build(match)


# Evaluated in order, first match wins. The utterance group starts at the first
# non-blank character and keeps any trailing whitespace (including a CR left
# over from CRLF input) exactly as the model produced it.
SEGMENT_RULES: Sequence[SegmentRule] = (
    # **Host**: Welcome back
    SegmentRule(
        name="bold_speaker",
        pattern=re.compile(r"^\s*\*\*(?P<speaker>[^*]*?[^*\s][^*]*?)\*\*:\s*(?P<text>\S.*)$"),
    ),
    # **Host:** Welcome back
    SegmentRule(
        name="bold_speaker_inner_colon",
        pattern=re.compile(r"^\s*\*\*(?P<speaker>[^*:]*?[^*:\s][^*:]*?):\*\*\s*(?P<text>\S.*)$"),
    ),
    # Speaker 1: Welcome back
    SegmentRule(
        name="numbered_speaker",
        pattern=re.compile(r"^\s*(?P<speaker>Speaker \d+):\s*(?P<text>\S.*)$"),
    ),
)


def parse_segments(raw_text: str, rules: Iterable[SegmentRule] = SEGMENT_RULES) -> List[Segment]:
    """Split ``raw_text`` into segments, one per matching line, in line order.

    Never fails: text with no recognised line yields an empty list.
    """
    if not raw_text:
        return []

    rules = tuple(rules)
    segments: List[Segment] = []
    for line in raw_text.split("\n"):
        for rule in rules:
            segment = rule.apply(line)
            if segment is not None:
                segments.append(segment)
                break
    return segments


def segments_to_text(segments: Iterable[Segment]) -> str:
    """Render segments back into ``speaker: text`` lines."""
    return "\n".join(f"{segment.speaker}: {segment.text}" for segment in segments)
