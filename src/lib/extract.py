"""
Summary extraction helpers

Pulls key points, action items and topics out of an AI-generated summary
so templates can show them as their own sections. Extraction is pattern
based and deliberately shallow: it reads bullet and numbered lines and a
few labelled phrases, and returns plain strings.
"""

import re
from typing import Dict, List, Optional


_BULLET_RE = re.compile(r"^[-•*]\s+")
_NUMBERED_RE = re.compile(r"^\d+\.\s+")

_ACTION_PATTERNS = [
    re.compile(r"(?:^|\n)[-•*]\s*(?:Action|TODO|Task|Follow-up):\s*(.+?)(?=\n|$)", re.IGNORECASE),
    re.compile(r"(?:^|\n)(?:\d+\.)\s*(?:Action|TODO|Task|Follow-up):\s*(.+?)(?=\n|$)", re.IGNORECASE),
    re.compile(r"(?:^|\n)[-•*]\s*(.+?)\s*(?:should|must|will|need to)\s+(.+?)(?=\n|$)", re.IGNORECASE),
]

_TOPIC_PATTERNS = [
    re.compile(r"(?:Topics? covered|Discussed|Topics?):\s*(.+?)(?=\n\n|\n[A-Z]|$)", re.IGNORECASE | re.DOTALL),
    re.compile(r"(?:^|\n)[-•*]\s*(?:Topic|Subject):\s*(.+?)(?=\n|$)", re.IGNORECASE),
]

MAX_KEY_POINTS = 15
MAX_ACTION_ITEMS = 10
MAX_TOPICS = 10

CONTENT_TYPE_LABELS: Dict[str, str] = {
    "meeting": "Meeting",
    "lecture": "Lecture",
    "interview": "Interview",
    "podcast": "Podcast",
    "voice-memo": "Voice Memo",
    "sales-call": "Sales Call",
    "medical": "Medical",
    "legal": "Legal",
    "other": "Other",
}

DISCLAIMERS: Dict[str, str] = {
    "medical": "This document is for informational purposes only and does not constitute medical advice.",
    "medical-clinical": "This document is for informational purposes only and does not constitute medical advice.",
    "legal": "This document is for informational purposes only and does not constitute legal advice.",
}


def keyPoints_extract(summary: str) -> List[str]:
    """
    Bullet and numbered lines worth repeating as key points.

    Lines of 10 characters or fewer, and lines starting with "action",
    are left out. At most 15 points are returned.
    """
    points: List[str] = []
    for line in summary.split("\n"):
        trimmed = line.strip()
        if _BULLET_RE.match(trimmed):
            point = _BULLET_RE.sub("", trimmed, count=1).strip()
        elif _NUMBERED_RE.match(trimmed):
            point = _NUMBERED_RE.sub("", trimmed, count=1).strip()
        else:
            continue
        if len(point) > 10 and not point.lower().startswith("action"):
            points.append(point)
    return points[:MAX_KEY_POINTS]


def actionItems_extract(summary: str) -> List[str]:
    """
    Action items from labelled bullets ("- TODO: ...") and obligation
    phrasing ("- Alice will ..."), deduplicated, at most 10.
    """
    items: List[str] = []
    for pattern in _ACTION_PATTERNS:
        for match in pattern.finditer(summary):
            item = (match.group(1) or match.group(0)).strip()
            if len(item) > 5 and item not in items:
                items.append(item)
    return items[:MAX_ACTION_ITEMS]


def topics_extract(summary: str) -> List[str]:
    """Lines of a "Topics covered:" block and the first "- Topic:" bullet, at most 10"""
    topics: List[str] = []
    for pattern in _TOPIC_PATTERNS:
        match = pattern.search(summary)
        if match and match.group(1):
            lines = [line.strip() for line in match.group(1).strip().split("\n")]
            topics.extend(line for line in lines if len(line) > 5)
    return topics[:MAX_TOPICS]


def contentType_format(content_type: Optional[str]) -> str:
    """Display label of a content type; "Document" when unknown"""
    return CONTENT_TYPE_LABELS.get(content_type or "", "Document")


def disclaimer_get(content_type: Optional[str]) -> Optional[str]:
    return DISCLAIMERS.get(content_type or "")
