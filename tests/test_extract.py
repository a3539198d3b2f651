"""
Summary extraction tests

Tests key points, action items, topics, content type labels and
disclaimers.
"""

from pagedown.lib.extract import (
    actionItems_extract,
    contentType_format,
    disclaimer_get,
    keyPoints_extract,
    topics_extract,
)


class TestKeyPoints:
    """Test key point extraction"""

    def test_bullets_and_numbers(self):
        summary = (
            "Intro line that is not a bullet\n"
            "- Short\n"
            "- This is a long enough point\n"
            "1. Numbered item that is long\n"
            "* Action: follow up with legal\n"
        )
        assert keyPoints_extract(summary) == ["This is a long enough point", "Numbered item that is long"]

    def test_limit(self):
        summary = "\n".join(f"- Key point number {i}" for i in range(20))
        points = keyPoints_extract(summary)
        assert len(points) == 15
        assert points[0] == "Key point number 0"

    def test_empty(self):
        assert keyPoints_extract("") == []


class TestActionItems:
    """Test action item extraction"""

    def test_labelled_items(self):
        summary = "- Action: Send the minutes\n- TODO: Book a room\n2. Task: Review the budget\n"
        assert actionItems_extract(summary) == ["Send the minutes", "Book a room", "Review the budget"]

    def test_obligation_phrasing(self):
        summary = "- The team should ship it\n- The team should ship it\n- Marketing will draft copy"
        assert actionItems_extract(summary) == ["The team", "Marketing"]

    def test_short_items_dropped(self):
        assert actionItems_extract("- TODO: fix\n") == []

    def test_limit(self):
        summary = "\n".join(f"- TODO: item number {i}" for i in range(15))
        assert len(actionItems_extract(summary)) == 10


class TestTopics:
    """Test topic extraction"""

    def test_topics_block_and_subject_bullet(self):
        summary = "Topics covered: pricing strategy\n\n- Subject: Quarterly planning"
        assert topics_extract(summary) == ["pricing strategy", "Quarterly planning"]

    def test_short_lines_dropped(self):
        assert topics_extract("Discussed: misc") == []

    def test_no_topics(self):
        assert topics_extract("Nothing labelled here.") == []


class TestLabels:
    """Test content type labels and disclaimers"""

    def test_known_labels(self):
        assert contentType_format("voice-memo") == "Voice Memo"
        assert contentType_format("sales-call") == "Sales Call"
        assert contentType_format("meeting") == "Meeting"

    def test_unknown_label(self):
        assert contentType_format("daily-stand-up") == "Document"
        assert contentType_format(None) == "Document"

    def test_disclaimers(self):
        assert "medical advice" in disclaimer_get("medical")
        assert "medical advice" in disclaimer_get("medical-clinical")
        assert "legal advice" in disclaimer_get("legal")
        assert disclaimer_get("meeting") is None
