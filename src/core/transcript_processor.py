"""
Transcript Processor for PrepKit interviews

Splits a raw, speaker-tagged call transcript into ordered
question/answer segments.
"""

import re

from src.models.transcript import QASegment

INTERVIEWER_TAGS = ("ASSISTANT", "INTERVIEWER", "AI", "BOT")
CANDIDATE_TAGS = ("USER", "CANDIDATE")

_TAG_PATTERN = re.compile(
    r"^\s*(?P<tag>" + "|".join(INTERVIEWER_TAGS + CANDIDATE_TAGS) + r")\s*:\s*(?P<text>.*)$",
    re.IGNORECASE,
)


class TranscriptProcessor:
    """
    Converts raw transcript text into QASegment entries.

    An interviewer line opens a new segment; a candidate line sets the
    answer of the open segment. Segments that never receive an answer
    are dropped, including a trailing unanswered question.
    """

    def parse(self, raw_text: str) -> list[QASegment]:
        segments: list[QASegment] = []
        question = ""
        answer = ""

        for line in raw_text.splitlines():
            match = _TAG_PATTERN.match(line)
            if not match:
                continue

            tag = match.group("tag").upper()
            text = match.group("text").strip()

            if tag in INTERVIEWER_TAGS:
                if answer:
                    segments.append(QASegment(question_text=question, answer_text=answer))
                question, answer = text, ""
            else:
                answer = text

        if answer:
            segments.append(QASegment(question_text=question, answer_text=answer))

        return segments
