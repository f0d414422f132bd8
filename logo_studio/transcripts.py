"""
Helpers for turning transcripts into prompt text and for reading transcripts
that people paste or upload.

Accepted input shapes for ``parse_transcript_text``:

  - a JSON array of ``{"speaker": ..., "text": ..., "timestamp"?: ...}`` objects
    (smart quotes and trailing commas are repaired first)
  - plain lines of ``Speaker: what they said``, optionally prefixed with a
    ``[00:01:02]`` timestamp; lines without a speaker continue the previous entry
"""

import json
import re
from typing import List

from pydantic import ValidationError

from .schemas import TranscriptEntry

_SMART_SINGLE = re.compile("[‘’]")
_SMART_DOUBLE = re.compile("[“”]")
_TRAILING_COMMA = re.compile(r",\s*([\]}])")
_JSON_ARRAY = re.compile(r"^\[\s*[{\]]")
_LINE = re.compile(r"^\s*(?:\[(?P<timestamp>[^\]]+)\]\s*)?(?P<speaker>[^:\[\]]{1,80}):\s*(?P<text>.*)$")


def format_transcript(transcript: List[TranscriptEntry]) -> str:
    lines = []
    for entry in transcript:
        prefix = f"[{entry.timestamp}] " if entry.timestamp else ""
        lines.append(f"{prefix}{entry.speaker}: {entry.text}")
    return "\n".join(lines)


def clean_json_text(text: str) -> str:
    """Repair the JSON defects people usually introduce when pasting by hand."""
    cleaned = text.strip()
    cleaned = _SMART_SINGLE.sub("'", cleaned)
    cleaned = _SMART_DOUBLE.sub('"', cleaned)
    cleaned = _TRAILING_COMMA.sub(r"\1", cleaned)
    return cleaned.replace("\r\n", "\n").replace("\r", "\n")


def _parse_json_transcript(text: str) -> List[TranscriptEntry]:
    parsed = json.loads(clean_json_text(text))
    if not isinstance(parsed, list):
        raise ValueError("Transcript must be an array of entries")

    entries: List[TranscriptEntry] = []
    for idx, item in enumerate(parsed, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Entry {idx} is not an object")
        try:
            entries.append(TranscriptEntry.model_validate(item))
        except ValidationError as exc:
            raise ValueError(f"Entry {idx} is missing required fields (text, speaker)") from exc
    return entries


def _parse_line_transcript(text: str) -> List[TranscriptEntry]:
    entries: List[TranscriptEntry] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        match = _LINE.match(line)
        if match and match.group("text").strip():
            entries.append(
                TranscriptEntry(
                    speaker=match.group("speaker").strip(),
                    text=match.group("text").strip(),
                    timestamp=match.group("timestamp"),
                )
            )
        elif entries:
            last = entries[-1]
            entries[-1] = last.model_copy(update={"text": f"{last.text} {line}"})
        else:
            raise ValueError(f"Could not find a speaker in line: {line!r}")
    return entries


def parse_transcript_text(text: str) -> List[TranscriptEntry]:
    """Parse pasted or uploaded transcript text into entries."""
    stripped = text.strip()
    if not stripped:
        raise ValueError("Transcript is empty.")

    if _JSON_ARRAY.match(stripped):
        try:
            entries = _parse_json_transcript(stripped)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON transcript: {exc.msg} (line {exc.lineno})") from exc
    else:
        entries = _parse_line_transcript(stripped)

    if not entries:
        raise ValueError("Transcript has no entries.")
    return entries
