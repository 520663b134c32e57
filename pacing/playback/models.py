"""
Data models for playback state, progress reports and chapters.
"""

import json
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List


class PlaybackState(Enum):
    """
    Coarse engine state, derived from content, position and play flag.

    ENDED is only reached by playing past the last word; seeking never
    lands there.
    """

    IDLE = auto()  # nothing loaded
    PAUSED = auto()
    PLAYING = auto()
    ENDED = auto()


@dataclass(frozen=True)
class ProgressReport:
    """Emitted once when a reading session closes."""

    word_index: int
    session_seconds: float
    words_read: int

    @property
    def words_per_minute(self) -> float:
        """Effective speed over the session (0 for an empty session)."""
        if self.session_seconds <= 0:
            return 0.0
        return self.words_read / self.session_seconds * 60.0


@dataclass
class Chapter:
    """
    A chapter or section, with optional nested subsections.

    Only ``start_word_index`` matters to the engine; it is a seek
    target like any other word offset.
    """

    title: str
    start_word_index: int
    children: List["Chapter"] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def flattened(self) -> List["Chapter"]:
        """This chapter followed by all descendants, depth first."""
        out = [self]
        for child in self.children:
            out.extend(child.flattened())
        return out

    def progress_fraction(self, total_words: int) -> float:
        """How far into the book this chapter starts."""
        if total_words <= 0:
            return 0.0
        return self.start_word_index / total_words

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "startWordIndex": self.start_word_index,
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chapter":
        """
        Build a chapter tree from its dict form.

        Raises:
            KeyError:  If ``title`` or ``startWordIndex`` is missing.
            TypeError: If ``startWordIndex`` is not an integer.
        """
        start = data["startWordIndex"]
        if isinstance(start, bool) or not isinstance(start, int):
            raise TypeError(f"startWordIndex must be an integer, got {start!r}")
        return cls(
            title=str(data["title"]),
            start_word_index=start,
            children=[cls.from_dict(c) for c in data.get("children", [])],
        )


def flatten_chapters(chapters: List[Chapter]) -> List[Chapter]:
    out: List[Chapter] = []
    for chapter in chapters:
        out.extend(chapter.flattened())
    return out


def chapters_to_json(chapters: List[Chapter]) -> str:
    return json.dumps([c.to_dict() for c in chapters], indent=2, ensure_ascii=False)


def chapters_from_json(text: str) -> List[Chapter]:
    """Parse a JSON array of chapter objects."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise TypeError("Chapter JSON must be a list of chapter objects")
    return [Chapter.from_dict(item) for item in data]
