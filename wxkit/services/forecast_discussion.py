"""Split an Area Forecast Discussion into the sections we read aloud."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from wxkit.clients import ForecastDiscussionClient, SpeechClient
from wxkit.core.exceptions import PayloadError
from wxkit.schemas import DiscussionSection


def section_patterns(office: str) -> List[Tuple[str, "re.Pattern[str]"]]:
    # Greedy: a heading repeated in the body extends the section.
    return [
        ("overview", re.compile(rf"AFD{re.escape(office.upper())}(.*)SHORT TERM", re.DOTALL)),
        ("short_term", re.compile(r"SHORT TERM(.*)LONG TERM", re.DOTALL)),
        ("long_term", re.compile(r"LONG TERM(.*)AVIATION", re.DOTALL)),
    ]


def split_discussion(text: str, office: str) -> List[DiscussionSection]:
    sections: List[DiscussionSection] = []
    for name, pattern in section_patterns(office):
        match = pattern.search(text)
        if not match or not match.group(1).strip():
            raise PayloadError(f"Could not locate the {name.replace('_', ' ')} section.")
        sections.append(DiscussionSection(name=name, text=match.group(1)))
    return sections


class ForecastDiscussionService:
    """Fetch the discussion, split it and optionally speak each section."""

    def __init__(
        self,
        forecast_client: ForecastDiscussionClient,
        speech_client: Optional[SpeechClient] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._forecast = forecast_client
        self._speech = speech_client
        self._log = logger or logging.getLogger(__name__)

    def fetch_sections(self, office: str) -> List[DiscussionSection]:
        self._log.info("Getting area forecast discussion for %s", office)
        return split_discussion(self._forecast.fetch_discussion(office), office)

    def synthesize(
        self, sections: Sequence[DiscussionSection], output_dir: Path
    ) -> List[Path]:
        """Write ``afd-<n>.<ext>`` for each section and return the paths."""
        if self._speech is None:
            raise RuntimeError("Speech synthesis requires a configured speech client.")

        output_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for index, section in enumerate(sections, start=1):
            self._log.info("Synthesizing %s section", section.name)
            audio = self._speech.synthesize(section.text)
            target = output_dir / f"afd-{index}.{self._speech.file_extension}"
            target.write_bytes(audio)
            written.append(target)
        return written


__all__ = ["ForecastDiscussionService", "section_patterns", "split_discussion"]
