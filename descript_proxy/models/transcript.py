from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

TranscriptShape = Literal["segments", "monologues", "paragraphs", "words", "text"]


class NormalizedTranscript(BaseModel):
    """
    Flat transcript text derived from a raw Descript transcript document.
    - text:  lines joined by '\\n', each optionally '[HH:MM:SS] Speaker: ...'
    - shape: which document layout produced the text (None if nothing matched)
    """
    model_config = ConfigDict(frozen=True)

    text: str = ""
    shape: Optional[TranscriptShape] = None

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()
