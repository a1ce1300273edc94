"""Value types shared by the normalization pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

from ..core.keys import K_ALT, K_SRC


@dataclass(frozen=True)
class MediaRef:
    """An embedded image found inside the extracted article."""

    src: str
    alt: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {K_SRC: self.src, K_ALT: self.alt}


@dataclass(frozen=True)
class ExtractionSuccess:
    text: str
    media_refs: List[MediaRef] = field(default_factory=list)
    prefix_note: str = ""


@dataclass(frozen=True)
class ExtractionFailure:
    """Structural extraction found nothing usable; carried as content, never raised."""

    reason: str


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]


__all__ = ["MediaRef", "ExtractionSuccess", "ExtractionFailure", "ExtractionResult"]
