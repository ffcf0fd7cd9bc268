"""
Data models for detected CAPTCHA widgets.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

#: identifiers starting with these come from truncated markup or templates
MARKUP_DELIMITERS = ("<", ">", "{", "}")
MIN_IDENTIFIER_LENGTH = 6


class Location(str, Enum):
    """Where on the page a widget declaration was observed."""

    HTML_ELEMENT = "HTML Element"
    SCRIPT_CONTENT = "Script Content"
    SCRIPT_SOURCE = "Script Source"
    EXTERNAL_SCRIPT = "External Script"
    URL_PARAMETER = "URL Parameter"

    def __str__(self) -> str:
        return self.value


def is_valid_identifier(value: Optional[str]) -> bool:
    """Reject empty, too short and markup-looking identifiers."""
    if not value:
        return False
    value = value.strip()
    return len(value) >= MIN_IDENTIFIER_LENGTH and not value.startswith(MARKUP_DELIMITERS)


@dataclass(frozen=True, slots=True)
class Detection:
    """Extractor hit that is not yet bound to a page or location."""

    vendor_type: str
    identifier: str
    difficulty: Optional[str] = None
    variant: Optional[str] = None
    theme: Optional[str] = None
    size: Optional[str] = None
    action: Optional[str] = None

    def to_record(self, location: Location, found_on: str) -> CaptchaRecord:
        return CaptchaRecord(
            vendor_type=self.vendor_type,
            identifier=self.identifier,
            location=location,
            found_on=found_on,
            difficulty=self.difficulty,
            variant=self.variant,
            theme=self.theme,
            size=self.size,
            action=self.action,
        )


@dataclass(frozen=True, slots=True)
class CaptchaRecord:
    """A CAPTCHA widget configuration found on a crawled page."""

    vendor_type: str
    identifier: str
    location: Location
    found_on: str
    difficulty: Optional[str] = None
    variant: Optional[str] = None
    theme: Optional[str] = None
    size: Optional[str] = None
    action: Optional[str] = None

    def __post_init__(self) -> None:
        if not is_valid_identifier(self.identifier):
            raise ValueError(f"invalid CAPTCHA identifier: {self.identifier!r}")

    @property
    def page_key(self) -> tuple[str, str, str]:
        """Composite key used for per-page deduplication."""
        return (self.identifier, self.vendor_type, self.location.value)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["location"] = self.location.value
        return {k: v for k, v in data.items() if v is not None}
