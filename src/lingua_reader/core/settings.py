"""Application settings entity and its defaults."""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict

TEXT_ALIGN_OPTIONS = ("left", "center", "justify", "right")


@dataclass(frozen=True)
class AppSettings:
    """Reader preferences and translation configuration.

    Every field is mandatory. Partial data coming from storage is merged with
    DEFAULT_SETTINGS once, in from_dict, so read sites never default ad hoc.
    """

    highlight_color: str
    api_key: str
    font_size: int
    line_height: float
    letter_spacing: float
    word_spacing: float
    paragraph_spacing: int
    text_align: str
    font_family: str
    translation_icon_size: int
    translation_language: str
    split_char_count: int

    def __post_init__(self) -> None:
        if self.text_align not in TEXT_ALIGN_OPTIONS:
            raise ValueError(f"Unsupported text alignment: {self.text_align!r}")
        if self.font_size <= 0:
            raise ValueError("Font size must be positive")
        if self.split_char_count <= 0:
            raise ValueError("Split character count must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        """Build settings from stored data, filling missing fields from defaults."""
        known = {f.name for f in fields(cls)}
        overrides = {key: value for key, value in data.items() if key in known}
        return replace(DEFAULT_SETTINGS, **overrides)


DEFAULT_SETTINGS = AppSettings(
    highlight_color="#3b82f6",
    api_key="",
    font_size=16,
    line_height=1.6,
    letter_spacing=0,
    word_spacing=0,
    paragraph_spacing=16,
    text_align="left",
    font_family="system-ui",
    translation_icon_size=24,
    translation_language="Russian",
    split_char_count=10000,
)
