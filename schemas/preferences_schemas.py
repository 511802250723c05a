from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone

MIN_FONT_SIZE = 0.7
MAX_FONT_SIZE = 2.5


def clamp_font_size(value):
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, float(value)))


class Preferences(BaseModel):
    user_id: str
    preferred_translation: str = 'TB'
    preferred_language: str = 'malay'
    font_size: float = 1.0  # ratio applied to the base reading size
    font_family: str = 'Default'
    show_verse_numbers: bool = True
    night_mode: bool = False
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('font_size', mode='before')
    @classmethod
    def _clamp_font_size(cls, value):
        if value is None:
            return 1.0
        return clamp_font_size(value)


class PreferencesUpdate(BaseModel):
    preferred_translation: Optional[str] = None
    preferred_language: Optional[str] = None
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    show_verse_numbers: Optional[bool] = None
    night_mode: Optional[bool] = None

    def apply_to(self, preferences: Preferences) -> Preferences:
        changes = self.model_dump(exclude_none=True)
        changes['updated_at'] = datetime.now(timezone.utc)
        # Round-trip through validation so clamping applies to updates too
        return Preferences.model_validate({**preferences.model_dump(), **changes})
