"""Settings models for persisted player preferences."""

from config import REPEAT_MODES, THEMES
from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Request to update multiple settings. Omitted fields are left alone."""

    theme: str | None = Field(None, pattern=f"^({'|'.join(THEMES)})$")
    auto_play: bool | None = None
    repeat_mode: str | None = Field(None, pattern=f"^({'|'.join(REPEAT_MODES)})$")
    shuffle: bool | None = None
    volume: int | None = Field(None, ge=0, le=100)


class AllSettings(BaseModel):
    """All player settings."""

    theme: str = "light"
    auto_play: bool = False
    repeat_mode: str = "off"
    shuffle: bool = False
    volume: int = 75
