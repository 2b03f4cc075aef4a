"""Process-wide user preferences (not scoped to an account)."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Language(str, Enum):
    VIETNAMESE = "vi"
    ENGLISH = "en"


class Preferences(BaseModel):
    """Appearance and device flags shared by every account on this device."""
    model_config = ConfigDict(populate_by_name=True)
    
    theme_mode: ThemeMode = Field(default=ThemeMode.SYSTEM, alias="themeMode")
    language: Language = Language.VIETNAMESE
    notifications_enabled: bool = Field(default=False, alias="notificationsEnabled")
    faceid_enabled: bool = Field(default=False, alias="faceIdEnabled")
