"""
User Preference Models

Preferences live on the device, not in the remote store. They are read
once when a screen mounts and written back whenever any of them change.
The aggregation core never reads them.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Currency(str, Enum):
    """Currencies the amount formatting supports."""
    USD = "USD"
    EUR = "EUR"
    TL = "TL"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Language(str, Enum):
    EN = "en"
    TR = "tr"


class UserPreferences(BaseModel):
    """
    The serialized settings mapping.

    Unknown keys from older app versions are ignored rather than rejected
    so a stale payload never locks a user out of their settings.
    """
    model_config = ConfigDict(extra="ignore")

    currency: Currency = Field(default=Currency.USD)
    theme: Theme = Field(default=Theme.LIGHT)
    language: Language = Field(default=Language.EN)

    # Notification toggles
    budget_alerts: bool = Field(default=True)
    bill_reminders: bool = Field(default=True)
    monthly_reports: bool = Field(default=False)
    sync_data: bool = Field(default=True)
