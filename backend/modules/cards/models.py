"""
Cards module data models.

A card is a physical NFC tag pointing at exactly one profile at a time.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from modules.analytics.models import AnalyticsEvent, DeviceBreakdown


class ChipType(str, Enum):
    NTAG213 = "NTAG213"
    NTAG215 = "NTAG215"
    NTAG216 = "NTAG216"
    OTHER = "Other"


class Card(BaseModel):
    """An NFC card assigned to a profile."""

    id: str = Field(..., description="Card record ID")
    user_id: str
    organization_id: Optional[str] = None
    profile_id: str
    card_id: str = Field(..., description="Short code written to the chip")
    chip_type: ChipType = ChipType.NTAG215
    serial_number: Optional[str] = None
    is_active: bool = True
    is_write_protected: bool = False
    tap_count: int = Field(default=0, ge=0)
    last_tapped: Optional[datetime] = None
    custom_url: Optional[str] = None
    created_at: Optional[datetime] = None
    activated_at: Optional[datetime] = None
    deactivated_at: Optional[datetime] = None


class CreateCardRequest(BaseModel):
    profile_id: str
    chip_type: ChipType = ChipType.NTAG215
    serial_number: Optional[str] = Field(None, max_length=64)


class UpdateCardRequest(BaseModel):
    """Partial card update. Setting profile_id reassigns the card."""

    profile_id: Optional[str] = None
    chip_type: Optional[ChipType] = None
    serial_number: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None
    is_write_protected: Optional[bool] = None


class CardListResponse(BaseModel):
    cards: list[Card]
    total: int


class TapResult(BaseModel):
    """Where a tapped card sends the visitor."""

    card_id: str
    profile_slug: str
    redirect_url: str
    tap_count: int


class CardAnalytics(BaseModel):
    card_id: str
    total_taps: int
    last_tapped: Optional[datetime] = None
    daily_taps: dict[str, int] = Field(default_factory=dict)
    device_breakdown: DeviceBreakdown
    recent_activity: list[AnalyticsEvent] = Field(default_factory=list)
