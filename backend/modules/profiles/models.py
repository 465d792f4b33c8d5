"""
Profiles module data models.

Profiles, the templates they are rendered with, and the fully resolved
EffectiveView handed to the presentation layer.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Profile
# =============================================================================


class Weekday(str, Enum):
    """Days of the week, in display order."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


WEEKDAY_ORDER = list(Weekday)


class PersonalInfo(BaseModel):
    """Identity shown in the profile header."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    profile_photo: Optional[str] = None

    @field_validator("first_name", "last_name", "title", "company")
    @classmethod
    def strip_whitespace(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if isinstance(value, str) else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None

    def is_empty(self) -> bool:
        return not any([self.street, self.city, self.state, self.country, self.postal_code])


class ContactInfo(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[Address] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if isinstance(value, str) else value


class CustomLink(BaseModel):
    platform: str
    url: str
    icon: Optional[str] = None


SOCIAL_PLATFORMS = ("linkedin", "twitter", "facebook", "instagram", "youtube", "github", "tiktok")


class SocialLinks(BaseModel):
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    youtube: Optional[str] = None
    github: Optional[str] = None
    tiktok: Optional[str] = None
    custom: list[CustomLink] = Field(default_factory=list)

    def as_links(self) -> list[CustomLink]:
        """All configured links, built-in platforms first."""
        links = [
            CustomLink(platform=platform, url=url)
            for platform in SOCIAL_PLATFORMS
            if (url := getattr(self, platform))
        ]
        return links + list(self.custom)


class BusinessHours(BaseModel):
    day: Weekday
    is_open: bool = True
    open_time: Optional[str] = None
    close_time: Optional[str] = None

    @field_validator("day", mode="before")
    @classmethod
    def lowercase_day(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class Customization(BaseModel):
    """
    Per-profile overrides of the template's look.

    Unset or empty fields fall back to the template defaults.
    """

    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    font_family: Optional[str] = None
    logo: Optional[str] = None
    background_image: Optional[str] = None
    custom_css: Optional[str] = None


class SectionVisibility(BaseModel):
    """Which optional blocks the owner wants shown."""

    show_contact: bool = True
    show_social: bool = True
    show_hours: bool = True
    show_gallery: bool = False
    show_services: bool = False
    show_testimonials: bool = False


class GalleryItem(BaseModel):
    url: str
    caption: Optional[str] = None
    order: int = 0


class ServiceItem(BaseModel):
    title: str
    description: Optional[str] = None
    price: Optional[str] = None
    order: int = 0


class Testimonial(BaseModel):
    name: str
    company: Optional[str] = None
    content: str
    rating: Optional[int] = Field(None, ge=1, le=5)
    date: Optional[datetime] = None
    order: int = 0


class CallToActionType(str, Enum):
    VCARD = "vcard"
    EMAIL = "email"
    PHONE = "phone"
    WEBSITE = "website"
    CUSTOM = "custom"


class CallToAction(BaseModel):
    enabled: bool = True
    text: str = "Save Contact"
    action: CallToActionType = CallToActionType.VCARD
    custom_url: Optional[str] = None


class ProfileAnalytics(BaseModel):
    """Running engagement counters. They only ever increase."""

    views: int = Field(default=0, ge=0)
    unique_views: int = Field(default=0, ge=0)
    card_taps: int = Field(default=0, ge=0)
    contact_downloads: int = Field(default=0, ge=0)
    link_clicks: dict[str, int] = Field(default_factory=dict)


class Profile(BaseModel):
    """A digital business card profile."""

    id: str = Field(..., description="Profile ID")
    user_id: str = Field(..., description="Owning user ID")
    organization_id: Optional[str] = Field(None, description="Owning organization, if any")
    slug: str = Field(..., description="Public URL slug; never changes once published")
    personal_info: PersonalInfo
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    business_hours: list[BusinessHours] = Field(default_factory=list)
    template_id: Optional[str] = None
    customization: Customization = Field(default_factory=Customization)
    sections: SectionVisibility = Field(default_factory=SectionVisibility)
    gallery: list[GalleryItem] = Field(default_factory=list)
    services: list[ServiceItem] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    call_to_action: CallToAction = Field(default_factory=CallToAction)
    analytics: ProfileAnalytics = Field(default_factory=ProfileAnalytics)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        """Name with title, as shown in dashboards."""
        name = self.personal_info.full_name
        if self.personal_info.title:
            return f"{name} - {self.personal_info.title}"
        return name


class CreateProfileRequest(BaseModel):
    """Request to create a profile."""

    personal_info: PersonalInfo
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    business_hours: list[BusinessHours] = Field(default_factory=list)
    template_id: Optional[str] = None
    customization: Customization = Field(default_factory=Customization)
    sections: SectionVisibility = Field(default_factory=SectionVisibility)
    gallery: list[GalleryItem] = Field(default_factory=list)
    services: list[ServiceItem] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    call_to_action: CallToAction = Field(default_factory=CallToAction)
    is_active: bool = True


class UpdateProfileRequest(BaseModel):
    """
    Partial profile update.

    The slug is not updatable: printed cards and QR codes point at it.
    """

    personal_info: Optional[PersonalInfo] = None
    contact_info: Optional[ContactInfo] = None
    social_links: Optional[SocialLinks] = None
    business_hours: Optional[list[BusinessHours]] = None
    template_id: Optional[str] = None
    customization: Optional[Customization] = None
    sections: Optional[SectionVisibility] = None
    gallery: Optional[list[GalleryItem]] = None
    services: Optional[list[ServiceItem]] = None
    testimonials: Optional[list[Testimonial]] = None
    call_to_action: Optional[CallToAction] = None
    is_active: Optional[bool] = None


class ProfileListResponse(BaseModel):
    profiles: list[Profile]
    total: int


# =============================================================================
# Template
# =============================================================================


class SectionType(str, Enum):
    HEADER = "header"
    CONTACT = "contact"
    SOCIAL = "social"
    ABOUT = "about"
    SERVICES = "services"
    GALLERY = "gallery"
    TESTIMONIALS = "testimonials"
    HOURS = "hours"
    CTA = "cta"


class Layout(str, Enum):
    CENTERED = "centered"
    LEFT_ALIGNED = "left-aligned"
    SPLIT = "split"
    CARD = "card"
    MINIMAL = "minimal"


class TemplateSection(BaseModel):
    id: str
    type: SectionType
    order: int = 0
    config: dict[str, Any] = Field(default_factory=dict)


class TemplateStructure(BaseModel):
    layout: Layout = Layout.CENTERED
    sections: list[TemplateSection] = Field(default_factory=list)


class DefaultColors(BaseModel):
    primary: str = "#0066cc"
    secondary: str = "#f0f0f0"
    text: str = "#333333"
    background: str = "#ffffff"


class DefaultFonts(BaseModel):
    heading: str = "Poppins"
    body: str = "Inter"


class Template(BaseModel):
    """A layout and default styling shared by many profiles."""

    id: str
    name: str
    slug: str
    description: Optional[str] = Field(None, max_length=200)
    category: str = "other"
    thumbnail: Optional[str] = None
    structure: TemplateStructure = Field(default_factory=TemplateStructure)
    default_colors: DefaultColors = Field(default_factory=DefaultColors)
    default_fonts: DefaultFonts = Field(default_factory=DefaultFonts)
    features: list[str] = Field(default_factory=list)
    is_premium: bool = False
    is_active: bool = True
    usage_count: int = Field(default=0, ge=0)


# =============================================================================
# Effective view
# =============================================================================


class ResolvedColors(BaseModel):
    model_config = {"frozen": True}

    primary: str
    secondary: str
    text: str
    background: str


class ResolvedFonts(BaseModel):
    model_config = {"frozen": True}

    heading: str
    body: str


class ResolvedSection(BaseModel):
    """A section that will be rendered, with its content already ordered."""

    model_config = {"frozen": True}

    id: str
    type: SectionType
    order: int
    config: dict[str, Any] = Field(default_factory=dict)
    content: Any = None


class EffectiveView(BaseModel):
    """
    Everything needed to render a public profile.

    Produced by `resolve`; every styling field is populated.
    """

    model_config = {"frozen": True}

    profile_id: str
    slug: str
    template_slug: Optional[str] = None
    layout: Layout
    colors: ResolvedColors
    fonts: ResolvedFonts
    logo: Optional[str] = None
    background_image: Optional[str] = None
    custom_css: Optional[str] = None
    sections: tuple[ResolvedSection, ...] = ()

    def section_types(self) -> list[SectionType]:
        return [section.type for section in self.sections]

    def get_section(self, section_type: SectionType) -> Optional[ResolvedSection]:
        for section in self.sections:
            if section.type == section_type:
                return section
        return None
