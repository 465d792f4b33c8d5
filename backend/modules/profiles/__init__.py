"""
Profiles module.

Digital business card profiles, the templates they render with, and the
public pages visitors reach by tapping a card or scanning a QR code.

Public API:
- IProfileService: Interface for profile operations
- resolve: Template + profile -> EffectiveView
- generate_unique_slug / generate_vcard: Publishing helpers
- Profile, Template, EffectiveView: Core models
"""

from .interfaces import IProfileService
from .models import (
    Profile,
    PersonalInfo,
    ContactInfo,
    Address,
    SocialLinks,
    CustomLink,
    BusinessHours,
    Weekday,
    Customization,
    SectionVisibility,
    GalleryItem,
    ServiceItem,
    Testimonial,
    CallToAction,
    ProfileAnalytics,
    CreateProfileRequest,
    UpdateProfileRequest,
    ProfileListResponse,
    Template,
    TemplateSection,
    TemplateStructure,
    SectionType,
    Layout,
    DefaultColors,
    DefaultFonts,
    EffectiveView,
    ResolvedSection,
)
from .rendering import resolve, DEFAULT_LAYOUT
from .slugs import slugify, generate_unique_slug
from .vcard import generate_vcard
from .exceptions import (
    ProfileError,
    ProfileNotFoundError,
    ProfileAccessDeniedError,
    TemplateNotFoundError,
    InvalidTemplateError,
)

__all__ = [
    # Interface
    "IProfileService",
    # Models
    "Profile",
    "PersonalInfo",
    "ContactInfo",
    "Address",
    "SocialLinks",
    "CustomLink",
    "BusinessHours",
    "Weekday",
    "Customization",
    "SectionVisibility",
    "GalleryItem",
    "ServiceItem",
    "Testimonial",
    "CallToAction",
    "ProfileAnalytics",
    "CreateProfileRequest",
    "UpdateProfileRequest",
    "ProfileListResponse",
    "Template",
    "TemplateSection",
    "TemplateStructure",
    "SectionType",
    "Layout",
    "DefaultColors",
    "DefaultFonts",
    "EffectiveView",
    "ResolvedSection",
    # Rendering and publishing
    "resolve",
    "DEFAULT_LAYOUT",
    "slugify",
    "generate_unique_slug",
    "generate_vcard",
    # Exceptions
    "ProfileError",
    "ProfileNotFoundError",
    "ProfileAccessDeniedError",
    "TemplateNotFoundError",
    "InvalidTemplateError",
]
