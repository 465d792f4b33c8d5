"""
Profile rendering model.

`resolve` layers a profile's customization over its template and returns a
fully populated EffectiveView. It is pure: no lookups, no clocks. A profile
whose template is missing still renders with the built-in default layout.
"""

from typing import Any, Callable, Optional

from .models import (
    CallToAction,
    DefaultColors,
    DefaultFonts,
    EffectiveView,
    Layout,
    Profile,
    ResolvedColors,
    ResolvedFonts,
    ResolvedSection,
    SectionType,
    Template,
    TemplateSection,
    TemplateStructure,
    WEEKDAY_ORDER,
)


DEFAULT_LAYOUT = TemplateStructure(
    layout=Layout.CENTERED,
    sections=[
        TemplateSection(id="header", type=SectionType.HEADER, order=0),
        TemplateSection(id="contact", type=SectionType.CONTACT, order=1),
    ],
)

# Sections without an entry render whenever the template lists them.
VISIBILITY_FLAGS: dict[SectionType, str] = {
    SectionType.CONTACT: "show_contact",
    SectionType.SOCIAL: "show_social",
    SectionType.HOURS: "show_hours",
    SectionType.GALLERY: "show_gallery",
    SectionType.SERVICES: "show_services",
    SectionType.TESTIMONIALS: "show_testimonials",
}


def _pick(override: Optional[str], default: str) -> str:
    if override is None or not override.strip():
        return default
    return override


def _is_enabled(section: TemplateSection, profile: Profile) -> bool:
    if section.type == SectionType.CTA:
        return profile.call_to_action.enabled
    flag = VISIBILITY_FLAGS.get(section.type)
    if flag is None:
        return True
    return bool(getattr(profile.sections, flag))


def _testimonial_key(item: Any) -> tuple:
    # Undated testimonials sort after dated ones with the same order.
    return (item.order, item.date is None, item.date.timestamp() if item.date else 0)


def _header(profile: Profile) -> dict[str, Any]:
    return profile.personal_info.model_dump(exclude={"bio"}) | {
        "full_name": profile.personal_info.full_name,
    }


def _about(profile: Profile) -> Optional[str]:
    return profile.personal_info.bio


def _contact(profile: Profile) -> dict[str, Any]:
    return profile.contact_info.model_dump(exclude_none=True)


def _social(profile: Profile) -> list[dict[str, Any]]:
    return [link.model_dump(exclude_none=True) for link in profile.social_links.as_links()]


def _hours(profile: Profile) -> list[dict[str, Any]]:
    hours = sorted(profile.business_hours, key=lambda h: WEEKDAY_ORDER.index(h.day))
    return [h.model_dump(mode="json") for h in hours]


def _gallery(profile: Profile) -> list[dict[str, Any]]:
    return [item.model_dump() for item in sorted(profile.gallery, key=lambda i: i.order)]


def _services(profile: Profile) -> list[dict[str, Any]]:
    return [item.model_dump() for item in sorted(profile.services, key=lambda i: i.order)]


def _testimonials(profile: Profile) -> list[dict[str, Any]]:
    ordered = sorted(profile.testimonials, key=_testimonial_key)
    return [item.model_dump(mode="json") for item in ordered]


def _cta(profile: Profile) -> dict[str, Any]:
    cta: CallToAction = profile.call_to_action
    return cta.model_dump(mode="json", exclude_none=True)


SECTION_CONTENT: dict[SectionType, Callable[[Profile], Any]] = {
    SectionType.HEADER: _header,
    SectionType.ABOUT: _about,
    SectionType.CONTACT: _contact,
    SectionType.SOCIAL: _social,
    SectionType.HOURS: _hours,
    SectionType.GALLERY: _gallery,
    SectionType.SERVICES: _services,
    SectionType.TESTIMONIALS: _testimonials,
    SectionType.CTA: _cta,
}


def resolve(template: Optional[Template], profile: Profile) -> EffectiveView:
    """
    Combine a template and a profile into the view to render.

    Colors and fonts come from the profile customization where it is set
    and non-empty, otherwise from the template defaults. A section is
    included when the template lists it and the profile has not switched
    it off. Sections follow the template's `order`; gallery and service
    items follow their own `order`, testimonials their order then date.

    Args:
        template: The profile's template, or None if it could not be found
        profile: The profile to render

    Returns:
        A frozen EffectiveView with every styling field populated
    """
    structure = template.structure if template is not None else DEFAULT_LAYOUT
    colors = template.default_colors if template is not None else DefaultColors()
    fonts = template.default_fonts if template is not None else DefaultFonts()
    custom = profile.customization

    resolved_colors = ResolvedColors(
        primary=_pick(custom.primary_color, colors.primary),
        secondary=_pick(custom.secondary_color, colors.secondary),
        text=colors.text,
        background=colors.background,
    )
    resolved_fonts = ResolvedFonts(
        heading=_pick(custom.font_family, fonts.heading),
        body=_pick(custom.font_family, fonts.body),
    )

    # sorted() is stable, so equal orders keep the template's listing order
    ordered = sorted(structure.sections, key=lambda s: s.order)
    sections = tuple(
        ResolvedSection(
            id=section.id,
            type=section.type,
            order=section.order,
            config=dict(section.config),
            content=SECTION_CONTENT[section.type](profile),
        )
        for section in ordered
        if _is_enabled(section, profile)
    )

    return EffectiveView(
        profile_id=profile.id,
        slug=profile.slug,
        template_slug=template.slug if template is not None else None,
        layout=structure.layout,
        colors=resolved_colors,
        fonts=resolved_fonts,
        logo=custom.logo or None,
        background_image=custom.background_image or None,
        custom_css=custom.custom_css or None,
        sections=sections,
    )
