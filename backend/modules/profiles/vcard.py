"""vCard 3.0 export for profiles."""

from datetime import datetime, timezone
from typing import Optional

from .models import Profile, WEEKDAY_ORDER


def escape(value: str) -> str:
    """Escape text for a vCard property value."""
    return (
        value.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _hours_note(profile: Profile) -> Optional[str]:
    if not profile.sections.show_hours or not profile.business_hours:
        return None
    lines = []
    for hours in sorted(profile.business_hours, key=lambda h: WEEKDAY_ORDER.index(h.day)):
        day = hours.day.value.capitalize()
        if hours.is_open and hours.open_time and hours.close_time:
            lines.append(f"{day}: {hours.open_time} - {hours.close_time}")
        else:
            lines.append(f"{day}: Closed")
    return "Business Hours:\n" + "\n".join(lines)


def generate_vcard(profile: Profile, now: Optional[datetime] = None) -> str:
    """
    Render a profile as a vCard 3.0 document.

    Lines are CRLF separated as the format requires.
    """
    info = profile.personal_info
    contact = profile.contact_info
    now = now or datetime.now(timezone.utc)

    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{escape(info.full_name)}",
        f"N:{escape(info.last_name)};{escape(info.first_name)};;;",
    ]
    if info.title:
        lines.append(f"TITLE:{escape(info.title)}")
    if info.company:
        lines.append(f"ORG:{escape(info.company)}")
    if contact.email:
        lines.append(f"EMAIL;TYPE=INTERNET:{escape(contact.email)}")
    if contact.phone:
        lines.append(f"TEL;TYPE=CELL:{escape(contact.phone)}")
    if contact.website:
        lines.append(f"URL:{escape(contact.website)}")
    if contact.address and not contact.address.is_empty():
        a = contact.address
        parts = [a.street, a.city, a.state, a.postal_code, a.country]
        lines.append("ADR;TYPE=WORK:;;" + ";".join(escape(p or "") for p in parts))
    if info.profile_photo:
        lines.append(f"PHOTO;VALUE=URI:{info.profile_photo}")
    for link in profile.social_links.as_links():
        lines.append(f"X-SOCIALPROFILE;TYPE={escape(link.platform)}:{escape(link.url)}")

    notes = [text for text in (info.bio, _hours_note(profile)) if text]
    if notes:
        lines.append(f"NOTE:{escape(chr(10).join(notes))}")

    lines.append(f"REV:{now.strftime('%Y-%m-%dT%H:%M:%SZ')}")
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


def vcard_filename(profile: Profile) -> str:
    base = f"{profile.personal_info.first_name}_{profile.personal_info.last_name}"
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in base)
    return f"{safe or profile.slug}.vcf"
