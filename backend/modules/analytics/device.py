"""
Device classification from user agent strings.

Tablet markers are checked first because iPad and Android tablet agents
also carry mobile markers. Agents with no recognisable platform, bots and
empty strings are left unclassified rather than guessed.
"""

import re
from typing import Optional

from .models import DeviceClass

_BOT = re.compile(r"bot|crawl|spider|slurp|curl|wget|python-requests|httpclient|headless", re.I)
_TABLET = re.compile(r"tablet|ipad|kindle|silk|playbook", re.I)
_ANDROID = re.compile(r"android", re.I)
_MOBILE = re.compile(r"mobile|android|iphone|ipod|blackberry|iemobile|opera mini", re.I)
_DESKTOP = re.compile(r"windows nt|macintosh|mac os x|x11|linux|cros", re.I)


def detect_device(user_agent: Optional[str]) -> DeviceClass:
    """Classify a user agent as mobile, tablet, desktop or unclassified."""
    if not user_agent or not user_agent.strip():
        return DeviceClass.UNCLASSIFIED
    if _BOT.search(user_agent):
        return DeviceClass.UNCLASSIFIED
    if _TABLET.search(user_agent):
        return DeviceClass.TABLET
    # Android tablets omit "Mobile" from their agent
    if _ANDROID.search(user_agent) and not re.search(r"mobile", user_agent, re.I):
        return DeviceClass.TABLET
    if _MOBILE.search(user_agent):
        return DeviceClass.MOBILE
    if _DESKTOP.search(user_agent):
        return DeviceClass.DESKTOP
    return DeviceClass.UNCLASSIFIED
