"""
Party logo lookup.

A logo stored on the member record always wins. Otherwise the party name is
looked up in PARTY_LOGOS, the fixed set of logos bundled with the client.
"""
import re
from typing import Any, Callable, Dict, Mapping, Optional

BUNDLED_LOGO_DIR = "assets/party_logos"

# Normalized party name -> bundled logo file
PARTY_LOGOS: Dict[str, str] = {
    "aam aadmi party": f"{BUNDLED_LOGO_DIR}/aap.png",
    "aap": f"{BUNDLED_LOGO_DIR}/aap.png",
    "bharatiya janata party": f"{BUNDLED_LOGO_DIR}/bjp.png",
    "bjp": f"{BUNDLED_LOGO_DIR}/bjp.png",
    "indian national congress": f"{BUNDLED_LOGO_DIR}/inc.png",
    "congress": f"{BUNDLED_LOGO_DIR}/inc.png",
    "inc": f"{BUNDLED_LOGO_DIR}/inc.png",
}


def normalize_party_name(party_name: Optional[str]) -> str:
    """Lower-case, strip punctuation and collapse whitespace: "B.J.P." -> "bjp"."""
    text = (party_name or "").casefold().replace(".", "")
    text = re.sub(r"[^\w\s]", " ", text)
    return " ".join(text.split())


class PartyLogoResolver:
    """Resolves the logo reference of a member; stored URL first, bundled logo second."""

    def __init__(
        self,
        media_resolver: Callable[[Optional[str]], Optional[str]],
        logos: Mapping[str, str] = PARTY_LOGOS,
    ):
        self.media_resolver = media_resolver
        # Keys normalized once so lookups are a single dict access
        self.logos = {normalize_party_name(name): ref for name, ref in logos.items()}

    def bundled_logo(self, party_name: Optional[str]) -> Optional[str]:
        return self.logos.get(normalize_party_name(party_name))

    def resolve(self, member: Mapping[str, Any]) -> Optional[str]:
        stored = member.get("partyLogoUrl")
        if stored:
            return self.media_resolver(stored)
        return self.bundled_logo(member.get("partyName"))
