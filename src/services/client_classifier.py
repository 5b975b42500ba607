"""Client classifier - Decides between the static page and the live stream"""

import re
from typing import Optional

from models.enums import ClientKind

# Command-line HTTP clients. Checked first: a match always streams.
TERMINAL_PATTERN = re.compile(
    r"(curl|wget|httpie|libwww-perl|python-requests|python-urllib|python-httpx|"
    r"Go-http-client|php|node-fetch|fetch\(|http-client|http_client)",
    re.IGNORECASE,
)

# Browser engine signatures.
BROWSER_PATTERN = re.compile(
    r"(Mozilla/|AppleWebKit|Chrome/|Safari/|Opera/|Edg/|Firefox/|Gecko/)",
    re.IGNORECASE,
)


def classify(identity: Optional[str]) -> ClientKind:
    """
    Classify a User-Agent string.

    Unknown or missing identities stream; only a confidently identified
    browser gets the static page.
    """
    if not identity:
        return ClientKind.TERMINAL
    if TERMINAL_PATTERN.search(identity):
        return ClientKind.TERMINAL
    if BROWSER_PATTERN.search(identity):
        return ClientKind.BROWSER
    return ClientKind.TERMINAL


def is_browser(identity: Optional[str]) -> bool:
    return classify(identity) is ClientKind.BROWSER


class ClientClassifier:
    """Stateless wrapper so the policy can be injected through the service container."""

    def classify(self, identity: Optional[str]) -> ClientKind:
        return classify(identity)

    def is_browser(self, identity: Optional[str]) -> bool:
        return is_browser(identity)
