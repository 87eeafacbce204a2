from __future__ import annotations

# Ordered: the first domain found in the referer decides the label.
_TRAFFIC_SOURCES: tuple[tuple[str, str], ...] = (
    ("linkedin", "linkedin"),
    ("github", "github"),
    ("google", "google"),
    ("twitter", "twitter"),
    ("facebook", "facebook"),
    ("instagram", "instagram"),
    ("indeed", "indeed"),
    ("glassdoor", "glassdoor"),
)

DIRECT_SOURCE = "direct"
OTHER_SOURCE = "other"


def classify_traffic_source(referer: str | None) -> str:
    if not isinstance(referer, str) or not referer.strip():
        return DIRECT_SOURCE

    lowered = referer.lower()
    for domain, source in _TRAFFIC_SOURCES:
        if domain in lowered:
            return source
    return OTHER_SOURCE
