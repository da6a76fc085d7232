"""Company logo lookup keyed by residency partner name."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from portal.domain.residency.models import ResidencyPartner

CompanyLogoMap = Dict[str, Optional[str]]


def _normalise(name: str) -> str:
    return name.strip().lower()


def build_company_logo_map(partners: Iterable[ResidencyPartner]) -> CompanyLogoMap:
    """First partner wins when two normalise to the same name."""
    logos: CompanyLogoMap = {}
    for partner in partners:
        if not partner.name:
            continue
        logos.setdefault(_normalise(partner.name), partner.logo_url)
    return logos


def get_company_logo_url(company_name: Optional[str], logos: CompanyLogoMap) -> Optional[str]:
    """Exact normalised match first, then containment either way."""
    if not company_name:
        return None
    normalised = _normalise(company_name)
    if not normalised:
        return None
    direct = logos.get(normalised)
    if direct:
        return direct
    for key, url in logos.items():
        if url and (key in normalised or normalised in key):
            return url
    return None
