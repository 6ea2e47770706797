from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ReferenceLink:
    label: str
    url: str
    description: str


REFERENCE_LINKS: tuple[ReferenceLink, ...] = (
    ReferenceLink("Autotrader UK", "https://www.autotrader.co.uk/cars/valuation", "Daily updated valuations"),
    ReferenceLink("Parkers", "https://www.parkers.co.uk/car-valuation/", "Independent pricing since 1972"),
    ReferenceLink("HPI Check", "https://www.hpi.co.uk/car-valuation.html", "Industry benchmark"),
    ReferenceLink("Motorway", "https://motorway.co.uk/car-value-tracker", "Live market tracker"),
)


def reference_links_payload() -> list[dict[str, str]]:
    return [asdict(link) for link in REFERENCE_LINKS]
