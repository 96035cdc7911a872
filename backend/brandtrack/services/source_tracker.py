"""
Source Tracker
Aggregates the pages AI responses cite, by domain, and stores them per analysis
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from brandtrack.models import SourceDomain, SourcePage
from brandtrack.schemas import AIResponse, SourceCitation
from brandtrack.utils.numbers import round_half_up
from brandtrack.utils.url_normalizer import normalize_url

logger = logging.getLogger(__name__)

BRAND_CATEGORY = "Your Brand"
COMPETITOR_CATEGORY = "Competitor"

# (category, substrings) checked in order
DOMAIN_CATEGORIES = [
    ("Social", ("reddit", "twitter", "facebook", "linkedin", "instagram")),
    ("Encyclopedia", ("wikipedia",)),
    ("Video", ("youtube", "youtu.be")),
    ("News & Media", ("news", "blog", "medium", "substack")),
    ("Community", ("forum", "community", "discussion")),
    ("E-commerce", ("shop", "store", "amazon", "ebay")),
]
DEFAULT_CATEGORY = "Industry & Network"


@dataclass
class DomainAggregate:
    domain: str
    domain_name: str
    category: str
    times_cited: int = 0
    pages: List[SourceCitation] = field(default_factory=list)


def extract_domain(url: str) -> str:
    """Hostname without www."""
    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    hostname = urlparse(candidate).hostname or ""
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname or url.strip().lower()


def get_domain_name(domain: str) -> str:
    """Readable name from a domain: reddit.com -> Reddit"""
    parts = domain.split(".")
    if len(parts) >= 2 and parts[-2]:
        return parts[-2].capitalize()
    return domain


def categorize_domain(domain: str) -> str:
    domain_lower = domain.lower()
    for category, needles in DOMAIN_CATEGORIES:
        if any(needle in domain_lower for needle in needles):
            return category
    return DEFAULT_CATEGORY


def calculate_share_of_citations(times_cited: int, total_citations: int) -> float:
    """Percentage of all citations, 1 decimal"""
    if total_citations <= 0:
        return 0.0
    return round_half_up(times_cited / total_citations * 100, 1)


def collect_sources(responses: Iterable[AIResponse]) -> List[SourceCitation]:
    return [source for response in responses for source in response.sources]


def aggregate_sources_by_domain(
    sources: Iterable[SourceCitation],
    brand_url: Optional[str] = None,
    competitor_urls: Iterable[str] = (),
) -> Dict[str, DomainAggregate]:
    """
    Group citations by domain.

    Domains matching the brand URL or a competitor URL (after normalization)
    are categorised as such instead of by name pattern.
    """
    brand_key = normalize_url(brand_url)
    competitor_keys = {normalize_url(url) for url in competitor_urls} - {""}

    domains: Dict[str, DomainAggregate] = {}
    for source in sources:
        domain = source.domain or extract_domain(source.url)
        key = normalize_url(domain)

        if key not in domains:
            if brand_key and key == brand_key:
                category = BRAND_CATEGORY
            elif key in competitor_keys:
                category = COMPETITOR_CATEGORY
            else:
                category = categorize_domain(domain)

            domains[key] = DomainAggregate(
                domain=domain,
                domain_name=source.domain_name or get_domain_name(domain),
                category=category,
            )

        aggregate = domains[key]
        aggregate.pages.append(source)
        aggregate.times_cited += 1

    return domains


class SourceTrackerService:
    """Persists per-analysis citation domains and pages"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_sources(
        self,
        brand_analysis_id: UUID,
        responses: Iterable[AIResponse],
        brand_url: Optional[str] = None,
        competitor_urls: Iterable[str] = (),
    ) -> int:
        """Write source_domains and source_pages rows. Returns the number of domains saved."""
        sources = collect_sources(responses)
        if not sources:
            logger.info("No sources to save for analysis %s", brand_analysis_id)
            return 0

        total = len(sources)
        domains = aggregate_sources_by_domain(sources, brand_url, competitor_urls)

        for aggregate in domains.values():
            domain_row = SourceDomain(
                brand_analysis_id=brand_analysis_id,
                domain=aggregate.domain,
                domain_name=aggregate.domain_name,
                times_cited=aggregate.times_cited,
                share_of_citations=round_half_up(calculate_share_of_citations(aggregate.times_cited, total)),
                category=aggregate.category,
            )
            self.db.add(domain_row)
            await self.db.flush()

            for page in aggregate.pages:
                self.db.add(SourcePage(
                    brand_analysis_id=brand_analysis_id,
                    domain_id=domain_row.id,
                    url=page.url,
                    title=page.title,
                    times_cited=1,
                    share_of_citations=round_half_up(calculate_share_of_citations(1, total)),
                ))

        await self.db.flush()
        logger.info(
            "Saved %d source domains and %d pages for analysis %s",
            len(domains), total, brand_analysis_id,
        )
        return len(domains)
