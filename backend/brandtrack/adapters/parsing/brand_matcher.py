"""
Brand Matching Engine
Detects brand and competitor mentions in AI responses
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from brandtrack.config import BRAND_NAME_SUFFIXES
from brandtrack.schemas import AIResponse, RankingEntry


@dataclass
class EntityMention:
    """Mention data for one entity in one response"""
    name: str
    mentioned: bool
    in_rankings: bool
    position: Optional[int] = None


def _check_name(entity_name) -> str:
    if not isinstance(entity_name, str):
        raise TypeError(f"entity name must be a string, got {type(entity_name).__name__}")
    return entity_name.strip()


def matches(response_text: str, entity_name: str) -> bool:
    """
    Check whether an entity name appears in a response.

    Any one strategy matching is enough:
    1. Case-insensitive substring
    2. Word-boundary regex (case-insensitive)
    3. Compound name: name followed by "+", "&" or a capitalised word
       (e.g. "Tea Burn + Control Coffee")
    4. Literal variants: verbatim, lower, upper and title case

    An empty name never matches.
    """
    name = _check_name(entity_name)
    if not isinstance(response_text, str):
        raise TypeError(f"response text must be a string, got {type(response_text).__name__}")
    if not name or not response_text:
        return False

    if name.lower() in response_text.lower():
        return True

    escaped = re.escape(name)
    if re.search(rf"\b{escaped}\b", response_text, re.IGNORECASE):
        return True

    if re.search(rf"(?i:{escaped})(?:\s*[+&]|\s+[A-Z])", response_text):
        return True

    variants = {name, name.lower(), name.upper(), name.title()}
    return any(variant in response_text for variant in variants)


_SUFFIX_PATTERN = re.compile(
    r"[\s,]*\b(?:" + "|".join(BRAND_NAME_SUFFIXES) + r")\b\.?$",
    re.IGNORECASE,
)

_SYMBOL_WORDS = {"&": ["and", ""], "+": ["plus", "and", ""]}


def normalize_brand_name(name: str) -> str:
    """
    Lowercase a company name, collapse whitespace and drop possessives and
    one trailing corporate suffix: "Acme, Inc." -> "acme".

    A name that is nothing but a suffix ("Tech") is kept as is.
    """
    normalized = " ".join(_check_name(name).lower().split())
    normalized = re.sub(r"'s\b", "", normalized)
    stripped = _SUFFIX_PATTERN.sub("", normalized).strip()
    return stripped or normalized


def brand_variations(name: str) -> List[str]:
    """
    Alternative spellings of a company name: suffix-normalized, joined,
    hyphenated, and with "&" / "+" spelled out or dropped.
    Variations shorter than two characters are left out.
    """
    normalized = normalize_brand_name(name)
    candidates = [
        _check_name(name).lower(),
        normalized,
        normalized.replace(" ", ""),
        normalized.replace(" ", "-"),
    ]
    for symbol, words in _SYMBOL_WORDS.items():
        if symbol in normalized:
            for word in words:
                candidates.append(" ".join(normalized.replace(symbol, f" {word} ").split()))

    variations = []
    for candidate in candidates:
        if len(candidate) >= 2 and candidate not in variations:
            variations.append(candidate)
    return variations


def ranking_matches(company: str, entity_name: str) -> bool:
    """Case-insensitive substring match in either direction"""
    company_lower = company.strip().lower()
    name_lower = _check_name(entity_name).lower()
    if not company_lower or not name_lower:
        return False
    return name_lower in company_lower or company_lower in name_lower


def find_ranking(rankings: Iterable[RankingEntry], entity_name: str) -> Optional[RankingEntry]:
    """First ranking entry that refers to the entity"""
    for entry in rankings:
        if ranking_matches(entry.company, entity_name):
            return entry
    return None


def brand_mentioned_in(response: AIResponse, brand_name: str) -> bool:
    """
    Whether the subject brand counts as mentioned in a response:
    the upstream flag is set or the brand appears in the response's rankings.
    """
    if response.brand_mentioned:
        return True
    return find_ranking(response.rankings, brand_name) is not None


class BrandMatcher:
    """
    Tags AI responses with mention and position data for a fixed set of
    entities: the subject brand plus its competitors.

    Competitors are searched under their name, its spelling variations and
    any configured aliases. The subject brand counts as mentioned only by
    the upstream flag or the rankings.
    """

    def __init__(
        self,
        brand_name: str,
        competitors: Iterable[str],
        aliases: Optional[Dict[str, Iterable[str]]] = None,
    ):
        self.brand_name = _check_name(brand_name)
        if not self.brand_name:
            raise ValueError("brand name is required")

        seen = {self.brand_name.lower()}
        self.competitors: List[str] = []
        for name in competitors:
            name = _check_name(name)
            if name and name.lower() not in seen:
                seen.add(name.lower())
                self.competitors.append(name)

        self.aliases: Dict[str, List[str]] = {}
        for name, names in (aliases or {}).items():
            self.add_aliases(name, names)

    @property
    def entity_names(self) -> List[str]:
        return [self.brand_name] + self.competitors

    def add_aliases(self, name: str, aliases: Iterable[str]) -> None:
        """Register other names an entity goes by. Entity names are case-insensitive."""
        known = self.aliases.setdefault(_check_name(name).lower(), [])
        for alias in aliases:
            alias = _check_name(alias)
            if alias and alias.lower() not in (a.lower() for a in known):
                known.append(alias)

    def aliases_for(self, name: str) -> List[str]:
        return list(self.aliases.get(_check_name(name).lower(), []))

    def search_terms(self, name: str) -> List[str]:
        """The name, its variations and its aliases, without repeats"""
        terms: List[str] = []
        for term in [name, *brand_variations(name), *self.aliases_for(name)]:
            if term.lower() not in (t.lower() for t in terms):
                terms.append(term)
        return terms

    def _find_ranking(self, rankings: List[RankingEntry], name: str) -> Optional[RankingEntry]:
        for term in [name, *self.aliases_for(name)]:
            entry = find_ranking(rankings, term)
            if entry is not None:
                return entry
        return None

    def tag_brand(self, response: AIResponse) -> EntityMention:
        """Mention data for the subject brand"""
        entry = find_ranking(response.rankings, self.brand_name)
        position = entry.position if entry else response.brand_position
        return EntityMention(
            name=self.brand_name,
            mentioned=response.brand_mentioned or entry is not None,
            in_rankings=entry is not None,
            position=position,
        )

    def tag_competitor(self, response: AIResponse, name: str) -> EntityMention:
        """Mention data for a competitor, detected in the text or the rankings"""
        entry = self._find_ranking(response.rankings, name)
        mentioned = entry is not None or any(
            matches(response.response, term) for term in self.search_terms(name)
        )
        return EntityMention(
            name=name,
            mentioned=mentioned,
            in_rankings=entry is not None,
            position=entry.position if entry else None,
        )

    def tag_response(self, response: AIResponse) -> List[EntityMention]:
        """Mention data for every tracked entity, brand first"""
        mentions = [self.tag_brand(response)]
        for name in self.competitors:
            mentions.append(self.tag_competitor(response, name))
        return mentions
