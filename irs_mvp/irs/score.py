from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .knowledge import (
    DAILY_PATTERN_ID, INSUFFICIENT_PATTERN_ID, SPRAY_PATTERN_ID, KnowledgeBase,
)
from .models import Confidence, IngredientRecord, Modifiers, Severity

# (min, max, tier), inclusive integer bounds
SEVERITY_BANDS: List[Tuple[int, float, Severity]] = [
    (0, 2, Severity.LOW),
    (3, 5, Severity.MODERATE),
    (6, float("inf"), Severity.HIGH),
]


@dataclass
class MatchResult:
    hits: List[IngredientRecord] = field(default_factory=list)
    unknowns: List[str] = field(default_factory=list)
    pattern_bucket: List[str] = field(default_factory=list)
    tiers: List[Confidence] = field(default_factory=list)


def parse_ingredients(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def match_ingredients(names: Iterable[str], kb: KnowledgeBase) -> MatchResult:
    m = MatchResult()
    for name in names:
        hit = kb.lookup(name)
        if hit:
            m.hits.append(hit)
            m.pattern_bucket.extend(hit.patterns)
            m.tiers.append(hit.confidence)
        else:
            m.unknowns.append(name)
            m.pattern_bucket.append(INSUFFICIENT_PATTERN_ID)
            m.tiers.append(Confidence.INSUFFICIENT)
    return m


def collect_pattern_ids(bucket: Iterable[str], modifiers: Modifiers) -> List[str]:
    """Adds the exposure patterns and de-duplicates in first-seen order."""
    ids = list(bucket)
    if modifiers.spray:
        ids.append(SPRAY_PATTERN_ID)
    if modifiers.frequency:
        ids.append(DAILY_PATTERN_ID)
    return list(dict.fromkeys(ids))


def exposure_bonus(modifiers: Modifiers) -> int:
    return max(0, modifiers.spray + modifiers.indoor + modifiers.frequency - modifiers.ventilation)


def compute_score(pattern_ids: Iterable[str], modifiers: Modifiers, kb: KnowledgeBase) -> Tuple[int, int, int]:
    base = 0
    for pid in dict.fromkeys(pattern_ids):
        if pid == INSUFFICIENT_PATTERN_ID:
            continue
        pattern = kb.pattern(pid)
        base += pattern.weight if pattern else 0
    bonus = exposure_bonus(modifiers)
    return base, bonus, base + bonus


def evaluate_severity(total: int) -> Severity:
    for lo, hi, tier in SEVERITY_BANDS:
        if lo <= total <= hi:
            return tier
    return SEVERITY_BANDS[0][2]
