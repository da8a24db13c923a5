from typing import Iterable, List, Sequence

from .knowledge import INSUFFICIENT_PATTERN_ID, KnowledgeBase
from .models import Confidence, IngredientRecord, Modifiers

MAX_REASONS = 3

PLACEHOLDER_CONFIDENCE_NOTE = "Provide ingredients to calculate an inhalation signal."
PLACEHOLDER_KNOW = "Awaiting input."
PLACEHOLDER_DONT_KNOW = "No ingredients provided; inhalation coverage unknown."

NO_PATTERN_DISCLAIMER = (
    "No identified inhalation risk pattern found. This does not confirm safety. "
    "It reflects current knowledge coverage."
)
INSUFFICIENT_CAUTION = "Several ingredients lack inhalation-specific studies; interpret signals cautiously."
GENERIC_GAPS = "Gaps remain in long-term inhalation studies and mixture interactions."

# fixed order: spray, indoor, frequency, ventilation
MODIFIER_REASONS = (
    ("spray", "Spray/aerosol use amplifies inhalable droplets"),
    ("indoor", "Indoor use increases residence time of vapors"),
    ("frequency", "Frequent use can keep airborne levels elevated"),
    ("ventilation", "Claimed ventilation reduces accumulation (partial offset)"),
)


def derive_confidence(tiers: Iterable[Confidence]) -> Confidence:
    tiers = list(tiers)
    if not tiers:
        return Confidence.INSUFFICIENT
    return max(tiers)


def collect_reasons(
    pattern_ids: Sequence[str],
    hits: Sequence[IngredientRecord],
    modifiers: Modifiers,
    kb: KnowledgeBase,
) -> List[str]:
    reasons: List[str] = []
    for pid in pattern_ids:
        if pid == INSUFFICIENT_PATTERN_ID:
            continue
        pattern = kb.pattern(pid)
        if not pattern:
            continue
        related = ", ".join(hit.display for hit in hits if pid in hit.patterns)
        reasons.append(f"{pattern.name} ({related})" if related else pattern.name)

    for attr, sentence in MODIFIER_REASONS:
        if getattr(modifiers, attr) > 0:
            reasons.append(sentence)

    return reasons[:MAX_REASONS]


def describe_what_we_know(
    hits: Sequence[IngredientRecord], pattern_ids: Sequence[str], kb: KnowledgeBase
) -> List[str]:
    shown = [pid for pid in pattern_ids if pid != INSUFFICIENT_PATTERN_ID]
    if not shown:
        return [NO_PATTERN_DISCLAIMER]

    statements = []
    for hit in hits:
        names = "; ".join(p.name for p in (kb.pattern(pid) for pid in hit.patterns) if p)
        statements.append(f"{hit.display}: {names} — {hit.notes}")
    return statements


def describe_what_we_dont_know(unknowns: Sequence[str], has_insufficient_flag: bool) -> List[str]:
    if unknowns:
        return [
            f"No inhalation-focused data located for: {', '.join(unknowns)}. "
            'Pattern tagged as "Insufficient Inhalation Data."'
        ]
    # unknowns always carry the flag; kept as a fallback for hand-built inputs
    if has_insufficient_flag:
        return [INSUFFICIENT_CAUTION]
    return [GENERIC_GAPS]


def describe_score_breakdown(base: int, exposure_bonus: int, pattern_ids: Sequence[str]) -> str:
    breakdown = f"Base patterns: {base}, Exposure modifiers: {exposure_bonus}."
    if not [pid for pid in pattern_ids if pid != INSUFFICIENT_PATTERN_ID]:
        return f"{breakdown} No mechanism-based inhalation signals matched. Coverage gaps remain."
    return (
        f"{breakdown} Signals emphasize mechanism-driven exposure rather than ingredient lists, "
        "highlighting how droplets, vapors, and frequency shape inhalation dose."
    )
