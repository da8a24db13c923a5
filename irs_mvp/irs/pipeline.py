import os
import sys
from typing import Optional

from .explain import (
    PLACEHOLDER_CONFIDENCE_NOTE, PLACEHOLDER_DONT_KNOW, PLACEHOLDER_KNOW,
    collect_reasons, derive_confidence, describe_score_breakdown,
    describe_what_we_dont_know, describe_what_we_know,
)
from .knowledge import INSUFFICIENT_PATTERN_ID, KnowledgeBase, builtin_knowledge_base
from .models import EvaluationResult, Modifiers
from .score import (
    collect_pattern_ids, compute_score, evaluate_severity, match_ingredients, parse_ingredients,
)

# 観測フラグ：OBS=1 のときだけ [obs] を出す (stderr; stdout は結果用)
OBS = os.getenv("OBS", "") == "1"


def _obs(msg: str) -> None:
    if OBS:
        print(msg, file=sys.stderr)


def evaluate(
    raw_ingredients: Optional[str],
    modifiers: Optional[Modifiers] = None,
    kb: Optional[KnowledgeBase] = None,
) -> EvaluationResult:
    """parse -> match -> score -> explain. Never raises for string input."""
    kb = kb or builtin_knowledge_base()
    modifiers = modifiers or Modifiers()

    ingredients = parse_ingredients(raw_ingredients)
    _obs(f"[obs] parsed {len(ingredients)} ingredient(s)")

    m = match_ingredients(ingredients, kb)
    _obs(f"[obs] matched hits={len(m.hits)} unknowns={len(m.unknowns)}")

    all_ids = collect_pattern_ids(m.pattern_bucket, modifiers)
    has_insufficient_flag = INSUFFICIENT_PATTERN_ID in all_ids
    pattern_ids = [pid for pid in all_ids if pid != INSUFFICIENT_PATTERN_ID]

    base, bonus, total = compute_score(pattern_ids, modifiers, kb)
    severity = evaluate_severity(total)
    _obs(f"[obs] patterns={pattern_ids} base={base} bonus={bonus} total={total} severity={severity.chip}")

    confidence = derive_confidence(m.tiers)
    if ingredients:
        confidence_note = confidence.note
        what_we_know = describe_what_we_know(m.hits, pattern_ids, kb)
        what_we_dont_know = describe_what_we_dont_know(m.unknowns, has_insufficient_flag)
    else:
        confidence_note = PLACEHOLDER_CONFIDENCE_NOTE
        what_we_know = [PLACEHOLDER_KNOW]
        what_we_dont_know = [PLACEHOLDER_DONT_KNOW]

    return EvaluationResult(
        ingredients=tuple(ingredients),
        pattern_ids=tuple(pattern_ids),
        has_insufficient_flag=has_insufficient_flag,
        hits=tuple(m.hits),
        unknowns=tuple(m.unknowns),
        base=base,
        exposure_bonus=bonus,
        total=total,
        severity=severity,
        confidence=confidence,
        confidence_note=confidence_note,
        reasons=tuple(collect_reasons(pattern_ids, m.hits, modifiers, kb)),
        what_we_know=tuple(what_we_know),
        what_we_dont_know=tuple(what_we_dont_know),
        why_it_matters=describe_score_breakdown(base, bonus, pattern_ids),
    )


def reset(kb: Optional[KnowledgeBase] = None) -> EvaluationResult:
    """Zero-input state: score 0, Low, Insufficient, no patterns or sources."""
    return evaluate("", Modifiers(), kb)
