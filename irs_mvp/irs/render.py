from typing import Any, Dict, List

from .knowledge import KnowledgeBase
from .models import EvaluationResult, Pattern, Source

NO_REASONS = "No identified inhalation risk pattern found."
NO_SOURCES = "No verifiable sources available for the provided ingredients."


def _patterns(result: EvaluationResult, kb: KnowledgeBase) -> List[Pattern]:
    return [p for p in (kb.pattern(pid) for pid in result.pattern_ids) if p]


def _unique_sources(result: EvaluationResult) -> List[Source]:
    # 同じ成分を重複入力しても出典は1回だけ表示する
    return list(dict.fromkeys(result.sources))


def render_text(result: EvaluationResult, kb: KnowledgeBase) -> str:
    lines = [
        f"{result.severity.label} (score {result.total})",
        f"[{result.severity.chip}]",
        "",
        "Key reasons:",
    ]
    lines += [f"  - {r}" for r in (result.reasons or (NO_REASONS,))]

    lines += ["", f"Confidence: {result.confidence.label}"]
    if result.confidence_note:
        lines.append(f"  {result.confidence_note}")

    lines += ["", "What we know:"]
    lines += [f"  - {s}" for s in result.what_we_know]
    lines += ["", "What we don't know:"]
    lines += [f"  - {s}" for s in result.what_we_dont_know]

    patterns = _patterns(result, kb)
    if patterns:
        lines += ["", "Patterns:"]
        for p in patterns:
            lines.append(f"  * {p.name} (Weight: {p.weight})")
            lines.append(f"    {p.rationale}")

    lines += ["", "Sources:"]
    sources = _unique_sources(result)
    if not sources:
        lines.append(f"  - {NO_SOURCES}")
    for s in sources:
        lines.append(f"  - {s.title} <{s.url}>" if s.url else f"  - {s.title}")

    lines += ["", "Why it matters:", f"  {result.why_it_matters}"]
    return "\n".join(lines)


def render_json(result: EvaluationResult, kb: KnowledgeBase) -> Dict[str, Any]:
    return {
        "severity": result.severity.chip,
        "label": result.severity.label,
        "score": {
            "base": result.base,
            "exposure_bonus": result.exposure_bonus,
            "total": result.total,
        },
        "confidence": result.confidence.label,
        "confidence_note": result.confidence_note,
        "reasons": list(result.reasons),
        "what_we_know": list(result.what_we_know),
        "what_we_dont_know": list(result.what_we_dont_know),
        "unknowns": list(result.unknowns),
        "patterns": [
            {"id": p.id, "name": p.name, "weight": p.weight, "rationale": p.rationale}
            for p in _patterns(result, kb)
        ],
        "sources": [{"title": s.title, "url": s.url} for s in _unique_sources(result)],
        "why_it_matters": result.why_it_matters,
    }
