import json
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from jsonschema import validate

from .models import Confidence, IngredientRecord, Pattern, Source
from .schemas import KNOWLEDGE_BASE_SCHEMA

# Designated pattern ids
SPRAY_PATTERN_ID = "p7"
DAILY_PATTERN_ID = "p8"
INSUFFICIENT_PATTERN_ID = "p9"
DESIGNATED_PATTERN_IDS = (SPRAY_PATTERN_ID, DAILY_PATTERN_ID, INSUFFICIENT_PATTERN_ID)

BUILTIN_KNOWLEDGE_BASE: Dict[str, Any] = {
    "patterns": [
        {
            "id": "p1",
            "name": "Membrane-Disrupting Cationic Agents",
            "weight": 3,
            "rationale": "Cationic actives can interact with lipid membranes in the airways, "
                         "suggesting elevated inhalation signal even at low doses.",
        },
        {
            "id": "p2",
            "name": "Persistent Polymeric Compounds",
            "weight": 3,
            "rationale": "Polymeric or high-molecular-weight materials can persist on surfaces "
                         "and become airborne as fine droplets or dust.",
        },
        {
            "id": "p3",
            "name": "Volatile Organic Compounds (VOCs)",
            "weight": 2,
            "rationale": "Volatile solvents and fragrances can form an inhalable vapor cloud "
                         "and irritate the upper airway.",
        },
        {
            "id": "p4",
            "name": "Secondary Pollutant Formation",
            "weight": 3,
            "rationale": "Terpenes and similar compounds can react with indoor ozone to generate "
                         "secondary pollutants such as ultrafine particles.",
        },
        {
            "id": "p5",
            "name": "Strong Irritant / Inflammatory Response",
            "weight": 2,
            "rationale": "Irritants can inflame respiratory tissue, heightening sensitivity "
                         "to repeated exposures.",
        },
        {
            "id": "p6",
            "name": "Surfactant-Induced Barrier Disruption",
            "weight": 2,
            "rationale": "Surfactants can disrupt mucosal barriers, increasing uptake of other "
                         "co-formulated substances.",
        },
        {
            "id": "p7",
            "name": "Aerosolized Exposure Amplification",
            "weight": 1,
            "rationale": "Sprays and aerosols produce fine droplets that travel deeper into "
                         "the respiratory tract.",
        },
        {
            "id": "p8",
            "name": "Chronic Low-Dose Repeated Exposure",
            "weight": 1,
            "rationale": "Frequent use can keep airborne concentrations elevated, even if "
                         "single doses are low.",
        },
        {
            "id": "p9",
            "name": "Insufficient Inhalation Data",
            "weight": 0,
            "rationale": "Published inhalation-focused data not located. Uncertainty remains high.",
        },
    ],
    "ingredients": [
        {
            "key": "benzalkonium chloride",
            "display": "Benzalkonium chloride",
            "patterns": ["p1", "p6"],
            "notes": "Quaternary ammonium surfactant; membrane-active with mucosal interactions.",
            "confidence": "Moderate",
            "sources": [
                {
                    "title": "EPA Reregistration Eligibility Decision for Alkyl Dimethyl Benzyl "
                             "Ammonium Chloride (2006)",
                    "url": "https://www.epa.gov/sites/default/files/2015-09/documents/"
                           "benzalkonium-chloride-red.pdf",
                },
            ],
        },
        {
            "key": "limonene",
            "display": "Limonene",
            "patterns": ["p3", "p4"],
            "notes": "Volatile terpene fragrance; reacts with indoor ozone to form secondary aerosols.",
            "confidence": "Moderate",
            "sources": [
                {
                    "title": "Weschler & Shields, Indoor ozone/terpene reactions "
                             "(Environ Sci Technol, 1999)",
                    "url": "https://doi.org/10.1021/es980947y",
                },
            ],
        },
        {
            "key": "isopropyl alcohol",
            "display": "Isopropyl alcohol",
            "patterns": ["p3", "p5"],
            "notes": "Volatile solvent; transient upper-airway irritant at higher vapor levels.",
            "confidence": "Moderate",
            "sources": [
                {
                    "title": "NIOSH Pocket Guide to Chemical Hazards: Isopropyl alcohol",
                    "url": "https://www.cdc.gov/niosh/npg/npgd0359.html",
                },
            ],
        },
        {
            "key": "polyquaternium-10",
            "display": "Polyquaternium-10",
            "patterns": ["p2"],
            "notes": "Cationic polymer; can persist on surfaces and be re-aerosolized.",
            "confidence": "Low",
            "sources": [
                {
                    "title": "Manufacturer safety data sheet for Polyquaternium-10 "
                             "(film-forming polymer)",
                    "url": "https://www.tcichemicals.com/US/en/p/P1232",
                },
            ],
        },
        {
            "key": "polysorbate 20",
            "display": "Polysorbate 20",
            "patterns": ["p6"],
            "notes": "Nonionic surfactant that can loosen epithelial barriers, especially in aerosols.",
            "confidence": "Low",
            "sources": [
                {
                    "title": "ECHA substance information: Polysorbate 20",
                    "url": "https://echa.europa.eu/substance-information/-/substanceinfo/100.066.969",
                },
            ],
        },
    ],
}


class KnowledgeBase:
    """Read-only pattern and ingredient tables."""

    def __init__(self, patterns: Mapping[str, Pattern], ingredients: Mapping[str, IngredientRecord]):
        self.patterns = MappingProxyType(dict(patterns))
        self.ingredients = MappingProxyType(dict(ingredients))

    def pattern(self, pattern_id: str) -> Optional[Pattern]:
        return self.patterns.get(pattern_id)

    def lookup(self, name: str) -> Optional[IngredientRecord]:
        return self.ingredients.get(name.lower())


def validate_references(doc: Dict[str, Any]) -> None:
    errors: List[str] = []
    pattern_ids = [p["id"] for p in doc.get("patterns", [])]
    known = set(pattern_ids)

    seen = set()
    for pid in pattern_ids:
        if pid in seen:
            errors.append(f"patterns: duplicate id {pid!r}")
        seen.add(pid)
    for pid in DESIGNATED_PATTERN_IDS:
        if pid not in known:
            errors.append(f"patterns: required id {pid!r} missing")

    seen = set()
    for i, row in enumerate(doc.get("ingredients", [])):
        key = row.get("key")
        if key != key.strip():
            errors.append(f"ingredients[{i}].key has surrounding whitespace: {key!r}")
        if key != key.lower():
            errors.append(f"ingredients[{i}].key must be lowercase: {key!r}")
        if key in seen:
            errors.append(f"ingredients[{i}].key duplicate: {key!r}")
        seen.add(key)
        for pid in row.get("patterns", []):
            if pid not in known:
                errors.append(f"ingredients[{i}].patterns unknown id: {pid!r}")

    if errors:
        head = errors[:10]
        more = "" if len(errors) <= 10 else f" (+{len(errors) - 10} more)"
        raise ValueError("Invalid knowledge base: " + " | ".join(head) + more)


def build_knowledge_base(doc: Dict[str, Any]) -> KnowledgeBase:
    validate(instance=doc, schema=KNOWLEDGE_BASE_SCHEMA)
    validate_references(doc)

    patterns = {
        p["id"]: Pattern(id=p["id"], name=p["name"], weight=p["weight"], rationale=p["rationale"])
        for p in doc["patterns"]
    }
    ingredients = {}
    for row in doc["ingredients"]:
        ingredients[row["key"]] = IngredientRecord(
            key=row["key"],
            display=row["display"],
            patterns=tuple(row["patterns"]),
            notes=row["notes"],
            confidence=Confidence.parse(row.get("confidence") or "Moderate"),
            sources=tuple(Source(title=s["title"], url=s.get("url")) for s in row.get("sources", [])),
        )
    return KnowledgeBase(patterns, ingredients)


_BUILTIN: Optional[KnowledgeBase] = None


def builtin_knowledge_base() -> KnowledgeBase:
    global _BUILTIN
    if _BUILTIN is None:
        _BUILTIN = build_knowledge_base(BUILTIN_KNOWLEDGE_BASE)
    return _BUILTIN


def load_knowledge_base(path: Optional[str] = None) -> KnowledgeBase:
    if not path:
        return builtin_knowledge_base()
    with open(path, "r", encoding="utf-8") as f:
        doc = json.load(f)
    return build_knowledge_base(doc)


def knowledge_base_to_dict(kb: KnowledgeBase) -> Dict[str, Any]:
    return {
        "patterns": [
            {"id": p.id, "name": p.name, "weight": p.weight, "rationale": p.rationale}
            for p in kb.patterns.values()
        ],
        "ingredients": [
            {
                "key": r.key,
                "display": r.display,
                "patterns": list(r.patterns),
                "notes": r.notes,
                "confidence": r.confidence.label,
                "sources": [{"title": s.title, "url": s.url} for s in r.sources],
            }
            for r in kb.ingredients.values()
        ],
    }
