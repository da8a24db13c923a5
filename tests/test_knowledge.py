import json

import pytest
from jsonschema import ValidationError

from irs.knowledge import (
    BUILTIN_KNOWLEDGE_BASE, build_knowledge_base, builtin_knowledge_base,
    knowledge_base_to_dict, load_knowledge_base,
)
from irs.models import Confidence


def _doc(ingredients=None, pattern_ids=("p1", "p7", "p8", "p9")):
    return {
        "patterns": [
            {"id": pid, "name": f"Pattern {pid}", "weight": 1, "rationale": "r"} for pid in pattern_ids
        ],
        "ingredients": ingredients if ingredients is not None else [],
    }


def test_builtin_tables():
    kb = builtin_knowledge_base()
    assert len(kb.patterns) == 9
    assert kb.pattern("p9").weight == 0
    assert [p.weight for p in kb.patterns.values()] == [3, 3, 2, 3, 2, 2, 1, 1, 0]
    assert set(kb.ingredients) == {
        "benzalkonium chloride", "limonene", "isopropyl alcohol", "polyquaternium-10", "polysorbate 20",
    }
    assert kb.lookup("Polyquaternium-10").confidence is Confidence.LOW


def test_builtin_is_read_only():
    kb = builtin_knowledge_base()
    with pytest.raises(TypeError):
        kb.patterns["p10"] = kb.pattern("p1")


def test_load_without_path_returns_builtin():
    assert load_knowledge_base() is builtin_knowledge_base()
    assert load_knowledge_base("") is builtin_knowledge_base()


def test_exported_document_loads_back(tmp_path):
    path = tmp_path / "kb.json"
    path.write_text(json.dumps(knowledge_base_to_dict(builtin_knowledge_base())), encoding="utf-8")

    kb = load_knowledge_base(str(path))
    assert kb.lookup("limonene") == builtin_knowledge_base().lookup("limonene")
    assert dict(kb.patterns) == dict(builtin_knowledge_base().patterns)


def test_missing_confidence_defaults_to_moderate():
    kb = build_knowledge_base(_doc([
        {"key": "water", "display": "Water", "patterns": ["p1"], "notes": ""},
    ]))
    record = kb.lookup("WATER")
    assert record.confidence is Confidence.MODERATE
    assert record.sources == ()


def test_source_without_url():
    kb = build_knowledge_base(_doc([
        {"key": "water", "display": "Water", "patterns": ["p1"], "notes": "",
         "sources": [{"title": "Label claim"}]},
    ]))
    assert kb.lookup("water").sources[0].url is None


def test_schema_rejects_negative_weight():
    doc = _doc()
    doc["patterns"][0]["weight"] = -1
    with pytest.raises(ValidationError):
        build_knowledge_base(doc)


def test_schema_rejects_empty_pattern_list():
    with pytest.raises(ValidationError):
        build_knowledge_base(_doc([{"key": "water", "display": "Water", "patterns": [], "notes": ""}]))


def test_schema_rejects_unknown_confidence():
    with pytest.raises(ValidationError):
        build_knowledge_base(_doc([
            {"key": "water", "display": "Water", "patterns": ["p1"], "notes": "", "confidence": "Certain"},
        ]))


def test_unknown_pattern_reference():
    with pytest.raises(ValueError, match="unknown id: 'p42'"):
        build_knowledge_base(_doc([{"key": "water", "display": "Water", "patterns": ["p42"], "notes": ""}]))


def test_designated_patterns_required():
    with pytest.raises(ValueError, match="required id 'p9' missing"):
        build_knowledge_base(_doc(pattern_ids=("p1", "p7", "p8")))


def test_keys_must_be_lowercase_and_unique():
    row = {"key": "Water", "display": "Water", "patterns": ["p1"], "notes": ""}
    with pytest.raises(ValueError) as exc:
        build_knowledge_base(_doc([row, dict(row)]))
    assert "must be lowercase" in str(exc.value)
    assert "duplicate" in str(exc.value)


def test_keys_must_not_carry_surrounding_whitespace():
    row = {"key": " water ", "display": "Water", "patterns": ["p1"], "notes": ""}
    with pytest.raises(ValueError, match="surrounding whitespace"):
        build_knowledge_base(_doc([row]))


def test_error_report_is_truncated():
    rows = [
        {"key": f"x{i}", "display": f"X{i}", "patterns": ["nope"], "notes": ""} for i in range(12)
    ]
    with pytest.raises(ValueError, match=r"\(\+2 more\)$"):
        build_knowledge_base(_doc(rows))


def test_builtin_document_is_not_mutated_by_build():
    before = json.dumps(BUILTIN_KNOWLEDGE_BASE, sort_keys=True)
    build_knowledge_base(BUILTIN_KNOWLEDGE_BASE)
    assert json.dumps(BUILTIN_KNOWLEDGE_BASE, sort_keys=True) == before
