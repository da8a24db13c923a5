import io
import json

import pytest

import run_signal


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("IRS_KNOWLEDGE_BASE", raising=False)
    monkeypatch.delenv("IRS_OUTPUT", raising=False)


def test_json_single_run(capsys):
    code = run_signal.main([
        "--ingredients", "Benzalkonium Chloride, Limonene",
        "--form", "spray", "--setting", "indoor", "--frequency", "daily", "--json",
    ])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["score"]["total"] == 15
    assert out["severity"] == "High"


def test_text_default(capsys):
    assert run_signal.main(["--ingredients", "UnknownChemX"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("🟢 Low inhalation concern (score 0)")
    assert "UnknownChemX" in out


def test_output_format_from_env(monkeypatch, capsys):
    monkeypatch.setenv("IRS_OUTPUT", "json")
    assert run_signal.main(["--reset"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["confidence"] == "Insufficient"
    assert out["score"]["total"] == 0


def test_loop_with_reset(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("limonene\n:reset\n"))
    assert run_signal.main(["--loop", "--json", "--setting", "indoor"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["score"] == {"base": 5, "exposure_bonus": 1, "total": 6}
    assert second["score"]["total"] == 0


def test_bad_knowledge_base_exits_2(monkeypatch, tmp_path, capsys):
    path = tmp_path / "kb.json"
    path.write_text(json.dumps({"patterns": [], "ingredients": []}), encoding="utf-8")
    monkeypatch.setenv("IRS_KNOWLEDGE_BASE", str(path))
    with pytest.raises(SystemExit) as exc:
        run_signal.main(["--ingredients", "limonene"])
    assert exc.value.code == 2
    assert capsys.readouterr().err.startswith("Error: knowledge base does not match schema")


def test_unreadable_knowledge_base_exits_2(monkeypatch, tmp_path):
    path = tmp_path / "kb.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("IRS_KNOWLEDGE_BASE", str(path))
    with pytest.raises(SystemExit) as exc:
        run_signal.main([])
    assert exc.value.code == 2


def test_non_utf8_knowledge_base_reports_read_failure(monkeypatch, tmp_path, capsys):
    path = tmp_path / "kb.json"
    path.write_bytes(b"\xff\xfe{}")
    monkeypatch.setenv("IRS_KNOWLEDGE_BASE", str(path))
    with pytest.raises(SystemExit) as exc:
        run_signal.main([])
    assert exc.value.code == 2
    assert capsys.readouterr().err.startswith("Error: failed to read knowledge base:")
