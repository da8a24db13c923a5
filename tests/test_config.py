import pytest

from irs.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("IRS_KNOWLEDGE_BASE", raising=False)
    monkeypatch.delenv("IRS_OUTPUT", raising=False)


def test_defaults():
    s = Settings.from_env()
    assert s.knowledge_base_path == ""
    assert s.output_format == "text"


def test_json_output(monkeypatch):
    monkeypatch.setenv("IRS_OUTPUT", " JSON ")
    assert Settings.from_env().output_format == "json"


def test_invalid_output(monkeypatch):
    monkeypatch.setenv("IRS_OUTPUT", "html")
    with pytest.raises(RuntimeError):
        Settings.from_env()


def test_missing_knowledge_base_file(monkeypatch, tmp_path):
    monkeypatch.setenv("IRS_KNOWLEDGE_BASE", str(tmp_path / "missing.json"))
    with pytest.raises(RuntimeError, match="not found"):
        Settings.from_env()


def test_existing_knowledge_base_file(monkeypatch, tmp_path):
    path = tmp_path / "kb.json"
    path.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("IRS_KNOWLEDGE_BASE", str(path))
    assert Settings.from_env().knowledge_base_path == str(path)
