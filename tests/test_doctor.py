from docfetch.workflows.doctor import build_doctor_report, format_doctor_report, redact_value


def test_report_lists_dependency_checks(monkeypatch):
    monkeypatch.delenv("DOCFETCH_TIMEOUT", raising=False)
    report = build_doctor_report()
    names = {check["name"] for check in report["checks"]}
    assert {"aiohttp", "lxml", "fitz", "markdownify", "mcp"} <= names
    assert report["ok"] is True


def test_invalid_timeout_flags_report(monkeypatch):
    monkeypatch.setenv("DOCFETCH_TIMEOUT", "-3")
    report = build_doctor_report()
    assert report["ok"] is False
    entry = next(check for check in report["checks"] if check["name"] == "DOCFETCH_TIMEOUT")
    assert entry["status"] == "missing"


def test_format_report():
    text = format_doctor_report(build_doctor_report())
    assert text.startswith("Docfetch doctor")
    assert "- [warn] aiohttp: ok" in text


def test_redact_value():
    assert redact_value("abcdefghijkl") == "abcd...ijkl"
    assert redact_value("short") == "*****"
    assert redact_value("") == ""
