from __future__ import annotations

import importlib.util
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .fetcher_config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

_SECRET_TOKENS = ("key", "token", "secret", "password", "pass")

# import name -> (distribution, what breaks without it)
_REQUIRED_MODULES = (
    ("aiohttp", "aiohttp", "URL retrieval"),
    ("lxml", "lxml", "HTML parsing"),
    ("lxml_html_clean", "lxml_html_clean", "HTML cleaning"),
    ("bs4", "beautifulsoup4", "markdown conversion and image harvesting"),
    ("markdownify", "markdownify", "markdown conversion"),
    ("ftfy", "ftfy", "mojibake repair"),
    ("charset_normalizer", "charset-normalizer", "charset detection"),
    ("fitz", "pymupdf", "PDF text extraction"),
    ("mcp", "mcp", "MCP server"),
)


def _is_secret_name(name: str) -> bool:
    lowered = (name or "").lower()
    return any(token in lowered for token in _SECRET_TOKENS)


def redact_value(value: str, keep: int = 4) -> str:
    raw = (value or "").strip()
    if not raw:
        return ""
    if len(raw) <= keep * 2:
        return "*" * len(raw)
    return f"{raw[:keep]}...{raw[-keep:]}"


def _redacted_env_value(name: str, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return redact_value(value) if _is_secret_name(name) else value


def _module_available(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False


def build_doctor_report() -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "ok": True,
        "checks": [],
    }

    def add_check(
        name: str,
        status: bool,
        *,
        detail: Optional[str] = None,
        remedy: Optional[str] = None,
        level: str = "warn",
        value: Optional[str] = None,
    ) -> None:
        entry = {
            "name": name,
            "status": "ok" if status else "missing",
            "level": level,
            "detail": detail,
        }
        if remedy:
            entry["remedy"] = remedy
        if value is not None:
            entry["value"] = _redacted_env_value(name, value)
        report["checks"].append(entry)
        if not status and level == "warn":
            report["ok"] = False

    for module, dist, purpose in _REQUIRED_MODULES:
        available = _module_available(module)
        add_check(
            module,
            available,
            detail=f"{purpose} enabled" if available else f"{purpose} unavailable",
            remedy=f"pip install {dist}",
            level="warn",
        )

    user_agent = os.getenv("DOCFETCH_USER_AGENT")
    add_check(
        "DOCFETCH_USER_AGENT",
        True,
        detail="custom user agent" if user_agent else f"default: {DEFAULT_USER_AGENT}",
        level="info",
        value=user_agent,
    )

    timeout = os.getenv("DOCFETCH_TIMEOUT")
    timeout_ok = True
    if timeout:
        try:
            timeout_ok = float(timeout) > 0
        except ValueError:
            timeout_ok = False
    add_check(
        "DOCFETCH_TIMEOUT",
        timeout_ok,
        detail=f"{timeout}s" if timeout else f"default: {DEFAULT_TIMEOUT:g}s",
        remedy="Set DOCFETCH_TIMEOUT to a positive number of seconds.",
        level="warn",
        value=timeout,
    )

    return report


def format_doctor_report(report: Dict[str, Any]) -> str:
    lines: List[str] = []
    lines.append("Docfetch doctor")
    lines.append(f"Generated: {report.get('generated_at')}")
    lines.append("Values are redacted where applicable.")
    lines.append("")
    for check in report.get("checks", []):
        name = check.get("name", "check")
        status = check.get("status", "unknown")
        level = check.get("level", "info")
        detail = check.get("detail")
        value = check.get("value")
        label = f"{name}: {status}"
        if value:
            label = f"{label} ({value})"
        lines.append(f"- [{level}] {label}")
        if detail:
            lines.append(f"  detail: {detail}")
        remedy = check.get("remedy")
        if remedy and status != "ok":
            lines.append(f"  remedy: {remedy}")
    return "\n".join(lines).rstrip() + "\n"
