"""Human readable text for ``(domain, action)`` log events.

Templates live in ``event_templates.json`` next to this module as
``{"domain": {"action": "text with {placeholders}"}}``.
"""

from __future__ import annotations

import json
from pathlib import Path

TemplateKey = tuple[str, str]

EVENT_TEMPLATES: dict[TemplateKey, str] = {}
DEFAULT_TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")


def _flatten(document: object) -> dict[TemplateKey, str]:
    if not isinstance(document, dict):
        raise ValueError("top level must be an object of domains")
    return {
        (domain, action): text
        for domain, actions in document.items()
        if isinstance(actions, dict)
        for action, text in actions.items()
        if isinstance(text, str)
    }


def load_event_templates(path: Path | None = None) -> dict[TemplateKey, str]:
    """Read a template file.

    Failures do not raise: the result then holds only ``("app", "load_error")``
    describing the problem, so logging keeps working with derived text.
    """
    source = path or DEFAULT_TEMPLATES_PATH
    try:
        return _flatten(json.loads(source.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return {("app", "load_error"): f"Event templates file missing: {source.name}"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}


def reload_event_templates(path: Path | None = None) -> None:
    # In place, other modules hold a reference to the dict.
    fresh = load_event_templates(path)
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(fresh)


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "load_event_templates", "reload_event_templates"]
