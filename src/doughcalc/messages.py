"""
Localized step text and UI strings.

``MessageCatalog`` wraps the YAML catalog (``data/messages.yml``) and hands
out per-language resolvers that satisfy
``doughcalc.core.timeline.TemplateResolver``. Plural suffixes and the
"additions" fragment are language concerns and are computed here, not in
the timeline builder.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from doughcalc.core.io import load_messages
from doughcalc.core.models import StepText

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def _plural_category_en(count: int) -> str:
    return "one" if count == 1 else "other"


def _plural_category_hr(count: int) -> str:
    # 1, 21, 31 ... -> one; 2-4, 22-24 ... -> few; 11-14 and the rest -> other
    n = abs(count)
    if n % 10 == 1 and n % 100 != 11:
        return "one"
    if n % 10 in (2, 3, 4) and n % 100 not in (12, 13, 14):
        return "few"
    return "other"


PLURAL_RULES: Dict[str, Callable[[int], str]] = {
    "en": _plural_category_en,
    "hr": _plural_category_hr,
}


def default_language() -> str:
    return os.environ.get("DOUGHCALC_LANG", "").strip().lower() or DEFAULT_LANGUAGE


def render_template(template: str, params: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders; unknown names stay as written."""
    def _sub(match: re.Match) -> str:
        key = match.group(1)
        if key in params and params[key] is not None:
            return str(params[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_sub, template)


class LocalizedResolver:
    """Template resolver bound to one language section of the catalog."""

    def __init__(self, language: str, section: Mapping[str, Any]):
        self.language = language
        self._steps: Mapping[str, Any] = section.get("steps") or {}
        self._ui: Mapping[str, Any] = section.get("ui") or {}
        self._ingredients: Mapping[str, Any] = section.get("ingredients") or {}
        self._plural: Mapping[str, Any] = section.get("plural") or {}
        self._plural_rule = PLURAL_RULES.get(language, _plural_category_en)

    def plural_suffix(self, count: int) -> str:
        category = self._plural_rule(int(count))
        suffix = self._plural.get(category)
        if suffix is None:
            suffix = self._plural.get("other", "")
        return str(suffix)

    def additions_fragment(self, additions: Iterable[str]) -> str:
        names = [str(self._ingredients.get(key, key)) for key in additions or ()]
        return "".join(f", {name}" for name in names)

    def _render_params(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        rendered = dict(params)
        if "count" in rendered:
            rendered.setdefault("plural", self.plural_suffix(rendered["count"]))
        additions = rendered.get("additions")
        if not isinstance(additions, str):
            rendered["additions"] = self.additions_fragment(additions or ())
        return rendered

    def resolve(self, template_id: str, params: Mapping[str, Any]) -> StepText:
        entry = self._steps.get(template_id)
        if not entry:
            logger.warning("No step template %r for language %s", template_id, self.language)
            return StepText(label=template_id, description="")
        rendered = self._render_params(params)
        return StepText(
            label=render_template(str(entry.get("label") or template_id), rendered),
            description=render_template(str(entry.get("description") or ""), rendered),
        )

    def text(self, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        template = self._ui.get(key)
        if template is None:
            return key
        return render_template(str(template), params or {})


class MessageCatalog:
    def __init__(self, data: Mapping[str, Any], default: Optional[str] = None):
        self._data = dict(data or {})
        self.default = default or default_language()
        self._cache: Dict[str, LocalizedResolver] = {}

    @classmethod
    def load(cls, filepath=None, default: Optional[str] = None) -> "MessageCatalog":
        return cls(load_messages(filepath), default=default)

    @property
    def languages(self) -> List[str]:
        return sorted(self._data)

    def resolver(self, language: Optional[str] = None) -> LocalizedResolver:
        lang = (language or self.default).strip().lower()
        if lang not in self._data:
            fallback = self.default if self.default in self._data else DEFAULT_LANGUAGE
            logger.warning("Unknown language %r; falling back to %s", lang, fallback)
            lang = fallback
        if lang not in self._cache:
            self._cache[lang] = LocalizedResolver(lang, self._data.get(lang) or {})
        return self._cache[lang]

    def translate(self, language: Optional[str], key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        return self.resolver(language).text(key, params)


__all__ = [
    "DEFAULT_LANGUAGE",
    "PLURAL_RULES",
    "default_language",
    "render_template",
    "LocalizedResolver",
    "MessageCatalog",
]
