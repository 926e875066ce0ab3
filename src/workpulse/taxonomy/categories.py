"""Category normalizer: maps free-text role/department labels onto macro-categories."""

from __future__ import annotations

import unicodedata

from workpulse.errors import ConfigurationError
from workpulse.models.config import AnalyticsConfig, CategoryRule
from workpulse.models.enums import MacroCategory


def fold(text: str) -> str:
    """Casefold and strip accents so 'OPERACIÓN' and 'operacion' compare equal."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).strip()


class CategoryNormalizer:
    """Ordered keyword-rule matcher. First matching rule wins.

    Total and pure: every input maps to exactly one category. Blank input
    maps to the unspecified sentinel; unmatched text to the default category.
    """

    def __init__(
        self,
        rules: list[CategoryRule],
        default: str = MacroCategory.SERVICES_SUPPORT.value,
        unspecified: str = MacroCategory.UNSPECIFIED.value,
    ) -> None:
        if default == unspecified:
            raise ConfigurationError("Default and unspecified categories must differ")
        self._default = default
        self._unspecified = unspecified
        self._rules: list[tuple[str, tuple[str, ...]]] = []
        for rule in rules:
            if not rule.category.strip():
                raise ConfigurationError("Category rule with blank category name")
            keywords = tuple(fold(k) for k in rule.keywords if k.strip())
            if not keywords:
                raise ConfigurationError(f"Category rule '{rule.category}' has no keywords")
            self._rules.append((rule.category, keywords))

    @classmethod
    def from_config(cls, config: AnalyticsConfig) -> CategoryNormalizer:
        return cls(
            config.category_rules,
            default=config.default_category,
            unspecified=config.unspecified_category,
        )

    @property
    def default(self) -> str:
        return self._default

    @property
    def unspecified(self) -> str:
        return self._unspecified

    @property
    def categories(self) -> list[str]:
        """Every category this normalizer can return, in rule order."""
        seen: list[str] = []
        for category, _ in self._rules:
            if category not in seen:
                seen.append(category)
        for extra in (self._default, self._unspecified):
            if extra not in seen:
                seen.append(extra)
        return seen

    def normalize(self, label: str | None) -> str:
        """Map a free-text label to its macro-category."""
        if label is None:
            return self._unspecified
        folded = fold(label)
        if not folded:
            return self._unspecified
        for category, keywords in self._rules:
            if any(k in folded for k in keywords):
                return category
        return self._default
