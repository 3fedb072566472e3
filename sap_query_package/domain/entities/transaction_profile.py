"""Domain entities describing per transaction defaulting behaviour."""

from dataclasses import dataclass, field
from typing import Any

DATE_KIND_DETAIL = "detail"
DATE_KIND_SUMMARY = "summary"
CHECKBOX_ALL_MARKER = "All"


@dataclass(frozen=True)
class CheckboxValue:
    """Checkbox parameter whose encoding depends on the transaction date kind.

    Detail transactions expect a list (``["All"]`` when checked), summary
    transactions expect a plain boolean.
    """

    checked: bool = True

    def encode(self, date_kind: str) -> list[str] | bool:
        if date_kind == DATE_KIND_SUMMARY:
            return self.checked
        return [CHECKBOX_ALL_MARKER] if self.checked else []


@dataclass(frozen=True)
class DefaultRule:
    """Default value applied to parameters whose name matches the rule.

    ``exact`` compares the full lowercase name. Otherwise every token in
    ``all_of`` must be contained in the lowercase name and none of
    ``none_of`` may be.
    """

    value: Any
    all_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()
    exact: str | None = None

    @property
    def is_exact(self) -> bool:
        return self.exact is not None

    def matches(self, parameter: str) -> bool:
        lowered = parameter.lower()
        if self.exact is not None:
            return lowered == self.exact.lower()
        if not self.all_of:
            return False
        if not all(token in lowered for token in self.all_of):
            return False
        return not any(token in lowered for token in self.none_of)


@dataclass(frozen=True)
class TransactionProfile:
    """Resolved behaviour for one family of transactions."""

    canonical_code: str
    date_kind: str
    match_tokens: tuple[tuple[str, ...], ...] = ()
    rules: tuple[DefaultRule, ...] = ()
    extra_parameters: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, haystack: str) -> bool:
        return any(
            all(token in haystack for token in tokens) for tokens in self.match_tokens
        )


__all__ = [
    "CHECKBOX_ALL_MARKER",
    "CheckboxValue",
    "DATE_KIND_DETAIL",
    "DATE_KIND_SUMMARY",
    "DefaultRule",
    "TransactionProfile",
]
