# dropship_import/extractors/base_extractor.py

"""Abstract base class for all product-page extractors."""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from bs4 import BeautifulSoup

from dropship_import.config.settings import Settings
from dropship_import.models.product import PartialProduct

ExtractionStep = Callable[["PageDocument", PartialProduct], None]


@dataclass
class PageDocument:
    """A fetched product page shared read-only by every extractor."""

    html: str
    url: str = ""

    @cached_property
    def soup(self) -> BeautifulSoup:
        """Parsed DOM, built once on first use."""
        return BeautifulSoup(self.html, "lxml")


def _first_group(match: re.Match[str]) -> Any:
    return match.group(1)


def _always(_value: Any) -> bool:
    return True


@dataclass(frozen=True)
class FieldRule:
    """One candidate pattern for a field.

    ``convert`` turns a match into a value (``None`` to skip the match)
    and ``accept`` is the sanity filter the value must pass.
    """

    pattern: re.Pattern[str]
    convert: Callable[[re.Match[str]], Any] = _first_group
    accept: Callable[[Any], bool] = _always


def first_valid_match(text: str, rules: list[FieldRule]) -> Any:
    """Return the first converted match that passes its rule's filter.

    Rules are tried in order; within a rule, matches are tried in
    document order. Returns ``None`` when nothing qualifies.
    """
    for rule in rules:
        for match in rule.pattern.finditer(text):
            value = rule.convert(match)
            if value is not None and rule.accept(value):
                return value
    return None


class BaseExtractor(ABC):
    """Abstract base class for all product-page extractors.

    Subclasses list their per-field steps in :meth:`_steps`. Each step
    runs in isolation: a step that raises is logged and skipped, leaving
    its field unset for the merger to default.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(
            f"dropship_import.extractors.{name}"
        )
        self.settings = Settings()

    def extract(self, page: PageDocument) -> PartialProduct:
        """Run every step over *page* and return what was found."""
        partial = PartialProduct()
        for step in self._steps():
            self._attempt(step.__name__, page, step, partial)
        self.logger.debug(
            "[%s] %s filled %s",
            self.name,
            page.url or "<document>",
            partial.filled_fields(),
        )
        return partial

    def _attempt(
        self,
        label: str,
        page: PageDocument,
        step: ExtractionStep,
        partial: PartialProduct,
    ) -> None:
        """Run one step, swallowing and logging any failure."""
        try:
            step(page, partial)
        except Exception as exc:
            self.logger.debug(
                "[%s] %s failed on %s: %s",
                self.name,
                label,
                page.url or "<document>",
                exc,
                exc_info=True,
            )

    def _apply_rules(
        self,
        page: PageDocument,
        partial: PartialProduct,
        table: dict[str, list[FieldRule]],
    ) -> None:
        """Fill each still-unset field from its ordered rule list."""
        for field_name, rules in table.items():
            if getattr(partial, field_name) is not None:
                continue

            def _fill(
                doc: PageDocument,
                target: PartialProduct,
                name: str = field_name,
                candidates: list[FieldRule] = rules,
            ) -> None:
                value = first_valid_match(doc.html, candidates)
                if value is not None:
                    setattr(target, name, value)

            self._attempt(field_name, page, _fill, partial)

    @abstractmethod
    def _steps(self) -> list[ExtractionStep]:
        """Return the ordered extraction steps for this extractor."""
        ...
