# dropship_import/storage/draft_store.py

"""JSON-file persistence for imported product drafts."""

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from dropship_import.config.settings import Settings
from dropship_import.models.product import ExtractedProduct
from dropship_import.models.product_draft import DRAFT_STATUSES, ProductDraft

logger = logging.getLogger("dropship_import.storage")


class DraftStore:
    """Keeps product drafts in a single JSON file, newest first."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.DRAFTS_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("DraftStore initialised, path=%s", self.path)

    # ── Private helpers ──────────────────────────────────

    def _load(self) -> list[ProductDraft]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            raw = json.load(f)
        return [ProductDraft.from_dict(item) for item in raw]

    def _save(self, drafts: list[ProductDraft]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(
                [d.to_dict() for d in drafts],
                f,
                ensure_ascii=False,
                indent=2,
            )

    # ── Public API ───────────────────────────────────────

    def add(self, products: Iterable[ExtractedProduct]) -> list[ProductDraft]:
        """Wrap each product as a new draft and persist it."""
        created = [ProductDraft.create(p) for p in products]
        if not created:
            return []
        drafts = created[::-1] + self._load()
        self._save(drafts)
        logger.info("Saved %d draft(s) to %s", len(created), self.path)
        return created

    def list(self) -> list[ProductDraft]:
        """Return every stored draft, newest first."""
        return self._load()

    def get(self, draft_id: str) -> ProductDraft | None:
        return next((d for d in self._load() if d.id == draft_id), None)

    def update_status(self, draft_ids: Iterable[str], status: str) -> int:
        """Set *status* on the given drafts; return how many changed."""
        if status not in DRAFT_STATUSES:
            raise ValueError(
                f"Unknown draft status {status!r}; "
                f"expected one of {', '.join(DRAFT_STATUSES)}"
            )
        wanted = set(draft_ids)
        drafts = self._load()
        now = datetime.now()
        changed = 0
        for draft in drafts:
            if draft.id in wanted:
                draft.status = status
                draft.updated_at = now
                changed += 1
        if changed:
            self._save(drafts)
            logger.info("Marked %d draft(s) as %s", changed, status)
        return changed

    def delete(self, draft_ids: Iterable[str]) -> int:
        """Remove the given drafts; return how many were removed."""
        wanted = set(draft_ids)
        drafts = self._load()
        kept = [d for d in drafts if d.id not in wanted]
        removed = len(drafts) - len(kept)
        if removed:
            self._save(kept)
            logger.info("Deleted %d draft(s)", removed)
        return removed
