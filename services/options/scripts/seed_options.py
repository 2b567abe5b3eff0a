"""Load reference options from a JSON file.

The file maps kind slugs to lists of ``{"name": ..., "description": ...}``.
Names that are already active are skipped, so the script can be re-run.

    python -m services.options.scripts.seed_options options.json
"""
import json
import os
import sys
from pathlib import Path

from sqlalchemy.orm import Session

from services.options.app.core.errors import OptionAlreadyExistsError
from services.options.app.db import session_scope
from services.options.app.models.catalog import get_option_kind
from services.options.app.schemas.options import OptionCreate
from services.options.app.services.options import OptionService


def seed(session: Session, data: dict[str, list[dict]]) -> dict[str, dict[str, int]]:
    """Create missing options per kind; returns created/skipped counts by kind."""
    summary: dict[str, dict[str, int]] = {}
    for slug, entries in data.items():
        service = OptionService(session, get_option_kind(slug))
        counts = {"created": 0, "skipped": 0}
        for entry in entries:
            payload = OptionCreate.model_validate(entry)
            if service.repository.exists_by_name(payload.name):
                counts["skipped"] += 1
                continue
            try:
                service.create(payload)
            except OptionAlreadyExistsError:
                # Inserted concurrently by another writer
                counts["skipped"] += 1
            else:
                counts["created"] += 1
        summary[slug] = counts
    return summary


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    path = Path(args[0] if args else os.getenv("SEED_FILE", "options.json"))
    data = json.loads(path.read_text(encoding="utf-8"))

    with session_scope() as session:
        summary = seed(session, data)

    for slug, counts in summary.items():
        print(f"{slug}: created {counts['created']}, skipped {counts['skipped']}")
    total = sum(c["created"] for c in summary.values())
    print(f"Seeded {total} options across {len(summary)} kinds from {path}")


if __name__ == "__main__":
    main()
