"""
Sample data loader for the catalogue.

``load_sample_catalog`` fills a repository from a JSON document so a
fresh process has something to show. The bundled file
``app/data/sample_catalog.json`` also carries records in the older
shape (description only in the content body, a free-text ``author``
name, ids pointing at authors that no longer exist) so the read-time
reconciliation in the service has real data to work on.

Expected format::

    {
      "authors": [{"id": 1, "name": "Jane Austen"}],
      "books": [{"title": "Emma", "author_ids": [1], ...}]
    }

Author ids in the file are local references. They are remapped to the
ids the repository assigns; references to authors missing from the
file are stored as ``0``, which never resolves.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..storage import Repository


logger = logging.getLogger(__name__)

DATA_FILE = Path(__file__).resolve().parents[1] / "data" / "sample_catalog.json"


def _text(value) -> str:
    return str(value).strip() if value not in (None, "") else ""


def load_sample_catalog(repository: Repository, path: Optional[Path] = None) -> Tuple[int, int]:
    """Load authors and books from ``path`` into ``repository``.

    Parameters
    ----------
    repository : Repository
        Destination for the records.
    path : Optional[Path]
        JSON file to read. Defaults to the bundled sample file.

    Returns
    -------
    Tuple[int, int]
        Number of authors and books created. A missing or malformed
        file is logged and loads nothing.
    """
    source = Path(path) if path is not None else DATA_FILE
    try:
        with source.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Could not read sample catalogue %s: %s", source, exc)
        return 0, 0
    if not isinstance(raw, dict):
        logger.error("Sample catalogue %s is not a JSON object", source)
        return 0, 0

    id_map: Dict[int, int] = {}
    authors_loaded = 0
    for entry in raw.get("authors") or []:
        name = _text(entry.get("name")) if isinstance(entry, dict) else ""
        if not name:
            logger.warning("Skipping sample author without a name: %r", entry)
            continue
        record = repository.create("author", {"name": name})
        try:
            id_map[int(entry.get("id"))] = record.id
        except (TypeError, ValueError):
            pass
        authors_loaded += 1

    books_loaded = 0
    for entry in raw.get("books") or []:
        title = _text(entry.get("title")) if isinstance(entry, dict) else ""
        if not title:
            logger.warning("Skipping sample book without a title: %r", entry)
            continue
        local_ids = entry.get("author_ids")
        if not isinstance(local_ids, list):
            local_ids = [local_ids] if local_ids else []
        author_ids = []
        for local in local_ids:
            try:
                author_ids.append(id_map.get(int(local), 0))
            except (TypeError, ValueError):
                continue
        repository.create(
            "book",
            {
                "title": title,
                "description": _text(entry.get("description")),
                "content": _text(entry.get("content")),
                "isbn": _text(entry.get("isbn")),
                "publication_year": _text(entry.get("publication_year")),
                "author_ids": author_ids,
                "legacy_author": _text(entry.get("author")),
            },
        )
        books_loaded += 1

    logger.info(
        "Loaded %d authors and %d books from %s", authors_loaded, books_loaded, source
    )
    return authors_loaded, books_loaded
