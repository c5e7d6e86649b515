"""Catalog source reading a JSON track list from disk."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from song_timeline.application.interfaces.catalog_source import CatalogSource
from song_timeline.domain.game.catalog import Catalog, Track
from song_timeline.domain.shared.exceptions import ValidationError
from song_timeline.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

_TRACK_LIST = TypeAdapter(list[Track])


class JsonFileCatalogSource(CatalogSource):
    """Loads ``[{"id", "uri", "title", "artist", "year"}, ...]`` from a file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> Catalog:
        if not self._path.is_file():
            raise ValidationError(
                ErrorMessages.CATALOG_PATH_MISSING.format(path=self._path), field="catalog_path"
            )

        raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("top-level value is not a list")
            tracks = _TRACK_LIST.validate_python(data, strict=False)
        except (ValueError, PydanticValidationError) as e:
            raise ValidationError(
                ErrorMessages.CATALOG_FILE_INVALID.format(path=self._path), field="catalog_path"
            ) from e

        catalog = Catalog.from_tracks(tracks)
        logger.info(LogTemplates.CATALOG_LOADED, len(catalog), self._path)
        return catalog
