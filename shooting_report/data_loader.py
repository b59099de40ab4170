from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Optional, Union

import pandas as pd
import requests

from .config import settings
from .errors import SourceUnavailable

logger = logging.getLogger(__name__)


def _is_remote(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def _read_table(source: Union[str, IO[str]], label: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(source, dtype=str)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise SourceUnavailable(f"Could not read incident table from {label}: {exc}") from exc
    df.columns = [str(col).strip() for col in df.columns]
    return df


@dataclass
class ShootingDataRepository:
    source: str = settings.DATASET_URL
    local_copy: Optional[str] = None
    timeout_seconds: float = settings.REQUEST_TIMEOUT
    cache_ttl_seconds: int = int(settings.CACHE_TTL.total_seconds())

    def __post_init__(self) -> None:
        self._cache: Optional[pd.DataFrame] = None
        self._cache_timestamp: Optional[datetime] = None

    def load(self, force: bool = False) -> pd.DataFrame:
        now = datetime.now(timezone.utc)
        if (
            not force
            and self._cache is not None
            and self._cache_timestamp is not None
            and (now - self._cache_timestamp).total_seconds() < self.cache_ttl_seconds
        ):
            return self._cache

        df = self._fetch()
        logger.info("Loaded %d raw incident rows", len(df))
        self._cache = df
        self._cache_timestamp = now
        return df

    def refresh(self) -> pd.DataFrame:
        return self.load(force=True)

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._cache_timestamp

    def _fetch(self) -> pd.DataFrame:
        if self.local_copy and Path(self.local_copy).exists():
            logger.info("Reading local copy %s", self.local_copy)
            return _read_table(self.local_copy, self.local_copy)

        if not _is_remote(self.source):
            return _read_table(self.source, self.source)

        text = self._download()
        if self.local_copy:
            self._save_local_copy(text)
        return _read_table(io.StringIO(text), self.source)

    def _save_local_copy(self, text: str) -> None:
        path = Path(self.local_copy)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save local copy to %s: %s", path, exc)
            return
        logger.info("Saved downloaded dataset to %s", path)

    def _download(self) -> str:
        logger.info("Downloading incident dataset from %s", self.source)
        try:
            response = requests.get(self.source, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailable(f"Could not download {self.source}: {exc}") from exc
        return response.text
