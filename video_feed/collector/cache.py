"""In-memory cache of finished batches keyed by category and pagination token."""

from typing import Dict, List, Optional, Tuple

from video_feed.models.video import VideoRecord

CacheKey = Tuple[str, str]


class ResponseCache:
    """
    Session-lifetime mapping from ``(category, after-token or "start")`` to a batch.

    Entries are never evicted. Only non-empty batches are stored.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, Tuple[VideoRecord, ...]] = {}

    def get(self, key: CacheKey) -> Optional[List[VideoRecord]]:
        batch = self._entries.get(key)
        if batch is None:
            return None
        return list(batch)

    def put(self, key: CacheKey, batch: List[VideoRecord]) -> None:
        """
        Store a finished batch.

        Raises:
            ValueError: If the batch is empty
        """
        if not batch:
            raise ValueError(f"Refusing to cache an empty batch for {key}")
        self._entries[key] = tuple(batch)

    def keys(self) -> List[CacheKey]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
