from __future__ import annotations

import asyncio
from typing import Iterable, List, Tuple

from rapidfuzz import fuzz, process
from rapidfuzz.utils import default_process

SCORE_CUTOFF = 70


class AutocompleteIndex:
    """Fuzzy lookup over a fixed list of names.

    Built once; never mutated afterwards, so any number of callers may query it
    concurrently.
    """

    def __init__(self, names: Iterable[str], *, score_cutoff: float = SCORE_CUTOFF) -> None:
        self._names: Tuple[str, ...] = tuple(names)
        self._score_cutoff = score_cutoff

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def __len__(self) -> int:
        return len(self._names)

    def lookup(self, partial: str) -> List[str]:
        query = (partial or "").strip()
        if not query:
            return list(self._names)

        results = process.extract(
            query,
            self._names,
            scorer=fuzz.WRatio,
            processor=default_process,
            limit=None,
            score_cutoff=self._score_cutoff,
        )
        # best score first; ties go to the shorter name, then to stored order
        results.sort(key=lambda r: (-r[1], len(r[0]), r[2]))
        return [name for name, _score, _idx in results]

    async def lookup_async(self, partial: str) -> List[str]:
        """Run :meth:`lookup` in a worker thread to keep the event loop free."""
        if not (partial or "").strip():
            return list(self._names)
        return await asyncio.to_thread(self.lookup, partial)

