"""Selects the N processes with the highest resident memory from a snapshot."""

import numpy as np

from topmem.models import ProcessSample


class TopNSelector:
    """Stable ascending sort on resident memory, then keep the last N.

    Equal resident sizes keep the order the source produced them in.
    """

    def select(self, snapshot: list[ProcessSample], n: int) -> list[ProcessSample]:
        if n < 1:
            raise ValueError(f"Number of processes must be at least 1, got {n}")
        if not snapshot:
            return []
        resident = np.fromiter((s.resident_kb for s in snapshot), dtype=np.int64, count=len(snapshot))
        order = np.argsort(resident, kind="stable")[-n:]
        return [snapshot[i] for i in order]
