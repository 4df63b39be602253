"""
Input-fingerprinted result cache

One slot per entry point. A call whose inputs fingerprint differently from
the cached ones clears that slot before computing.
"""
import copy
import hashlib
import json
from typing import Any, Callable, Dict, Optional, Tuple

from utils.logger import get_logger

logger = get_logger(__name__)


def fingerprint(payload: Any) -> str:
    """SHA-256 of the canonical JSON form of the inputs"""
    canonical = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()


class AnalyticsCache:
    """Clear-on-input-change cache for analytics results"""

    def __init__(self):
        self._slots: Dict[str, Tuple[str, Any]] = {}
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, name: str, inputs: Any, compute: Callable[[], Any]) -> Any:
        """
        Return the cached result for `name` when inputs are unchanged.

        Args:
            name: Entry point name
            inputs: JSON-serializable inputs identifying the call
            compute: Zero-argument function producing the result

        Returns:
            A deep copy of the result; inputs that cannot be fingerprinted
            are computed without caching
        """
        try:
            key = fingerprint(inputs)
        except (TypeError, ValueError) as e:
            logger.warning(f"Cannot fingerprint inputs for {name}, computing without cache: {e}")
            self.misses += 1
            return compute()

        slot = self._slots.get(name)

        if slot is not None and slot[0] == key:
            self.hits += 1
            return copy.deepcopy(slot[1])

        if slot is not None:
            logger.debug(f"Inputs changed for {name}, invalidating cached result")
        self.misses += 1
        result = compute()
        self._slots[name] = (key, copy.deepcopy(result))
        return result

    def invalidate(self, name: Optional[str] = None) -> None:
        """Drop one slot, or every slot when name is None"""
        if name is None:
            self._slots.clear()
        else:
            self._slots.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return name in self._slots

    def __len__(self) -> int:
        return len(self._slots)
