"""Feature usage registry shared by the batch job utilities."""
import threading
from typing import Dict


class FeatureUsageRegistry:
    """
    Thread-safe counter of utility usage.
    
    The registry is rendered into the User-Agent header of outgoing requests
    so the API can attribute traffic to client-side utilities.
    
    Example:
        >>> registry = FeatureUsageRegistry()
        >>> registry.mark_usage('BatchJobUtilities')
        >>> registry.text()
        'BatchJobUtilities=1'
    """
    
    def __init__(self):
        self._lock = threading.Lock()
        self._usage: Dict[str, int] = {}
    
    def mark_usage(self, feature_id: str) -> None:
        """Record one use of a feature."""
        with self._lock:
            self._usage[feature_id] = self._usage.get(feature_id, 0) + 1
    
    def usage(self, feature_id: str) -> int:
        """Returns how many times a feature was marked."""
        with self._lock:
            return self._usage.get(feature_id, 0)
    
    def clear(self) -> None:
        """Forget all recorded usage."""
        with self._lock:
            self._usage.clear()
    
    def text(self) -> str:
        """Render usage as 'Feature=count,...' sorted by feature id."""
        with self._lock:
            return ','.join(
                f"{feature}={count}" for feature, count in sorted(self._usage.items())
            )
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._usage)
