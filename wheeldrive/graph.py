"""Rolling window of profile samples for plotting."""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Tuple

from .tuning import DEFAULT_GRAPH_SIZE, ProfileData, ProfileDataType

__all__ = ["DataGraph"]


class DataGraph:
    """Keeps the latest ``window_size`` samples while updates are enabled."""

    def __init__(self, window_size: int = DEFAULT_GRAPH_SIZE) -> None:
        self.window_size = window_size
        self.can_update = False
        self.visible: Dict[ProfileDataType, bool] = {t: False for t in ProfileDataType}
        self._values: Deque[ProfileData] = deque(maxlen=window_size)

    def __len__(self) -> int:
        return len(self._values)

    def add_data_point(self, data: ProfileData) -> None:
        """Append a sample, dropping the oldest when full; ignored while paused."""
        if self.can_update:
            self._values.append(data)

    def series(self, data_type: ProfileDataType) -> List[Tuple[float, float]]:
        """Points ``(index, value)`` of one quantity over the window."""
        return [(float(i), data.value(data_type)) for i, data in enumerate(self._values)]

    def toggle_updates(self) -> bool:
        """Pause or resume recording; return whether recording is now on."""
        self.can_update = not self.can_update
        return self.can_update

    def reset(self) -> None:
        """Drop all recorded samples."""
        self._values.clear()