from abc import ABC, abstractmethod
from typing import List, Sequence

from .models import ImageAsset


class ISnapshotRepository(ABC):
    @abstractmethod
    def load(self) -> List[ImageAsset]:
        """Return the persisted collection, or an empty list when none is usable"""
        pass

    @abstractmethod
    def save(self, assets: Sequence[ImageAsset]) -> bool:
        """Overwrite the persisted collection; return False if the write failed"""
        pass
