from __future__ import annotations
from dataclasses import dataclass
import random

@dataclass
class FaultConfig:
    delay_ms: int = 0           # add delay before responding
    drop_rate: float = 0.0      # 0.0..1.0
    corrupt_rate: float = 0.0   # 0.0..1.0, breaks the reply magic
    truncate_rate: float = 0.0  # 0.0..1.0, cuts the reply mid-field

    @property
    def delay_s(self) -> float:
        return self.delay_ms / 1000.0

    def should_drop(self) -> bool:
        return self.drop_rate > 0 and random.random() < self.drop_rate

    def should_corrupt(self) -> bool:
        return self.corrupt_rate > 0 and random.random() < self.corrupt_rate

    def should_truncate(self) -> bool:
        return self.truncate_rate > 0 and random.random() < self.truncate_rate

    def clear(self) -> None:
        self.delay_ms = 0
        self.drop_rate = 0.0
        self.corrupt_rate = 0.0
        self.truncate_rate = 0.0
