"""Game configuration and filesystem locations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"

SUPPORTED_SIZES: tuple[int, ...] = (3, 4, 5, 6)
DEFAULT_SIZE = 4


@dataclass(frozen=True)
class GameConfig:
    supported_sizes: tuple[int, ...] = SUPPORTED_SIZES
    default_size: int = DEFAULT_SIZE
    tick_interval_ms: int = 120
    max_shuffle_attempts: int = 1000
    data_dir: Path = field(default=DATA_DIR)
    storage_file: str = "storage.json"
    key_prefix: str = "retro15"
    log_file: str = "retro15.log"

    def __post_init__(self) -> None:
        if not self.supported_sizes or min(self.supported_sizes) < 2:
            raise ValueError("Supported sizes must all be at least 2.")
        if self.default_size not in self.supported_sizes:
            raise ValueError(
                f"Default size {self.default_size} is not one of "
                f"{', '.join(map(str, self.supported_sizes))}."
            )
        if self.tick_interval_ms <= 0:
            raise ValueError("Tick interval must be positive.")

    @property
    def storage_path(self) -> Path:
        return self.data_dir / self.storage_file

    @property
    def log_path(self) -> Path:
        return self.data_dir / self.log_file
