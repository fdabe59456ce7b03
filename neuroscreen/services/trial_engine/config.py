"""Trial Engine configuration and the default color palette."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ColorOption:
    """A palette entry. Identity is the name; hex is for display only."""
    name: str
    hex: str


DEFAULT_PALETTE: Tuple[ColorOption, ...] = (
    ColorOption("RED", "#FF0000"),
    ColorOption("GREEN", "#00FF00"),
    ColorOption("BLUE", "#0000FF"),
    ColorOption("YELLOW", "#FFFF00"),
    ColorOption("PURPLE", "#800080"),
    ColorOption("ORANGE", "#FFA500"),
)


@dataclass(frozen=True)
class TrialConfig:
    """Configuration for one executive-function test run."""
    trial_count: int = 20
    palette: Tuple[ColorOption, ...] = DEFAULT_PALETTE

    # Gap between a response and the next stimulus (milliseconds)
    inter_trial_delay_ms: int = 500

    def __post_init__(self):
        if self.trial_count <= 0:
            raise ValueError(f"Trial count must be positive, got {self.trial_count}")
        if not self.palette:
            raise ValueError("Palette must contain at least one color")
        if self.inter_trial_delay_ms < 0:
            raise ValueError(
                f"Inter-trial delay must be >= 0, got {self.inter_trial_delay_ms}"
            )
