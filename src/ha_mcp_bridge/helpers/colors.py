#!/usr/bin/env python3
"""
Color name classification for RGB light states
Maps an RGB triple to the nearest friendly color name in a fixed palette
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class ReferenceColor:
    """A named palette entry with its own match radius"""
    name: str
    rgb: Tuple[int, int, int]
    tolerance: float

    def distance(self, rgb: Sequence[int]) -> float:
        """Euclidean distance in RGB space"""
        return math.sqrt(sum((a - b) ** 2 for a, b in zip(self.rgb, rgb)))

    def matches(self, rgb: Sequence[int]) -> bool:
        return self.distance(rgb) <= self.tolerance


# Order matters: the first entry within tolerance wins, even when a later
# entry is closer. Whites are tight so saturated colors never land on them.
PALETTE: Tuple[ReferenceColor, ...] = (
    ReferenceColor("White", (255, 255, 255), 30),
    ReferenceColor("Warm White", (255, 214, 170), 35),
    ReferenceColor("Red", (255, 0, 0), 60),
    ReferenceColor("Orange", (255, 165, 0), 45),
    ReferenceColor("Yellow", (255, 255, 0), 50),
    ReferenceColor("Green", (0, 255, 0), 60),
    ReferenceColor("Cyan", (0, 255, 255), 50),
    ReferenceColor("Blue", (0, 0, 255), 60),
    ReferenceColor("Purple", (128, 0, 128), 50),
    ReferenceColor("Pink", (255, 192, 203), 40),
)


def classify_rgb(rgb: Sequence[int], palette: Sequence[ReferenceColor] = PALETTE) -> Optional[str]:
    """
    Get a friendly color name for an RGB triple

    Args:
        rgb: Three 0-255 components
        palette: Reference colors, checked in order

    Returns:
        Name of the first palette entry within its tolerance, or None
    """
    if len(rgb) != 3:
        raise ValueError(f"RGB color must have exactly 3 components, got {len(rgb)}")

    for color in palette:
        if color.matches(rgb):
            return color.name
    return None
