"""
Mock renderer implementation for exercising the transform pipeline.
"""
from typing import Optional

from .types import AtomHit, GestureState, GestureType, TransformSnapshot


class MockRenderer:
    """Mock renderer that prints transform changes instead of drawing them."""

    def __init__(self, verbose: bool = False):
        """Initialize the mock renderer."""
        self.verbose = verbose
        self.frame_count = 0
        self.last_snapshot: Optional[TransformSnapshot] = None
        self.last_hit: Optional[AtomHit] = None

    async def render(self, snapshot: TransformSnapshot, gesture: GestureState,
                     hit: Optional[AtomHit]) -> None:
        """Record the frame and print gesture-driven changes."""
        self.frame_count += 1
        self.last_snapshot = snapshot

        if gesture.type != GestureType.NONE or self.verbose:
            qx, qy, qz, qw = snapshot.orientation
            print(f"[MockRenderer] {gesture.type.value}: "
                  f"quat=({qx:.3f}, {qy:.3f}, {qz:.3f}, {qw:.3f}) scale={snapshot.scale:.3f} "
                  f"(frame #{self.frame_count})")

        hit_id = hit.atom.id if hit else None
        last_id = self.last_hit.atom.id if self.last_hit else None
        if hit_id != last_id and hit is not None:
            print(f"[MockRenderer] Hover: {hit.atom.element} - {hit.atom.id} "
                  f"{hit.atom.residue} {hit.atom.res_seq}")
        self.last_hit = hit

    def reset_counters(self) -> None:
        """Reset frame counter for testing."""
        self.frame_count = 0
