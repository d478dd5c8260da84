"""
Type definitions for the gesture-driven molecule viewer.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Protocol, Tuple, runtime_checkable


@dataclass(frozen=True)
class Landmark:
    """A single hand landmark in normalized image coordinates plus relative depth."""
    x: float
    y: float
    z: float = 0.0


# One hand is an ordered list of 21 landmarks
Hand = List[Landmark]


@dataclass
class LandmarkFrame:
    """Landmarks for every hand detected in one camera frame (0-2 hands)."""
    hands: List[Hand] = field(default_factory=list)


@dataclass(frozen=True)
class Vec2:
    """Two-component vector."""
    x: float = 0.0
    y: float = 0.0


class GestureType(str, Enum):
    """Mutually exclusive interaction modes."""
    NONE = "NONE"
    GRIP = "GRIP"              # rotate
    PINCH_ZOOM = "PINCH_ZOOM"  # scale
    POINT = "POINT"            # inspect


@dataclass(frozen=True)
class GestureState:
    """Complete per-frame gesture snapshot."""
    type: GestureType = GestureType.NONE
    rotation_delta: Vec2 = Vec2()    # this frame only, zero unless GRIP
    scale_factor: float = 1.0        # 1.0 is neutral
    pointer_position: Vec2 = Vec2()  # normalized device coordinates (-1..1)
    hand_present: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "type": self.type.value,
            "rotation_delta": {"x": self.rotation_delta.x, "y": self.rotation_delta.y},
            "scale_factor": self.scale_factor,
            "pointer_position": {"x": self.pointer_position.x, "y": self.pointer_position.y},
            "hand_present": self.hand_present,
        }


@dataclass(frozen=True)
class ClassifierMemory:
    """Cross-frame memory carried between classifier calls."""
    previous_wrist: Optional[Vec2] = None            # last GRIP wrist position
    previous_pinch_distance: Optional[float] = None  # last inter-wrist distance


@dataclass(frozen=True)
class FingerPose:
    """Extended/curled flags for the four non-thumb fingers."""
    index_extended: bool
    index_curled: bool
    middle_curled: bool
    ring_curled: bool
    pinky_curled: bool


@dataclass(frozen=True)
class TransformSnapshot:
    """Read-only view of the accumulated object transform."""
    orientation: Tuple[float, float, float, float]  # quaternion (x, y, z, w)
    scale: float


@dataclass
class Atom:
    """One ATOM/HETATM record."""
    id: int
    name: str
    element: str
    residue: str
    res_seq: int
    x: float
    y: float
    z: float


@dataclass
class MoleculeData:
    """Atoms of a structure and their geometric center."""
    atoms: List[Atom]
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class AtomHit:
    """Nearest atom under the pointer ray."""
    index: int
    atom: Atom
    distance: float
    local_position: Tuple[float, float, float]  # position relative to the molecule center


@dataclass
class ChatMessage:
    """One turn of the assistant conversation."""
    role: Literal["user", "model"]
    text: str
    is_error: bool = False


@runtime_checkable
class RendererProto(Protocol):
    """Abstract protocol for renderers that consume the accumulated transform."""

    async def render(self, snapshot: TransformSnapshot, gesture: GestureState,
                     hit: Optional[AtomHit]) -> None:
        """Draw the molecule with the given transform and hovered atom."""
        ...


@runtime_checkable
class PointerResolverProto(Protocol):
    """Abstract protocol for hit-testing a pointer against the rendered molecule."""

    def resolve(self, pointer_ndc: Vec2, molecule: MoleculeData,
                snapshot: TransformSnapshot) -> Optional[AtomHit]:
        """Return the nearest atom under the pointer, or None."""
        ...
