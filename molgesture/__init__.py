"""
Gesture-Driven Molecule Viewer

Reads webcam frames, detects hand landmarks using MediaPipe, classifies
grip / two-hand zoom / point gestures and accumulates them into a smoothed
orientation and scale for a 3D molecule.
"""

__version__ = "0.1.0"
__author__ = "Molecule Gesture Viewer Team"

from .types import (
    Landmark,
    LandmarkFrame,
    Vec2,
    GestureType,
    GestureState,
    ClassifierMemory,
    TransformSnapshot,
    Atom,
    MoleculeData,
    AtomHit,
    ChatMessage,
    RendererProto,
    PointerResolverProto,
)
from .config import load_config, Cfg
from .gestures import GestureClassifier, classify_frame, finger_pose, EMPTY_MEMORY
from .transform import TransformAccumulator
from .pointer import RaySphereResolver
from .structure import StructureError, fetch_pdb, parse_pdb, load_pdb_file
from .renderer_mock import MockRenderer

__all__ = [
    "Landmark",
    "LandmarkFrame",
    "Vec2",
    "GestureType",
    "GestureState",
    "ClassifierMemory",
    "TransformSnapshot",
    "Atom",
    "MoleculeData",
    "AtomHit",
    "ChatMessage",
    "RendererProto",
    "PointerResolverProto",
    "load_config",
    "Cfg",
    "GestureClassifier",
    "classify_frame",
    "finger_pose",
    "EMPTY_MEMORY",
    "TransformAccumulator",
    "RaySphereResolver",
    "StructureError",
    "fetch_pdb",
    "parse_pdb",
    "load_pdb_file",
    "MockRenderer",
]
