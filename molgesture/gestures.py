"""
Gesture classification that turns per-frame hand landmarks into gesture states.
"""
import logging
from typing import Dict, Optional, Sequence, Tuple

from .config import Cfg, ClassifierConfig
from .constants import WRIST, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP
from .landmarks import distance_2d, usable_hands
from .types import ClassifierMemory, FingerPose, GestureState, GestureType, Landmark, Vec2

logger = logging.getLogger(__name__)

FINGER_TIPS = {
    "index": INDEX_TIP,
    "middle": MIDDLE_TIP,
    "ring": RING_TIP,
    "pinky": PINKY_TIP,
}

# Fresh memory, also used after hand loss
EMPTY_MEMORY = ClassifierMemory()


def finger_distances(hand: Sequence[Landmark]) -> Dict[str, float]:
    """
    Wrist-to-fingertip distances for the four non-thumb fingers.

    Args:
        hand: List of 21 hand landmarks

    Returns:
        Mapping of finger name to normalized image-space distance
    """
    wrist = hand[WRIST]
    return {name: distance_2d(wrist, hand[tip]) for name, tip in FINGER_TIPS.items()}


def finger_pose(hand: Sequence[Landmark], cfg: ClassifierConfig) -> FingerPose:
    """
    Classify each finger as extended and/or curled against the configured thresholds.

    A finger between the curl and extension thresholds is neither.
    """
    d = finger_distances(hand)
    return FingerPose(
        index_extended=d["index"] > cfg.extension_threshold,
        index_curled=d["index"] < cfg.curl_threshold,
        middle_curled=d["middle"] < cfg.curl_threshold,
        ring_curled=d["ring"] < cfg.curl_threshold,
        pinky_curled=d["pinky"] < cfg.curl_threshold,
    )


def is_grip(pose: FingerPose) -> bool:
    """Closed fist: index not extended, middle/ring/pinky curled."""
    return (not pose.index_extended and pose.middle_curled
            and pose.ring_curled and pose.pinky_curled)


def is_point(pose: FingerPose) -> bool:
    """Index extended with middle and ring curled. Pinky is not checked."""
    return pose.index_extended and pose.middle_curled and pose.ring_curled


def pointer_from_tip(tip: Landmark) -> Vec2:
    """Map a fingertip in mirrored image space to normalized device coordinates."""
    return Vec2(
        x=(1.0 - tip.x) * 2.0 - 1.0,
        y=-(tip.y * 2.0 - 1.0),
    )


def classify_frame(hands: Sequence[Sequence[Landmark]], memory: ClassifierMemory,
                   cfg: ClassifierConfig) -> Tuple[GestureState, ClassifierMemory]:
    """
    Classify one frame of hand landmarks.

    Checks run in a fixed order: no hands, two hands, one hand. Two-hand
    zoom always wins over any one-hand interpretation.

    Args:
        hands: Detected hands for this frame, each a list of 21 landmarks
        memory: Memory returned by the previous call (EMPTY_MEMORY at start)
        cfg: Thresholds and sensitivities

    Returns:
        Tuple of (gesture_state, new_memory)
    """
    hands = usable_hands(hands)

    # No hands: forget everything so a reacquired hand starts clean
    if not hands:
        return GestureState(type=GestureType.NONE, hand_present=False), EMPTY_MEMORY

    # Two hands: zoom on inter-wrist distance
    if len(hands) == 2:
        distance = distance_2d(hands[0][WRIST], hands[1][WRIST])
        scale_factor = 1.0
        if memory.previous_pinch_distance is not None:
            scale_factor = 1.0 + (distance - memory.previous_pinch_distance) * cfg.zoom_sensitivity

        state = GestureState(
            type=GestureType.PINCH_ZOOM,
            scale_factor=scale_factor,
            hand_present=True,
        )
        return state, ClassifierMemory(previous_wrist=None, previous_pinch_distance=distance)

    # One hand: finger pose decides between grip, point and nothing
    hand = hands[0]
    pose = finger_pose(hand, cfg)
    wrist = hand[WRIST]

    if is_grip(pose):
        current = Vec2(wrist.x, wrist.y)
        rotation = Vec2()
        if memory.previous_wrist is not None:
            dx = current.x - memory.previous_wrist.x
            dy = current.y - memory.previous_wrist.y
            # Camera image is mirrored, so horizontal motion is inverted
            rotation = Vec2(x=-dx * cfg.rotation_sensitivity, y=dy * cfg.rotation_sensitivity)

        state = GestureState(
            type=GestureType.GRIP,
            rotation_delta=rotation,
            hand_present=True,
        )
        return state, ClassifierMemory(previous_wrist=current, previous_pinch_distance=None)

    if is_point(pose):
        state = GestureState(
            type=GestureType.POINT,
            pointer_position=pointer_from_tip(hand[INDEX_TIP]),
            hand_present=True,
        )
        return state, EMPTY_MEMORY

    return GestureState(type=GestureType.NONE, hand_present=True), EMPTY_MEMORY


class GestureClassifier:
    """
    Frame-loop wrapper around classify_frame that owns the classifier memory.
    """

    def __init__(self, cfg: Cfg):
        """Initialize gesture classifier with configuration."""
        self.cfg = cfg
        self._memory = EMPTY_MEMORY
        self._last_type: Optional[GestureType] = None

    @property
    def memory(self) -> ClassifierMemory:
        """Memory that will be used for the next frame."""
        return self._memory

    def update(self, hands: Sequence[Sequence[Landmark]]) -> GestureState:
        """
        Classify the current frame and advance the memory.

        Args:
            hands: Detected hands for this frame

        Returns:
            GestureState for this frame
        """
        state, self._memory = classify_frame(hands, self._memory, self.cfg.classifier)

        if state.type != self._last_type:
            logger.debug(f"Gesture changed: {self._last_type} -> {state.type.value}")
            self._last_type = state.type

        return state

    def reset(self) -> None:
        """Forget wrist and pinch history."""
        self._memory = EMPTY_MEMORY
        self._last_type = None
