"""
Landmark geometry helpers and input validation for the gesture classifier.
"""
import logging
import math
from numbers import Real
from typing import List, Sequence

from .constants import HAND_LANDMARK_COUNT, WRIST, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP
from .types import Landmark

logger = logging.getLogger(__name__)

# Only these points feed the classifier
CLASSIFIER_INDICES = (WRIST, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)


def distance_2d(a: Landmark, b: Landmark) -> float:
    """Euclidean distance between two landmarks in normalized image space, ignoring depth."""
    return math.hypot(a.x - b.x, a.y - b.y)


def is_valid_hand(hand: Sequence[Landmark]) -> bool:
    """
    Check that a hand can be classified.

    A hand needs the full set of 21 landmarks and finite coordinates
    on every point the classifier reads.
    """
    if not isinstance(hand, Sequence) or len(hand) < HAND_LANDMARK_COUNT:
        return False
    for idx in CLASSIFIER_INDICES:
        x = getattr(hand[idx], "x", None)
        y = getattr(hand[idx], "y", None)
        if not (isinstance(x, Real) and isinstance(y, Real)):
            return False
        if not (math.isfinite(x) and math.isfinite(y)):
            return False
    return True


def usable_hands(hands: Sequence[Sequence[Landmark]]) -> List[Sequence[Landmark]]:
    """
    Reduce detector output to at most two classifiable hands.

    One malformed hand spoils the whole frame, which is then treated as
    having no hands at all.

    Args:
        hands: Raw hands from the detector (any count, possibly malformed)

    Returns:
        The first two hands in detector order, or [] if any hand is malformed
    """
    if not isinstance(hands, Sequence) or not hands:
        return []

    if not all(is_valid_hand(hand) for hand in hands):
        logger.debug(f"Malformed landmarks in a {len(hands)}-hand frame, treating as no hands")
        return []
    if len(hands) > 2:
        logger.debug(f"Detector reported {len(hands)} hands, using the first two")
    return list(hands[:2])
