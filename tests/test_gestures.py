"""
Test cases for gesture classification with synthetic hand landmarks.
"""
import math
import unittest
from typing import Dict, List, Tuple
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from molgesture.gestures import (
    EMPTY_MEMORY,
    GestureClassifier,
    classify_frame,
    finger_pose,
    is_grip,
    is_point,
    pointer_from_tip,
)
from molgesture.types import ClassifierMemory, GestureType, Landmark, Vec2
from molgesture.config import load_config


# Fingertip offsets from the wrist (dx, dy)
FIST = {8: (0.0, -0.15), 12: (0.0, -0.1), 16: (0.02, -0.1), 20: (0.04, -0.09)}
POINTING = {8: (0.0, -0.3), 12: (0.0, -0.1), 16: (0.02, -0.1), 20: (0.04, -0.09)}
POINTING_PINKY_OUT = {8: (0.0, -0.3), 12: (0.0, -0.1), 16: (0.02, -0.1), 20: (0.1, -0.28)}
OPEN_PALM = {8: (0.0, -0.3), 12: (0.0, -0.32), 16: (0.05, -0.3), 20: (0.1, -0.27)}


def make_hand(wrist: Tuple[float, float], tips: Dict[int, Tuple[float, float]]) -> List[Landmark]:
    """
    Create 21 landmarks with every point at the wrist except the given fingertips.

    Args:
        wrist: Wrist position in [0..1] image space
        tips: Landmark index -> offset from the wrist

    Returns:
        List of 21 landmarks
    """
    wx, wy = wrist
    hand = [Landmark(wx, wy, 0.0) for _ in range(21)]
    for idx, (dx, dy) in tips.items():
        hand[idx] = Landmark(wx + dx, wy + dy, 0.0)
    return hand


def two_hands(distance: float, y: float = 0.5) -> List[List[Landmark]]:
    """Two fists whose wrists are the given distance apart, centered horizontally."""
    return [
        make_hand((0.5 - distance / 2, y), FIST),
        make_hand((0.5 + distance / 2, y), FIST),
    ]


class TestFingerPose(unittest.TestCase):
    """Test finger pose thresholds."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config().classifier

    def test_fist_is_grip(self):
        pose = finger_pose(make_hand((0.5, 0.5), FIST), self.cfg)
        self.assertFalse(pose.index_extended)
        self.assertTrue(pose.middle_curled and pose.ring_curled and pose.pinky_curled)
        self.assertTrue(is_grip(pose))
        self.assertFalse(is_point(pose))

    def test_point_ignores_pinky(self):
        """POINT holds whether the pinky is curled or extended."""
        for tips in (POINTING, POINTING_PINKY_OUT):
            pose = finger_pose(make_hand((0.5, 0.5), tips), self.cfg)
            self.assertTrue(is_point(pose))
            self.assertFalse(is_grip(pose))

    def test_open_palm_is_neither(self):
        pose = finger_pose(make_hand((0.5, 0.5), OPEN_PALM), self.cfg)
        self.assertFalse(is_grip(pose))
        self.assertFalse(is_point(pose))

    def test_finger_between_thresholds(self):
        """A finger between curl and extension thresholds is neither extended nor curled."""
        tips = dict(FIST)
        tips[12] = (0.0, -0.22)
        pose = finger_pose(make_hand((0.5, 0.5), tips), self.cfg)
        self.assertFalse(pose.middle_curled)
        self.assertFalse(is_grip(pose))


class TestClassifyFrame(unittest.TestCase):
    """Test the pure classification function."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config().classifier

    def test_no_hands(self):
        memory = ClassifierMemory(previous_wrist=Vec2(0.5, 0.5), previous_pinch_distance=0.3)
        state, new_memory = classify_frame([], memory, self.cfg)

        self.assertEqual(state.type, GestureType.NONE)
        self.assertFalse(state.hand_present)
        self.assertEqual(new_memory, EMPTY_MEMORY)

    def test_grip_first_frame_has_no_rotation(self):
        state, memory = classify_frame([make_hand((0.5, 0.5), FIST)], EMPTY_MEMORY, self.cfg)

        self.assertEqual(state.type, GestureType.GRIP)
        self.assertEqual(state.rotation_delta, Vec2(0.0, 0.0))
        self.assertEqual(memory.previous_wrist, Vec2(0.5, 0.5))
        self.assertIsNone(memory.previous_pinch_distance)

    def test_grip_rotation_delta(self):
        """Second frame yields (-dx*S, dy*S)."""
        _, memory = classify_frame([make_hand((0.4, 0.6), FIST)], EMPTY_MEMORY, self.cfg)
        state, _ = classify_frame([make_hand((0.42, 0.57), FIST)], memory, self.cfg)

        s = self.cfg.rotation_sensitivity
        self.assertAlmostEqual(state.rotation_delta.x, -0.02 * s)
        self.assertAlmostEqual(state.rotation_delta.y, -0.03 * s)
        self.assertEqual(state.scale_factor, 1.0)

    def test_point_pointer_is_mirrored(self):
        hand = make_hand((0.3, 0.8), POINTING)  # index tip at (0.3, 0.5)
        state, memory = classify_frame([hand], ClassifierMemory(previous_wrist=Vec2(0.1, 0.1)), self.cfg)

        self.assertEqual(state.type, GestureType.POINT)
        self.assertTrue(state.hand_present)
        self.assertAlmostEqual(state.pointer_position.x, 0.4)
        self.assertAlmostEqual(state.pointer_position.y, 0.0)
        self.assertIsNone(memory.previous_wrist)

    def test_pointer_corners(self):
        top_left = pointer_from_tip(Landmark(0.0, 0.0))
        bottom_right = pointer_from_tip(Landmark(1.0, 1.0))
        self.assertEqual((top_left.x, top_left.y), (1.0, 1.0))
        self.assertEqual((bottom_right.x, bottom_right.y), (-1.0, -1.0))

    def test_unrecognized_pose_keeps_hand_present(self):
        memory = ClassifierMemory(previous_wrist=Vec2(0.5, 0.5))
        state, new_memory = classify_frame([make_hand((0.5, 0.7), OPEN_PALM)], memory, self.cfg)

        self.assertEqual(state.type, GestureType.NONE)
        self.assertTrue(state.hand_present)
        self.assertIsNone(new_memory.previous_wrist)

    def test_two_hands_first_frame_is_neutral(self):
        state, memory = classify_frame(two_hands(0.3), EMPTY_MEMORY, self.cfg)

        self.assertEqual(state.type, GestureType.PINCH_ZOOM)
        self.assertEqual(state.scale_factor, 1.0)
        self.assertAlmostEqual(memory.previous_pinch_distance, 0.3)
        self.assertIsNone(memory.previous_wrist)

    def test_two_hands_scale_factor(self):
        _, memory = classify_frame(two_hands(0.4), EMPTY_MEMORY, self.cfg)
        state, _ = classify_frame(two_hands(0.3), memory, self.cfg)

        k = self.cfg.zoom_sensitivity
        self.assertAlmostEqual(state.scale_factor, 1.0 - 0.1 * k)

    def test_two_hands_take_priority_over_pose(self):
        """Two pointing hands are still a zoom."""
        hands = [make_hand((0.3, 0.6), POINTING), make_hand((0.7, 0.6), POINTING)]
        state, _ = classify_frame(hands, EMPTY_MEMORY, self.cfg)
        self.assertEqual(state.type, GestureType.PINCH_ZOOM)

    def test_two_hands_clear_wrist_history(self):
        _, memory = classify_frame([make_hand((0.5, 0.5), FIST)], EMPTY_MEMORY, self.cfg)
        _, memory = classify_frame(two_hands(0.3), memory, self.cfg)
        state, _ = classify_frame([make_hand((0.6, 0.5), FIST)], memory, self.cfg)

        self.assertEqual(state.rotation_delta, Vec2(0.0, 0.0))

    def test_one_hand_clears_pinch_history(self):
        _, memory = classify_frame(two_hands(0.3), EMPTY_MEMORY, self.cfg)
        _, memory = classify_frame([make_hand((0.5, 0.5), OPEN_PALM)], memory, self.cfg)
        state, _ = classify_frame(two_hands(0.5), memory, self.cfg)

        self.assertEqual(state.scale_factor, 1.0)

    def test_more_than_two_hands_uses_first_two(self):
        hands = two_hands(0.3) + [make_hand((0.9, 0.9), FIST)]
        state, memory = classify_frame(hands, EMPTY_MEMORY, self.cfg)

        self.assertEqual(state.type, GestureType.PINCH_ZOOM)
        self.assertAlmostEqual(memory.previous_pinch_distance, 0.3)

    def test_malformed_hand_is_no_hand(self):
        short_hand = make_hand((0.5, 0.5), FIST)[:10]
        state, memory = classify_frame([short_hand], ClassifierMemory(previous_wrist=Vec2(0.5, 0.5)), self.cfg)

        self.assertEqual(state.type, GestureType.NONE)
        self.assertFalse(state.hand_present)
        self.assertEqual(memory, EMPTY_MEMORY)

    def test_non_finite_landmark_is_no_hand(self):
        hand = make_hand((0.5, 0.5), FIST)
        hand[8] = Landmark(math.nan, 0.4)
        state, _ = classify_frame([hand], EMPTY_MEMORY, self.cfg)
        self.assertFalse(state.hand_present)

    def test_non_landmark_points_are_no_hand(self):
        state, _ = classify_frame([[(0.5, 0.5)] * 21], EMPTY_MEMORY, self.cfg)
        self.assertEqual(state.type, GestureType.NONE)
        self.assertFalse(state.hand_present)

    def test_one_truncated_hand_spoils_the_frame(self):
        """A valid fist next to a truncated hand must not classify as a one-hand grip."""
        fist = make_hand((0.5, 0.5), FIST)
        memory = ClassifierMemory(previous_wrist=Vec2(0.4, 0.5))
        state, new_memory = classify_frame([fist, fist[:10]], memory, self.cfg)

        self.assertEqual(state.type, GestureType.NONE)
        self.assertFalse(state.hand_present)
        self.assertEqual(new_memory, EMPTY_MEMORY)

    def test_malformed_third_hand_spoils_the_frame(self):
        hands = two_hands(0.3) + [make_hand((0.9, 0.9), FIST)[:5]]
        state, memory = classify_frame(hands, EMPTY_MEMORY, self.cfg)

        self.assertFalse(state.hand_present)
        self.assertEqual(memory, EMPTY_MEMORY)

    def test_non_sequence_hands_are_no_hand(self):
        for hands in ([5], [None], [make_hand((0.5, 0.5), FIST), 3.0], 7, None):
            state, memory = classify_frame(hands, EMPTY_MEMORY, self.cfg)
            self.assertEqual(state.type, GestureType.NONE)
            self.assertFalse(state.hand_present)
            self.assertEqual(memory, EMPTY_MEMORY)

    def test_inputs_not_mutated(self):
        """The same memory can be replayed and gives the same answer."""
        _, memory = classify_frame([make_hand((0.5, 0.5), FIST)], EMPTY_MEMORY, self.cfg)
        hands = [make_hand((0.55, 0.5), FIST)]
        first, _ = classify_frame(hands, memory, self.cfg)
        second, _ = classify_frame(hands, memory, self.cfg)
        self.assertEqual(first, second)


class TestGestureClassifier(unittest.TestCase):
    """Test the stateful classifier over frame sequences."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.classifier = GestureClassifier(self.cfg)

    def test_scenario(self):
        """No hands, grip, grip moved, two hands, two hands apart."""
        s1 = self.classifier.update([])
        self.assertEqual(s1.type, GestureType.NONE)
        self.assertFalse(s1.hand_present)

        s2 = self.classifier.update([make_hand((0.5, 0.5), FIST)])
        self.assertEqual(s2.type, GestureType.GRIP)
        self.assertEqual(s2.rotation_delta, Vec2(0.0, 0.0))

        s3 = self.classifier.update([make_hand((0.55, 0.5), FIST)])
        self.assertEqual(s3.type, GestureType.GRIP)
        self.assertAlmostEqual(s3.rotation_delta.x, -0.15)
        self.assertAlmostEqual(s3.rotation_delta.y, 0.0)

        s4 = self.classifier.update(two_hands(0.3))
        self.assertEqual(s4.type, GestureType.PINCH_ZOOM)
        self.assertEqual(s4.scale_factor, 1.0)

        s5 = self.classifier.update(two_hands(0.35))
        self.assertEqual(s5.type, GestureType.PINCH_ZOOM)
        self.assertAlmostEqual(s5.scale_factor, 1.075)

    def test_hand_loss_resets_rotation_history(self):
        self.classifier.update([make_hand((0.2, 0.2), FIST)])
        self.classifier.update([])
        state = self.classifier.update([make_hand((0.8, 0.8), FIST)])

        self.assertEqual(state.type, GestureType.GRIP)
        self.assertEqual(state.rotation_delta, Vec2(0.0, 0.0))

    def test_hand_loss_resets_pinch_history(self):
        self.classifier.update(two_hands(0.2))
        self.classifier.update([])
        state = self.classifier.update(two_hands(0.6))

        self.assertEqual(state.scale_factor, 1.0)

    def test_point_then_grip_has_no_spike(self):
        self.classifier.update([make_hand((0.2, 0.5), FIST)])
        self.classifier.update([make_hand((0.5, 0.5), POINTING)])
        state = self.classifier.update([make_hand((0.8, 0.5), FIST)])

        self.assertEqual(state.rotation_delta, Vec2(0.0, 0.0))

    def test_reset(self):
        self.classifier.update([make_hand((0.5, 0.5), FIST)])
        self.assertIsNotNone(self.classifier.memory.previous_wrist)
        self.classifier.reset()
        self.assertEqual(self.classifier.memory, EMPTY_MEMORY)

    def test_to_dict(self):
        state = self.classifier.update([make_hand((0.5, 0.5), FIST)])
        data = state.to_dict()
        self.assertEqual(data["type"], "GRIP")
        self.assertEqual(data["rotation_delta"], {"x": 0.0, "y": 0.0})
        self.assertTrue(data["hand_present"])


if __name__ == '__main__':
    unittest.main()
