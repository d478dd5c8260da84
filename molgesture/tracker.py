"""
Hand landmark detection using MediaPipe Hands.
"""
import logging
from typing import List

import cv2
import mediapipe as mp
import numpy as np

from .landmarks import CLASSIFIER_INDICES
from .types import Hand, Landmark, LandmarkFrame

logger = logging.getLogger(__name__)


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 2, model_complexity: int = 1,
                 min_detection_conf: float = 0.5, min_tracking_conf: float = 0.5):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: 0 = lite model, 1 = full model
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )
        logger.debug(f"MediaPipe Hands ready (max_num_hands={max_num_hands}, complexity={model_complexity})")

    def process(self, frame_bgr: np.ndarray) -> LandmarkFrame:
        """
        Process a frame and return landmarks for every detected hand.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            LandmarkFrame with one list of 21 landmarks per hand (empty if no hand)
        """
        # MediaPipe expects RGB
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)

        hands: List[Hand] = []
        if results.multi_hand_landmarks:
            for hand_landmarks in results.multi_hand_landmarks:
                hands.append([Landmark(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark])

        return LandmarkFrame(hands=hands)

    def draw_landmarks(self, frame: np.ndarray, landmark_frame: LandmarkFrame) -> np.ndarray:
        """
        Draw hand landmarks on the frame.

        Args:
            frame: Input frame
            landmark_frame: Landmarks in [0..1] range

        Returns:
            Frame with landmarks drawn
        """
        height, width = frame.shape[:2]

        for hand in landmark_frame.hands:
            for i, lm in enumerate(hand):
                px = int(lm.x * width)
                py = int(lm.y * height)
                # Classifier inputs are drawn larger
                radius = 5 if i in CLASSIFIER_INDICES else 3
                cv2.circle(frame, (px, py), radius, (0, 255, 0), -1)

        return frame

    def close(self) -> None:
        """Release MediaPipe resources."""
        self.hands.close()


