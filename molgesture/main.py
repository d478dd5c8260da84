"""
Main application for gesture-driven molecule manipulation.
"""
import argparse
import asyncio
import logging
import time
from typing import List, Optional

import cv2

from .assistant import MoleculeAssistant
from .config import load_config
from .constants import atom_color
from .gestures import GestureClassifier, finger_distances
from .pointer import RaySphereResolver
from .renderer_mock import MockRenderer
from .structure import StructureError, fetch_pdb
from .tracker import HandsTracker
from .transform import TransformAccumulator
from .types import ChatMessage, GestureType, MoleculeData

logger = logging.getLogger(__name__)

GESTURE_LABELS = {
    GestureType.GRIP: "ROTATING (GRIP)",
    GestureType.PINCH_ZOOM: "ZOOMING (PINCH)",
    GestureType.POINT: "INSPECTING (POINT)",
}


class MoleculeGestureApp:
    """Main application class for gesture-driven molecule viewing."""

    def __init__(self, config_path: Optional[str] = None, pdb_id: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.pdb_id = (pdb_id or self.config.structure.default_pdb_id).upper()

        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            model_complexity=self.config.mediapipe.model_complexity,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )
        self.classifier = GestureClassifier(self.config)
        self.accumulator = TransformAccumulator(self.config)
        self.resolver = RaySphereResolver(self.config)
        self.renderer = MockRenderer()
        self.assistant = MoleculeAssistant(self.config)
        self.molecule: Optional[MoleculeData] = None
        self.history: List[ChatMessage] = []
        self._closed = False

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            self.close()
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def load_structure(self, pdb_id: str) -> bool:
        """
        Load a structure; on failure keep the previous one.

        A new molecule starts a fresh conversation and a fresh view.

        Returns:
            True if the structure was loaded
        """
        pdb_id = pdb_id.strip()
        if not pdb_id:
            return False

        try:
            self.molecule = fetch_pdb(
                pdb_id,
                base_url=self.config.structure.base_url,
                timeout=self.config.structure.timeout_s
            )
        except StructureError as e:
            logger.error(f"Failed to load PDB. ID might be invalid: {e}")
            return False

        self.pdb_id = pdb_id.upper()
        self.history = []
        self.accumulator.reset()
        self.classifier.reset()
        logger.info(f"Loaded {self.pdb_id} ({len(self.molecule.atoms)} atoms)")
        return True

    def ask(self, question: str) -> Optional[ChatMessage]:
        """Send a question about the current molecule and record both turns."""
        question = question.strip()
        if not question:
            return None

        reply = self.assistant.chat(self.history, question, self.pdb_id)
        self.history.append(ChatMessage(role="user", text=question))
        self.history.append(reply)
        return reply

    async def run(self):
        """Run the main application loop."""
        try:
            await self._loop()
        finally:
            self.close()

    async def _loop(self):
        self.load_structure(self.pdb_id)

        logger.info(f"Starting {self.config.display.window_name}")
        print("Gesture Controls:")
        print("  - Closed Fist + Move = Rotate")
        print("  - Two Hands apart/together = Zoom")
        print("  - Index Finger = Inspect atom")
        print("Press 'l' to load a PDB ID, 'e' to explain, 'c' to chat, 'r' to reset, 'q' to quit")

        last_time = time.perf_counter()

        while True:
            ret, frame = self.cap.read()
            if not ret:
                logger.error("Failed to read frame from camera")
                break

            # Classification and accumulation run in sequence within one frame
            landmark_frame = self.tracker.process(frame)
            gesture = self.classifier.update(landmark_frame.hands)

            t_now = time.perf_counter()
            snapshot = self.accumulator.apply(gesture, dt=t_now - last_time)
            last_time = t_now

            hit = None
            if gesture.type == GestureType.POINT and self.molecule is not None:
                hit = self.resolver.resolve(gesture.pointer_position, self.molecule, snapshot)

            await self.renderer.render(snapshot, gesture, hit)

            # Draw overlay
            if self.config.display.show_landmarks and landmark_frame.hands:
                frame = self.tracker.draw_landmarks(frame, landmark_frame)
            if self.config.display.mirror:
                frame = cv2.flip(frame, 1)

            status_text = "No hand detected"
            if gesture.hand_present:
                status_text = f"Hands: {len(landmark_frame.hands)}"
                if len(landmark_frame.hands) == 1:
                    d = finger_distances(landmark_frame.hands[0])
                    status_text += " | " + " ".join(f"{k[0].upper()}={v:.2f}" for k, v in d.items())

            gesture_status = GESTURE_LABELS.get(gesture.type, "")
            transform_info = f"{self.pdb_id} | scale={snapshot.scale:.2f}"
            if hit is not None:
                transform_info += f" | {hit.atom.element} - {hit.atom.id} {hit.atom.residue} {hit.atom.res_seq}"

            cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2)
            cv2.putText(frame, transform_info, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
            if hit is not None:
                # CPK swatch for the hovered atom
                cv2.circle(frame, (frame.shape[1] - 20, 55), 8, atom_color(hit.atom.element), -1)
            if gesture_status:
                cv2.putText(frame, gesture_status, (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 0), 2)

            cv2.putText(frame, "Fist = Rotate | Two Hands = Zoom | Point = Inspect",
                        (10, frame.shape[0] - 40), cv2.FONT_HERSHEY_SIMPLEX, 0.45, (255, 255, 255), 1)
            cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, (255, 255, 255), 1)

            cv2.imshow(self.config.display.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('r'):
                self.accumulator.reset()
                self.classifier.reset()
            if key == ord('e'):
                print(self.assistant.explain(self.pdb_id))
            if key == ord('l'):
                self.load_structure(input("PDB ID: "))
            if key == ord('c'):
                reply = self.ask(input(f"Ask about {self.pdb_id}: "))
                if reply is not None:
                    print(reply.text)
            # Blocking prompts above stall the frame clock
            if key in (ord('l'), ord('c'), ord('e')):
                last_time = time.perf_counter()

    def close(self) -> None:
        """Release camera, tracker and windows. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self.cap.isOpened():
            self.cap.release()
        self.tracker.close()
        cv2.destroyAllWindows()

    def __del__(self):
        """Cleanup resources."""
        if hasattr(self, 'cap') and not getattr(self, '_closed', True) and self.cap.isOpened():
            self.cap.release()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manipulate a 3D molecule with hand gestures")
    parser.add_argument("--config", help="Path to YAML config (default: config.default.yaml)")
    parser.add_argument("--pdb", help="PDB ID to load (default from config)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point for the application."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    )

    try:
        with MoleculeGestureApp(config_path=args.config, pdb_id=args.pdb) as app:
            await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
