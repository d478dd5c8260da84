"""
Accumulation of gesture deltas into a smoothed object orientation and scale.
"""
import logging
import math
from typing import Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from .config import Cfg
from .types import GestureState, GestureType, TransformSnapshot

logger = logging.getLogger(__name__)

UP_AXIS = np.array([0.0, 1.0, 0.0])
RIGHT_AXIS = np.array([1.0, 0.0, 0.0])


def incremental_rotation(yaw: float, pitch: float) -> Rotation:
    """
    Rotation for one GRIP frame.

    Yaw turns about the up axis, pitch about the right axis; the yaw is
    applied first, as quaternion product pitch * yaw.
    """
    q_yaw = Rotation.from_rotvec(UP_AXIS * yaw)
    q_pitch = Rotation.from_rotvec(RIGHT_AXIS * pitch)
    return q_pitch * q_yaw


def slerp_toward(current: Rotation, target: Rotation, t: float) -> Rotation:
    """
    Spherical interpolation a fraction t of the way from current to target.

    Works on the rotation vector of the relative rotation, which is always
    the short arc.
    """
    if t <= 0.0:
        return current
    if t >= 1.0:
        return target
    relative = target * current.inv()
    return Rotation.from_rotvec(relative.as_rotvec() * t) * current


class TransformAccumulator:
    """
    Persistent object transform driven by gesture states.

    Targets move immediately with each gesture delta; the rendered (current)
    values chase them by exponential smoothing every frame, so the displayed
    transform never jumps.

    Features:
    - Orientation composed by quaternion multiplication (no Euler sums)
    - Scale clamped to the configured range on every frame
    - Optional elapsed-time smoothing independent of display frame rate
    """

    def __init__(self, cfg: Cfg):
        """Initialize accumulator at identity orientation and unit scale."""
        self.cfg = cfg
        self.min_scale = cfg.transform.min_scale
        self.max_scale = cfg.transform.max_scale
        self.smoothing = cfg.transform.smoothing
        self.reference_fps = cfg.transform.reference_fps
        self.reset()

    def reset(self) -> None:
        """Return to identity orientation and unit scale."""
        self._target_rotation = Rotation.identity()
        self._current_rotation = Rotation.identity()
        self._target_scale = 1.0
        self._current_scale = 1.0

    def apply(self, gesture: GestureState, dt: Optional[float] = None) -> TransformSnapshot:
        """
        Fold one gesture state into the targets and advance smoothing by one frame.

        The same gesture state may be applied on several consecutive render
        frames; each application counts as a fresh delta.

        Args:
            gesture: Gesture state for this frame
            dt: Seconds since the previous frame. None uses a fixed per-frame step.

        Returns:
            Snapshot of the current (smoothed) transform
        """
        if gesture.type == GestureType.GRIP:
            self._apply_rotation(gesture.rotation_delta.x, gesture.rotation_delta.y)
        elif gesture.type == GestureType.PINCH_ZOOM:
            self._apply_scale(gesture.scale_factor)

        self._step(dt)
        return self.snapshot()

    def _apply_rotation(self, yaw: float, pitch: float) -> None:
        if not (math.isfinite(yaw) and math.isfinite(pitch)):
            logger.debug(f"Ignoring non-finite rotation delta ({yaw}, {pitch})")
            return
        if yaw == 0.0 and pitch == 0.0:
            return
        self._target_rotation = incremental_rotation(yaw, pitch) * self._target_rotation

    def _apply_scale(self, factor: float) -> None:
        if not math.isfinite(factor) or factor <= 0.0:
            logger.debug(f"Ignoring invalid scale factor {factor}")
            return
        self._target_scale = self._clamp_scale(self._target_scale * factor)

    def _clamp_scale(self, value: float) -> float:
        return max(self.min_scale, min(self.max_scale, value))

    def smoothing_factor(self, dt: Optional[float] = None) -> float:
        """
        Fraction of the remaining gap to close this frame.

        With dt given, the fixed per-frame factor is rescaled so that the
        decay per second matches a display running at reference_fps.
        """
        if dt is None:
            return self.smoothing
        if dt <= 0.0 or not math.isfinite(dt):
            return 0.0
        return 1.0 - (1.0 - self.smoothing) ** (dt * self.reference_fps)

    def _step(self, dt: Optional[float]) -> None:
        # Clamp every frame, even if nothing changed the target
        self._target_scale = self._clamp_scale(self._target_scale)

        alpha = self.smoothing_factor(dt)
        self._current_scale += (self._target_scale - self._current_scale) * alpha
        self._current_scale = self._clamp_scale(self._current_scale)
        self._current_rotation = slerp_toward(self._current_rotation, self._target_rotation, alpha)

    def set_target_scale(self, value: float) -> None:
        """Set the target scale directly; out-of-range values are clamped on the next frame."""
        self._target_scale = float(value)

    def set_target_orientation(self, quat_xyzw: Sequence[float]) -> None:
        """Set the target orientation from an (x, y, z, w) quaternion."""
        self._target_rotation = Rotation.from_quat(quat_xyzw)

    @property
    def rotation(self) -> Rotation:
        """Current (smoothed) orientation."""
        return self._current_rotation

    @property
    def target_rotation(self) -> Rotation:
        """Target orientation."""
        return self._target_rotation

    @property
    def orientation(self) -> np.ndarray:
        """Current orientation as an (x, y, z, w) quaternion."""
        return self._current_rotation.as_quat()

    @property
    def target_orientation(self) -> np.ndarray:
        """Target orientation as an (x, y, z, w) quaternion."""
        return self._target_rotation.as_quat()

    @property
    def scale(self) -> float:
        """Current (smoothed) scale."""
        return self._current_scale

    @property
    def target_scale(self) -> float:
        """Target scale."""
        return self._target_scale

    def matrix(self) -> np.ndarray:
        """4x4 model matrix combining current rotation and uniform scale."""
        m = np.eye(4)
        m[:3, :3] = self._current_rotation.as_matrix() * self._current_scale
        return m

    def snapshot(self) -> TransformSnapshot:
        """Read-only copy of the current transform for renderers."""
        return TransformSnapshot(
            orientation=tuple(float(v) for v in self.orientation),
            scale=self._current_scale,
        )
