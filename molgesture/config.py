"""
Configuration management for the gesture-driven molecule viewer.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class ClassifierConfig:
    """Finger pose thresholds and gesture sensitivities."""
    extension_threshold: float   # wrist-to-tip distance above which a finger is extended
    curl_threshold: float        # wrist-to-tip distance below which a finger is curled
    rotation_sensitivity: float  # S: wrist displacement -> rotation delta
    zoom_sensitivity: float      # K: inter-wrist distance change -> scale factor


@dataclass
class TransformConfig:
    """Transform accumulator settings."""
    min_scale: float
    max_scale: float
    smoothing: float       # fraction of the remaining gap closed per frame
    reference_fps: float   # frame rate the smoothing factor is tuned for


@dataclass
class PointerConfig:
    """Camera model used for ray casting the pointer."""
    camera_z: float
    fov_deg: float
    aspect: float
    atom_radius_scale: float


@dataclass
class StructureConfig:
    """Structure download settings."""
    default_pdb_id: str
    base_url: str
    timeout_s: float


@dataclass
class AssistantConfig:
    """Chat assistant settings."""
    model: str
    max_words: int


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    mirror: bool
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    classifier: ClassifierConfig
    transform: TransformConfig
    pointer: PointerConfig
    structure: StructureConfig
    assistant: AssistantConfig
    display: DisplayConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data['model_complexity'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    cls_data = data['classifier']
    classifier = ClassifierConfig(
        extension_threshold=float(cls_data['extension_threshold']),
        curl_threshold=float(cls_data['curl_threshold']),
        rotation_sensitivity=float(cls_data['rotation_sensitivity']),
        zoom_sensitivity=float(cls_data['zoom_sensitivity'])
    )
    if classifier.curl_threshold >= classifier.extension_threshold:
        raise ValueError(
            f"curl_threshold ({classifier.curl_threshold}) must be lower than "
            f"extension_threshold ({classifier.extension_threshold})"
        )

    tf_data = data['transform']
    transform = TransformConfig(
        min_scale=float(tf_data['min_scale']),
        max_scale=float(tf_data['max_scale']),
        smoothing=float(tf_data['smoothing']),
        reference_fps=float(tf_data['reference_fps'])
    )
    if not 0.0 < transform.min_scale < transform.max_scale:
        raise ValueError(f"Invalid scale range: [{transform.min_scale}, {transform.max_scale}]")
    if not 0.0 < transform.smoothing <= 1.0:
        raise ValueError(f"smoothing must be in (0, 1], got {transform.smoothing}")

    ptr_data = data['pointer']
    pointer = PointerConfig(
        camera_z=float(ptr_data['camera_z']),
        fov_deg=float(ptr_data['fov_deg']),
        aspect=float(ptr_data['aspect']),
        atom_radius_scale=float(ptr_data['atom_radius_scale'])
    )

    st_data = data['structure']
    structure = StructureConfig(
        default_pdb_id=st_data['default_pdb_id'],
        base_url=st_data['base_url'],
        timeout_s=float(st_data['timeout_s'])
    )

    as_data = data['assistant']
    assistant = AssistantConfig(
        model=as_data['model'],
        max_words=as_data['max_words']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        mirror=display_data['mirror'],
        window_name=display_data['window_name']
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        classifier=classifier,
        transform=transform,
        pointer=pointer,
        structure=structure,
        assistant=assistant,
        display=display
    )
