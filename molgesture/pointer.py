"""
Pointer ray casting against the displayed molecule.
"""
import logging
import math
from typing import Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from .config import Cfg
from .constants import atom_radius
from .types import AtomHit, MoleculeData, TransformSnapshot, Vec2

logger = logging.getLogger(__name__)


def ndc_to_ray(pointer_ndc: Vec2, camera_z: float, fov_deg: float,
               aspect: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Ray from a perspective camera on the +Z axis through a device coordinate.

    The camera sits at (0, 0, camera_z) looking toward the origin.

    Args:
        pointer_ndc: Pointer in normalized device coordinates (-1..1)
        camera_z: Camera distance from the origin
        fov_deg: Vertical field of view in degrees
        aspect: Viewport width / height

    Returns:
        Tuple of (origin, unit direction)
    """
    tan_half = math.tan(math.radians(fov_deg) / 2.0)
    direction = np.array([
        pointer_ndc.x * tan_half * aspect,
        pointer_ndc.y * tan_half,
        -1.0,
    ])
    direction /= np.linalg.norm(direction)
    origin = np.array([0.0, 0.0, camera_z])
    return origin, direction


def ray_sphere_distances(origin: np.ndarray, direction: np.ndarray,
                         centers: np.ndarray, radii: np.ndarray) -> np.ndarray:
    """
    Distance along a unit ray to each sphere, np.inf where the ray misses.

    Args:
        origin: Ray origin, shape (3,)
        direction: Unit ray direction, shape (3,)
        centers: Sphere centers, shape (N, 3)
        radii: Sphere radii, shape (N,)
    """
    oc = origin - centers
    b = oc @ direction
    c = np.einsum("ij,ij->i", oc, oc) - radii ** 2
    disc = b * b - c

    distances = np.full(len(centers), np.inf)
    hit = disc >= 0.0
    root = np.sqrt(disc[hit])
    near = -b[hit] - root
    far = -b[hit] + root
    # Origin inside a sphere counts as hitting its far side
    t = np.where(near >= 0.0, near, far)
    distances[hit] = np.where(t >= 0.0, t, np.inf)
    return distances


class RaySphereResolver:
    """
    Reference pointer resolver that treats every atom as a sphere.

    Atoms are positioned relative to the molecule center, scaled and
    rotated by the accumulated transform, and hit-tested against a ray
    from the camera through the pointer.
    """

    def __init__(self, cfg: Cfg):
        """Initialize resolver with the pointer camera configuration."""
        self.cfg = cfg
        self._cached_molecule: Optional[MoleculeData] = None
        self._local_positions = np.zeros((0, 3))
        self._base_radii = np.zeros(0)

    def _prepare(self, molecule: MoleculeData) -> None:
        """Cache centered positions and radii for a molecule."""
        if molecule is self._cached_molecule:
            return
        center = np.asarray(molecule.center, dtype=float)
        if molecule.atoms:
            self._local_positions = np.array([(a.x, a.y, a.z) for a in molecule.atoms]) - center
        else:
            self._local_positions = np.zeros((0, 3))
        self._base_radii = np.array(
            [atom_radius(a.element) * self.cfg.pointer.atom_radius_scale for a in molecule.atoms]
        )
        self._cached_molecule = molecule

    def resolve(self, pointer_ndc: Vec2, molecule: MoleculeData,
                snapshot: TransformSnapshot) -> Optional[AtomHit]:
        """
        Find the nearest atom under the pointer.

        Args:
            pointer_ndc: Pointer position from a POINT gesture
            molecule: Loaded structure
            snapshot: Current object transform

        Returns:
            AtomHit for the nearest intersected atom, or None
        """
        if molecule is None or not molecule.atoms:
            return None

        self._prepare(molecule)

        rotation = Rotation.from_quat(snapshot.orientation)
        world_centers = rotation.apply(self._local_positions * snapshot.scale)
        world_radii = self._base_radii * snapshot.scale

        origin, direction = ndc_to_ray(
            pointer_ndc,
            camera_z=self.cfg.pointer.camera_z,
            fov_deg=self.cfg.pointer.fov_deg,
            aspect=self.cfg.pointer.aspect,
        )
        distances = ray_sphere_distances(origin, direction, world_centers, world_radii)

        index = int(np.argmin(distances))
        if not np.isfinite(distances[index]):
            return None

        atom = molecule.atoms[index]
        local = self._local_positions[index]
        logger.debug(f"Pointer hit {atom.element}{atom.id} ({atom.residue} {atom.res_seq})")
        return AtomHit(
            index=index,
            atom=atom,
            distance=float(distances[index]),
            local_position=(float(local[0]), float(local[1]), float(local[2])),
        )
