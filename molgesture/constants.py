"""
Landmark indices and atom display tables.
"""

# MediaPipe hand landmark indices
HAND_LANDMARK_COUNT = 21
WRIST = 0
INDEX_TIP = 8
MIDDLE_TIP = 12
RING_TIP = 16
PINKY_TIP = 20

# CPK coloring for common elements (BGR tuples for OpenCV drawing)
ATOM_COLORS = {
    "H": (255, 255, 255),
    "C": (144, 144, 144),
    "N": (248, 80, 48),
    "O": (13, 13, 255),
    "S": (48, 255, 255),
    "P": (0, 165, 255),
    "F": (80, 224, 144),
    "CL": (31, 240, 31),
    "BR": (41, 41, 166),
    "I": (148, 0, 148),
    "FE": (51, 102, 224),
    "CA": (0, 255, 61),
    "DEFAULT": (180, 105, 255),
}

# Van der Waals radii in angstroms
ATOM_RADII = {
    "H": 1.2,
    "C": 1.7,
    "N": 1.55,
    "O": 1.52,
    "S": 1.8,
    "P": 1.8,
    "DEFAULT": 1.5,
}


def atom_radius(element: str) -> float:
    """Van der Waals radius for an element symbol, with a default for unknown elements."""
    return ATOM_RADII.get(element.upper(), ATOM_RADII["DEFAULT"])


def atom_color(element: str) -> tuple:
    """CPK color for an element symbol as a BGR tuple."""
    return ATOM_COLORS.get(element.upper(), ATOM_COLORS["DEFAULT"])
