"""
PDB structure download and parsing.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

import requests

from .types import Atom, MoleculeData

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://files.rcsb.org/download"


class StructureError(Exception):
    """Raised when a structure cannot be fetched or read."""


def fetch_pdb(pdb_id: str, base_url: str = DEFAULT_BASE_URL, timeout: float = 15.0,
              session: Optional[requests.Session] = None) -> MoleculeData:
    """
    Download a structure from the RCSB archive and parse it.

    Args:
        pdb_id: Four-character PDB identifier (case-insensitive)
        base_url: Archive download root
        timeout: Request timeout in seconds
        session: Optional requests session to reuse connections

    Returns:
        Parsed molecule data

    Raises:
        StructureError: If the download fails or returns a non-2xx status
    """
    pdb_id = pdb_id.strip().upper()
    if not pdb_id:
        raise StructureError("Empty PDB ID")

    url = f"{base_url.rstrip('/')}/{pdb_id}.pdb"
    http = session or requests
    logger.info(f"Fetching structure {pdb_id} from {url}")

    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise StructureError(f"Failed to fetch PDB: {pdb_id} ({e})") from e

    if not response.ok:
        raise StructureError(f"Failed to fetch PDB: {pdb_id} (HTTP {response.status_code})")

    molecule = parse_pdb(response.text)
    logger.info(f"Loaded {pdb_id}: {len(molecule.atoms)} atoms")
    return molecule


def load_pdb_file(path: Union[str, Path]) -> MoleculeData:
    """
    Read and parse a local .pdb file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    pdb_path = Path(path)
    if not pdb_path.exists():
        raise FileNotFoundError(f"PDB file not found: {pdb_path}")

    with open(pdb_path, 'r') as f:
        return parse_pdb(f.read())


def parse_atom_line(line: str) -> Atom:
    """
    Parse one fixed-column ATOM/HETATM record.

    Columns (1-based): serial 7-11, name 13-16, residue 18-20,
    resSeq 23-26, x/y/z 31-38/39-46/47-54, element 77-78.

    Raises:
        ValueError: If a numeric field is missing or malformed
    """
    name = line[12:16].strip()
    element = line[76:78].strip()
    # Older files leave the element column empty
    if not element:
        element = name[:1]

    return Atom(
        id=int(line[6:11]),
        name=name,
        element=element.upper(),
        residue=line[17:20].strip(),
        res_seq=int(line[22:26]),
        x=float(line[30:38]),
        y=float(line[38:46]),
        z=float(line[46:54]),
    )


def parse_pdb(text: str) -> MoleculeData:
    """
    Parse PDB text into atoms and their geometric center.

    Lines other than ATOM/HETATM are ignored; malformed atom lines are
    skipped.

    Args:
        text: Contents of a .pdb file

    Returns:
        MoleculeData with atoms in file order and their mean position
    """
    atoms: List[Atom] = []
    skipped = 0

    for line in text.splitlines():
        if not (line.startswith("ATOM") or line.startswith("HETATM")):
            continue
        try:
            atoms.append(parse_atom_line(line))
        except ValueError:
            skipped += 1

    if skipped:
        logger.debug(f"Skipped {skipped} malformed atom record(s)")

    if not atoms:
        return MoleculeData(atoms=[], center=(0.0, 0.0, 0.0))

    n = len(atoms)
    center = (
        sum(a.x for a in atoms) / n,
        sum(a.y for a in atoms) / n,
        sum(a.z for a in atoms) / n,
    )
    return MoleculeData(atoms=atoms, center=center)
