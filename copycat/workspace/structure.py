# Folder: copycat/workspace/
# File: structure.py
from enum import Enum


class StructureKind(Enum):
    """Tag carried by every structure that can live in Workspace.structures."""
    BOND = 'bond'
    GROUP = 'group'
    CORRESPONDENCE = 'correspondence'
    DESCRIPTION = 'description'
    RULE = 'rule'


def combine_strengths(internal: float, external: float) -> float:
    """
    Blends internal and external strength; the stronger the internal
    strength, the less the external support matters.
    """
    weight = internal / 100
    return weight * internal + (1 - weight) * external
