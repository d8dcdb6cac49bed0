# Folder: copycat/workspace/
# File: bond.py
import math
import logging

from copycat.workspace.objects import Letter
from copycat.workspace.structure import StructureKind, combine_strengths

logger = logging.getLogger(__name__)

MIXED_TYPE_FACTOR = 0.7     # letter-to-group bonds
LENGTH_FACET_FACTOR = 0.7   # bonds on the length facet


class Bond:
    """
    A relation (sameness, successor or predecessor) between two adjacent
    objects of one string, seen through a single facet.
    """

    kind = StructureKind.BOND

    def __init__(self, source, destination, category, facet, source_descriptor, dest_descriptor):
        """
        Args:
            source (WorkspaceObject): Object the relation starts from.
            destination (WorkspaceObject): Adjacent object the relation points to.
            category (SlipNode): sameness, successor or predecessor.
            facet (SlipNode): letterCategory or length.
            source_descriptor (SlipNode): Source's descriptor for the facet.
            dest_descriptor (SlipNode): Destination's descriptor for the facet.
        """
        self.ctx = source.ctx
        self.string = source.string
        self.total_strength = 0.0
        self.source = source
        self.destination = destination
        self.category = category
        self.facet = facet
        self.source_descriptor = source_descriptor
        self.dest_descriptor = dest_descriptor

        sn = self.ctx.slipnet
        self.left_object = source
        self.right_object = destination
        self.direction_category = sn.right
        if source.left_index > destination.right_index:
            self.left_object = destination
            self.right_object = source
            self.direction_category = sn.left
        if source_descriptor is dest_descriptor:
            self.direction_category = None

    def __repr__(self):
        return f"<Bond: {self.synopsis()}>"

    def synopsis(self) -> str:
        return (f"{self.source.synopsis()} to {self.destination.synopsis()} "
                f"({self.category.name}, {self.facet.name}, "
                f"{self.source_descriptor.name}, {self.dest_descriptor.name})")

    def build(self):
        self.ctx.workspace.structures.append(self)
        self.string.bonds.append(self)
        self.left_object.bonds.append(self)
        self.right_object.bonds.append(self)
        self.left_object.right_bond = self
        self.right_object.left_bond = self
        self.category.activation = 100
        if self.direction_category is not None:
            self.direction_category.activation = 100

    def break_(self):
        workspace = self.ctx.workspace
        workspace.structures = [s for s in workspace.structures if s is not self]
        self.string.bonds = [b for b in self.string.bonds if b is not self]
        self.left_object.bonds = [b for b in self.left_object.bonds if b is not self]
        self.right_object.bonds = [b for b in self.right_object.bonds if b is not self]
        if self.left_object.right_bond is self:
            self.left_object.right_bond = None
        if self.right_object.left_bond is self:
            self.right_object.left_bond = None

    def flipped_version(self) -> 'Bond':
        """Returns an unbuilt bond in the opposite direction with the opposite category."""
        sn = self.ctx.slipnet
        return Bond(self.destination, self.source, self.category.get_related_node(sn.opposite),
                    self.facet, self.dest_descriptor, self.source_descriptor)

    def same_neighbors(self, other: 'Bond') -> bool:
        return self.left_object is other.left_object and self.right_object is other.right_object

    def same_categories(self, other: 'Bond') -> bool:
        return self.category is other.category and self.direction_category is other.direction_category

    def update_strength(self):
        sn = self.ctx.slipnet
        compat = 1.0 if isinstance(self.source, Letter) == isinstance(self.destination, Letter) else MIXED_TYPE_FACTOR
        facet_factor = 1.0 if self.facet is sn.letter_category else LENGTH_FACET_FACTOR
        internal = min(100.0, compat * facet_factor * self.category.bond_degree_of_association())

        external = 0.0
        num_supporters = sum(1 for b in self.string.bonds if self._is_supported_by(b))
        if num_supporters > 0:
            density = 100 * math.sqrt(self._local_density())
            support_factor = min(1.0, 0.6 ** (1 / num_supporters ** 3))
            external = support_factor * density
        self.total_strength = combine_strengths(internal, external)

    def _is_supported_by(self, other: 'Bond') -> bool:
        return (other.string is self.string
                and self.left_object.letter_distance(other.left_object) != 0
                and self.right_object.letter_distance(other.right_object) != 0
                and self.same_categories(other))

    def _local_density(self) -> float:
        """Share of adjacent-object slots in the string filled by a bond like this one."""
        slot_sum = 0
        support_sum = 0
        objects = [o for o in self.ctx.workspace.objects if o.string is self.string]
        others = [b for b in self.string.bonds if b is not self and self.same_categories(b)]
        for obj1 in objects:
            for obj2 in objects:
                if not obj1.is_beside(obj2):
                    continue
                slot_sum += 1
                if any({b.left_object, b.right_object} == {obj1, obj2} for b in others):
                    support_sum += 1
        return 0.0 if slot_sum == 0 else support_sum / slot_sum
