# Folder: copycat/workspace/
# File: objects.py
import logging
from typing import Any, List, Optional, Sequence

from copycat.workspace.description import Description
from copycat.workspace.structure import StructureKind, combine_strengths

logger = logging.getLogger(__name__)

# Length factor by number of grouped objects (4 or more share the last entry)
GROUP_LENGTH_FACTORS = {1: 5, 2: 20, 3: 60}
GROUP_LENGTH_FACTOR_MAX = 90
MAX_LENGTH_DESCRIBED = 5
MIN_LENGTH_DESCRIPTION_PROB = 0.06


class WorkspaceObject:
    """
    Base class for the perceivable objects of a string (Letters and Groups).
    Spans are 1-based and inclusive.
    """
    def __init__(self, wstring):
        self.ctx = wstring.ctx
        self.string = wstring
        self.changed = False
        self.descriptions: List[Description] = []
        self.bonds: List[Any] = []
        self.group: Optional['Group'] = None
        self.correspondence = None
        self.replacement = None
        self.left_bond = None
        self.right_bond = None
        self.left_index = 0
        self.right_index = 0
        self.leftmost = False
        self.rightmost = False

        self.raw_importance = 0.0
        self.relative_importance = 0.0
        self.intra_string_salience = 0.0
        self.inter_string_salience = 0.0
        self.total_salience = 0.0
        self.intra_string_unhappiness = 0.0
        self.inter_string_unhappiness = 0.0
        self.total_unhappiness = 0.0

    def add_descriptions(self, descriptions: Sequence[Description]):
        """Builds a copy of each description this object does not already carry."""
        for to_add in list(descriptions):
            if not any(d.same_as(to_add) for d in self.descriptions):
                Description(self, to_add.description_type, to_add.descriptor).build()

    def _intra_string_happiness(self) -> float:
        if self.spans_string():
            return 100.0
        if self.group is not None:
            return self.group.total_strength
        return sum(b.total_strength for b in self.bonds) / 6.0

    def _raw_importance(self) -> float:
        result = 0.0
        for description in self.descriptions:
            if description.description_type.is_fully_active():
                result += description.descriptor.activation
            else:
                result += description.descriptor.activation / 20
        if self.group is not None:
            result *= 2 / 3
        if self.changed:
            result *= 2
        return result

    def update_values(self):
        """Recomputes importance, unhappiness and salience."""
        self.raw_importance = self._raw_importance()
        intra_happiness = self._intra_string_happiness()
        self.intra_string_unhappiness = 100 - intra_happiness
        inter_happiness = self.correspondence.total_strength if self.correspondence else 0.0
        self.inter_string_unhappiness = 100 - inter_happiness
        self.total_unhappiness = 100 - (intra_happiness + inter_happiness) / 2
        self.intra_string_salience = 0.2 * self.relative_importance + 0.8 * self.intra_string_unhappiness
        self.inter_string_salience = 0.8 * self.relative_importance + 0.2 * self.inter_string_unhappiness
        self.total_salience = (self.intra_string_salience + self.inter_string_salience) / 2

    def letter_span(self) -> int:
        return self.right_index - self.left_index + 1

    def spans_string(self) -> bool:
        return self.leftmost and self.rightmost

    def is_within(self, other: 'WorkspaceObject') -> bool:
        return self.left_index >= other.left_index and self.right_index <= other.right_index

    def is_outside_of(self, other: 'WorkspaceObject') -> bool:
        return self.left_index > other.right_index or self.right_index < other.left_index

    def is_beside(self, other: 'WorkspaceObject') -> bool:
        if self.string is not other.string:
            return False
        return self.left_index == other.right_index + 1 or other.left_index == self.right_index + 1

    def relevant_descriptions(self) -> List[Description]:
        return [d for d in self.descriptions if d.description_type.is_fully_active()]

    def relevant_distinguishing_descriptors(self) -> list:
        return [d.descriptor for d in self.relevant_descriptions()
                if self.is_distinguishing_descriptor(d.descriptor)]

    def has_descriptor(self, sought) -> bool:
        return any(d.descriptor is sought for d in self.descriptions)

    def get_descriptor(self, description_type):
        for d in self.descriptions:
            if d.description_type is description_type:
                return d.descriptor
        return None

    def get_description_type(self, descriptor):
        for d in self.descriptions:
            if d.descriptor is descriptor:
                return d.description_type
        return None

    def is_middle_object(self) -> bool:
        """True when the neighbours on both sides are the string's end objects."""
        left_neighbour_is_leftmost = False
        right_neighbour_is_rightmost = False
        for obj in self.string.objects:
            if obj.leftmost and obj.right_index == self.left_index - 1:
                left_neighbour_is_leftmost = True
            if obj.rightmost and obj.left_index == self.right_index + 1:
                right_neighbour_is_rightmost = True
        return left_neighbour_is_leftmost and right_neighbour_is_rightmost

    def get_common_groups(self, other: 'WorkspaceObject') -> List['WorkspaceObject']:
        return [obj for obj in self.string.objects if self.is_within(obj) and other.is_within(obj)]

    def letter_distance(self, other: 'WorkspaceObject') -> int:
        if self.string is not other.string:
            raise ValueError("Cannot compare objects from different strings")
        if other.left_index > self.right_index:
            return other.left_index - self.right_index
        if self.left_index > other.right_index:
            return self.left_index - other.right_index
        return 0

    def _is_distinguishing_among(self, descriptor, peer_type) -> bool:
        slipnet = self.ctx.slipnet
        if descriptor is slipnet.letter or descriptor is slipnet.group or descriptor in slipnet.numbers:
            return False
        for obj in self.string.objects:
            if obj is self or not isinstance(obj, peer_type):
                continue
            if any(d.descriptor is descriptor for d in obj.descriptions):
                return False
        return True


class Letter(WorkspaceObject):
    """A single character of a workspace string."""

    def __init__(self, wstring, position: int):
        """
        Args:
            wstring (WorkspaceString): Owning string.
            position (int): 1-based position in the string.
        """
        super().__init__(wstring)
        self.char = wstring.text[position - 1]
        self.position = position
        self.left_index = position
        self.right_index = position
        self.leftmost = position == 1
        self.rightmost = position == wstring.length
        self._add_descriptions()

    def __repr__(self):
        return f"<Letter: {self.char}>"

    def synopsis(self) -> str:
        return self.char

    def _add_descriptions(self):
        sn = self.ctx.slipnet
        length = self.string.length

        def add(description_type, descriptor):
            self.descriptions.append(Description(self, description_type, descriptor))

        add(sn.object_category, sn.letter)
        add(sn.letter_category, sn.letters[ord(self.char) - ord('a')])
        if length == 1:
            add(sn.string_position_category, sn.single)
        if self.leftmost:
            add(sn.string_position_category, sn.leftmost)
        if self.rightmost:
            add(sn.string_position_category, sn.rightmost)
        if 2 * self.position == length + 1:
            add(sn.string_position_category, sn.middle)

    def is_distinguishing_descriptor(self, descriptor) -> bool:
        return self._is_distinguishing_among(descriptor, Letter)


class Group(WorkspaceObject):
    """
    A run of adjacent objects joined by bonds of one category and direction.
    A Group is both a workspace object and a structure.
    """

    kind = StructureKind.GROUP

    def __init__(self, wstring, group_category, direction_category, facet,
                 object_list: Sequence[WorkspaceObject], bond_list: Sequence):
        """
        Args:
            wstring (WorkspaceString): Owning string.
            group_category (SlipNode): successorGroup, predecessorGroup or samenessGroup.
            direction_category (SlipNode | None): left, right, or None for sameness groups.
            facet (SlipNode): The bond facet shared by the grouped bonds.
            object_list (Sequence[WorkspaceObject]): Grouped objects, left to right.
            bond_list (Sequence[Bond]): Bonds joining the objects.
        """
        super().__init__(wstring)
        sn = self.ctx.slipnet
        self.total_strength = 0.0
        self.group_category = group_category
        self.direction_category = direction_category
        self.facet = facet
        self.object_list = list(object_list)
        self.bond_list = list(bond_list)
        self.bond_category = group_category.get_related_node(sn.bond_category)

        self.left_index = self.object_list[0].left_index
        self.right_index = self.object_list[-1].right_index
        self.leftmost = self.left_index == 1
        self.rightmost = self.right_index == wstring.length
        self.bond_descriptions: List[Description] = []
        self._add_descriptions()

    def __repr__(self):
        return f"<Group: {self.synopsis()}>"

    def synopsis(self) -> str:
        left, right = self.left_index - 1, self.right_index
        return f"group[{left},{right - 1}] == {self.string.text[left:right]}"

    def _add_descriptions(self):
        sn = self.ctx.slipnet

        def add(description_type, descriptor):
            self.descriptions.append(Description(self, description_type, descriptor))

        if self.bond_list:
            self.bond_descriptions.append(Description(self, sn.bond_facet, self.bond_list[0].facet))
        self.bond_descriptions.append(Description(self, sn.bond_category, self.bond_category))

        add(sn.object_category, sn.group)
        add(sn.group_category, self.group_category)
        if self.direction_category is None:
            # Sameness groups are described by the shared descriptor
            descriptor = self.object_list[0].get_descriptor(self.facet)
            if descriptor is not None:
                add(self.facet, descriptor)
        else:
            add(sn.direction_category, self.direction_category)

        if self.spans_string():
            add(sn.string_position_category, sn.whole)
        elif self.leftmost:
            add(sn.string_position_category, sn.leftmost)
        elif self.rightmost:
            add(sn.string_position_category, sn.rightmost)
        elif self.is_middle_object():
            add(sn.string_position_category, sn.middle)

        num_objects = len(self.object_list)
        if num_objects <= MAX_LENGTH_DESCRIBED:
            exponent = num_objects ** 3 * (100 - sn.length.activation) / 100
            prob = self.ctx.temperature.get_adjusted_prob(0.5 ** exponent)
            if prob < MIN_LENGTH_DESCRIPTION_PROB:
                prob = 0.0
            if self.ctx.rand_gen.coin_flip(prob):
                add(sn.length, sn.numbers[num_objects - 1])

    def build(self):
        workspace = self.ctx.workspace
        workspace.objects.append(self)
        workspace.structures.append(self)
        self.string.objects.append(self)
        for obj in self.object_list:
            obj.group = self
        for description in list(self.descriptions):
            description.build()

    def break_(self):
        if self.correspondence is not None:
            self.correspondence.break_()
        if self.group is not None:
            self.group.break_()
        if self.left_bond is not None:
            self.left_bond.break_()
        if self.right_bond is not None:
            self.right_bond.break_()
        for description in list(self.descriptions):
            description.break_()
        for obj in self.object_list:
            obj.group = None
        workspace = self.ctx.workspace
        workspace.structures = [s for s in workspace.structures if s is not self]
        workspace.objects = [o for o in workspace.objects if o is not self]
        self.string.objects = [o for o in self.string.objects if o is not self]

    def same_as(self, other: 'Group') -> bool:
        return (self.left_index == other.left_index
                and self.right_index == other.right_index
                and self.group_category is other.group_category
                and self.direction_category is other.direction_category
                and self.facet is other.facet)

    def flipped_version(self) -> 'Group':
        """Returns an unbuilt copy with opposite group category, direction and bonds."""
        sn = self.ctx.slipnet
        flipped_bonds = [b.flipped_version() for b in self.bond_list]
        flipped_category = self.group_category.get_related_node(sn.opposite)
        flipped_direction = self.direction_category.get_related_node(sn.opposite) if self.direction_category else None
        return Group(self.string, flipped_category, flipped_direction, self.facet, self.object_list, flipped_bonds)

    def is_distinguishing_descriptor(self, descriptor) -> bool:
        return self._is_distinguishing_among(descriptor, Group)

    def update_strength(self):
        related_bond_association = self.bond_category.degree_of_association()
        bond_weight = related_bond_association ** 0.98
        length_factor = GROUP_LENGTH_FACTORS.get(len(self.object_list), GROUP_LENGTH_FACTOR_MAX)
        length_weight = 100 - bond_weight
        internal = (related_bond_association * bond_weight + length_factor * length_weight) / 100
        external = 100.0 if self.spans_string() else self.local_support()
        self.total_strength = combine_strengths(internal, external)

    def local_support(self) -> float:
        num_supporters = self.number_of_local_supporting_groups()
        if num_supporters == 0:
            return 0.0
        support_factor = min(1.0, 0.6 ** (1 / num_supporters ** 3))
        local_density = num_supporters / (0.5 * self.string.length)
        return min(100.0, 100 * local_density ** 0.5 * support_factor)

    def number_of_local_supporting_groups(self) -> int:
        return sum(
            1 for obj in self.string.objects
            if isinstance(obj, Group) and self.is_outside_of(obj)
            and obj.group_category is self.group_category
            and obj.direction_category is self.direction_category)
