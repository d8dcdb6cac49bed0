# Folder: copycat/workspace/
# File: description.py
import logging

from copycat.workspace.structure import StructureKind, combine_strengths

logger = logging.getLogger(__name__)

# Local support indexed by the number of other objects described the same way
LOCAL_SUPPORT_BY_COUNT = (0, 20, 60, 90, 100)


class Description:
    """A (description type, descriptor) pair attached to one workspace object."""

    kind = StructureKind.DESCRIPTION

    def __init__(self, obj, description_type, descriptor):
        """
        Args:
            obj (WorkspaceObject): The described object.
            description_type (SlipNode): E.g. letterCategory or stringPositionCategory.
            descriptor (SlipNode): E.g. 'a' or leftmost.
        """
        self.ctx = obj.ctx
        self.string = obj.string
        self.object = obj
        self.description_type = description_type
        self.descriptor = descriptor
        self.total_strength = 0.0

    def __repr__(self):
        return f"<Description: {self.synopsis()}>"

    def synopsis(self) -> str:
        where = self.ctx.workspace.string_label(self.object.string)
        return f"{self.object.synopsis()} in {where} string, {self.description_type.name} == {self.descriptor.name}"

    def same_as(self, other: 'Description') -> bool:
        return other.description_type is self.description_type and other.descriptor is self.descriptor

    def activate(self):
        self.description_type.activation = 100
        self.descriptor.activation = 100

    def update_strength(self):
        internal = self.descriptor.depth

        # Count disjoint objects in the same string described with the same type
        num_described_like_this = 0
        for other in self.string.objects:
            if other is self.object:
                continue
            if self.object.is_within(other) or other.is_within(self.object):
                continue
            num_described_like_this += sum(
                1 for d in other.descriptions if d.description_type is self.description_type)
        local_support = LOCAL_SUPPORT_BY_COUNT[min(num_described_like_this, 4)]

        external = (local_support + self.description_type.activation) / 2
        self.total_strength = combine_strengths(internal, external)

    def build(self):
        self.activate()
        if not self.object.has_descriptor(self.descriptor):
            self.object.descriptions.append(self)
        structures = self.ctx.workspace.structures
        if self not in structures:
            structures.append(self)

    def break_(self):
        workspace = self.ctx.workspace
        workspace.structures = [s for s in workspace.structures if s is not self]
        self.object.descriptions = [d for d in self.object.descriptions if d is not self]
