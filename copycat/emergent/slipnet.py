# Folder: copycat/emergent/
# File: slipnet.py
"""
Slipnet: the long-term conceptual memory of the engine.

The network topology (nodes, depths, typed links) is built once and never
changes. Only the activation state changes; it lives in dense numpy arrays
indexed by node id so that decay and spreading can be computed for the whole
network in one pass. Writes to a node's activation go to a pending buffer that
is committed by `Slipnet.update`, so every node is updated from the same
snapshot of the network.
"""
import math
import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

MAX_ACTIVATION = 100.0
FULL_ACTIVATION_THRESHOLD = MAX_ACTIVATION - 1e-5
JUMP_THRESHOLD = 55.0
SHRUNK_LINK_FACTOR = 0.4


class LinkType(Enum):
    CATEGORY = 'category'
    INSTANCE = 'instance'
    PROPERTY = 'property'
    LATERAL_SLIP = 'lateralSlip'
    LATERAL_NON_SLIP = 'lateralNonSlip'


# Codelet kinds posted top-down whenever the keyed concept is fully active.
TOP_DOWN_CODELETS: Dict[str, Tuple[str, ...]] = {
    'left': ('top-down-bond-scout--direction', 'top-down-group-scout--direction'),
    'right': ('top-down-bond-scout--direction', 'top-down-group-scout--direction'),
    'predecessor': ('top-down-bond-scout--category',),
    'successor': ('top-down-bond-scout--category',),
    'sameness': ('top-down-bond-scout--category',),
    'predecessorGroup': ('top-down-group-scout--category',),
    'successorGroup': ('top-down-group-scout--category',),
    'samenessGroup': ('top-down-group-scout--category',),
    'stringPositionCategory': ('top-down-description-scout',),
    'alphabeticPositionCategory': ('top-down-description-scout',),
}


class SlipNode:
    """
    A single concept of the Slipnet (a letter, a number, a relation, a category...).
    """
    def __init__(self, slipnet: 'Slipnet', node_id: int, name: str, short_name: str,
                 depth: float, intrinsic_link_length: float = 0):
        """
        Args:
            slipnet (Slipnet): Owning network, which holds the activation arrays.
            node_id (int): Index of this node in the activation arrays.
            name (str): Unique concept name, e.g. "successor".
            short_name (str): Abbreviated name for compact displays.
            depth (float): Conceptual depth in [0, 100]; deeper concepts decay slower.
            intrinsic_link_length (float): Length of links labelled by this node.
        """
        self.slipnet = slipnet
        self.id = node_id
        self.name = name
        self.short_name = short_name
        self.depth = depth
        self.intrinsic_link_length = intrinsic_link_length
        self.shrunk_link_length = intrinsic_link_length * SHRUNK_LINK_FACTOR
        self.incoming_links: List['SlipLink'] = []
        self.outgoing_links: List['SlipLink'] = []
        self.codelets: Tuple[str, ...] = TOP_DOWN_CODELETS.get(name, ())

    def __repr__(self):
        return f"<SlipNode: {self.name}>"

    def synopsis(self) -> str:
        return self.name

    def _links_of_type(self, link_type: LinkType) -> List['SlipLink']:
        return [link for link in self.outgoing_links if link.type is link_type]

    @property
    def category_links(self) -> List['SlipLink']:
        return self._links_of_type(LinkType.CATEGORY)

    @property
    def instance_links(self) -> List['SlipLink']:
        return self._links_of_type(LinkType.INSTANCE)

    @property
    def property_links(self) -> List['SlipLink']:
        return self._links_of_type(LinkType.PROPERTY)

    @property
    def lateral_slip_links(self) -> List['SlipLink']:
        return self._links_of_type(LinkType.LATERAL_SLIP)

    @property
    def lateral_non_slip_links(self) -> List['SlipLink']:
        return self._links_of_type(LinkType.LATERAL_NON_SLIP)

    @property
    def activation(self) -> float:
        """The committed activation value."""
        return float(self.slipnet.activation[self.id])

    @activation.setter
    def activation(self, value: float):
        # Takes effect at the next Slipnet.update
        self.slipnet.pending[self.id] = value

    def is_fully_active(self) -> bool:
        return self.slipnet.activation[self.id] > FULL_ACTIVATION_THRESHOLD

    def clamp_high(self):
        self.slipnet.activation[self.id] = MAX_ACTIVATION
        self.slipnet.clamped[self.id] = True

    def unclamp(self):
        self.slipnet.clamped[self.id] = False

    def is_clamped_high(self) -> bool:
        return bool(self.slipnet.clamped[self.id])

    def category(self) -> Optional['SlipNode']:
        links = self.category_links
        return links[0].destination if links else None

    def degree_of_association(self) -> float:
        link_length = self.shrunk_link_length if self.is_fully_active() else self.intrinsic_link_length
        return 100 - link_length

    def bond_degree_of_association(self) -> float:
        return min(100.0, 11.0 * math.sqrt(self.degree_of_association()))

    def is_linked_to(self, other: 'SlipNode') -> bool:
        return any(link.destination is other for link in self.outgoing_links)

    def is_slip_linked_to(self, other: 'SlipNode') -> bool:
        return any(link.destination is other for link in self.lateral_slip_links)

    def is_related_to(self, other: 'SlipNode') -> bool:
        return self is other or self.is_linked_to(other)

    def get_related_node(self, relation: 'SlipNode') -> Optional['SlipNode']:
        """Follows the first outgoing link labelled by relation (identity maps to self)."""
        if relation is self.slipnet.identity:
            return self
        for link in self.outgoing_links:
            if link.label is not None and link.label is relation:
                return link.destination
        return None

    def get_bond_category(self, destination: 'SlipNode') -> Optional['SlipNode']:
        """Returns the label of the link to destination (identity when destination is self)."""
        if destination is self:
            return self.slipnet.identity
        for link in self.outgoing_links:
            if link.destination is destination:
                return link.label
        return None

    def apply_slippages(self, slippages: Sequence) -> 'SlipNode':
        """Returns the target descriptor of the first mapping that starts at this node."""
        for mapping in slippages:
            if mapping.initial_descriptor is self:
                return mapping.target_descriptor
        return self


class SlipLink:
    """A directed, typed, optionally labelled edge between two SlipNodes."""

    def __init__(self, link_type: LinkType, source: SlipNode, destination: SlipNode,
                 label: Optional[SlipNode] = None, length: float = 0):
        self.type = link_type
        self.source = source
        self.destination = destination
        self.label = label
        self.fixed_length = length
        source.outgoing_links.append(self)
        destination.incoming_links.append(self)

    def __repr__(self):
        label = f", label={self.label.name}" if self.label else ''
        return f"<SlipLink: {self.source.name} to {self.destination.name} (length={self.fixed_length:.0f}{label})>"

    def degree_of_association(self) -> float:
        if self.fixed_length > 0 or self.label is None:
            return 100 - self.fixed_length
        return self.label.degree_of_association()

    def intrinsic_degree_of_association(self) -> float:
        if self.fixed_length != 0:
            return 100 - self.fixed_length
        if self.label is not None:
            return 100 - self.label.intrinsic_link_length
        return 0.0


class Slipnet:
    """
    The network of concepts. Nodes are reachable as attributes
    (e.g. `slipnet.successor`), letters and numbers as ordered lists.
    """
    def __init__(self):
        self.nodes: List[SlipNode] = []
        self.links: List[SlipLink] = []
        self.letters: List[SlipNode] = []
        self.numbers: List[SlipNode] = []
        self._by_name: Dict[str, SlipNode] = {}

        self._create_nodes()
        n = len(self.nodes)
        self.depths = np.array([node.depth for node in self.nodes], dtype=float)
        self.activation = np.zeros(n)
        self.pending = np.zeros(n)
        self.clamped = np.zeros(n, dtype=bool)

        self._create_links()
        # spread_matrix[i, j]: total activation node i sends to node j when fully active
        self.spread_matrix = np.zeros((n, n))
        for link in self.links:
            self.spread_matrix[link.source.id, link.destination.id] += link.intrinsic_degree_of_association()

        self.reset()
        logger.info(f"Slipnet initialized with {n} nodes and {len(self.links)} links.")

    def node(self, name: str) -> SlipNode:
        """Looks up a node by its concept name."""
        return self._by_name[name]

    def reset(self):
        """Zeroes every activation and clamps the a-priori relevant categories high."""
        self.activation[:] = 0
        self.pending[:] = 0
        self.clamped[:] = False
        self.letter_category.clamp_high()
        self.string_position_category.clamp_high()

    def update(self, rand_gen, unclamp: bool = False):
        """
        Decays, spreads and commits activation for the whole network.
        Args:
            rand_gen (RandGen): Source of the stochastic full-activation jumps.
            unclamp (bool): Release the initially clamped categories first.
        """
        if unclamp:
            self.letter_category.unclamp()
            self.string_position_category.unclamp()
            logger.debug("Slipnet: initial clamps released")

        # Decay and spreading both read the committed activations only
        self.pending -= self.activation * (1 - self.depths / 100)
        fully_active = (self.activation > FULL_ACTIVATION_THRESHOLD).astype(float)
        self.pending += fully_active @ self.spread_matrix

        free = ~self.clamped
        committed = np.clip(self.activation + self.pending, 0, MAX_ACTIVATION)
        self.activation[free] = committed[free]
        self.activation[self.clamped] = MAX_ACTIVATION

        candidates = np.nonzero(free & (self.activation > JUMP_THRESHOLD) & (self.activation != MAX_ACTIVATION))[0]
        for idx in candidates:
            if rand_gen.coin_flip((self.activation[idx] / 100) ** 3):
                self.activation[idx] = MAX_ACTIVATION
        self.pending[:] = 0

    def fully_active_nodes(self) -> List[SlipNode]:
        return [node for node in self.nodes if node.is_fully_active()]

    def _add_node(self, name: str, short_name: str, depth: float, length: float = 0) -> SlipNode:
        node = SlipNode(self, len(self.nodes), name, short_name, depth, length)
        self.nodes.append(node)
        self._by_name[name] = node
        return node

    def _add_link(self, link_type: LinkType, source: SlipNode, destination: SlipNode,
                  label: Optional[SlipNode] = None, length: float = 0):
        self.links.append(SlipLink(link_type, source, destination, label, length))

    def _add_symmetric_links(self, link_type, source, destination, label=None, length=0):
        self._add_link(link_type, source, destination, label, length)
        self._add_link(link_type, destination, source, label, length)

    def _add_category_instance_links(self, category: SlipNode, instance: SlipNode, instance_length: float):
        category_length = category.depth - instance.depth
        self._add_link(LinkType.INSTANCE, category, instance, None, instance_length)
        self._add_link(LinkType.CATEGORY, instance, category, None, category_length)

    def _create_nodes(self):
        for ch in 'abcdefghijklmnopqrstuvwxyz':
            self.letters.append(self._add_node(ch, ch.upper(), 10))
        for digit in '12345':
            self.numbers.append(self._add_node(digit, digit, 30))

        # String positions
        self.leftmost = self._add_node('leftmost', 'lmost', 40)
        self.rightmost = self._add_node('rightmost', 'rmost', 40)
        self.middle = self._add_node('middle', 'mid', 40)
        self.single = self._add_node('single', 'single', 40)
        self.whole = self._add_node('whole', 'whole', 40)

        # Alphabetic positions
        self.first = self._add_node('first', 'first', 60)
        self.last = self._add_node('last', 'last', 60)

        # Directions
        self.left = self._add_node('left', 'left', 40)
        self.right = self._add_node('right', 'right', 40)

        # Bond types
        self.predecessor = self._add_node('predecessor', 'pred', 50, 60)
        self.successor = self._add_node('successor', 'succ', 50, 60)
        self.sameness = self._add_node('sameness', 'same', 80)

        # Group types
        self.predecessor_group = self._add_node('predecessorGroup', 'predGrp', 50)
        self.successor_group = self._add_node('successorGroup', 'succGrp', 50)
        self.sameness_group = self._add_node('samenessGroup', 'sameGrp', 80)

        # Other relations
        self.identity = self._add_node('identity', 'iden', 90)
        self.opposite = self._add_node('opposite', 'opp', 90, 80)

        # Objects
        self.letter = self._add_node('letter', 'letter', 20)
        self.group = self._add_node('group', 'group', 80)

        # Categories
        self.letter_category = self._add_node('letterCategory', 'letCat', 30)
        self.string_position_category = self._add_node('stringPositionCategory', 'strPosCat', 70)
        self.alphabetic_position_category = self._add_node('alphabeticPositionCategory', 'alphPosCat', 80)
        self.direction_category = self._add_node('directionCategory', 'dirCat', 70)
        self.bond_category = self._add_node('bondCategory', 'bndCat', 80)
        self.group_category = self._add_node('groupCategory', 'grpCat', 80)
        self.length = self._add_node('length', 'len', 60)
        self.object_category = self._add_node('objectCategory', 'objCat', 90)
        self.bond_facet = self._add_node('bondFacet', 'bndFac', 90)

    def _create_links(self):
        # Successor/predecessor chains
        for node_set in (self.letters, self.numbers):
            for previous, node in zip(node_set, node_set[1:]):
                self._add_link(LinkType.LATERAL_NON_SLIP, previous, node, self.successor, 0)
                self._add_link(LinkType.LATERAL_NON_SLIP, node, previous, self.predecessor, 0)

        for letter in self.letters:
            self._add_category_instance_links(self.letter_category, letter, 97)
        self._add_link(LinkType.CATEGORY, self.letter_category, self.sameness_group, None, 50)

        for number in self.numbers:
            self._add_category_instance_links(self.length, number, 100)

        for group in (self.predecessor_group, self.successor_group, self.sameness_group):
            self._add_link(LinkType.LATERAL_NON_SLIP, group, self.length, None, 95)

        opposites = [
            (self.first, self.last),
            (self.leftmost, self.rightmost),
            (self.left, self.right),
            (self.successor, self.predecessor),
            (self.successor_group, self.predecessor_group),
        ]
        for a, b in opposites:
            self._add_symmetric_links(LinkType.LATERAL_SLIP, a, b, self.opposite, 0)

        # Properties
        self._add_link(LinkType.PROPERTY, self.letters[0], self.first, None, 75)
        self._add_link(LinkType.PROPERTY, self.letters[-1], self.last, None, 75)

        ic_pairs = [
            (self.object_category, self.letter),
            (self.object_category, self.group),
            (self.string_position_category, self.leftmost),
            (self.string_position_category, self.rightmost),
            (self.string_position_category, self.middle),
            (self.string_position_category, self.single),
            (self.string_position_category, self.whole),
            (self.alphabetic_position_category, self.first),
            (self.alphabetic_position_category, self.last),
            (self.direction_category, self.left),
            (self.direction_category, self.right),
            (self.bond_category, self.predecessor),
            (self.bond_category, self.successor),
            (self.bond_category, self.sameness),
            (self.group_category, self.predecessor_group),
            (self.group_category, self.successor_group),
            (self.group_category, self.sameness_group),
            (self.bond_facet, self.letter_category),
            (self.bond_facet, self.length),
        ]
        for category, instance in ic_pairs:
            self._add_category_instance_links(category, instance, 100)

        # Bonds to their groups and back
        self._add_link(LinkType.LATERAL_NON_SLIP, self.sameness, self.sameness_group, self.group_category, 30)
        self._add_link(LinkType.LATERAL_NON_SLIP, self.successor, self.successor_group, self.group_category, 60)
        self._add_link(LinkType.LATERAL_NON_SLIP, self.predecessor, self.predecessor_group, self.group_category, 60)
        self._add_link(LinkType.LATERAL_NON_SLIP, self.sameness_group, self.sameness, self.bond_category, 90)
        self._add_link(LinkType.LATERAL_NON_SLIP, self.successor_group, self.successor, self.bond_category, 90)
        self._add_link(LinkType.LATERAL_NON_SLIP, self.predecessor_group, self.predecessor, self.bond_category, 90)

        self._add_symmetric_links(LinkType.LATERAL_SLIP, self.letter_category, self.length, None, 95)
        self._add_symmetric_links(LinkType.LATERAL_SLIP, self.letter, self.group, None, 90)

        # Direction-position, direction-neighbor, position-neighbor
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.left, self.leftmost, None, 90)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.right, self.rightmost, None, 90)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.right, self.leftmost, None, 100)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.left, self.rightmost, None, 100)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.leftmost, self.first, None, 100)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.rightmost, self.first, None, 100)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.leftmost, self.last, None, 100)
        self._add_symmetric_links(LinkType.LATERAL_NON_SLIP, self.rightmost, self.last, None, 100)

        self._add_symmetric_links(LinkType.LATERAL_SLIP, self.single, self.whole, None, 90)
