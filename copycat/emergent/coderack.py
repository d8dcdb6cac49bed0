# Folder: copycat/emergent/
# File: coderack.py
"""
The Coderack: a pool of pending codelets from which one is drawn per tick,
with probability rising with urgency (sharper at low temperature).
"""
import math
import logging
import traceback
from collections import Counter
from typing import Dict, List, Optional

from copycat.emergent.codelets import Codelet, CodeletFactory, CodeletType
from copycat.emergent.codelets.utils import get_urgency_bin
from copycat.workspace import Bond, ConceptMapping, Correspondence, Description, Group, Letter, Rule

logger = logging.getLogger(__name__)

DEFAULT_MAX_CODELETS = 100
EVICTION_URGENCY_CEILING = 7.5
SEED_COPIES_PER_OBJECT = 2
# How-many-to-post thresholds; each is blurred by +/- its square root
FEW_UNSTRUCTURED_OBJECTS = 2.0
SOME_UNSTRUCTURED_OBJECTS = 4.0

BOTTOM_UP_CODELETS = (
    CodeletType.BOTTOM_UP_DESCRIPTION_SCOUT,
    CodeletType.BOTTOM_UP_BOND_SCOUT,
    CodeletType.GROUP_SCOUT_WHOLE_STRING,
    CodeletType.BOTTOM_UP_CORRESPONDENCE_SCOUT,
    CodeletType.IMPORTANT_OBJECT_CORRESPONDENCE_SCOUT,
    CodeletType.REPLACEMENT_FINDER,
    CodeletType.RULE_SCOUT,
    CodeletType.RULE_TRANSLATOR,
    CodeletType.BREAKER,
)
SEED_CODELETS = (
    CodeletType.BOTTOM_UP_BOND_SCOUT,
    CodeletType.REPLACEMENT_FINDER,
    CodeletType.BOTTOM_UP_CORRESPONDENCE_SCOUT,
)


class Coderack:
    """Holds pending codelets, picks the next one to run and posts new ones."""

    def __init__(self, ctx, max_codelets: int = DEFAULT_MAX_CODELETS):
        self.ctx = ctx
        self.max_codelets = max_codelets
        self.codelets: List[Codelet] = []
        self.num_codelets_run = 0
        self.last_run_codelet: Optional[Codelet] = None
        self.factory = CodeletFactory(ctx)

    def __repr__(self):
        return f"<Coderack: {len(self.codelets)} pending, {self.num_codelets_run} run>"

    def reset(self):
        self.codelets = []
        self.num_codelets_run = 0
        self.last_run_codelet = None

    def pending_by_kind(self) -> Dict[str, int]:
        return dict(Counter(c.name for c in self.codelets))

    def post(self, codelet: Codelet):
        """Adds codelet; past capacity, evicts one, favouring old low-urgency codelets."""
        self.codelets.append(codelet)
        if len(self.codelets) > self.max_codelets:
            weights = [(self.num_codelets_run - c.birthdate) * (EVICTION_URGENCY_CEILING - c.urgency)
                       for c in self.codelets]
            evicted = self.ctx.rand_gen.weighted_choice(self.codelets, weights)
            self.codelets = [c for c in self.codelets if c is not evicted]
            logger.debug(f"Evicted {evicted!r}")

    def post_new(self, codelet_type, urgency: float, args=None):
        """Creates a codelet of the given kind and posts it."""
        codelet = self.factory.create(codelet_type, urgency, args)
        self.post(codelet)
        return codelet

    def choose_and_run_codelet(self):
        """Runs one codelet, seeding the rack first when it is empty."""
        if not self.codelets:
            self._seed()

        chosen = self.ctx.rand_gen.weighted_choice(self.codelets, self._run_probabilities())
        self.codelets = [c for c in self.codelets if c is not chosen]
        self.num_codelets_run += 1
        try:
            chosen.run()
            self.last_run_codelet = chosen
        except Exception as e:
            logger.debug(f"Codelet {chosen.name} failed:\n{traceback.format_exc()}")
            self.ctx.reporter.error(f"Error running codelet {chosen.name}: {e}")

    def _seed(self):
        num_objects = len(self.ctx.workspace.objects)
        if num_objects == 0:
            self.post_new(CodeletType.RULE_SCOUT, 1)
            return
        for codelet_type in SEED_CODELETS:
            for _ in range(SEED_COPIES_PER_OBJECT * num_objects):
                self.post_new(codelet_type, 1)

    def _run_probabilities(self) -> List[float]:
        scale = (100 - self.ctx.temperature.value() + 10) / 15
        weights = [c.urgency ** scale for c in self.codelets]
        total = sum(weights)
        return [w / total for w in weights]

    def update_codelets(self):
        """Posts top-down codelets for fully active concepts, then bottom-up ones."""
        if self.num_codelets_run == 0:
            return
        self._post_top_down_codelets()
        self._post_bottom_up_codelets()

    def _post_top_down_codelets(self):
        rand_gen = self.ctx.rand_gen
        for node in self.ctx.slipnet.nodes:
            if node.activation < 100:
                continue
            for name in node.codelets:
                codelet_type = CodeletType(name)
                prob = self._probability_of_posting(codelet_type)
                for _ in range(self._how_many_to_post(codelet_type)):
                    if rand_gen.coin_flip(prob):
                        urgency = get_urgency_bin(node.activation * node.depth / 100)
                        self.post_new(codelet_type, urgency, [node])

    def _post_bottom_up_codelets(self):
        rand_gen = self.ctx.rand_gen
        for codelet_type in BOTTOM_UP_CODELETS:
            prob = self._probability_of_posting(codelet_type)
            how_many = self._how_many_to_post(codelet_type)
            urgency = 1 if codelet_type is CodeletType.BREAKER else 3
            if codelet_type is CodeletType.RULE_TRANSLATOR and self.ctx.temperature.value() < 25:
                urgency = 5
            for _ in range(how_many):
                if rand_gen.coin_flip(prob):
                    self.post_new(codelet_type, urgency)

    def _unreplaced_letters(self) -> List[Letter]:
        workspace = self.ctx.workspace
        return [o for o in workspace.initial_string.objects if isinstance(o, Letter) and o.replacement is None]

    def _probability_of_posting(self, codelet_type: CodeletType) -> float:
        workspace = self.ctx.workspace
        family = codelet_type.family
        if family == 'breaker':
            return 1.0
        if family == 'replacement':
            return 1.0 if self._unreplaced_letters() else 0.0
        if family == 'rule':
            return 1.0 if workspace.rule is None else workspace.rule.total_weakness() / 100
        if family == 'correspondence':
            return workspace.inter_string_unhappiness / 100
        if family == 'description':
            return (self.ctx.temperature.value() / 100) ** 2
        return workspace.intra_string_unhappiness / 100

    def _how_many_to_post(self, codelet_type: CodeletType) -> int:
        workspace = self.ctx.workspace
        family = codelet_type.family
        if family in ('breaker', 'description'):
            return 1
        if codelet_type is CodeletType.RULE_TRANSLATOR:
            return 1 if workspace.rule is not None else 0
        if family == 'rule':
            return 2
        if family == 'group' and not workspace.structures_of_kind(Bond.kind):
            return 0
        if family == 'replacement' and workspace.rule is not None:
            return 0

        in_play = [o for o in workspace.objects
                   if o.string is workspace.initial_string or o.string is workspace.target_string]
        number = 0
        if family == 'bond':
            number = sum(1 for o in in_play if not o.spans_string()
                         and ((o.left_bond is None and not o.leftmost) or (o.right_bond is None and not o.rightmost)))
        elif family == 'group':
            number = sum(1 for o in in_play if not o.spans_string() and o.group is None)
        elif family == 'replacement':
            number = len(self._unreplaced_letters())
        elif family == 'correspondence':
            number = sum(1 for o in in_play if o.correspondence is None)

        rand_gen = self.ctx.rand_gen
        if number < rand_gen.sqrt_blur(FEW_UNSTRUCTURED_OBJECTS):
            return 1
        if number < rand_gen.sqrt_blur(SOME_UNSTRUCTURED_OBJECTS):
            return 2
        return 3

    def propose_bond(self, source, destination, category, facet, source_descriptor, dest_descriptor) -> Bond:
        facet.activation = 100
        source_descriptor.activation = 100
        dest_descriptor.activation = 100
        bond = Bond(source, destination, category, facet, source_descriptor, dest_descriptor)
        self.post_new(CodeletType.BOND_STRENGTH_TESTER, get_urgency_bin(category.bond_degree_of_association()),
                      [bond])
        return bond

    def propose_description(self, obj, description_type, descriptor) -> Description:
        description = Description(obj, description_type, descriptor)
        descriptor.activation = 100
        self.post_new(CodeletType.DESCRIPTION_STRENGTH_TESTER, get_urgency_bin(description_type.activation),
                      [description])
        return description

    def propose_correspondence(self, initial_object, target_object, concept_mappings: List[ConceptMapping],
                               flip_target_object: bool) -> Correspondence:
        correspondence = Correspondence(initial_object, target_object, concept_mappings, flip_target_object)
        for mapping in concept_mappings:
            mapping.initial_desc_type.activation = 100
            mapping.initial_descriptor.activation = 100
            mapping.target_desc_type.activation = 100
            mapping.target_descriptor.activation = 100
        distinguishing = [m for m in correspondence.concept_mappings if m.is_distinguishing()]
        avg_strength = sum(m.strength() for m in distinguishing) / (len(distinguishing) or 1)
        self.post_new(CodeletType.CORRESPONDENCE_STRENGTH_TESTER, get_urgency_bin(avg_strength), [correspondence])
        return correspondence

    def propose_group(self, objects, bonds, group_category, direction_category, facet) -> Group:
        bond_category = group_category.get_related_node(self.ctx.slipnet.bond_category)
        bond_category.activation = 100
        if direction_category is not None:
            direction_category.activation = 100
        group = Group(objects[0].string, group_category, direction_category, facet, objects, bonds)
        self.post_new(CodeletType.GROUP_STRENGTH_TESTER, get_urgency_bin(bond_category.bond_degree_of_association()),
                      [group])
        return group

    def propose_rule(self, facet=None, descriptor=None, category=None, relation=None) -> Rule:
        rule = Rule(self.ctx, facet, descriptor, category, relation)
        rule.update_strength()
        depth = 0.0
        if descriptor is not None and relation is not None:
            depth = 100 * math.sqrt((descriptor.depth + relation.depth) / 2 / 100)
        self.post_new(CodeletType.RULE_STRENGTH_TESTER, get_urgency_bin(depth), [rule])
        return rule
