# Folder: copycat/emergent/codelets/
# File: utils.py
"""
Helpers shared by the codelets: urgency binning, salience-weighted object
choice, scout source selection and structure fights.
"""
import logging
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

NUM_URGENCY_BINS = 7


def get_urgency_bin(urgency: float) -> int:
    """Maps an urgency in [0, 100] onto one of 7 bins (1 to 7)."""
    i = int(urgency) * NUM_URGENCY_BINS // 100
    return NUM_URGENCY_BINS if i >= NUM_URGENCY_BINS else i + 1


def choose_unmodified_object(ctx, attribute: str, objects: Sequence):
    """Picks an object outside the modified string, weighted by the adjusted attribute value."""
    candidates = [o for o in objects if o.string is not ctx.workspace.modified_string]
    weights = [ctx.temperature.get_adjusted_value(getattr(o, attribute)) for o in candidates]
    return ctx.rand_gen.weighted_choice(candidates, weights)


def choose_neighbor(ctx, source):
    """Picks an object adjacent to source, weighted by intra-string salience."""
    candidates = [o for o in ctx.workspace.objects if o.is_beside(source)]
    weights = [ctx.temperature.get_adjusted_value(o.intra_string_salience) for o in candidates]
    return ctx.rand_gen.weighted_choice(candidates, weights)


def _string_relevance(wstring, criterion: str, node) -> float:
    if criterion == 'bondCategory' and len(wstring.objects) == 1:
        return 0.0
    non_spanning = [o for o in wstring.objects if not o.spans_string()]
    if criterion == 'bondCategory':
        matches = sum(1 for o in non_spanning if o.right_bond and o.right_bond.category is node)
    else:
        matches = sum(1 for o in non_spanning if o.right_bond and o.right_bond.direction_category is node)
    if len(non_spanning) == 1:
        return 100.0 * matches
    if len(non_spanning) == 0:
        return 0.0
    return 100.0 * matches / (len(non_spanning) - 1)


def get_scout_source(ctx, criterion: str, node):
    """
    Chooses the string a top-down scout should look at, then an object in it.
    Args:
        criterion (str): 'bondCategory' or 'bondDirection'.
        node (SlipNode): The category or direction being sought.
    Returns:
        WorkspaceObject or None.
    """
    workspace = ctx.workspace
    initials = _string_relevance(workspace.initial_string, criterion, node) + \
        workspace.initial_string.intra_string_unhappiness
    targets = _string_relevance(workspace.target_string, criterion, node) + \
        workspace.target_string.intra_string_unhappiness
    if ctx.rand_gen.weighted_greater_than(targets, initials):
        chosen_string = workspace.target_string
    else:
        chosen_string = workspace.initial_string
    return choose_unmodified_object(ctx, 'intra_string_salience', chosen_string.objects)


def choose_bond_facet(ctx, source, destination):
    """Picks a facet (letterCategory or length) described on both objects."""
    sn = ctx.slipnet
    bond_facets = (sn.letter_category, sn.length)
    source_facets = [d.description_type for d in source.descriptions if d.description_type in bond_facets]
    candidates = [d.description_type for d in destination.descriptions if d.description_type in source_facets]

    siblings = [o for o in ctx.workspace.objects if o.string is source.string]
    sibling_types = [d.description_type for o in siblings for d in o.descriptions]
    weights = []
    for facet in candidates:
        support = 100 * sum(1 for t in sibling_types if t is facet) / (len(siblings) or 1)
        weights.append((facet.activation + support) / 2)
    return ctx.rand_gen.weighted_choice(candidates, weights)


def structure_vs_structure(ctx, structure1, weight1: float, structure2, weight2: float) -> bool:
    """Returns True when structure1 wins a temperature-adjusted, weighted strength contest."""
    structure1.update_strength()
    structure2.update_strength()
    weighted1 = ctx.temperature.get_adjusted_value(structure1.total_strength * weight1)
    weighted2 = ctx.temperature.get_adjusted_value(structure2.total_strength * weight2)
    return ctx.rand_gen.weighted_greater_than(weighted1, weighted2)


def fight_it_out(ctx, structure, structure_weight: float, incompatibles: Sequence,
                 incompatible_weight: float) -> bool:
    """Returns True only if structure beats every incompatible structure."""
    for incompatible in incompatibles:
        if not structure_vs_structure(ctx, structure, structure_weight, incompatible, incompatible_weight):
            logger.debug(f"{structure!r} lost to {incompatible!r}")
            return False
    return True


def _extends_run(bond, category, direction, facet) -> bool:
    if bond is None or bond.category is not category:
        return False
    if bond.direction_category is not direction and bond.direction_category is not None:
        return False
    return facet is None or facet is bond.facet


def collect_bonded_run(source, category, direction) -> Tuple[list, list, Optional[object], Optional[object]]:
    """
    Walks left then right from source along bonds of one category and direction.
    Returns:
        (objects, bonds, facet, direction) of the run, left to right. objects has
        a single element when no bond extends the run.
    """
    facet = None
    while _extends_run(source.left_bond, category, direction, facet):
        facet = source.left_bond.facet
        direction = source.left_bond.direction_category
        source = source.left_bond.left_object

    destination = source
    while _extends_run(destination.right_bond, category, direction, facet):
        facet = destination.right_bond.facet
        direction = destination.right_bond.direction_category
        destination = destination.right_bond.right_object

    objects = [source]
    bonds = []
    current = source
    while current is not destination:
        bonds.append(current.right_bond)
        current = current.right_bond.right_object
        objects.append(current)
    return objects, bonds, facet, direction
