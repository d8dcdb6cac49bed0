from copycat.emergent.codelets import CodeletType, utils
from copycat.emergent.codelets.bond_codelets import BondBuilder, BottomUpBondScout, TopDownBondScoutCategory
from copycat.emergent.codelets.breaker import Breaker
from copycat.emergent.codelets.correspondence_codelets import CorrespondenceBuilder
from copycat.emergent.codelets.group_codelets import GroupBuilder
from copycat.emergent.codelets.rule_codelets import ReplacementFinder, RuleScout, RuleTranslator
from copycat.workspace import Bond, ConceptMapping, Correspondence, Group, Rule, StructureKind


def _letter_bond(engine, source, destination):
    sn = engine.slipnet
    source_descriptor = source.get_descriptor(sn.letter_category)
    dest_descriptor = destination.get_descriptor(sn.letter_category)
    return Bond(source, destination, source_descriptor.get_bond_category(dest_descriptor),
                sn.letter_category, source_descriptor, dest_descriptor)


def _find_all_replacements(engine):
    letters = engine.workspace.initial_string.letters
    for _ in range(500):
        if all(letter.replacement is not None for letter in letters):
            break
        ReplacementFinder(engine, 3).run()
    assert all(letter.replacement is not None for letter in letters)


def test_bond_builder_builds_uncontested_bond(abc_engine):
    a, b, _ = abc_engine.workspace.initial_string.letters
    bond = _letter_bond(abc_engine, a, b)
    BondBuilder(abc_engine, 3, [bond]).run()
    assert bond in abc_engine.workspace.structures
    assert a.right_bond is bond


def test_bond_builder_reinforces_existing_bond(abc_engine):
    a, b, _ = abc_engine.workspace.initial_string.letters
    existing = _letter_bond(abc_engine, a, b)
    existing.build()
    duplicate = _letter_bond(abc_engine, a, b)
    BondBuilder(abc_engine, 3, [duplicate]).run()
    assert abc_engine.workspace.structures_of_kind(StructureKind.BOND) == [existing]


def test_group_builder_builds_group_over_bonds(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    bonds = [_letter_bond(abc_engine, a, b), _letter_bond(abc_engine, b, c)]
    for bond in bonds:
        bond.build()
    group = Group(workspace.initial_string, sn.successor_group, sn.right, sn.letter_category, [a, b, c], bonds)
    GroupBuilder(abc_engine, 3, [group]).run()
    assert group in workspace.objects
    assert group.bond_list == bonds
    assert a.group is group


def test_group_builder_creates_missing_bonds(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    bond = _letter_bond(abc_engine, a, b)
    bond.build()
    group = Group(workspace.initial_string, sn.successor_group, sn.right, sn.letter_category, [a, b, c], [bond])
    GroupBuilder(abc_engine, 3, [group]).run()
    assert b.right_bond is not None
    assert b.right_bond.category is sn.successor
    assert len(group.bond_list) == 2


def test_replacement_finder_marks_changed_letter(abc_engine):
    sn = abc_engine.slipnet
    _find_all_replacements(abc_engine)
    a, b, c = abc_engine.workspace.initial_string.letters
    assert a.replacement.relation is sn.sameness
    assert not a.changed
    assert c.replacement.relation is sn.successor
    assert c.changed
    assert abc_engine.workspace.changed_object is c


def test_rule_scout_waits_for_replacements(abc_engine):
    RuleScout(abc_engine, 3).run()
    assert abc_engine.coderack.codelets == []


def test_rule_scout_proposes_rule_for_change(abc_engine):
    sn = abc_engine.slipnet
    _find_all_replacements(abc_engine)
    RuleScout(abc_engine, 3).run()
    pending = abc_engine.coderack.codelets
    assert len(pending) == 1
    assert pending[0].codelet_type is CodeletType.RULE_STRENGTH_TESTER
    rule = pending[0].args[0]
    assert rule.facet is sn.letter_category
    assert rule.descriptor in (sn.rightmost, sn.letters[2])
    assert rule.relation in (sn.successor, sn.letters[3])


def test_rule_scout_proposes_no_change_rule(engine):
    engine.set_strings('abc', 'abc', 'xyz')
    _find_all_replacements(engine)
    RuleScout(engine, 3).run()
    rule = engine.coderack.codelets[0].args[0]
    assert rule.facet is None
    assert rule.synopsis() == 'No change'


def _cool(engine):
    engine.temperature.try_unclamp(engine.temperature.clamp_time)
    engine.temperature.set(0)


def test_rule_translator_sets_answer(engine):
    sn = engine.slipnet
    engine.set_strings('abc', 'abd', 'ijk')
    Rule(engine, sn.letter_category, sn.rightmost, sn.letter, sn.successor).build()
    _cool(engine)
    RuleTranslator(engine, 5).run()
    assert engine.workspace.final_answer == 'ijl'


def test_rule_translator_reclamps_on_failure(abc_engine):
    sn = abc_engine.slipnet
    Rule(abc_engine, sn.letter_category, sn.rightmost, sn.letter, sn.successor).build()
    _cool(abc_engine)
    RuleTranslator(abc_engine, 5).run()
    assert abc_engine.workspace.final_answer is None
    assert abc_engine.temperature.clamped
    assert abc_engine.temperature.clamp_time == abc_engine.coderack.num_codelets_run + 100


def test_breaker_without_structures_does_nothing(abc_engine):
    before = list(abc_engine.workspace.structures)
    for _ in range(10):
        Breaker(abc_engine, 1).run()
    assert abc_engine.workspace.structures == before


def _bare_correspondence(initial_object, target_object):
    # No concept mappings: total strength is 0 for non-spanning letters
    return Correspondence(initial_object, target_object, [])


def _mapped_correspondence(initial_object, target_object):
    mappings = ConceptMapping.get_mappings(initial_object, target_object,
                                           initial_object.descriptions, target_object.descriptions)
    return Correspondence(initial_object, target_object, mappings)


def test_bottom_up_bond_scout_posts_strength_tester(abc_engine):
    sn = abc_engine.slipnet
    BottomUpBondScout(abc_engine, 3).run()
    pending = abc_engine.coderack.codelets
    assert len(pending) == 1
    assert pending[0].codelet_type is CodeletType.BOND_STRENGTH_TESTER
    bond = pending[0].args[0]
    assert bond.source.is_beside(bond.destination)
    assert bond.category in (sn.successor, sn.predecessor)
    assert bond.facet is sn.letter_category
    assert bond not in abc_engine.workspace.structures


def test_top_down_bond_scout_posts_bond_of_requested_category(abc_engine):
    sn = abc_engine.slipnet
    TopDownBondScoutCategory(abc_engine, 3, [sn.successor]).run()
    pending = abc_engine.coderack.codelets
    assert [c.codelet_type for c in pending] == [CodeletType.BOND_STRENGTH_TESTER]
    bond = pending[0].args[0]
    assert bond.category is sn.successor
    assert bond.direction_category is sn.right


def test_fight_it_out_wins_and_loses(abc_engine):
    workspace = abc_engine.workspace
    a, b, _ = workspace.initial_string.letters
    x, y, _ = workspace.target_string.letters
    bond = _letter_bond(abc_engine, a, b)
    weak = [_bare_correspondence(a, x), _bare_correspondence(b, y)]
    assert utils.fight_it_out(abc_engine, bond, 1.0, weak, 1.0)
    assert not utils.fight_it_out(abc_engine, weak[0], 1.0, [bond], 1.0)
    assert utils.fight_it_out(abc_engine, weak[0], 1.0, [], 1.0)


def test_bond_builder_breaks_losing_correspondence(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, _ = workspace.initial_string.letters
    x, y, _ = workspace.target_string.letters
    _letter_bond(abc_engine, x, y).build()
    loser = _bare_correspondence(a, x)
    loser.build()

    # b -> a points left while the partner bond x -> y points right
    bond = _letter_bond(abc_engine, b, a)
    assert bond.direction_category is sn.left
    BondBuilder(abc_engine, 3, [bond]).run()
    assert a.right_bond is bond
    assert a.correspondence is None and x.correspondence is None
    assert loser not in workspace.structures


def test_correspondence_builder_breaks_weaker_rival(abc_engine):
    workspace = abc_engine.workspace
    a = workspace.initial_string.letters[0]
    x, y, _ = workspace.target_string.letters
    rival = _bare_correspondence(a, y)
    rival.build()

    correspondence = _mapped_correspondence(a, x)
    CorrespondenceBuilder(abc_engine, 3, [correspondence]).run()
    assert a.correspondence is correspondence and x.correspondence is correspondence
    assert y.correspondence is None
    assert workspace.structures_of_kind(StructureKind.CORRESPONDENCE) == [correspondence]


def test_correspondence_builder_loses_to_stronger_rival(abc_engine):
    workspace = abc_engine.workspace
    a = workspace.initial_string.letters[0]
    x, y, _ = workspace.target_string.letters
    rival = _mapped_correspondence(a, x)
    rival.build()

    CorrespondenceBuilder(abc_engine, 3, [_bare_correspondence(a, y)]).run()
    assert a.correspondence is rival
    assert y.correspondence is None
    assert workspace.structures_of_kind(StructureKind.CORRESPONDENCE) == [rival]


def test_correspondence_builder_flips_target_group(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    x, y, z = workspace.target_string.letters
    initial_bonds = [_letter_bond(abc_engine, a, b), _letter_bond(abc_engine, b, c)]
    target_bonds = [_letter_bond(abc_engine, x, y), _letter_bond(abc_engine, y, z)]
    for bond in initial_bonds + target_bonds:
        bond.build()
    initial_group = Group(workspace.initial_string, sn.successor_group, sn.right, sn.letter_category,
                          [a, b, c], initial_bonds)
    initial_group.build()
    unflipped = Group(workspace.target_string, sn.successor_group, sn.right, sn.letter_category,
                      [x, y, z], target_bonds)
    unflipped.build()

    flipped = unflipped.flipped_version()
    correspondence = Correspondence(initial_group, flipped, [], flip_target_object=True)
    CorrespondenceBuilder(abc_engine, 3, [correspondence]).run()

    assert unflipped not in workspace.structures and unflipped not in workspace.objects
    assert flipped in workspace.target_string.objects
    assert all(letter.group is flipped for letter in (x, y, z))
    assert x.right_bond is flipped.bond_list[0]
    assert x.right_bond.category is sn.predecessor
    assert x.right_bond.direction_category is sn.left
    assert not any(bond in workspace.structures for bond in target_bonds)
    assert initial_group.correspondence is correspondence
    assert flipped.correspondence is correspondence


def test_breaker_breaks_weak_structures_when_hot(abc_engine):
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    bond = _letter_bond(abc_engine, a, b)
    bond.build()
    assert abc_engine.temperature.value() == 100

    # Unscored structures have strength 0 and cannot resist at temperature 100
    Breaker(abc_engine, 1).run()
    assert bond not in workspace.structures
    assert a.right_bond is None and b.left_bond is None


def test_breaker_takes_group_with_its_bond(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    bonds = [_letter_bond(abc_engine, a, b), _letter_bond(abc_engine, b, c)]
    for bond in bonds:
        bond.build()
    group = Group(workspace.initial_string, sn.successor_group, sn.right, sn.letter_category, [a, b, c], bonds)
    group.build()

    Breaker(abc_engine, 1).run()
    assert group not in workspace.structures
    assert all(letter.group is None for letter in (a, b, c))
