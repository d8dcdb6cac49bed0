import pytest

from copycat.workspace import (Bond, ConceptMapping, Correspondence, Description, Group, Rule,
                               StructureKind, combine_strengths)


def _bond(engine, source, destination):
    sn = engine.slipnet
    source_descriptor = source.get_descriptor(sn.letter_category)
    dest_descriptor = destination.get_descriptor(sn.letter_category)
    category = source_descriptor.get_bond_category(dest_descriptor)
    if category is sn.identity:
        category = sn.sameness
    return Bond(source, destination, category, sn.letter_category, source_descriptor, dest_descriptor)


def test_combine_strengths():
    assert combine_strengths(100, 0) == 100
    assert combine_strengths(0, 40) == 40
    assert combine_strengths(50, 100) == 75


def test_letters_carry_position_descriptions(abc_engine):
    sn = abc_engine.slipnet
    a, b, c = abc_engine.workspace.initial_string.letters
    assert a.get_descriptor(sn.string_position_category) is sn.leftmost
    assert b.get_descriptor(sn.string_position_category) is sn.middle
    assert c.get_descriptor(sn.string_position_category) is sn.rightmost
    assert c.get_descriptor(sn.letter_category) is sn.letters[2]
    assert a.is_distinguishing_descriptor(sn.leftmost)
    assert not a.is_distinguishing_descriptor(sn.letter)


def test_successor_bond_from_a_to_b(abc_engine):
    sn = abc_engine.slipnet
    a, b, _ = abc_engine.workspace.initial_string.letters
    bond = _bond(abc_engine, a, b)
    assert bond.category is sn.successor
    assert bond.direction_category is sn.right
    assert bond.source_descriptor is sn.letters[0]
    assert bond.dest_descriptor is sn.letters[1]
    assert bond.left_object is a and bond.right_object is b


def test_bond_build_and_break_restore_collections(abc_engine):
    workspace = abc_engine.workspace
    a, b, _ = workspace.initial_string.letters
    before = list(workspace.structures)
    bond = _bond(abc_engine, a, b)
    bond.build()
    assert bond in workspace.structures
    assert a.right_bond is bond and b.left_bond is bond
    assert bond in workspace.initial_string.bonds
    bond.break_()
    assert workspace.structures == before
    assert a.right_bond is None and b.left_bond is None
    assert workspace.initial_string.bonds == []
    assert a.bonds == [] and b.bonds == []


def test_bond_strength_in_range(abc_engine):
    a, b, c = abc_engine.workspace.initial_string.letters
    first = _bond(abc_engine, a, b)
    first.build()
    second = _bond(abc_engine, b, c)
    second.build()
    for bond in (first, second):
        bond.update_strength()
        assert 0 <= bond.total_strength <= 100


def test_group_spanning_string(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    bonds = [_bond(abc_engine, a, b), _bond(abc_engine, b, c)]
    for bond in bonds:
        bond.build()
    group = Group(workspace.initial_string, sn.successor_group, sn.right, sn.letter_category, [a, b, c], bonds)
    assert group.spans_string()
    assert group.bond_category is sn.successor
    assert group.get_descriptor(sn.string_position_category) is sn.whole

    group.update_strength()
    assert 0 <= group.total_strength <= 100


def _successor_group(engine, wstring, letters):
    sn = engine.slipnet
    bonds = [_bond(engine, left, right) for left, right in zip(letters, letters[1:])]
    for bond in bonds:
        bond.build()
    return Group(wstring, sn.successor_group, sn.right, sn.letter_category, letters, bonds)


def test_group_local_support_from_neighbouring_groups(engine):
    assert engine.set_strings('abcdef', 'abcdeg', 'xyz')
    wstring = engine.workspace.initial_string
    a, b, c, d, e, f = wstring.letters

    group = _successor_group(engine, wstring, [a, b])
    assert group.number_of_local_supporting_groups() == 0
    assert group.local_support() == 0.0
    group.update_strength()
    unsupported = group.total_strength

    _successor_group(engine, wstring, [d, e]).build()
    assert group.number_of_local_supporting_groups() == 1
    # 100 * sqrt(1 / (0.5 * 6)) * 0.6 ** 1
    assert group.local_support() == pytest.approx(100 * (1 / 3) ** 0.5 * 0.6)
    group.update_strength()
    assert group.total_strength > unsupported

    _successor_group(engine, wstring, [b, c]).build()
    # Overlapping groups do not support each other
    assert group.number_of_local_supporting_groups() == 1


def test_group_build_and_break(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a, b, c = workspace.initial_string.letters
    bonds = [_bond(abc_engine, a, b), _bond(abc_engine, b, c)]
    for bond in bonds:
        bond.build()
    before = list(workspace.structures)
    group = Group(workspace.initial_string, sn.successor_group, sn.right, sn.letter_category, [a, b, c], bonds)
    group.build()
    assert group in workspace.objects and group in workspace.initial_string.objects
    assert all(letter.group is group for letter in (a, b, c))
    assert workspace.initial_string.get_equivalent_group(group) is group

    group.break_()
    assert workspace.structures == before
    assert group not in workspace.objects
    assert all(letter.group is None for letter in (a, b, c))


def test_flipped_group(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    x, y, z = workspace.target_string.letters
    bonds = [_bond(abc_engine, x, y), _bond(abc_engine, y, z)]
    group = Group(workspace.target_string, sn.successor_group, sn.right, sn.letter_category, [x, y, z], bonds)
    flipped = group.flipped_version()
    assert flipped.group_category is sn.predecessor_group
    assert flipped.direction_category is sn.left
    assert all(bond.category is sn.predecessor for bond in flipped.bond_list)


def test_one_correspondence_per_object(abc_engine):
    workspace = abc_engine.workspace
    a = workspace.initial_string.letters[0]
    x, y, _ = workspace.target_string.letters
    first = Correspondence(a, x, ConceptMapping.get_mappings(a, x, a.descriptions, x.descriptions))
    first.build()
    second = Correspondence(a, y, ConceptMapping.get_mappings(a, y, a.descriptions, y.descriptions))
    second.build()
    assert a.correspondence is second
    assert x.correspondence is None
    assert workspace.structures_of_kind(StructureKind.CORRESPONDENCE) == [second]

    second.break_()
    assert a.correspondence is None and y.correspondence is None
    assert workspace.structures_of_kind(StructureKind.CORRESPONDENCE) == []


def test_correspondence_strength_in_range(abc_engine):
    workspace = abc_engine.workspace
    c = workspace.initial_string.letters[2]
    x = workspace.target_string.letters[0]
    correspondence = Correspondence(c, x, ConceptMapping.get_mappings(
        c, x, c.relevant_descriptions(), x.relevant_descriptions()))
    correspondence.build()
    correspondence.update_strength()
    assert 0 <= correspondence.total_strength <= 100


def test_concept_mapping_between_opposite_ends(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    c = workspace.initial_string.letters[2]
    x = workspace.target_string.letters[0]
    mapping = ConceptMapping(sn.string_position_category, sn.string_position_category,
                             sn.rightmost, sn.leftmost, c, x)
    assert mapping.label is sn.opposite
    assert mapping.can_slip()
    assert mapping.is_distinguishing()
    symmetric = mapping.symmetric_version()
    assert symmetric.initial_descriptor is sn.leftmost
    assert symmetric.target_descriptor is sn.rightmost


def test_single_rule(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    first = Rule(abc_engine, sn.letter_category, sn.rightmost, sn.letter, sn.successor)
    first.build()
    second = Rule(abc_engine)
    second.build()
    assert workspace.rule is second
    assert workspace.structures_of_kind(StructureKind.RULE) == [second]
    second.break_()
    assert workspace.rule is None
    assert workspace.structures_of_kind(StructureKind.RULE) == []


def test_rule_strength(abc_engine):
    sn = abc_engine.slipnet
    no_change = Rule(abc_engine)
    no_change.update_strength()
    assert no_change.total_strength == 50
    assert no_change.synopsis() == 'No change'
    rule = Rule(abc_engine, sn.letter_category, sn.rightmost, sn.letter, sn.successor)
    rule.update_strength()
    assert 0 <= rule.total_strength <= 100
    assert rule.synopsis() == 'Replace letterCategory of rightmost letter by successor'


def test_description_build_and_break(abc_engine):
    sn = abc_engine.slipnet
    workspace = abc_engine.workspace
    a = workspace.initial_string.letters[0]
    description = Description(a, sn.alphabetic_position_category, sn.first)
    description.build()
    assert a.has_descriptor(sn.first)
    assert description in workspace.structures
    description.update_strength()
    assert 0 <= description.total_strength <= 100
    description.break_()
    assert not a.has_descriptor(sn.first)
    assert description not in workspace.structures
