import numpy as np
import pytest

from copycat.emergent.slipnet import Slipnet
from copycat.rand_gen import RandGen


@pytest.fixture
def slipnet():
    return Slipnet()


def test_clamped_categories_read_full(slipnet):
    rand_gen = RandGen(1)
    assert slipnet.letter_category.activation == 100
    assert slipnet.string_position_category.is_clamped_high()
    slipnet.update(rand_gen)
    assert slipnet.letter_category.activation == 100
    slipnet.update(rand_gen, unclamp=True)
    assert not slipnet.letter_category.is_clamped_high()


def test_activation_stays_in_bounds(slipnet):
    rand_gen = RandGen(2)
    for node in slipnet.nodes[::3]:
        node.activation = 250
    for _ in range(20):
        slipnet.update(rand_gen)
        assert np.all(slipnet.activation >= 0)
        assert np.all(slipnet.activation <= 100)


def test_writes_take_effect_on_update(slipnet):
    slipnet.successor.activation = 100
    assert slipnet.successor.activation == 0
    slipnet.update(RandGen(3))
    assert slipnet.successor.activation == 100
    assert slipnet.successor.is_fully_active()


def test_links(slipnet):
    sn = slipnet
    a, b = sn.letters[0], sn.letters[1]
    assert a.get_bond_category(b) is sn.successor
    assert b.get_bond_category(a) is sn.predecessor
    assert a.get_bond_category(a) is sn.identity
    assert sn.successor.get_related_node(sn.opposite) is sn.predecessor
    assert sn.successor_group.get_related_node(sn.bond_category) is sn.successor
    assert sn.sameness.get_related_node(sn.group_category) is sn.sameness_group
    assert sn.leftmost.is_slip_linked_to(sn.rightmost)
    assert sn.letters[5].category() is sn.letter_category


def test_lookup_and_codelet_table(slipnet):
    assert slipnet.node('successorGroup') is slipnet.successor_group
    assert 'top-down-group-scout--category' in slipnet.successor_group.codelets
    assert slipnet.letters[0].codelets == ()


def test_apply_slippages_without_mappings(slipnet):
    assert slipnet.rightmost.apply_slippages([]) is slipnet.rightmost
