import pytest

from copycat.emergent.codelets import CODELET_REGISTRY, Codelet, CodeletType, UnknownCodeletError
from copycat.emergent.codelets.bond_codelets import BondBuilder
from copycat.emergent.codelets.utils import get_urgency_bin


def test_urgency_bins():
    assert get_urgency_bin(0) == 1
    assert get_urgency_bin(14) == 1
    assert get_urgency_bin(15) == 2
    assert get_urgency_bin(50) == 4
    assert get_urgency_bin(99) == 7
    assert get_urgency_bin(100) == 7


def test_every_kind_is_registered():
    assert set(CODELET_REGISTRY) == set(CodeletType)
    for codelet_type, cls in CODELET_REGISTRY.items():
        assert cls.codelet_type is codelet_type


def test_factory_by_name(engine):
    codelet = engine.coderack.factory.create('bond-builder', 3, ['bond'])
    assert isinstance(codelet, BondBuilder)
    assert codelet.name == 'bond-builder'
    assert codelet.urgency == 3
    assert codelet.birthdate == engine.coderack.num_codelets_run


def test_factory_rejects_unknown_kind(engine):
    with pytest.raises(UnknownCodeletError):
        engine.coderack.factory.create('no-such-codelet', 1)
    with pytest.raises(KeyError):
        engine.coderack.factory.create('no-such-codelet', 1)


def test_post_evicts_beyond_capacity(engine):
    coderack = engine.coderack
    for _ in range(coderack.max_codelets + 20):
        coderack.post_new(CodeletType.BREAKER, 1)
    assert len(coderack.codelets) == coderack.max_codelets


def test_update_codelets_waits_for_first_run(abc_engine):
    abc_engine.coderack.update_codelets()
    assert abc_engine.coderack.codelets == []


def test_empty_rack_is_seeded(abc_engine):
    coderack = abc_engine.coderack
    coderack.choose_and_run_codelet()
    assert coderack.num_codelets_run == 1
    # 9 letters -> 18 copies of each of the three seed kinds, minus the one run
    assert len(coderack.codelets) >= 3 * 18 - 1
    assert set(coderack.pending_by_kind()) >= {'bottom-up-bond-scout', 'replacement-finder'}


class _FailingCodelet(Codelet):
    codelet_type = CodeletType.BREAKER

    def run(self):
        raise RuntimeError("boom")


def test_codelet_fault_is_reported(abc_engine, reporter):
    coderack = abc_engine.coderack
    coderack.post(_FailingCodelet(abc_engine, 1))
    coderack.choose_and_run_codelet()
    assert coderack.num_codelets_run == 1
    assert len(reporter.errors) == 1
    assert 'boom' in reporter.errors[0]


def test_propose_bond_posts_strength_tester(abc_engine):
    sn = abc_engine.slipnet
    a, b, _ = abc_engine.workspace.initial_string.letters
    bond = abc_engine.coderack.propose_bond(a, b, sn.successor, sn.letter_category, sn.letters[0], sn.letters[1])
    pending = abc_engine.coderack.codelets
    assert len(pending) == 1
    assert pending[0].codelet_type is CodeletType.BOND_STRENGTH_TESTER
    assert pending[0].args == [bond]
    assert 1 <= pending[0].urgency <= 7


def test_propose_rule_posts_strength_tester(abc_engine):
    rule = abc_engine.coderack.propose_rule()
    pending = abc_engine.coderack.codelets
    assert pending[0].codelet_type is CodeletType.RULE_STRENGTH_TESTER
    assert pending[0].args == [rule]
    assert pending[0].urgency == 1
