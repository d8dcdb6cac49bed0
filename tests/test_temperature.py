import pytest

from copycat.temperature import Temperature


def test_clamped_until_initial_clamp_time():
    t = Temperature(initial_clamp_time=30)
    assert t.value() == 100
    t.set(40)
    assert t.value() == 100
    assert t.last_unclamped_value == 40
    t.try_unclamp(29)
    assert t.clamped
    t.try_unclamp(30)
    assert not t.clamped
    t.set(40)
    assert t.value() == 40


def test_clamp_until():
    t = Temperature(initial_clamp_time=0)
    t.try_unclamp(0)
    t.set(20)
    t.clamp_until(110)
    assert t.value() == 100
    t.try_unclamp(110)
    t.set(25)
    assert t.value() == 25


def test_adjusted_prob_fixed_points():
    t = Temperature()
    assert t.get_adjusted_prob(0) == 0
    assert t.get_adjusted_prob(0.5) == 0.5


def test_adjusted_prob_at_high_temperature():
    t = Temperature()
    assert t.get_adjusted_prob(0.9) == pytest.approx(0.81)
    assert t.get_adjusted_prob(0.1) == pytest.approx(0.19)


def test_adjusted_value_sharpens_when_cold():
    t = Temperature(initial_clamp_time=0)
    assert t.get_adjusted_value(16) == pytest.approx(4.0)
    t.try_unclamp(0)
    t.set(10)
    assert t.get_adjusted_value(16) > 16
