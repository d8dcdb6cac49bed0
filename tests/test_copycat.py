import pytest

from copycat.config import CONFIG
from copycat.copycat import Copycat, InvalidInputError, RunState, validate_strings


def test_validate_strings():
    validate_strings('abc', 'ABD', 'xyz')
    for bad in ('ab3', '', 'a b', 'abç'):
        with pytest.raises(InvalidInputError):
            validate_strings('abc', 'abd', bad)


def test_invalid_strings_rejected_without_mutation(engine, reporter):
    workspace = engine.workspace
    before = (workspace.initial_string.text, workspace.modified_string.text, workspace.target_string.text)
    assert not engine.set_strings('ab3', 'abd', 'xyz')
    assert (workspace.initial_string.text, workspace.modified_string.text, workspace.target_string.text) == before
    assert len(reporter.warnings) == 1
    assert engine.state is RunState.READY


@pytest.mark.parametrize('strings', [
    ('abc\n', 'abd', 'xyz'),
    ('abſ', 'abd', 'xyz'),
    ('abc', 'abd', 'xyİ'),
])
def test_non_ascii_and_trailing_newline_rejected(engine, reporter, strings):
    with pytest.raises(InvalidInputError):
        validate_strings(*strings)
    assert not engine.set_strings(*strings)
    assert len(reporter.warnings) == 1
    assert engine.state is RunState.READY
    assert engine.workspace.initial_string.text == 'abc'


def test_strings_are_lowercased(engine):
    assert engine.set_strings('ABC', 'AbD', 'Xyz')
    assert engine.workspace.initial_string.text == 'abc'
    assert engine.workspace.modified_string.text == 'abd'
    assert engine.workspace.target_string.text == 'xyz'


def test_misuse_is_rejected_with_warning(abc_engine, reporter):
    abc_engine.pause()
    abc_engine.resume()
    assert len(reporter.warnings) == 2
    assert abc_engine.state is RunState.READY


def test_single_step_pauses_and_runs_one_codelet(abc_engine):
    states = []
    abc_engine.add_listener(states.append)
    abc_engine.single_step()
    assert abc_engine.state is RunState.PAUSED
    assert abc_engine.coderack.num_codelets_run == 1
    assert states == ['paused', 'paused']


def test_start_rejected_while_paused(abc_engine, reporter):
    abc_engine.single_step()
    abc_engine.start()
    assert len(reporter.warnings) == 1
    assert abc_engine.coderack.num_codelets_run == 1


def test_reset_returns_to_ready(abc_engine):
    for _ in range(10):
        abc_engine.single_step()
    abc_engine.reset()
    assert abc_engine.state is RunState.READY
    assert abc_engine.coderack.num_codelets_run == 0
    assert abc_engine.workspace.final_answer is None
    assert abc_engine.workspace.target_string.text == 'xyz'


def test_step_delay_is_never_negative(engine):
    engine.set_step_delay(-1)
    assert engine.step_delay == 0


def _codelet_trace(seed, ticks=300):
    engine = Copycat(seed=seed)
    engine.set_strings('abc', 'abd', 'ijk')
    trace = []
    for _ in range(ticks):
        if engine.state is RunState.DONE:
            break
        engine.single_step()
        last = engine.coderack.last_run_codelet
        trace.append((engine.coderack.num_codelets_run, last.name if last else None,
                      round(engine.temperature.value(), 6)))
    return trace, engine.workspace.final_answer


def test_same_seed_same_codelet_sequence():
    assert _codelet_trace(7) == _codelet_trace(7)


def test_run_respects_tick_limit(abc_engine):
    answer = abc_engine.run(max_ticks=50)
    if answer is None:
        assert abc_engine.state is RunState.PAUSED
        assert abc_engine.coderack.num_codelets_run == 50
    else:
        assert abc_engine.state is RunState.DONE
        assert abc_engine.coderack.num_codelets_run <= 50


def test_run_produces_letter_answer(reporter):
    engine = Copycat(seed=0, reporter=reporter)
    assert engine.set_strings('abc', 'abd', 'ijk')
    answer = engine.run(max_ticks=5000)
    assert engine.state is RunState.DONE
    assert len(answer) == 3 and answer.isalpha() and answer.islower()
    assert answer.startswith('ij')
    assert engine.snapshot()['answer'] == answer
    assert engine.coderack.num_codelets_run <= 5000


def test_pause_from_listener_and_resume(abc_engine, reporter):
    pause_points = [1, 3]

    def pause_at_ticks(state):
        if state == 'running' and pause_points and abc_engine.coderack.num_codelets_run >= pause_points[0]:
            pause_points.pop(0)
            abc_engine.pause()

    abc_engine.add_listener(pause_at_ticks)
    abc_engine.start()
    assert abc_engine.state is RunState.PAUSED
    assert abc_engine.coderack.num_codelets_run == 1

    abc_engine.pause()
    abc_engine.start()
    assert len(reporter.warnings) == 2
    assert abc_engine.state is RunState.PAUSED
    assert abc_engine.coderack.num_codelets_run == 1

    abc_engine.resume()
    assert abc_engine.state is RunState.PAUSED
    assert abc_engine.coderack.num_codelets_run == 3
    assert abc_engine.workspace.final_answer is None


def test_batch_run_rejects_invalid_input(engine, reporter):
    assert engine.batch_run('abc', 'ab1', 'xyz', 3, show_progress=False) == {}
    assert len(reporter.warnings) == 1


def test_batch_run_counts_every_iteration(reporter):
    config = {**CONFIG, 'run': {**CONFIG['run'], 'max_ticks': 30}}
    engine = Copycat(seed=3, reporter=reporter, config=config)
    results = engine.batch_run('abc', 'abd', 'ijk', 4, show_progress=False)
    assert sum(stats['count'] for stats in results.values()) == 4
    for (answer, _), stats in results.items():
        assert stats['avg_time'] <= 30
        assert 0 <= stats['avg_temp'] <= 100
    assert engine.workspace.target_string.text == 'ijk'
    assert engine.state is RunState.READY


def test_snapshot(abc_engine):
    abc_engine.single_step()
    snapshot = abc_engine.snapshot()
    assert snapshot['state'] == 'paused'
    assert snapshot['tick'] == 1
    assert snapshot['strings'] == {'initial': 'abc', 'modified': 'abd', 'target': 'xyz'}
    assert snapshot['answer'] is None
    assert 'letterCategory' in snapshot['active_concepts']
    assert sum(snapshot['pending_codelets'].values()) == len(abc_engine.coderack.codelets)
