import pytest

from copycat.copycat import Copycat


class RecordingReporter:
    def __init__(self):
        self.infos = []
        self.warnings = []
        self.errors = []

    def info(self, msg):
        self.infos.append(msg)

    def warn(self, msg):
        self.warnings.append(msg)

    def error(self, msg):
        self.errors.append(msg)


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def engine(reporter):
    return Copycat(seed=42, reporter=reporter)


@pytest.fixture
def abc_engine(engine):
    assert engine.set_strings('abc', 'abd', 'xyz')
    return engine
