import pytest

from bftools.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _silent_reporter():
    set_reporter(SilentReporter())
    set_verbosity(0)
    yield
