import pytest

from command_picker.analysis import build_reference_table
from helpers import GREEN, RED


@pytest.fixture
def palette():
    return build_reference_table([(RED, "Red"), (GREEN, "Green")])
