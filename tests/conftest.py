import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from sewergen import create_app  # noqa: E402
from sewergen.routes import sewer_api  # noqa: E402
from sewergen.sewer import Sewer, SewerSpec  # noqa: E402

INVARIANT_SEEDS = (11, 22, 33)


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    sewer_api.clear_cache()
    return test_app.test_client()


@pytest.fixture(scope="session")
def sewers_40x20():
    """A few full-size levels shared by the invariant tests (generation is the slow part)."""
    return {seed: Sewer.generate(SewerSpec(40, 20), random.Random(seed)) for seed in INVARIANT_SEEDS}
