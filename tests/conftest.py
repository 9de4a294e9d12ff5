import pytest

from devize import EngineConfig, create_context, reset_context, set_context, set_engine_config


@pytest.fixture(autouse=True)
def engine_config():
    set_engine_config(EngineConfig())
    yield
    set_engine_config(EngineConfig())


@pytest.fixture
def context():
    ctx = create_context()
    set_context(ctx)
    yield ctx
    reset_context()


@pytest.fixture
def bare_context():
    ctx = create_context(primitives=False)
    set_context(ctx)
    yield ctx
    reset_context()
