import random

import pytest

from impostor.config.settings import EngineConfig
from impostor.core.fsm import SessionServices, SessionStateMachine
from impostor.core.store import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_machine(store, rng):
    def factory(confirm_reset=None, **config_overrides):
        config = EngineConfig(**config_overrides)
        return SessionStateMachine(
            store=store,
            config=config,
            services=SessionServices(confirm_reset=confirm_reset),
            rng=rng,
        )

    return factory
