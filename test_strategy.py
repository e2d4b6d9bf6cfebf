import hashlib
import random

import pytest

import strategy
from errors import ConfigurationError
from sha_constants import SHA1, SHA224, SHA256, SHA384, SHA512
from sha_engine import HashContext
from strategy import PORTABLE, UNROLLED, TransformStrategy, select_strategy


DATA = random.Random(99).randbytes(1024)


@pytest.mark.parametrize("descriptor", [SHA1, SHA224, SHA256, SHA384, SHA512])
@pytest.mark.parametrize("blocks", [0, 1, 3])
def test_unrolled_matches_portable(descriptor, blocks):
    """The multi-block fast path returns exactly the portable state."""
    data = DATA[: descriptor.block_size * blocks]
    state = descriptor.initial_state
    assert UNROLLED.process(descriptor, state, data) == PORTABLE.process(descriptor, state, data)


@pytest.mark.parametrize("descriptor", [SHA1, SHA256, SHA512])
def test_multi_block_call_equals_single_block_calls(descriptor):
    bs = descriptor.block_size
    data = DATA[: bs * 4]
    state = descriptor.initial_state
    for i in range(0, len(data), bs):
        state = UNROLLED.process(descriptor, state, data[i : i + bs])
    assert UNROLLED.process(descriptor, descriptor.initial_state, data) == state


@pytest.mark.parametrize("name", ["portable", "unrolled"])
def test_contexts_agree_across_strategies(name):
    ctx = HashContext("sha384", strategy=name)
    ctx.update(DATA[:77])
    ctx.update(DATA[77:])
    assert ctx.strategy.name == name
    assert ctx.finalize() == hashlib.sha384(DATA).digest()


def test_select_strategy_by_name():
    assert PORTABLE.available() and UNROLLED.available()
    assert select_strategy("portable") is PORTABLE
    assert select_strategy(" Unrolled ") is UNROLLED
    assert select_strategy("auto") is UNROLLED


def test_select_strategy_from_environment(monkeypatch):
    monkeypatch.setenv(strategy.STRATEGY_ENV, "portable")
    assert select_strategy() is PORTABLE
    assert HashContext("sha1").strategy is PORTABLE

    monkeypatch.delenv(strategy.STRATEGY_ENV)
    assert select_strategy() is UNROLLED


def test_unknown_strategy(monkeypatch):
    with pytest.raises(ConfigurationError):
        select_strategy("sse2")
    monkeypatch.setenv(strategy.STRATEGY_ENV, "bogus")
    with pytest.raises(ConfigurationError):
        HashContext("sha256")


def test_registered_strategy_is_preferred_when_available(monkeypatch):
    monkeypatch.setattr(strategy, "_REGISTRY", dict(strategy._REGISTRY))
    calls = []

    def counting(descriptor, state, data):
        calls.append(len(data))
        return PORTABLE.process(descriptor, state, data)

    strategy.register_strategy(TransformStrategy("counting", counting), preferred=True)
    assert select_strategy("auto").name == "counting"
    assert "counting" in strategy.available_strategies()

    ctx = HashContext("sha256", b"abc", strategy="counting")
    assert ctx.finalize() == hashlib.sha256(b"abc").digest()
    assert calls == [64]


def test_unavailable_strategy_is_skipped(monkeypatch):
    monkeypatch.setattr(strategy, "_REGISTRY", dict(strategy._REGISTRY))
    missing = TransformStrategy("missing", PORTABLE.process, lambda: False)
    strategy.register_strategy(missing, preferred=True)

    assert select_strategy("auto") is UNROLLED
    assert "missing" not in strategy.available_strategies()
    with pytest.raises(ConfigurationError):
        select_strategy("missing")


def test_auto_is_reserved():
    with pytest.raises(ConfigurationError):
        strategy.register_strategy(TransformStrategy("auto", PORTABLE.process))
