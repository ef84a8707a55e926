# tests/unit/test_public_api.py
"""The top-level package exposes the timer primitives directly."""

from datetime import timedelta


def test_top_level_factories_share_default_clock() -> None:
    import hosttime

    delay = hosttime.sleep(timedelta(seconds=1))
    assert delay.clock is hosttime.DEFAULT_CLOCK
    delay.close()


def test_all_names_resolve() -> None:
    import hosttime

    for name in hosttime.__all__:
        assert getattr(hosttime, name) is not None


def test_factories_are_not_shadowed_by_submodules() -> None:
    """hosttime.engine.sleep stays the module; hosttime.sleep is the factory."""
    import hosttime
    import hosttime.engine.sleep as sleep_module

    assert callable(hosttime.sleep)
    assert hosttime.sleep is sleep_module.sleep
