import logging

import pytest

from swirl.config import SimulationConfig
from swirl.logging_config import setup_logging
from swirl.units import Diffusion, TimeDelta, Viscosity


@pytest.mark.parametrize("bad", [0.0, -0.1, float("nan"), float("inf")])
def test_timedelta_rejects_non_positive_or_non_finite(bad):
    with pytest.raises(ValueError):
        TimeDelta(bad)


def test_named_scalars_behave_like_floats():
    dt = TimeDelta(0.1)
    assert dt == 0.1
    assert dt * 10 == pytest.approx(1.0)
    assert Diffusion(0.0) == 0.0
    assert "TimeDelta" in repr(dt)


@pytest.mark.parametrize("kind", [Diffusion, Viscosity])
def test_rates_reject_negative_or_non_finite(kind):
    with pytest.raises(ValueError):
        kind(-1e-6)
    with pytest.raises(ValueError):
        kind(float("nan"))


def test_config_converts_to_named_scalars():
    config = SimulationConfig(size=16, dt=0.05, diffusion=0.001)
    assert isinstance(config.dt, TimeDelta)
    assert isinstance(config.diffusion, Diffusion)
    assert isinstance(config.viscosity, Viscosity)


@pytest.mark.parametrize("kwargs", [
    {"size": 2},
    {"iterations": 0},
    {"dt": 0.0},
    {"diffusion": -1.0},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)


def test_setup_logging_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "swirl.log"
    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG, str(log_file))
    try:
        assert logger.name == "swirl"
        assert len(logger.handlers) == 2
        logging.getLogger("swirl.simulation").debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
