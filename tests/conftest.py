"""Shared test helpers for the ilsim test suite."""

import logging

import pytest

from ilsim.model.runtime import PLCConfig
from ilsim.parse import tokenize_line
from ilsim.simulate import ScanEngine
from ilsim.simulate._image import ProcessImage


def make_image(inputs=None, outputs=None):
    """Build a default 16-in/16-out process image with some values preset."""
    image = ProcessImage.from_config(PLCConfig())
    image.inputs.update(inputs or {})
    image.outputs.update(outputs or {})
    return image


def instr(text, line=1):
    """Tokenise a single non-blank line."""
    instruction = tokenize_line(text, line)
    assert instruction is not None
    return instruction


def make_engine(*lines, inputs=None, run=True, **config):
    """Build a ScanEngine for *lines* with field inputs preset."""
    engine = ScanEngine(list(lines), config=PLCConfig(**config))
    for address, value in (inputs or {}).items():
        engine.set_input(address, value)
    if run:
        engine.run()
    return engine


@pytest.fixture(autouse=True)
def _reset_ilsim_logger():
    """Drop handlers installed by init_logger so each test starts clean."""
    yield
    logger = logging.getLogger("ilsim")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
