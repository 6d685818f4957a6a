# tests/conftest.py
"""
Shared fixtures and helpers for the arrayblock test suite.
"""

import logging

import pytest

from arrayblock.array_blk import ArrayBlk
from arrayblock.config import DomainConfig, set_config
from arrayblock.itv import Itv
from arrayblock.locations import AllocSite, ParamPath


def native(site, offset, size=(10, 10), stride=4):
    """Singleton native block; interval arguments are ``(lo, hi)`` pairs."""
    return ArrayBlk.make_native(
        site,
        Itv.of_range(*offset),
        Itv.of_range(*size),
        Itv.of_int(stride),
    )


def managed(site, length):
    return ArrayBlk.make_managed(site, Itv.of_range(*length))


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the default configuration."""
    previous = set_config(DomainConfig())
    yield
    set_config(previous)


@pytest.fixture
def site_a():
    return AllocSite.known("A", file="a.c", line=3)


@pytest.fixture
def site_b():
    return AllocSite.known("B", file="a.c", line=7)


@pytest.fixture
def param_site():
    return AllocSite.of_param_path(ParamPath("p").deref())


@pytest.fixture
def arrayblock_logger():
    """The package logger, with its handlers and level restored afterwards."""
    logger = logging.getLogger("arrayblock")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
