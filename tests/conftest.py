"""Pytest configuration for the ssm-rvs test suite."""

import pytest


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-statistical",
        action="store_true",
        default=False,
        help="Run statistical distribution tests (skipped by default)",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "statistical: mark test as a statistical distribution test (skipped unless --run-statistical is passed)",
    )
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (large sample sizes, may take several seconds)",
    )
    config.addinivalue_line(
        "markers",
        "rng_validation: mark test as a random stream validation test",
    )


def pytest_collection_modifyitems(config, items):
    """Skip statistical tests unless --run-statistical is passed."""
    if config.getoption("--run-statistical"):
        return
    skip_statistical = pytest.mark.skip(reason="need --run-statistical option to run")
    for item in items:
        if "statistical" in item.keywords:
            item.add_marker(skip_statistical)


@pytest.fixture
def seed():
    return 20240611
