"""
Pytest configuration for autodiff-solvers tests.

Shared variables and sample assignments for the term and solver tests.
"""

import pytest

from autodiff_solvers.terms import Variable


@pytest.fixture
def x():
    return Variable(0, "x")


@pytest.fixture
def y():
    return Variable(1, "y")


@pytest.fixture
def z():
    return Variable(2, "z")


@pytest.fixture
def assignments():
    """Sample points {id: value} for x, y and z, avoiding zero and ties."""
    return [
        {0: 1.5, 1: -2.0, 2: 0.25},
        {0: -3.0, 1: 0.5, 2: 4.0},
        {0: 0.7, 1: 2.2, 2: -1.1},
        {0: 10.0, 1: -0.3, 2: 2.5},
    ]
