"""Shared fixtures for omegahoa tests."""
from __future__ import annotations
import os
import sys
import pytest

# Ensure src/ is on the path so omegahoa is importable without install
_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_SRC = os.path.join(_ROOT, "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)

from omegahoa.hoa_parser import parse_hoa_file

EXAMPLES_DIR = os.path.join(_ROOT, "examples")

MINIMAL_TEXT = (
    'HOA: v1\nStates: 1\nStart: 0\nAP: 1 "a"\nAcceptance: 1 Inf(0)\n'
    "--BODY--\nState: 0 {0}\n[0] 0\n--END--\n"
)


def _example_path(name: str) -> str:
    return os.path.join(EXAMPLES_DIR, name)


@pytest.fixture
def minimal_text():
    return MINIMAL_TEXT


# --------------- Parsed documents ---------------

@pytest.fixture(scope="session")
def minimal_doc():
    return parse_hoa_file(_example_path("minimal.hoa"))


@pytest.fixture(scope="session")
def gf_doc():
    return parse_hoa_file(_example_path("gf_buchi.hoa"))


@pytest.fixture(scope="session")
def aliases_doc():
    return parse_hoa_file(_example_path("aliases.hoa"))


@pytest.fixture(scope="session")
def parity_doc():
    return parse_hoa_file(_example_path("parity.hoa"))
