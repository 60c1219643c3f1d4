# tests/conftest.py
# Ensure the project root (the folder that contains 'testpick' and 'tests') is on sys.path
# so that `from testpick...` imports work without installing the package.

import sys
import pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

FIXTURES = ROOT / "tests" / "fixtures"


@pytest.fixture
def sample_path() -> pathlib.Path:
    return FIXTURES / "sample.test.js"


@pytest.fixture
def sample_text(sample_path) -> str:
    return sample_path.read_text(encoding="utf-8")
