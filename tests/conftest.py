"""Shared fixtures."""

import pytest


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Empty project directory that is also the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
