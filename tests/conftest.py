"""Shared pytest fixtures."""

import os

import pytest

INGEST_DOCUMENT = """\
pipeline: !GenericPipeline
  name: Ingest
  runs:
    - !BasicStage
      name: Fetch
      outputs:
        raw: raw_data
    - !BasicStage
      name: Clean
      inputs: "*raw_data"
      outputs:
        cleaned: clean_data
    - !MonitoringService
      name: Watch
      inputs: clean_data
"""


@pytest.fixture
def ingest_document():
    """Three-stage pipeline where each stage consumes the previous one's output."""
    return INGEST_DOCUMENT


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch):
    """Keep STAGE_GRAPH_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.startswith("STAGE_GRAPH_"):
            monkeypatch.delenv(name, raising=False)
