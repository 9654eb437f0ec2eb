"""Tests for the studioflow public API surface.

These tests verify the symbols exposed at the package boundary.

Examples
--------
Import the workflow package to inspect its public surface:

>>> import studioflow.workflow
"""

from __future__ import annotations

import studioflow.storage
import studioflow.workflow


def test_workflow_exports_resolve() -> None:
    """Every name listed in the workflow ``__all__`` is importable."""
    missing = [
        name for name in studioflow.workflow.__all__
        if not hasattr(studioflow.workflow, name)
    ]
    assert not missing, f"studioflow.workflow is missing exports: {missing}"


def test_storage_exports_resolve() -> None:
    """Every name listed in the storage ``__all__`` is importable."""
    missing = [
        name for name in studioflow.storage.__all__
        if not hasattr(studioflow.storage, name)
    ]
    assert not missing, f"studioflow.storage is missing exports: {missing}"


def test_reducer_entry_points_are_public() -> None:
    """The reducer, engine and store port are reachable from the package."""
    for name in ("apply", "WorkflowEngine", "StateStore", "open_session"):
        assert name in studioflow.workflow.__all__, f"Expected {name} to be public."
