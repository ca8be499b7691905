"""Scaffold workflow domain concepts.

This package introduces first-class types for:
- The request and the locations threaded through every step
- The explicit scaffold state machine
- Conflict resolution for an existing target directory
- The orchestrator running the steps in order
"""

from repo_scaffold.scaffold.workflow.conflict import (
    ConflictDecision,
    ConflictResolver,
    decide_conflict,
)
from repo_scaffold.scaffold.workflow.orchestrator import (
    ScaffoldOptions,
    ScaffoldOrchestrator,
    ScaffoldOutcome,
)
from repo_scaffold.scaffold.workflow.state_machine import (
    RepoMap,
    ScaffoldRequest,
    ScaffoldState,
)

__all__ = [
    "ConflictDecision",
    "ConflictResolver",
    "RepoMap",
    "ScaffoldOptions",
    "ScaffoldOrchestrator",
    "ScaffoldOutcome",
    "ScaffoldRequest",
    "ScaffoldState",
    "decide_conflict",
]
