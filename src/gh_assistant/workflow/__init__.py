"""Push workflow domain concepts.

This package introduces first-class types for:
- The observed working tree and branch state
- Human confirmation decisions
- The explicit run state machine
- The orchestrator that sequences inspection, generation, commit, push and ticketing
"""

__all__: list[str] = []
