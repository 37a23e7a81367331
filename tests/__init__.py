"""
typegraph Test Suite.

This package contains:
- unit/: Unit tests per module (no network, no execution engine)
- integration/: Full builds executed with graphql-core
"""
