"""Per-tick motion controller for simulated animated actors.

Architecture highlights:
- Velocity-following and path-following controllers behind one registry
- Thread-safe command inboxes drained by dedicated workers
- In-memory host and loopback transport for running actors without an engine
"""
