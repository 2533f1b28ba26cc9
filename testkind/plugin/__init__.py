"""pytest integration.

The plugin reads `test_kind` markers at collection time and keeps, skips or
deselects each marked test according to the policy engine.
"""
