"""
Snafles Test Suite

Tests are organized into:
- unit/: Codec, resolver, query engine, repositories and middleware helpers
- integration/: HTTP-level tests against an in-process app
"""
