"""Core board primitives (cells, conditions, and the topic envelopes built from them).

Kept free of FastAPI concerns so it can be reused by API routes, the hub, and tests.
"""
