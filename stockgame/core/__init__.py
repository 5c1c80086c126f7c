"""Core gameplay primitives (portfolio state, trades, chat commands, milestones and rewards).

Kept free of FastAPI concerns so it can be reused by API routes, the update loop, and tests.
"""
