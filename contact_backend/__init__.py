"""
Contact-form backend.

This package provides a FastAPI application that accepts contact-form
submissions, stores them through a database abstraction, and lets an
operator list them, fetch one, and mark them read.
"""
