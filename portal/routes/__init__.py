"""API route modules."""
from portal.routes import auth, candidate, categories, questions, results, tests

__all__ = ["auth", "candidate", "categories", "questions", "results", "tests"]
