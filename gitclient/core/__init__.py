# gitclient/core/__init__.py

"""Core infrastructure shared by the git client: exceptions and logging."""
