"""Domain models and entities.

Pure data structures (Pydantic v2), version helpers and the error taxonomy.
The domain knows nothing about HTTP, subprocesses or the CLI.
"""
