"""
Feature modules live under this package.

Each module owns its models, persistence and service layer while reusing the
platform primitives (config, DB connection provider, file storage).
"""
