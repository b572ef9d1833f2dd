"""
Whisperbox Application Package

This package contains the anonymous-feedback service: users register,
verify their email with a one-time code, and receive anonymous messages
while they choose to accept them. The package is organized as follows:

- access.py: Page route classification and redirect rules
- config.py: Application configuration and environment settings
- database.py: Lazily created async engine and session dependency
- dependencies.py: FastAPI dependencies resolving the session principal
- errors.py: Typed HTTP errors shared by all handlers
- main.py: FastAPI application entry point
- models.py: SQLAlchemy ORM models (Account, Message)
- schemas.py: Pydantic request/response bodies
- templating.py: Jinja2 environment for email bodies

Subpackages:
- routes/: API route handlers (auth, messages)
- services/: Business logic (accounts, messages, codes, auth, email)
- utils/: Clock and input validators
- templates/: Email templates
"""
