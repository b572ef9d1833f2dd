"""
API Routes Package

This package contains FastAPI route handlers for the application.
Each module defines routes for a specific feature area:

- auth.py: Sign-up, code verification, username check, sign-in/out
- messages.py: Acceptance toggle, anonymous intake, inbox and deletion

Routes are registered in main.py using FastAPI's router system.
"""
