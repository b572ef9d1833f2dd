"""
Jinja2 Template Configuration

Centralized template loader for rendering outgoing email bodies.
Templates live in the whisperbox/templates package directory.
"""

from jinja2 import Environment, PackageLoader, select_autoescape


# Autoescaping keeps user-chosen values such as usernames inert in HTML
templates = Environment(
    loader=PackageLoader("whisperbox", "templates"),
    autoescape=select_autoescape(["html"]),
)
