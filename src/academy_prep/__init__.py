"""Academy Prep MCP App Server.

Track the pieces of a service-academy application: course grades and GPA,
Candidate Fitness Assessment results, and application goals.
"""

__version__ = "0.1.0"

from .app_definition import AcademyPrepApp


def get_app_html() -> str:
    """Return the MCP App HTML content. Re-renders each call for hot reload."""
    return AcademyPrepApp().render()
