# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Exception types raised by the project store and the request router."""

from __future__ import annotations

__all__ = [
    "ForgetMeKnotsError",
    "ProjectValidationError",
    "ProjectNotFoundError",
    "ImportFormatError",
]


class ForgetMeKnotsError(Exception):
    """Base class for errors the application reports to the user verbatim."""


class ProjectValidationError(ForgetMeKnotsError, ValueError):
    """Raised when a write is rejected before it reaches the database."""


class ProjectNotFoundError(ForgetMeKnotsError, LookupError):
    """Raised when an update targets a project id that does not exist."""

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__(f"Project {project_id} does not exist.")


class ImportFormatError(ForgetMeKnotsError):
    """Raised when a backup file is not a JSON array of project records."""
