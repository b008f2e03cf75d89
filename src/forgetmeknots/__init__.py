# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Public package interface for the Forget-Me-Knots project tracker."""

from forgetmeknots.core.errors import (
    ForgetMeKnotsError,
    ImportFormatError,
    ProjectNotFoundError,
    ProjectValidationError,
)
from forgetmeknots.core.models import ProjectDraft, ProjectRecord
from forgetmeknots.services.router import RequestRouter
from forgetmeknots.storage.project_store import ProjectStore, open_store

__version__ = "1.0.0"

__all__ = [
    "ForgetMeKnotsError",
    "ImportFormatError",
    "ProjectNotFoundError",
    "ProjectValidationError",
    "ProjectDraft",
    "ProjectRecord",
    "ProjectStore",
    "RequestRouter",
    "open_store",
]
