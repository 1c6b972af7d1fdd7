__all__ = [
    # Errors
    "AssignmentError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    # Operations
    "assign",
    "completion_overview",
    "create_onboarding_path",
    "list_assignments_for_user",
    "parse_audience",
    "resolve_audience",
    "set_completion_status",
    "tools_with_onboarding",
]

from .audience import parse_audience, resolve_audience
from .errors import AssignmentError, NotFoundError, StorageError, ValidationError
from .listing import list_assignments_for_user
from .onboarding import create_onboarding_path, tools_with_onboarding
from .overview import completion_overview
from .tracker import set_completion_status
from .writer import assign
