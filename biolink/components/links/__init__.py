"""
Links component - Ordered links shown on a profile page.
"""

from ._impl import LinkService, validate_link_data, validate_order
from .component import (
    run_create,
    run_delete,
    run_get,
    run_list,
    run_reorder,
    run_update,
)
from .models import (
    CreateLinkInput,
    DeleteLinkInput,
    GetLinkInput,
    LinkListOutput,
    LinkOperationOutput,
    LinkValidationError,
    ListLinksInput,
    ReorderLinksInput,
    UpdateLinkInput,
)
from .ports import LinkRepoPort

__all__ = [
    # Entry points
    "run_create",
    "run_update",
    "run_delete",
    "run_get",
    "run_list",
    "run_reorder",
    # Input models
    "CreateLinkInput",
    "UpdateLinkInput",
    "DeleteLinkInput",
    "GetLinkInput",
    "ListLinksInput",
    "ReorderLinksInput",
    # Output models
    "LinkOperationOutput",
    "LinkListOutput",
    "LinkValidationError",
    # Ports
    "LinkRepoPort",
    # Core
    "LinkService",
    "validate_link_data",
    "validate_order",
]
