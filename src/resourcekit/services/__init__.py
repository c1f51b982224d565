"""
Service layer: the generic CRUD orchestrator and its building blocks.

    from resourcekit.services import CrudService, parse_page_request

Resource-specific services (e.g. `services.user_role_service`) are imported
from their own modules; they depend on the repository layer, which in turn
depends on this package.
"""

from .crud_service import CrudService
from .merge import merge_source_to_target, merge_fields_of
from .pagination import Page, PageRequest, Sort, SortDirection, parse_page_request

__all__ = [
    "CrudService",
    "merge_source_to_target",
    "merge_fields_of",
    "Page",
    "PageRequest",
    "Sort",
    "SortDirection",
    "parse_page_request",
]
