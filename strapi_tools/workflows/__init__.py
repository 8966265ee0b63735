"""Multi-step backend workflows"""

from strapi_tools.workflows.create_with_locales import (
    LocaleWorkflowError,
    MultiLocaleCreation,
    MultiLocaleResult,
    WorkflowState,
)

__all__ = ["LocaleWorkflowError", "MultiLocaleCreation", "MultiLocaleResult", "WorkflowState"]
