"""Template generation for the frontend and backend halves of a project."""

from projgen.stacks.backend import BackendStack, extract_archive, initializr_params
from projgen.stacks.base import StackError, run_step
from projgen.stacks.frontend import FrontendStack

__all__ = [
    "BackendStack",
    "FrontendStack",
    "StackError",
    "extract_archive",
    "initializr_params",
    "run_step",
]
