"""Dependencies bounded context: inverse dependency lookup for related tests."""

from TestPathSelection.dependencies.ports import DependencyResolver
from TestPathSelection.dependencies.python_imports import PythonImportGraph

__all__ = [
    "DependencyResolver",
    "PythonImportGraph",
]
