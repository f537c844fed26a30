"""Coordinators - Orchestrate the library and reading workflows."""

from lingua_reader.coordinators.library_coordinator import LibraryCoordinator
from lingua_reader.coordinators.reading_coordinator import ReadingCoordinator

__all__ = ["LibraryCoordinator", "ReadingCoordinator"]
