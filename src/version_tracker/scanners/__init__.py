"""Evidence scanners for the sources of library version information.

This module provides scanners for extracting library coordinates from
descriptors, packaged metadata, jar file names and compiled constants.
"""

from version_tracker.scanners.base import BaseScanner
from version_tracker.scanners.class_constants import (
    ClassConstantScanner,
    ClassTable,
    StaticClassTable,
)
from version_tracker.scanners.jar import JarFileScanner
from version_tracker.scanners.pom import PomScanner
from version_tracker.scanners.pom_properties import PomPropertiesScanner

__all__ = [
    "BaseScanner",
    "ClassConstantScanner",
    "ClassTable",
    "JarFileScanner",
    "PomPropertiesScanner",
    "PomScanner",
    "StaticClassTable",
]
