"""
dirlens Mime - Content classification by magic bytes.

Public API:
-----------

Tree:
    Node: Immutable matcher tree node
    build_tree: Construct the default tree
    default_tree: Shared default tree

Detection:
    Detector: Classify bytes, streams and files
    detect: Classify bytes with the shared detector
    detect_file: Classify a file with the shared detector
    READ_LIMIT: Number of leading bytes inspected

Icons:
    FILE_ICONS, CATEGORY_ICONS, icon_for
"""

from dirlens.mime.icons import CATEGORY_ICONS, FILE_ICONS, icon_for
from dirlens.mime.node import Node
from dirlens.mime.tree import (
    READ_LIMIT,
    Detector,
    build_tree,
    default_tree,
    detect,
    detect_file,
    get_detector,
)

__all__ = [
    "CATEGORY_ICONS",
    "FILE_ICONS",
    "icon_for",
    "Node",
    "READ_LIMIT",
    "Detector",
    "build_tree",
    "default_tree",
    "detect",
    "detect_file",
    "get_detector",
]
