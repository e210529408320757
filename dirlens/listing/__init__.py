"""
dirlens Listing - Per-entry metadata and listing assembly.

Public API:
-----------

Records:
    File: Metadata of one entry
    Files: Ordered, numbered collection of File
    make_file: Build the File for one path
    make_files: Build Files for explicit paths

Assembly:
    build_listing: List a directory into a Files collection
    list_directory: build_listing driven by ListingOptions
    file_list: Unordered concurrent construction
    ListingOptions: Listing parameters

Sizes:
    byte_count_iec, byte_count_si, disk_usage
"""

from dirlens.listing.assembler import (
    ListingOptions,
    build_listing,
    file_list,
    list_directory,
)
from dirlens.listing.file import (
    File,
    ancestor_paths,
    make_file,
    make_files,
    parent_info,
)
from dirlens.listing.files import Files
from dirlens.listing.sizes import byte_count_iec, byte_count_si, disk_usage

__all__ = [
    "ListingOptions",
    "build_listing",
    "file_list",
    "list_directory",
    "File",
    "ancestor_paths",
    "make_file",
    "make_files",
    "parent_info",
    "Files",
    "byte_count_iec",
    "byte_count_si",
    "disk_usage",
]
