"""
Regex File Mover - A CLI tool for moving files whose names match a regex.

This package provides functionality to:
- List the files directly inside a source folder
- Filter file names with a regular expression (unanchored search)
- Move matched files to a target folder, falling back to copy+delete
  across volumes
- Skip files that already exist at the destination instead of overwriting
- Generate CSV or XLSX reports of operations
"""

__version__ = "0.1.0"
__author__ = "File Mover Team"
