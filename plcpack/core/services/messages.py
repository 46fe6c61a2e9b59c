"""
Message catalog for the pack pipeline.

Templates use logging-style ``%s`` placeholders so they can be passed
straight to ``logger.error(template, *args)``.
"""

# ── Errors ──────────────────────────────────────────────────────

FAILED_TO_RESOLVE_SOLUTION = "Failed to resolve the solution file of %s"
FAILED_TO_SAVE_LIBRARY = "Failed to save the PLC library of %s"
SOLUTION_NOT_FOUND = "No solution file referencing %s was found"
INVALID_VERSION = "'%s' is not a valid package version"
MISSING_PACKAGE_ID = "%s has no Title; cannot derive a package id"
INVALID_PACKAGE_ID = "'%s' is not a valid package id"
INVALID_PROJECT_FILE = "Cannot read project file %s: %s"
FAILED_TO_WRITE_PACKAGE = "Failed to write package %s: %s"
NUSPEC_NOT_SUPPORTED = "Packing from a .nuspec file is not implemented: %s"

# ── Progress ────────────────────────────────────────────────────

SAVING_LIBRARY = "Saving PLC library of %s"
LIBRARY_SAVED = "Saved PLC library to %s"
PACK_SUCCESS = "Successfully created package %s"
PASS_THROUGH = "Nothing to pack for %s"
