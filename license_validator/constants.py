"""Constants for license-validator."""

# Process exit codes
EXIT_SUCCESS = 0  # All licenses acceptable (or list-only run)
EXIT_ISSUES = 1  # At least one package violates the policy
EXIT_ERROR = 2  # Validation could not run

# Legal disclaimer attached to machine-readable reports
LEGAL_DISCLAIMER = (
    "This tool checks declared license metadata for informational purposes only. "
    "It does not constitute legal advice. Consult a qualified attorney for "
    "legal guidance on license compliance."
)

# SPDX whitelist expression compiled from an allow-list with no valid SPDX ids
EMPTY_WHITELIST = "()"
