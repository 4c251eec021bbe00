"""Process exit codes for the stackdoc CLI."""

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_PIPELINE_ERROR = 2
EXIT_INVALID_USAGE = 3
