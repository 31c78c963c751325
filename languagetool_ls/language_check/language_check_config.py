"""Default LanguageTool configuration for editor checks.

Workspace settings can extend both sets (``languageTool.disabledRules`` and
``languageTool.ignoredWords``).
"""

# Default rules to disable
DEFAULT_DISABLED_RULES = {
    # Dropping inline markup (code spans, inline HTML) can leave doubled
    # spaces in the analyzable text that are not in the document.
    "WHITESPACE_RULE",
    "CONSECUTIVE_SPACES",
}


# Default words to ignore (case-sensitive)
DEFAULT_IGNORED_WORDS = {
    "LanguageTool",
    "Markdown",
}

# LanguageTool server settings used for locally started servers.
DEFAULT_SERVER_CONFIG = {
    "requestLimitPeriodInSeconds": 60,
    # Editors send whole documents on every change; allow long documents
    # to finish instead of aborting the check.
    "maxCheckTimeMillis": 60000,
}

# Retry settings for transient LanguageTool failures. Kept short because a
# user is waiting on the diagnostics.
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_BASE_DELAY = 0.5
DEFAULT_RETRY_MAX_DELAY = 5.0
