"""Actionable message catalog used in portage-maint notifications."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "emerge_running": {
        "what": "Maintenance aborted before {phase}: another emerge process is running.",
        "next": "Wait for the running emerge to finish, or disable auto-abort with `-a false`.",
    },
    "unread_news": {
        "what": "Maintenance aborted before {phase}: {count} unread news item(s).",
        "next": "Read the items with `eselect news read` before the next run.",
    },
    "sync_failed": {
        "what": "Repository sync failed with status {returncode}.",
        "next": "Check network access and the repository configuration, then rerun.",
    },
    "update_failed": {
        "what": "World update failed with status {returncode}.",
        "next": "Resolve the blockers or build failures shown in the log below.",
    },
    "preserved_rebuild_failed": {
        "what": "Preserved library rebuild failed with status {returncode}.",
        "next": "Run `emerge @preserved-rebuild` by hand and review the failing packages.",
    },
    "depclean_failed": {
        "what": "Dependency cleanup failed with status {returncode}.",
        "next": "Review the depclean output and fix the dependency graph before rerunning.",
    },
    "revdep_rebuild_failed": {
        "what": "Reverse dependency rebuild failed with status {returncode}.",
        "next": "Run `revdep-rebuild -p` to list the broken packages.",
    },
    "perl_cleaner_failed": {
        "what": "Perl module cleanup failed with status {returncode}.",
        "next": "Run `perl-cleaner --all` by hand and review the failing modules.",
    },
    "run_succeeded": {
        "what": "All maintenance phases completed on {host}.",
        "next": "Review the update log below for configuration file updates to merge.",
    },
}


def actionable_error(code: str, **kwargs) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
