"""The fixed, ordered maintenance phase table."""

from portagemaint.constants import (
    DEPCLEAN_EXIT_CODE,
    REVDEP_EXIT_CODE,
    SYNC_EXIT_CODE,
    UPDATE_EXIT_CODE,
)
from portagemaint.models import Phase

SYNC = Phase(
    name="sync",
    program="emerge",
    base_args=("--sync",),
    args_key="sync_args",
    exit_code=SYNC_EXIT_CODE,
    description="sync_failed",
    check_emerging=True,
    check_news=True,
)

UPDATE = Phase(
    name="update",
    program="emerge",
    base_args=(),
    args_key="update_args",
    exit_code=UPDATE_EXIT_CODE,
    description="update_failed",
    check_news=True,
)

PRESERVED_REBUILD = Phase(
    name="preserved-rebuild",
    program="emerge",
    base_args=("@preserved-rebuild",),
    args_key="preserved_rebuild_args",
    exit_code=UPDATE_EXIT_CODE,
    description="preserved_rebuild_failed",
    check_news=True,
)

DEPCLEAN = Phase(
    name="depclean",
    program="emerge",
    base_args=("--depclean",),
    args_key="depclean_args",
    exit_code=DEPCLEAN_EXIT_CODE,
    description="depclean_failed",
)

REVDEP_REBUILD = Phase(
    name="revdep-rebuild",
    program="revdep-rebuild",
    base_args=(),
    args_key="revdep_rebuild_args",
    exit_code=REVDEP_EXIT_CODE,
    description="revdep_rebuild_failed",
)

PERL_CLEANER = Phase(
    name="perl-cleaner",
    program="perl-cleaner",
    base_args=(),
    args_key="perl_cleaner_args",
    exit_code=REVDEP_EXIT_CODE,
    description="perl_cleaner_failed",
)

PHASES = (SYNC, UPDATE, PRESERVED_REBUILD, DEPCLEAN, REVDEP_REBUILD, PERL_CLEANER)
