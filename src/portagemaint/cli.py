import logging

import click
from rich.logging import RichHandler

from .constants import ABORT_EXIT_CODE, DEFAULTS, SYSTEM_CONFIG_PATH, USER_CONFIG_PATH
from .core import MaintenanceRunner
from .errors import MaintenanceError
from .models import RunConfiguration
from .services.config_loader import ConfigLoader

QUIET_CONSOLE_LEVEL = logging.CRITICAL + 1

console_handler = RichHandler(rich_tracebacks=True, show_level=False, show_path=False)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[console_handler],
)


class MaintenanceCommand(click.Command):
    """Click command that reports bad invocations with exit status 1."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = ABORT_EXIT_CODE
            raise


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def _coerce(value, param_type, key):
    try:
        return param_type.convert(value, None, None)
    except click.BadParameter as exc:
        raise click.ClickException(f"Invalid value for '{key}': {exc.message}") from exc


def _resolve_verbosity(verbose_flag, verbose_level, config):
    if verbose_level is not None:
        return verbose_level
    if verbose_flag:
        return 1
    value = _resolve_option(None, config, "verbosity", default=DEFAULTS["verbosity"])
    return _coerce(value, click.IntRange(0, 1), "verbosity")


def build_configuration(config_values, **cli_values) -> RunConfiguration:
    """Layer CLI values over file values over the built-in defaults."""
    resolved = {}
    for key, default in DEFAULTS.items():
        if key == "verbosity":
            continue
        value = _resolve_option(cli_values.get(key), config_values, key, default=default)
        if isinstance(default, bool):
            value = _coerce(value, click.BOOL, key)
        elif isinstance(default, int):
            value = _coerce(value, click.INT, key)
        else:
            value = "" if value is None else str(value)
        resolved[key] = value

    resolved["verbosity"] = _resolve_verbosity(
        cli_values.get("verbose_flag"),
        cli_values.get("verbose_level"),
        config_values,
    )
    return RunConfiguration(**resolved)


@click.command(cls=MaintenanceCommand, context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-a", "auto_abort", type=click.BOOL, default=None, help="Abort on unread news or a running emerge.")
@click.option("-s", "--sync-args", default=None, help="Extra arguments for `emerge --sync`.")
@click.option("-u", "--update-args", default=None, help="Arguments for the world update `emerge` call.")
@click.option(
    "-r",
    "--preserved-rebuild-args",
    default=None,
    help="Extra arguments for `emerge @preserved-rebuild`.",
)
@click.option("-d", "--depclean-args", default=None, help="Extra arguments for `emerge --depclean`.")
@click.option("-e", "--revdep-rebuild-args", default=None, help="Arguments for `revdep-rebuild`.")
@click.option("-l", "--perl-cleaner-args", default=None, help="Arguments for `perl-cleaner`.")
@click.option("-n", "--nice", type=int, default=None, help="Scheduling priority delta (default: 19).")
@click.option("-v", "verbose_flag", is_flag=True, default=None, help="Same as --verbose 1.")
@click.option(
    "--verbose",
    "verbose_level",
    type=click.IntRange(0, 1),
    default=None,
    help="Verbosity level: 0 is silent, 1 prints a diagnostic line on failure.",
)
@click.option("--error-email", default=None, help="Address that receives failure reports.")
@click.option("--success-email", default=None, help="Address that receives success reports.")
@click.option("--tmp-dir", type=click.Path(file_okay=False), default=None, help="Base temporary directory.")
@click.option("--debug", is_flag=True, default=None, help="Keep the working directory after the run.")
@click.option(
    "--config",
    required=False,
    type=click.Path(dir_okay=False),
    help=f"Extra YAML configuration file, applied after {SYSTEM_CONFIG_PATH} and {USER_CONFIG_PATH}.",
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Path to log file")
def main(
    auto_abort,
    sync_args,
    update_args,
    preserved_rebuild_args,
    depclean_args,
    revdep_rebuild_args,
    perl_cleaner_args,
    nice,
    verbose_flag,
    verbose_level,
    error_email,
    success_email,
    tmp_dir,
    debug,
    config,
    log_file,
):
    """Sync, update and clean a Gentoo system, mailing the outcome."""
    logger = logging.getLogger("portagemaint")

    try:
        config_values = ConfigLoader(logger=logger).load_layers(
            [SYSTEM_CONFIG_PATH, USER_CONFIG_PATH],
            explicit_path=config,
        )
    except MaintenanceError as exc:
        raise click.ClickException(str(exc)) from exc

    run_config = build_configuration(
        config_values,
        auto_abort=auto_abort,
        sync_args=sync_args,
        update_args=update_args,
        preserved_rebuild_args=preserved_rebuild_args,
        depclean_args=depclean_args,
        revdep_rebuild_args=revdep_rebuild_args,
        perl_cleaner_args=perl_cleaner_args,
        nice=nice,
        verbose_flag=verbose_flag,
        verbose_level=verbose_level,
        error_email=error_email,
        success_email=success_email,
        tmp_dir=tmp_dir,
        debug=debug,
    )
    log_file = _resolve_option(log_file, config_values, "log_file")

    if run_config.verbosity >= 1:
        console_handler.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        # Quiet runs report through mail and --log-file only.
        console_handler.setLevel(QUIET_CONSOLE_LEVEL)
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if run_config.verbosity else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    logger.debug("Resolved configuration: %s", run_config)

    runner = MaintenanceRunner(config=run_config)
    raise SystemExit(runner.run())


if __name__ == "__main__":
    main()
