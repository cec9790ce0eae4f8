"""
Click CLI for lambdaclean.
"""

import logging
import sys
from typing import Optional

import click

from . import __version__
from .cancel import CancelToken, interrupt_handler
from .config import DEFAULT_CONCURRENCY, DEFAULT_KEEP, ErrorPolicy, SweepConfig, create_session
from .errors import ConfigurationError
from .provider import AwsProvider
from .sweep import Sweeper

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: int) -> None:
    """Send logs to stderr; stdout is reserved for KEEP/DELETE lines."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("lambdaclean").setLevel(level)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("prefix")
@click.option("-r", "--region", default=None,
              help='AWS Region (default "default" from local configuration)')
@click.option("-p", "--profile", default=None, help="Named AWS profile (default from local configuration)")
@click.option("-s", "--stack", "--group", "group", default=None,
              help="Name or ID of the CloudFormation stack to which a function belongs. Nested stacks are searched too.")
@click.option("-n", "--num-to-keep", "--keep", "keep", type=click.IntRange(min=0), default=DEFAULT_KEEP,
              show_default=True, help="Number of latest versions to keep. Older versions will be deleted.")
@click.option("-c", "--concurrency", type=click.IntRange(min=1), default=DEFAULT_CONCURRENCY,
              show_default=True, help="Number of delete requests that can be performed concurrently.")
@click.option("--dry-run", is_flag=True, help="If this option is specified, the function version is not deleted.")
@click.option("--skip-failed", is_flag=True,
              help="Skip a function whose versions cannot be listed or deleted instead of aborting the sweep.")
@click.option("-v", "--verbose", count=True, help="Log progress to stderr (-vv for debug output).")
@click.version_option(__version__, prog_name="lambda-clean")
def main(prefix: str, region: Optional[str], profile: Optional[str], group: Optional[str],
         keep: int, concurrency: int, dry_run: bool, skip_failed: bool, verbose: int):
    """
    Delete all but the latest versions of Lambda functions whose name starts with PREFIX.
    """
    _configure_logging(verbose)

    config = SweepConfig(
        prefix=prefix,
        group=group,
        keep=keep,
        concurrency=concurrency,
        dry_run=dry_run,
        region=region,
        profile=profile,
        policy=ErrorPolicy.SKIP_FUNCTION if skip_failed else ErrorPolicy.FAIL_FAST,
    )

    cancel = CancelToken()
    with interrupt_handler(cancel):
        try:
            config.validate()
            session = create_session(config.region, config.profile)
        except ConfigurationError as e:
            click.echo(str(e), err=True)
            sys.exit(1)

        result = Sweeper(AwsProvider(session), config, cancel=cancel).run()

    if result.error is not None:
        click.echo(str(result.error), err=True)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
