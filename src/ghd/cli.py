"""Main CLI entry point for ghd."""

import sys
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from ghd import __version__
from ghd.config import GhdConfig, SelectionStrategy, StatusErrorPolicy, load_config
from ghd.core.context import GhdContext
from ghd.core.exceptions import ConfigError, GhdError
from ghd.core.output import OutputFormat, OutputFormatter
from ghd.presenter import present_error, run


CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


class OutputFormatType(click.ParamType):
    """Custom Click parameter type for output format."""

    name = "format"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value.lower())
        except ValueError:
            self.fail(
                f"Invalid format '{value}'. Choose from: text, json, yaml",
                param,
                ctx,
            )


OUTPUT_FORMAT = OutputFormatType()


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"ghd version {__version__}")
    ctx.exit()


def apply_overrides(
    config: GhdConfig,
    profile: str | None,
    token: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
    environment: str | None = None,
    strategy: str | None = None,
    on_status_error: str | None = None,
) -> GhdConfig:
    """Return a copy of the config with command-line values applied to the profile."""
    name = profile or "default"
    current = config.get_profile(name)

    github_updates: dict[str, Any] = {}
    if token is not None:
        github_updates["token"] = token
    if base_url is not None:
        github_updates["base_url"] = base_url
    if timeout is not None:
        github_updates["timeout"] = timeout

    resolver_updates: dict[str, Any] = {}
    if environment is not None:
        resolver_updates["environment"] = environment
    if strategy is not None:
        resolver_updates["strategy"] = SelectionStrategy(strategy)
    if on_status_error is not None:
        resolver_updates["on_status_error"] = StatusErrorPolicy(on_status_error)

    updated = current.model_copy(
        update={
            "github": current.github.model_copy(update=github_updates),
            "resolver": current.resolver.model_copy(update=resolver_updates),
        }
    )
    return config.model_copy(update={"profiles": {**config.profiles, name: updated}})


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("repository", metavar="OWNER/REPO")
@click.option(
    "-t",
    "--token",
    metavar="TOKEN",
    help="GitHub token (default: GHD_GITHUB_TOKEN, GITHUB_TOKEN or GH_TOKEN)",
)
@click.option(
    "-e",
    "--environment",
    metavar="NAME",
    help="Deployment environment to query (default: prod)",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in SelectionStrategy]),
    help="verify: require a 'success' status; trust-order: take the first listed deployment",
)
@click.option(
    "--on-status-error",
    type=click.Choice([p.value for p in StatusErrorPolicy]),
    help="What to do when a deployment's statuses cannot be fetched",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    metavar="SECONDS",
    help="Per-request timeout in seconds (default: 5)",
)
@click.option(
    "--base-url",
    metavar="URL",
    help="GitHub API root (default: https://api.github.com)",
)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=OUTPUT_FORMAT,
    metavar="FORMAT",
    help="Output format: text, json, yaml",
)
@click.option(
    "-p",
    "--profile",
    metavar="NAME",
    envvar="GHD_PROFILE",
    help="Configuration profile to use",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    metavar="FILE",
    envvar="GHD_CONFIG",
    help="Path to config file",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for info, -vv for debug)",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.pass_context
def cli(
    ctx: click.Context,
    repository: str,
    token: str | None,
    environment: str | None,
    strategy: str | None,
    on_status_error: str | None,
    timeout: float | None,
    base_url: str | None,
    output_format: OutputFormat | None,
    profile: str | None,
    config_file: str | None,
    verbose: int,
    no_color: bool,
) -> None:
    """Print the commit message of the latest successful deployment.

    Lists the deployments of OWNER/REPO, checks each one's statuses in
    order until one has reached "success", and prints the message of the
    commit it deployed.

    \b
    Examples:
        ghd octo/hello -t "$GITHUB_TOKEN"
        ghd octo/hello -e staging -o json
        ghd octo/hello --strategy trust-order

    \b
    Configuration:
        ~/.ghd/config.yaml    User configuration
        ./ghd.yaml            Project configuration
        GHD_*                 Environment variables

    \b
    Exit codes:
        0 success, 2 configuration, 3 invalid URL, 4 transport,
        5 HTTP error status, 6 unexpected response, 7 no successful deployment
    """
    try:
        config = apply_overrides(
            load_config(config_file),
            profile,
            token=token,
            base_url=base_url,
            timeout=timeout,
            environment=environment,
            strategy=strategy,
            on_status_error=on_status_error,
        )
        color = not no_color and config.global_settings.color != "never"

        ghd_ctx = GhdContext(
            config=config,
            profile=profile,
            output_format=output_format,
            verbose=verbose,
            color=color,
        )

        if not repository.strip():
            raise ConfigError("Repository must not be empty")
        if not ghd_ctx.profile.github.get_token():
            raise ConfigError("GitHub token not configured (use --token or GITHUB_TOKEN)")

    except ConfigError as e:
        ctx.exit(present_error(OutputFormatter(color=not no_color), e))

    try:
        exit_code = run(ghd_ctx.resolver, ghd_ctx.github, ghd_ctx.output, repository.strip())
    finally:
        ghd_ctx.close()
    ctx.exit(exit_code)


def main() -> None:
    """Main entry point."""
    console = Console(stderr=True)
    try:
        cli()
    except GhdError as e:
        console.print(f"[red]Error:[/red] {escape(_one_line(str(e)))}", soft_wrap=True)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(_one_line(str(e)) or type(e).__name__)}", soft_wrap=True)
        sys.exit(1)


def _one_line(text: str) -> str:
    return " ".join(text.split())


if __name__ == "__main__":
    main()
