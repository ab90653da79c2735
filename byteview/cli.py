#!/usr/bin/env python3
"""
byteview - Main CLI
"""

import json
import sys
from pathlib import Path

import rich_click as click
from colorama import Fore, Style

from .__version__ import get_version_info
from .config import ConfigManager, create_default_config, create_view_coordinator
from .core.decoder import DataTypeMode
from .core.errors import ByteViewError
from .core.file_loader import FileLoader
from .core.page_window import PageWindow
from .log_setup import setup_logging
from .utils import format_size, get_byteview_dir, set_byteview_dir


def find_config_file() -> str:
    """Config file path inside BYTEVIEW_DIR (it may not exist yet)."""
    return str(get_byteview_dir() / "config.yml")


def _echo_error(message: str) -> None:
    click.echo(f"{Fore.RED}Error: {message}{Style.RESET_ALL}", err=True)


def _load_config_manager(ctx) -> ConfigManager:
    """ConfigManager for the current BYTEVIEW_DIR; exits if config.yml is unreadable."""
    config_manager = ConfigManager(ctx.obj["config_path"])
    try:
        config_manager.load_config()
    except (ValueError, OSError) as e:
        _echo_error(str(e))
        sys.exit(1)
    return config_manager


def _require_valid_config(config_manager: ConfigManager) -> None:
    """Exit with the validation errors if the config cannot be used."""
    errors = config_manager.get_validation_errors()
    if errors:
        click.echo(f"{Fore.RED}Configuration errors:{Style.RESET_ALL}", err=True)
        for error in errors:
            click.echo(f"  {Fore.RED}✗{Style.RESET_ALL} {error[1:]}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "byteview_dir",
    default=None,
    help="byteview directory containing config.yml and byteview.log",
)
@click.option("--version", is_flag=True, help="Show version information")
@click.option("--verbose", "-v", is_flag=True, help="Log to stderr as well")
@click.option("--log-file", default=None, help="Write the debug log here")
@click.pass_context
def cli(ctx, byteview_dir, version, verbose, log_file):
    """Paginated byte viewer.

    Launches the TUI by default. For CLI commands:
    byteview dump, byteview info, byteview config, etc.
    """
    ctx.ensure_object(dict)

    if byteview_dir:
        set_byteview_dir(byteview_dir)

    if version:
        version_info = get_version_info()
        click.echo(
            f"{Fore.CYAN}byteview {Fore.GREEN}{version_info['version']}{Style.RESET_ALL}"
        )
        if version_info["git_version"]:
            click.echo(f"Git version: {version_info['git_version']}")
        return

    tui_mode = ctx.invoked_subcommand in (None, "open")
    setup_logging(log_file, verbose=verbose, console=not tui_mode)

    ctx.obj["config_path"] = find_config_file()

    if ctx.invoked_subcommand is None:
        _launch_default_tui()


def _launch_default_tui(file_path: str = None):
    """Launch TUI by default."""
    try:
        from .tui_textual.app import run_textual_tui

        run_textual_tui(file_path=file_path)
    except ImportError as e:
        _echo_error(f"Textual TUI not available: {e}")
        sys.exit(1)


@cli.command("open")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def open_cmd(file):
    """Open FILE in the TUI."""
    _launch_default_tui(file_path=file)


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.option(
    "--mode",
    "-m",
    type=click.Choice(DataTypeMode.choices()),
    default=None,
    help="Data type (default: viewer.default_mode)",
)
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Page number")
@click.option("--all", "all_pages", is_flag=True, help="Dump every page")
@click.pass_context
def dump(ctx, file, mode, page, all_pages):
    """Render FILE to stdout using one of the data types."""
    config_manager = _load_config_manager(ctx)
    _require_valid_config(config_manager)

    config = config_manager.config
    # No UI thread to stay responsive for
    config.decoder.yield_delay_ms = 0

    with create_view_coordinator(config, mode=mode) as coordinator:
        result = coordinator.load_file(file)
        if result.error_occurred:
            _echo_error(result.error_message)
            sys.exit(1)

        if all_pages:
            while True:
                click.echo(result.text, nl=False)
                result = coordinator.next_page()
                if result.error_occurred:
                    break
            click.echo()
            return

        while result.current_page < page:
            result = coordinator.next_page()
            if result.is_notice:
                _echo_error(
                    f"Page {page} does not exist ({coordinator.page_count} pages)"
                )
                sys.exit(1)
            if result.error_occurred:
                _echo_error(result.error_message)
                sys.exit(1)

        click.echo(result.text)


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def info(ctx, file, as_json):
    """Show size and page count for FILE."""
    config_manager = _load_config_manager(ctx)
    _require_valid_config(config_manager)
    config = config_manager.config

    try:
        data = FileLoader(config.max_file_size_mb).load_file(file)
    except ByteViewError as e:
        _echo_error(str(e))
        sys.exit(1)

    window = PageWindow(config.viewer.page_size, len(data))
    details = {
        "filename": Path(file).name,
        "file_size": len(data),
        "page_size": window.page_size,
        "page_count": window.page_count,
    }

    if as_json:
        click.echo(json.dumps(details, indent=2))
        return

    click.echo(f"Filename: {Fore.CYAN}{details['filename']}{Style.RESET_ALL}")
    click.echo(
        f"File size: {details['file_size']} bytes ({format_size(details['file_size'])})"
    )
    click.echo(f"Page size: {details['page_size']} bytes")
    click.echo(f"Pages: {details['page_count']}")


# --- Config ---


@cli.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("view")
@click.pass_context
def config_view(ctx):
    """Display raw configuration file content."""
    config_path = Path(ctx.obj["config_path"])

    if not config_path.exists():
        click.echo(
            f"{Fore.YELLOW}No config file at {config_path} (using defaults){Style.RESET_ALL}"
        )
        return

    click.echo(config_path.read_text(encoding="utf-8"))


@config_cmd.command("validate")
@click.pass_context
def config_validate(ctx):
    """Validate configuration file."""
    config_manager = ConfigManager(ctx.obj["config_path"])

    try:
        results = config_manager.validate_config()
    except (ValueError, OSError) as e:
        _echo_error(str(e))
        sys.exit(1)

    errors = [r[1:] for r in results if r.startswith("✗")]
    warnings = [r[1:] for r in results if r.startswith("!")]
    notes = [r[1:] for r in results if r.startswith("i")]

    if errors:
        click.echo(f"{Fore.RED}Errors:{Style.RESET_ALL}")
        for error in errors:
            click.echo(f"  {Fore.RED}✗{Style.RESET_ALL} {error}")

    if warnings:
        click.echo(f"\n{Fore.YELLOW}Warnings:{Style.RESET_ALL}")
        for warning in warnings:
            click.echo(f"  {Fore.YELLOW}!{Style.RESET_ALL} {warning}")

    for note in notes:
        click.echo(f"  {Fore.BLUE}i{Style.RESET_ALL} {note}")

    if errors:
        sys.exit(1)

    click.echo(f"\n{Fore.GREEN}✓ Configuration is valid{Style.RESET_ALL}")


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def config_init(ctx, force):
    """Write a config.yml with every setting at its default."""
    try:
        path = create_default_config(ctx.obj["config_path"], force=force)
    except FileExistsError as e:
        _echo_error(f"{e} (use --force to overwrite)")
        sys.exit(1)

    click.echo(f"{Fore.GREEN}✓ Created {path}{Style.RESET_ALL}")


@config_cmd.group("settings")
def config_settings():
    """Scalar settings management.

    Use 'byteview config settings list' to see all available keys.
    """
    pass


@config_settings.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def settings_list(ctx, as_json):
    """List all available settings with current values."""
    config_manager = _load_config_manager(ctx)
    result = config_manager.list_settings()

    if as_json:
        click.echo(json.dumps(result["settings"], indent=2))
        return

    click.echo(f"{Fore.CYAN}Available Settings:{Style.RESET_ALL}\n")
    for setting in result["settings"]:
        value = setting["value"]
        if value is None:
            value_str = f"{Fore.YELLOW}null{Style.RESET_ALL}"
        else:
            value_str = str(value)

        status = f" {Fore.BLUE}(default){Style.RESET_ALL}" if setting["is_default"] else ""

        choices_str = ""
        if setting.get("choices"):
            choices_str = f" [{', '.join(setting['choices'])}]"

        click.echo(f"  {Fore.WHITE}{setting['key']}{Style.RESET_ALL} = {value_str}{status}")
        click.echo(f"    Type: {setting['type']}{choices_str}")
        click.echo(f"    {setting['description']}")
        click.echo()


@config_settings.command("get")
@click.argument("key")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def settings_get(ctx, key, as_json):
    """Get a setting value.

    KEY is the setting key (e.g., 'max_file_size_mb', 'viewer.page_size').
    """
    config_manager = _load_config_manager(ctx)
    result = config_manager.get_setting(key)

    if not result["success"]:
        _echo_error(result["message"])
        if result.get("available_keys"):
            click.echo(f"\nAvailable keys: {', '.join(result['available_keys'])}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    value = result["value"]
    click.echo(f"{result['key']} = {'null' if value is None else value}")
    click.echo(f"  Type: {result['type']}")
    click.echo(f"  Default: {result['default']}")
    if result.get("choices"):
        click.echo(f"  Choices: {', '.join(result['choices'])}")


@config_settings.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--no-backup", is_flag=True, help="Skip config backup before modifying")
@click.pass_context
def settings_set(ctx, key, value, no_backup):
    """Set a setting value.

    Examples:
        byteview config settings set viewer.page_size 4096
        byteview config settings set viewer.default_mode hex
    """
    config_manager = _load_config_manager(ctx)
    result = config_manager.set_setting(key, value, backup=not no_backup)
    _report_change(result)


@config_settings.command("unset")
@click.argument("key")
@click.option("--no-backup", is_flag=True, help="Skip config backup before modifying")
@click.pass_context
def settings_unset(ctx, key, no_backup):
    """Unset a setting (reset to default)."""
    config_manager = _load_config_manager(ctx)
    result = config_manager.unset_setting(key, backup=not no_backup)
    _report_change(result)


def _report_change(result: dict) -> None:
    if not result["success"]:
        _echo_error(result["message"])
        if result.get("available_keys"):
            click.echo(f"\nAvailable keys: {', '.join(result['available_keys'])}")
        sys.exit(1)

    if result.get("changed", True):
        click.echo(f"{Fore.GREEN}✓ {result['message']}{Style.RESET_ALL}")
        if result.get("backup_path"):
            click.echo(f"  Config backup: {result['backup_path']}")
    else:
        click.echo(f"{Fore.YELLOW}✓ {result['message']}{Style.RESET_ALL}")


def main():
    try:
        cli()
    except KeyboardInterrupt:
        click.echo(
            f"\n{Fore.YELLOW}Warning: Operation cancelled by user{Style.RESET_ALL}"
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
