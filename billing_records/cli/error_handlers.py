"""Enhanced error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from billing_records.cli.utils.formatters import format_error, format_warning
from billing_records.exceptions import (
    BillingValidationError,
    ExportError,
    MissingHeaderError,
    ParseError,
    PersistenceError,
    RecordNotFoundError,
    RowValidationError,
)


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


class StorageError(CLIError):
    """Error related to the billing data file."""

    pass


class DataValidationError(CLIError):
    """Error related to data validation."""

    pass


class ProcessingError(CLIError):
    """Error related to data processing."""

    pass


def _echo_with_hint(title: str, error: CLIError) -> None:
    click.echo(format_error(f"{title}: {error.message}"))
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def to_cli_error(error: Exception) -> Optional[CLIError]:
    """
    Translate a package exception into the CLI error it is reported as.

    Args:
        error: Exception raised by the billing records package

    Returns:
        Matching CLIError, or None if the error is not a known package error
    """
    if isinstance(error, CLIError):
        return error

    if isinstance(error, RecordNotFoundError):
        return StorageError(
            str(error), "Run 'billing-cli list-records' to see existing record ids"
        )
    if isinstance(error, PersistenceError):
        return StorageError(
            str(error), "Check BILLING_DATA_FILE points to a readable JSON file"
        )
    if isinstance(error, MissingHeaderError):
        return DataValidationError(
            str(error), "Run 'billing-cli export-template' for the expected columns"
        )
    if isinstance(error, (ParseError, RowValidationError, BillingValidationError)):
        return DataValidationError(str(error))
    if isinstance(error, ExportError):
        return ProcessingError(str(error))
    if isinstance(error, ValidationError):
        return ConfigurationError(
            str(error), "Check your environment variables and .env file"
        )
    return None


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1-4 for known error types, 130 on abort, 255 otherwise)
    """
    cli_error = to_cli_error(error)

    if isinstance(cli_error, ConfigurationError):
        _echo_with_hint("Configuration Error", cli_error)
        return 1

    elif isinstance(cli_error, StorageError):
        _echo_with_hint("Storage Error", cli_error)
        return 2

    elif isinstance(cli_error, DataValidationError):
        _echo_with_hint("Data Validation Error", cli_error)
        return 3

    elif isinstance(cli_error, ProcessingError):
        _echo_with_hint("Processing Error", cli_error)
        return 4

    # Handle click.Abort (user cancellation)
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    # Handle generic exceptions
    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(traceback.format_exc())
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Click's own exits and usage errors pass through untouched.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager instance

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is None or isinstance(
                exc_val, (SystemExit, click.exceptions.Exit, click.ClickException)
            ):
                return False
            exit_code = handle_cli_error(exc_val, self.show_debug)
            sys.exit(exit_code)

    return ErrorHandler(debug)
