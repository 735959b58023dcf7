"""Composition root for the Accounts user-management context.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Entry point (interactive CLI)
"""

import asyncio
import json
import logging
import sys
from typing import Any

from accounts.adapters.cli.commands import CLICommandHandler
from accounts.adapters.events.bus import InProcessEventBus
from accounts.adapters.events.log import LoggingEventPublisher
from accounts.adapters.hashing.bcrypt import BcryptPasswordHasher
from accounts.adapters.store.memory import InMemoryUserRepository
from accounts.adapters.store.sqlite import SQLiteUserRepository
from accounts.config import Settings, load_settings
from accounts.core.ports import EventPublisherPort, UserRepositoryPort
from accounts.core.user_service import UserService

logger = logging.getLogger(__name__)


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for account commands.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "accounts> ")
            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            if not isinstance(args, dict):
                logger.error("Arguments must be a JSON object. Use 'help' for command syntax.")
                continue

            try:
                result = await _execute_cli_command(cli_handler, command, args)
                print(json.dumps(result, indent=2, default=str))
            except ValueError as e:
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            # Ctrl+D to exit
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue
        except Exception as e:
            logger.error(f"CLI error: {e}", exc_info=True)


def _require(args: dict[str, Any], *names: str) -> None:
    for name in names:
        if name not in args:
            raise ValueError(f"Missing required parameter: {name}")


async def _execute_cli_command(
    cli_handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Execute a CLI command.

    Args:
        cli_handler: CLICommandHandler instance.
        command: Command name.
        args: Command arguments.

    Returns:
        Command result dictionary.

    Raises:
        ValueError: If command is not recognized or a parameter is missing.
    """
    if command == "register":
        _require(args, "email", "password")
        return await cli_handler.register(args["email"], args["password"])

    elif command == "update-email":
        _require(args, "user_id", "new_email")
        return await cli_handler.update_email(args["user_id"], args["new_email"])

    elif command == "update-password":
        _require(args, "user_id", "new_password")
        return await cli_handler.update_password(args["user_id"], args["new_password"])

    elif command == "authenticate":
        _require(args, "email", "password")
        return await cli_handler.authenticate(args["email"], args["password"])

    elif command == "show":
        _require(args, "user_id")
        return await cli_handler.show(args["user_id"])

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  register
    Register a new user.
    Required: email, password

    Example: register {"email": "ada@example.com", "password": "correct-horse"}

  update-email
    Change a user's email address.
    Required: user_id, new_email

    Example: update-email {"user_id": "uuid-here", "new_email": "ada@example.org"}

  update-password
    Change a user's password.
    Required: user_id, new_password

    Example: update-password {"user_id": "uuid-here", "new_password": "battery-staple"}

  authenticate
    Check a user's credentials.
    Required: email, password

    Example: authenticate {"email": "ada@example.com", "password": "correct-horse"}

  show
    Show a user's details.
    Required: user_id

    Example: show {"user_id": "uuid-here"}

  help
    Show this help message.

  exit
    Exit the CLI.

Note: All commands accept arguments as a single JSON object.
Provide the JSON after the command name on the same line.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_repository(settings: Settings) -> UserRepositoryPort:
    """Instantiate the user repository selected by configuration."""
    if settings.store_backend == "memory":
        logger.info("User repository: in-memory")
        return InMemoryUserRepository()
    elif settings.store_backend == "sqlite":
        logger.info(f"User repository: SQLite at {settings.store_sqlite_path}")
        return SQLiteUserRepository(db_path=settings.store_sqlite_path)
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


def build_publisher(settings: Settings) -> EventPublisherPort:
    """Instantiate the event publisher selected by configuration.

    The in-process bus is created with a logging subscriber on every event
    so published events stay visible.
    """
    if settings.event_backend == "log":
        logger.info("Event publisher: log")
        return LoggingEventPublisher()
    elif settings.event_backend == "bus":
        logger.info("Event publisher: in-process bus")
        bus = InProcessEventBus()
        bus.subscribe("*", LoggingEventPublisher(level=logging.DEBUG).publish)
        return bus
    raise ValueError(f"Unknown event backend: {settings.event_backend}")


def build_service(settings: Settings) -> tuple[UserService, UserRepositoryPort]:
    """Wire adapters into the core service.

    Returns:
        The service and the repository it uses (so callers can release it).
    """
    repository = build_repository(settings)
    publisher = build_publisher(settings)
    hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    return UserService(repository, publisher, hasher), repository


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the application.

    This is the composition root: the single place where all components
    are instantiated and wired together.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters and core services
    4. Run the interactive CLI
    """
    settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger.info("Loading Accounts user-management service...")

    service, repository = build_service(settings)

    try:
        logger.info(f"Starting in {settings.run_mode} mode...")
        cli_handler = CLICommandHandler(service)
        await _run_cli_interactive(cli_handler)
    finally:
        if isinstance(repository, SQLiteUserRepository):
            await repository.close_pool()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
