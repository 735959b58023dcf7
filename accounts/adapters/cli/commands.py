"""CLI command implementations for account management.

Provides user-initiated actions through command-line interface.

This adapter maps CLI commands (register, update-email, update-password,
authenticate, show) to UserManagementPort operations. It handles
CLI-specific formatting and error reporting.
"""

import logging
from typing import Any

from accounts.core.ports import UserManagementPort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to UserManagementPort.

    Every method returns a result dictionary with ``status`` set to
    ``"success"`` or ``"error"``. Domain errors are reported, not raised.
    """

    def __init__(self, management: UserManagementPort):
        """Initialize the CLI command handler.

        Args:
            management: UserManagementPort implementation to execute commands.
        """
        self.management = management

    async def register(self, email: str, password: str) -> dict[str, Any]:
        """Register a new user via CLI.

        Args:
            email: Email address for the new account.
            password: Plain text password.

        Returns:
            Dictionary with status, message and the new user_id.
        """
        try:
            user_id = await self.management.register_user(email, password)
            return {
                "status": "success",
                "operation": "register",
                "user_id": str(user_id),
                "message": f"User {user_id} registered",
            }

        except ValueError as e:
            logger.error(f"Failed to register user: {e}")
            return {
                "status": "error",
                "operation": "register",
                "message": str(e),
            }

    async def update_email(self, user_id: str, new_email: str) -> dict[str, Any]:
        """Change a user's email via CLI.

        Args:
            user_id: UUID of the user.
            new_email: New email address.

        Returns:
            Dictionary with status and message.
        """
        try:
            await self.management.update_email(user_id, new_email)
            return {
                "status": "success",
                "operation": "update-email",
                "user_id": user_id,
                "message": f"Email updated for user {user_id}",
            }

        except ValueError as e:
            logger.error(f"Failed to update email: {e}")
            return {
                "status": "error",
                "operation": "update-email",
                "user_id": user_id,
                "message": str(e),
            }

    async def update_password(
        self, user_id: str, new_password: str
    ) -> dict[str, Any]:
        """Change a user's password via CLI.

        Args:
            user_id: UUID of the user.
            new_password: New plain text password.

        Returns:
            Dictionary with status and message.
        """
        try:
            await self.management.update_password(user_id, new_password)
            return {
                "status": "success",
                "operation": "update-password",
                "user_id": user_id,
                "message": f"Password updated for user {user_id}",
            }

        except ValueError as e:
            logger.error(f"Failed to update password: {e}")
            return {
                "status": "error",
                "operation": "update-password",
                "user_id": user_id,
                "message": str(e),
            }

    async def authenticate(self, email: str, password: str) -> dict[str, Any]:
        """Check credentials via CLI.

        Returns:
            Dictionary with status, message and user_id on success.
        """
        try:
            user_id = await self.management.authenticate(email, password)
            return {
                "status": "success",
                "operation": "authenticate",
                "user_id": str(user_id),
                "message": "Authenticated",
            }

        except ValueError as e:
            return {
                "status": "error",
                "operation": "authenticate",
                "message": str(e),
            }

    async def show(self, user_id: str) -> dict[str, Any]:
        """Show a user's details via CLI.

        Returns:
            Dictionary with status and the user details.
        """
        try:
            details = await self.management.get_user(user_id)
            return {
                "status": "success",
                "operation": "show",
                "user": details.to_dict(),
            }

        except ValueError as e:
            logger.error(f"Failed to get user details: {e}")
            return {
                "status": "error",
                "operation": "show",
                "user_id": user_id,
                "message": str(e),
            }
