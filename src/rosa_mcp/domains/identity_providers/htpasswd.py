"""HTPasswd identity provider input handling and validation.

Mirrors the checks the ROSA CLI applies before creating an htpasswd
identity provider, so agents get the same feedback as CLI users.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import TYPE_CHECKING

import bcrypt

from rosa_mcp.utils.errors import InvalidArgumentError

if TYPE_CHECKING:
    from rosa_mcp.tools.arguments import ArgumentBag

CLUSTER_ADMIN_USERNAME = "cluster-admin"

MIN_PASSWORD_LENGTH = 14

# bcrypt only reads the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72

_IDP_NAME_RE = re.compile(r"^[0-9a-z]+([-_][0-9a-z]+)*$", re.IGNORECASE)


class HTPasswdError(ValueError):
    """Invalid htpasswd identity provider input."""


def validate_username(username: str) -> None:
    """Reject usernames OpenShift cannot map, and the reserved admin name.

    Raises:
        HTPasswdError: If the username is not allowed.
    """
    if any(c in username for c in "/:%"):
        raise HTPasswdError(
            f"invalid username '{username}': username must not contain /, :, or %"
        )
    if username == CLUSTER_ADMIN_USERNAME:
        raise HTPasswdError(
            f"username '{username}' is not allowed. It is preserved for cluster admin creation"
        )


def validate_idp_name(name: str) -> None:
    """Validate an identity provider name.

    Raises:
        HTPasswdError: If the name is not a valid identifier or is reserved.
    """
    if not _IDP_NAME_RE.match(name):
        raise HTPasswdError(f"Invalid identifier '{name}' for 'name'")
    if name.lower() == CLUSTER_ADMIN_USERNAME:
        raise HTPasswdError('The name "cluster-admin" is reserved for admin user IDP')


def validate_password(password: str) -> None:
    """Apply the OCM password policy.

    Raises:
        HTPasswdError: If the password violates the policy.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTPasswdError(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not password.isascii():
        raise HTPasswdError("password should contain only ASCII characters")
    if any(c.isspace() for c in password):
        raise HTPasswdError("password should not contain whitespace")
    if not any(c.isupper() for c in password):
        raise HTPasswdError("password must include uppercase letters")
    if not any(c.islower() for c in password):
        raise HTPasswdError("password must include lowercase letters")
    if not any(not c.isalpha() for c in password):
        raise HTPasswdError("password must include numbers or symbols")


def validate_user_credentials(username: str, password: str) -> None:
    validate_username(username)
    validate_password(password)


def hash_password(password: str) -> str:
    """Hash a plain password into an htpasswd-compatible bcrypt hash.

    Raises:
        HTPasswdError: If the password is too long for bcrypt.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise HTPasswdError(f"password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("ascii")


def parse_htpasswd_file(content: str) -> dict[str, str]:
    """Parse ``username:hashed-password`` lines, skipping blank lines.

    Raises:
        HTPasswdError: On a line without a username or password.
    """
    users: dict[str, str] = {}
    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        username, sep, password = line.partition(":")
        if not sep or not username or not password:
            raise HTPasswdError(
                f"Malformed line, Expected: validUsername:validPassword, Got: {line}"
            )
        users[username] = password
    return users


def process_user_input(args: ArgumentBag) -> tuple[dict[str, str], bool]:
    """Collect users from the tool arguments.

    Sources are tried in order: the ``users`` array of ``user:password``
    strings, a single ``username``/``password`` pair, then base64-encoded
    ``htpasswd_file_content`` whose passwords are already hashed.

    Returns:
        Mapping of username to password, and whether the passwords are hashed.

    Raises:
        InvalidArgumentError: If no usable source is given.
        HTPasswdError: If a source is malformed.
    """
    users_arg = args.raw("users")
    if isinstance(users_arg, list) and users_arg:
        users: dict[str, str] = {}
        for entry in users_arg:
            if not isinstance(entry, str):
                raise HTPasswdError("invalid user format, expected string")
            username, sep, password = entry.partition(":")
            if not sep:
                raise HTPasswdError("users should be provided in format username:password")
            users[username] = password
        return users, False

    username = args.raw("username")
    if isinstance(username, str):
        password = args.raw("password")
        if isinstance(password, str):
            return {username: password}, False
        raise InvalidArgumentError("password", "password required when username is provided")

    file_content = args.get_string("htpasswd_file_content")
    if file_content:
        try:
            decoded = base64.b64decode(file_content, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise HTPasswdError(f"failed to decode htpasswd file content: {e}") from e
        try:
            return parse_htpasswd_file(decoded), True
        except HTPasswdError as e:
            raise HTPasswdError(f"failed to parse htpasswd file: {e}") from e

    raise InvalidArgumentError(
        "users",
        "no user input provided: specify 'users', 'username'+'password', or 'htpasswd_file_content'",
    )
