"""
Authentication service for user management.

Handles user creation/update, password login and bearer tokens.
"""
import logging
import time

from authlib.jose import jwt
from authlib.jose.errors import JoseError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from retailflow.exceptions import RetailError, ValidationError, NotFoundError, ConflictError, UnauthorizedError, InternalError
from retailflow.models import User, UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid username or password'


def create_user(session, username, password, email, role) -> int:
    """
    Create a user with a hashed password.

    Raises:
        ValidationError: If a field is missing or the role does not exist
        ConflictError: If the username is taken
    """
    if not username or not password or not email or not role:
        raise ValidationError('All fields are required.')

    user_role = session.query(UserRole).filter_by(role=role).first()
    if not user_role:
        raise ValidationError(f'Role "{role}" does not exist.')

    try:
        user = User(username=username, email=email, role=role, roleid=user_role.id)
        user.set_password(password)
        session.add(user)
        session.commit()
        logger.info(f"[AUTH] Created user {username} with role {role}")
        return user.id

    except IntegrityError as e:
        session.rollback()
        logger.warning(f"[AUTH] Duplicate user {username}: {e.orig}")
        raise ConflictError(f'Username "{username}" is already taken.')
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[AUTH] Error creating user {username}: {e}")
        raise InternalError('Failed to create user')


def update_user(session, user_id, username, email, role, password=None) -> User:
    """Update a user; the password is only rehashed when provided."""
    if not user_id or not username or not email or not role:
        raise ValidationError('ID, username, email, and role are required to update a user.')

    try:
        user = session.query(User).filter_by(id=user_id).first()
        if not user:
            raise NotFoundError('User not found.')

        user_role = session.query(UserRole).filter_by(role=role).first()
        if not user_role:
            raise ValidationError(f'Role "{role}" does not exist.')

        user.username = username
        user.email = email
        user.role = role
        user.roleid = user_role.id
        if password:
            user.set_password(password)

        session.commit()
        return user

    except RetailError:
        session.rollback()
        raise
    except IntegrityError:
        session.rollback()
        raise ConflictError(f'Username "{username}" is already taken.')
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[AUTH] Error updating user {user_id}: {e}")
        raise InternalError('An error occurred while updating the user.')


def update_user_status(session, user_id, status) -> User:
    if not user_id:
        raise ValidationError('ID is required to update a user.')
    user = session.query(User).filter_by(id=user_id).first()
    if not user:
        raise NotFoundError('User not found.')
    if status not in (0, 1, '0', '1') or isinstance(status, bool):
        raise ValidationError('status must be 0 or 1')
    user.status = int(status)
    session.commit()
    return user


def delete_user(session, user_id):
    if not user_id:
        raise ValidationError('User ID is required.')
    user = session.query(User).filter_by(id=user_id).first()
    if not user:
        raise NotFoundError('User not found.')
    session.delete(user)
    session.commit()
    logger.info(f"[AUTH] Deleted user {user_id}")


def authenticate(session, username, password) -> User:
    """
    Return the user for valid credentials.

    Unknown users and wrong passwords raise the same UnauthorizedError.
    """
    if not username or not password:
        raise UnauthorizedError(INVALID_CREDENTIALS)

    user = session.query(User).filter_by(username=username).first()
    if not user or not user.check_password(password):
        logger.warning(f"[AUTH] Failed login for {username}")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if user.status == 0:
        raise UnauthorizedError('User is disabled')
    return user


def issue_token(user, secret, expires_in=3600) -> str:
    """Sign an HS256 bearer token for the user."""
    now = int(time.time())
    header = {'alg': 'HS256'}
    payload = {
        'id': user.id,
        'username': user.username,
        'iat': now,
        'exp': now + int(expires_in),
    }
    return jwt.encode(header, payload, secret).decode('utf-8')


def decode_token(token, secret) -> dict:
    """
    Verify a bearer token and return its claims.

    Raises:
        UnauthorizedError: If the signature is invalid or the token expired
    """
    try:
        claims = jwt.decode(token, secret)
        claims.validate()
    except (JoseError, ValueError) as e:
        logger.debug(f"[AUTH] Rejected token: {e}")
        raise UnauthorizedError('Invalid or expired token')
    return dict(claims)


def seed_roles(session, roles=('admin', 'manager', 'cashier')) -> int:
    """Insert missing user roles. Returns how many were added."""
    existing = {r.role for r in session.query(UserRole).all()}
    added = 0
    for role in roles:
        if role not in existing:
            session.add(UserRole(role=role))
            added += 1
    session.commit()
    return added
