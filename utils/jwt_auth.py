from fastapi import Depends
from fastapi.security.api_key import APIKeyHeader
from jose import JWTError, jwt
import os
from dotenv import load_dotenv
from utils.errors import AuthenticationError, AuthorizationError
from utils.logger_factory import new_logger
from utils.permissions import Permission, Role, has_permission, has_role_level, parse_role, role_level

load_dotenv()

SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("JWT_SECRET_KEY environment variable must be set for JWT authentication.")

ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


def _decode_identity(api_key: str, log) -> dict:
    if not api_key.startswith("Bearer "):
        log.error("Authorization header malformed or missing 'Bearer '")
        raise AuthenticationError()
    token = api_key[len("Bearer "):]
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        log.error(f"JWT decoding failed: {str(e)}")
        raise AuthenticationError()
    user_id = payload.get("sub")
    role = payload.get("role")
    if user_id is None or role is None:
        log.error(f"Invalid JWT: missing user ID or role. Claims: {sorted(payload.keys())}")
        raise AuthenticationError()
    return {
        "id": str(user_id),
        "email": payload.get("email"),
        "name": payload.get("name"),
        "role": role,
    }


def get_current_user(api_key: str = Depends(api_key_header)) -> dict:
    """Resolve the bearer token into an ``{id, email, name, role}`` identity."""
    log = new_logger("get_current_user")
    if not api_key:
        log.error("Authorization header missing.")
        raise AuthenticationError()
    user = _decode_identity(api_key, log)
    log.info(f"User ID: {user['id']}, Role: {user['role']}")
    return user


def get_optional_user(api_key: str = Depends(api_key_header)):
    """Like get_current_user, but anonymous visitors resolve to None."""
    if not api_key:
        return None
    log = new_logger("get_optional_user")
    try:
        return _decode_identity(api_key, log)
    except AuthenticationError:
        log.info("Ignoring unusable token on a public route")
        return None


def require_roles(*roles):
    """
    Dependency for endpoints open to an explicit list of roles.
    Usage: @router.post(..., dependencies=[Depends(require_roles('admin', 'content_manager'))])
    """
    allowed = {parse_role(r) for r in roles}

    def role_checker(user=Depends(get_current_user)):
        log = new_logger("require_roles")
        if parse_role(user["role"]) not in allowed:
            log.warning(f"Authorization failed: user_id={user['id']}, role={user['role']}, required_roles={roles}")
            raise AuthorizationError()
        return user
    return role_checker


def require_role(required_role: Role):
    """Dependency admitting ``required_role`` and every role ranked above it."""
    required_level = role_level(required_role)

    def level_checker(user=Depends(get_current_user)):
        log = new_logger("require_role")
        if not has_role_level(user["role"], required_level):
            log.warning(f"Authorization failed: user_id={user['id']}, role={user['role']}, required_role={required_role}")
            raise AuthorizationError()
        return user
    return level_checker


def require_permission(permission: Permission):
    def permission_checker(user=Depends(get_current_user)):
        log = new_logger("require_permission")
        if not has_permission(user["role"], permission):
            log.warning(f"Authorization failed: user_id={user['id']}, role={user['role']}, permission={permission.value}")
            raise AuthorizationError()
        log.info(f"Authorization successful: user_id={user['id']}, permission={permission.value}")
        return user
    return permission_checker
