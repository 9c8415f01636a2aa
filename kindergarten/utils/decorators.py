from functools import wraps
from flask import current_app
from flask_login import current_user
from kindergarten.errors import ForbiddenError, UnauthorizedError


def role_required(*roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if current_app.config.get('LOGIN_DISABLED'):
                return f(*args, **kwargs)

            if not current_user.is_authenticated:
                raise UnauthorizedError()

            if current_user.role not in roles:
                raise ForbiddenError()

            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = role_required('admin')
