from .health import health_bp
from .auth import auth_bp
from .users import users_bp
