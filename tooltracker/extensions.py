"""
Shared Flask extension instances.

Kept in a separate module so route blueprints can decorate views without
importing the application factory.
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Limits and storage come from RATELIMIT_* configuration in init_app().
limiter = Limiter(key_func=get_remote_address)
