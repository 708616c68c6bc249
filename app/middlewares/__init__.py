from .request_id_middleware import *
from .security_middleware import *

__all__ = [
    "RequestIDMiddleware",
    "DevSecurityMiddleware",
    "ProdSecurityMiddleware",
]
