"""Application configuration read from environment variables"""
import os

# Development defaults; override through the environment in production
SECRET_KEY = os.getenv("RENTAL_SECRET_KEY", "your-secret-key-keep-it-secret")
ALGORITHM = os.getenv("RENTAL_JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("RENTAL_TOKEN_EXPIRE_MINUTES", "30"))

LOG_LEVEL = os.getenv("RENTAL_LOG_LEVEL", "INFO")

ADMIN_USERNAME = os.getenv("RENTAL_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("RENTAL_ADMIN_PASSWORD", "admin123")
