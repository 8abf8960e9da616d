import os

# api.security refuses to import without a signing secret
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
