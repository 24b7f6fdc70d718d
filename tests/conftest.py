"""Root conftest — shared test configuration."""

import os
import tempfile

# Settings are cached on first use: environment must be set before articlehub is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="articlehub-uploads-"))
