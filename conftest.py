"""Global pytest configuration."""

import os

# Set environment for tests before any imports read settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test-docuflow.db")
os.environ["LLM_API_KEY"] = ""
os.environ["RESEND_API_KEY"] = ""
