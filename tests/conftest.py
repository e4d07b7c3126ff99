"""Pytest configuration and shared fixtures."""

# Load environment variables from .env file at test startup
from dotenv import load_dotenv
load_dotenv()

pytest_plugins = [
    "tests.fixtures.core.clocks",
    "tests.fixtures.core.services",
    "tests.fixtures.api",
]
