# Configuration module for environment setup and API client initialization
# This module is imported by: main.py, dependencies.py
# Dependencies: python-dotenv, openai
# Purpose: Centralized configuration management and API client creation

import os  # For accessing environment variables from system
from typing import List
from dotenv import load_dotenv  # For loading .env files into environment
from openai import AsyncOpenAI  # OpenAI client for API calls

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def load_environment():
    """
    Load environment variables from .env file and validate OpenAI API key
    Called by: get_openai_async_client()
    Returns: OpenAI API key string
    Raises: ValueError if API key is not found
    """
    load_dotenv()
    openai_key = os.getenv("OPENAI_API_KEY")
    if not openai_key:
        raise ValueError("OPEN AI KEY NOT LOADED")
    return openai_key


def get_openai_async_client():
    """
    Initialize and return the async OpenAI client.
    Called by: dependencies.get_debate_engine() - the client backs services/debate_engine.py
    Usage: client = get_openai_async_client() -> await client.chat.completions.create(...)
    """
    api_key = load_environment()
    return AsyncOpenAI(api_key=api_key)


def get_cors_origins() -> List[str]:
    """Comma-separated CORS_ORIGINS, defaulting to the Vite dev server."""
    load_dotenv()
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


def get_log_level() -> str:
    load_dotenv()
    return (os.getenv("LOG_LEVEL") or "INFO").upper()
