"""
User-facing error messages for failed agent runs.
"""

import asyncio

import httpx
from google.genai import errors as genai_errors

from app.api.middleware.error_handler import AppException


def get_user_friendly_error(error: BaseException) -> str:
    """Turn an exception into a short message a chat user can act on."""
    if isinstance(error, genai_errors.APIError):
        message = (error.message or "").lower()
        code = error.code
        if "api key" in message or "api_key" in message:
            return "The Gemini API key is missing or invalid. Please check your API key."
        if code in (401, 403):
            return "Access to the model was denied. Please check your API key permissions."
        if code == 429:
            return "You've hit the rate limit or quota for the AI service. Please wait a moment and try again."
        if code == 404:
            return "The requested model is not available. It may have been renamed or retired."
        if "safety" in message or "blocked" in message:
            return "The request was blocked by the AI safety filters. Try rephrasing it."
        if code is not None and code >= 500:
            return "The AI service is temporarily unavailable. Please try again shortly."
        return error.message or str(error)

    if isinstance(error, AppException):
        return error.message

    if isinstance(error, (httpx.TransportError, ConnectionError)):
        return "Couldn't reach the AI service. Please check your connection and try again."

    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return "The request timed out. Please try again."

    return str(error) or "An unexpected error occurred."
