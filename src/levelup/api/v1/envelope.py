"""Helpers for returning service results with a matching HTTP status."""

from fastapi import Response

from ...schemas import ServiceResult


def respond(result: ServiceResult, response: Response) -> dict:
    """Copy the result's status onto the response and return the envelope body."""

    response.status_code = result.status_code
    return result.model_dump()
