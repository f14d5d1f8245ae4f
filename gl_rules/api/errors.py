"""
Mapping from domain errors to HTTP errors.

Services raise ValueError subclasses; endpoints turn them into
an HTTPException with the status code that fits.
"""

from fastapi import HTTPException

from gl_rules.exceptions import NoDefaultRuleError, NotFoundError


def http_error(error: ValueError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, NoDefaultRuleError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
