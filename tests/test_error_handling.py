"""Test error handling functionality.

Verifies that custom exceptions are properly raised and handled,
returning the JSON error envelope with the right status codes.
"""
import asyncio
import json

import pytest
from starlette.requests import Request

from core.auth import CurrentUser, ensure_owner_or_admin, get_current_user, require_admin
from core.error_handlers import app_exception_handler, create_error_response
from core.exceptions import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from core.repository import get_or_404
from database import models


def body(response):
    return json.loads(response.body)


def test_exception_classes_have_proper_attributes():
    """Test that custom exception classes have expected attributes."""
    exc = NotFoundError("Recipe", 123)
    assert exc.status_code == 404
    assert "Recipe" in exc.message
    assert "123" in exc.message
    assert exc.details == {"resource": "Recipe", "id": 123}

    exc = ValidationError("Invalid input", field="age")
    assert exc.status_code == 400
    assert exc.message == "Invalid input"
    assert exc.details == {"field": "age"}

    assert UnauthorizedError().status_code == 401
    assert ForbiddenError().status_code == 403
    assert ConflictError("Email taken", field="email").status_code == 409

    exc = DatabaseError("Could not save", operation="create")
    assert exc.status_code == 500
    assert exc.details == {"operation": "create"}


def test_error_envelope_shape():
    """Details are only included when present."""
    assert body(create_error_response("Boom", 500)) == {"error": "Boom", "status_code": 500}
    response = create_error_response("Bad date", 400, {"field": "date"})
    assert response.status_code == 400
    assert body(response) == {"error": "Bad date", "status_code": 400, "details": {"field": "date"}}


def test_app_exception_handler_renders_envelope():
    request = Request({"type": "http", "method": "GET", "path": "/api/diary", "headers": [], "query_string": b""})
    response = asyncio.run(app_exception_handler(request, NotFoundError("Meal item", 5)))
    assert response.status_code == 404
    assert body(response)["error"] == "Meal item with id '5' not found"
    assert body(response)["details"] == {"resource": "Meal item", "id": 5}


def test_missing_identity_renders_message_string():
    request = Request({"type": "http", "method": "GET", "path": "/api/profile", "headers": [], "query_string": b""})
    with pytest.raises(UnauthorizedError) as exc_info:
        get_current_user(x_user_id=None, x_user_role="user")
    response = asyncio.run(app_exception_handler(request, exc_info.value))
    assert response.status_code == 401
    assert body(response) == {"error": "No user identity provided", "status_code": 401}


def test_missing_row_raises_404(db):
    """Test that requesting a non-existent product raises NotFoundError."""
    with pytest.raises(NotFoundError) as exc_info:
        get_or_404(db, models.Product, 99999, "Product")
    assert "Product" in str(exc_info.value.message)
    assert exc_info.value.status_code == 404


@pytest.mark.parametrize("user_id", [None, "", "abc", "0", "-3"])
def test_invalid_identity_is_unauthorized(user_id):
    with pytest.raises(UnauthorizedError):
        get_current_user(x_user_id=user_id, x_user_role="user")


def test_identity_headers_resolve_user():
    user = get_current_user(x_user_id="42", x_user_role="ADMIN")
    assert user == CurrentUser(id=42, role="admin")
    assert user.is_admin
    with pytest.raises(ForbiddenError):
        get_current_user(x_user_id="42", x_user_role="superuser")


def test_owner_and_admin_checks():
    ensure_owner_or_admin(CurrentUser(id=1), 1, "Recipe")
    ensure_owner_or_admin(CurrentUser(id=2, role="admin"), 1, "Recipe")
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_owner_or_admin(CurrentUser(id=2), 1, "Recipe")
    assert exc_info.value.details == {"resource": "Recipe"}
    with pytest.raises(ForbiddenError):
        require_admin(CurrentUser(id=2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
