"""Tests for request-model whitespace handling."""

import pytest
from pydantic import ValidationError

from mathsolve_ai.core.models.io.auth import ChangePasswordRequest, LoginRequest, RegisterRequest
from mathsolve_ai.core.models.io.problems import ProblemCreate


def test_plain_strings_and_list_items_are_stripped():
    problem = ProblemCreate.model_validate(
        {
            "title": "  Quadratic roots  ",
            "description": "Find all real roots of x^2 - 5x + 6 = 0.",
            "difficulty": "LOW",
            "category": " Algebra ",
            "tags": [" roots ", "quadratics"],
        }
    )
    assert problem.title == "Quadratic roots"
    assert problem.category == "Algebra"
    assert problem.tags == ["roots", "quadratics"]


def test_blank_strings_fail_length_checks_after_stripping():
    with pytest.raises(ValidationError):
        ProblemCreate.model_validate(
            {"title": "   ", "description": "Long enough description", "difficulty": "LOW", "category": "Algebra"}
        )


def test_passwords_are_kept_verbatim():
    login = LoginRequest.model_validate({"email": " Alice@Example.com ", "password": "  Pa55word!  "})
    assert login.email == "alice@example.com"
    assert login.password == "  Pa55word!  "

    register = RegisterRequest.model_validate(
        {"username": "alice", "email": "alice@example.com", "password": " Pa55word! "}
    )
    assert register.password == " Pa55word! "


@pytest.mark.parametrize("current_key,new_key", [("currentPassword", "newPassword"), ("current_password", "new_password")])
def test_password_changes_are_kept_verbatim(current_key, new_key):
    request = ChangePasswordRequest.model_validate({current_key: " Old-pa55 ", new_key: " New-Pa55word "})
    assert request.current_password == " Old-pa55 "
    assert request.new_password == " New-Pa55word "
