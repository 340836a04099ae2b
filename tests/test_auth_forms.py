import pytest
from pydantic import ValidationError

from services.auth.forms import (
    EditUserForm,
    LoginForm,
    SignupForm,
    form_errors,
    login_error_message,
    signup_error_message,
)


def _errors(model, **kw):
    with pytest.raises(ValidationError) as exc:
        model(**kw)
    return form_errors(exc.value)


def test_login_trims_email():
    form = LoginForm(email="  ana@example.com ", password="secret1")
    assert form.email == "ana@example.com"


def test_login_errors_are_per_field():
    errors = _errors(LoginForm, email="not-an-email", password="123")
    assert errors == {
        "email": "Email inválido",
        "password": "Senha deve ter no mínimo 6 caracteres",
    }


def test_signup_password_mismatch_lands_on_confirmation():
    errors = _errors(
        SignupForm, full_name="Ana", email="ana@example.com", password="secret1", confirm_password="secret2"
    )
    assert errors == {"confirm_password": "Senhas não coincidem"}


@pytest.mark.parametrize("name, message", [("A", "Nome deve ter no mínimo 2 caracteres"), ("x" * 101, "Nome deve ter no máximo 100 caracteres")])
def test_signup_name_bounds(name, message):
    errors = _errors(
        SignupForm, full_name=name, email="ana@example.com", password="secret1", confirm_password="secret1"
    )
    assert errors["full_name"] == message


def test_edit_user_password_is_optional():
    form = EditUserForm(full_name=" Ana ")
    assert form.full_name == "Ana"
    assert form.new_password == ""


def test_edit_user_checks_new_password():
    assert _errors(EditUserForm, full_name="Ana", new_password="123")["new_password"].startswith("Senha")
    errors = _errors(EditUserForm, full_name="Ana", new_password="secret1", confirm_password="other12")
    assert errors == {"confirm_password": "As senhas não coincidem"}
    assert _errors(EditUserForm, full_name="  ")["full_name"] == "Nome não pode estar vazio"


def test_backend_messages_are_translated():
    assert login_error_message("Invalid login credentials") == "Email ou senha incorretos"
    assert login_error_message("Email not confirmed") == "Por favor, confirme seu email antes de fazer login"
    assert login_error_message("boom") == "Erro ao fazer login"
    assert signup_error_message("User already registered") == "Este email já está cadastrado"
    assert signup_error_message("boom") == "Erro ao criar conta"
