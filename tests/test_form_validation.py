from wocuum.utils.form_validation import (
    escape_html,
    validate_auth_form,
    validate_field,
    validate_input,
)

VALID_REGISTER = {
    "email": "matti@example.com",
    "password": "Secret123",
    "confirmPassword": "Secret123",
    "fullName": "Matti Meikäläinen",
}


def test_valid_register_form():
    result = validate_auth_form(VALID_REGISTER, "register")
    assert result.is_valid
    assert result.errors == {}


def test_email_rules():
    assert validate_auth_form({"email": "  "}, "forgot").errors == {"email": "auth.errors.emailRequired"}
    assert validate_auth_form({"email": "no-at-sign"}, "forgot").errors["email"] == "auth.errors.emailInvalid"
    too_long = "a" * 250 + "@example.com"
    assert validate_auth_form({"email": too_long}, "forgot").errors["email"] == "auth.errors.emailTooLong"


def test_forgot_form_skips_password():
    result = validate_auth_form({"email": "matti@example.com"}, "forgot")
    assert result.is_valid


def test_password_rules_first_failure_wins():
    cases = {
        "": "auth.errors.passwordRequired",
        "Ab1": "auth.errors.passwordMinLength",
        "Ab1" + "x" * 130: "auth.errors.passwordTooLong",
        "SECRET123": "auth.errors.passwordLowercase",
        "secret123": "auth.errors.passwordUppercase",
        "SecretPass": "auth.errors.passwordNumber",
        "Secret 123": "auth.errors.passwordSpaces",
    }
    for password, expected in cases.items():
        result = validate_auth_form({"email": "matti@example.com", "password": password}, "login")
        assert result.errors.get("password") == expected, password


def test_full_name_rules():
    cases = {
        "": "auth.errors.fullNameRequired",
        "Al": "auth.errors.fullNameShort",
        "A" * 101: "auth.errors.fullNameTooLong",
        "R2-D2 Droid": "auth.errors.fullNameInvalid",
    }
    for full_name, expected in cases.items():
        result = validate_auth_form({**VALID_REGISTER, "fullName": full_name}, "register")
        assert result.errors.get("fullName") == expected, full_name

    accepted = validate_auth_form({**VALID_REGISTER, "fullName": "Anna-Liisa O'Brien"}, "register")
    assert "fullName" not in accepted.errors


def test_confirm_password_rules():
    missing = validate_auth_form({**VALID_REGISTER, "confirmPassword": ""}, "register")
    assert missing.errors["confirmPassword"] == "auth.errors.passwordRequired"

    mismatch = validate_auth_form({**VALID_REGISTER, "confirmPassword": "Secret124"}, "register")
    assert mismatch.errors["confirmPassword"] == "auth.errors.passwordMismatch"


def test_login_form_ignores_register_fields():
    result = validate_auth_form({"email": "matti@example.com", "password": "Secret123"}, "login")
    assert result.is_valid


def test_translate_is_applied():
    messages = {"auth.errors.emailRequired": "Sähköposti vaaditaan"}
    result = validate_auth_form({}, "forgot", translate=lambda key: messages.get(key, key))
    assert result.errors == {"email": "Sähköposti vaaditaan"}


def test_validate_field_uses_rest_of_form():
    assert validate_field("confirmPassword", "Other123", VALID_REGISTER, "register") == "auth.errors.passwordMismatch"
    assert validate_field("email", "matti@example.com", {}, "login") is None


def test_stricter_than_server_rules():
    # the API accepts this password, the form flags it
    result = validate_auth_form({"email": "matti@example.com", "password": "abcdef"}, "login")
    assert result.errors["password"] == "auth.errors.passwordUppercase"


def test_escape_html():
    assert escape_html(' <b>"Tom\'s"</b> ') == "&lt;b&gt;&quot;Tom&#x27;s&quot;&lt;&#x2F;b&gt;"
    assert escape_html(None) == ""


def test_validate_input():
    assert validate_input("alphanumeric", "abc123").is_valid
    assert validate_input("alphabetic", "abc123").errors == {"value": "Invalid alphabetic format"}
    assert validate_input("numeric", "0451").is_valid
    assert validate_input("hex", "ff").errors == {"value": "Unknown validation type"}


def test_trailing_newline_is_not_a_valid_email():
    result = validate_auth_form({"email": "a@b.com\n"}, "forgot")
    assert result.errors["email"] == "auth.errors.emailInvalid"


def test_validate_input_rejects_trailing_newline():
    assert validate_input("numeric", "123\n").errors == {"value": "Invalid numeric format"}


def test_escape_html_escapes_ampersand_first():
    assert escape_html("&lt;") == "&amp;lt;"
    assert escape_html("Fish & Chips") == "Fish &amp; Chips"
