from wocuum.utils.sanitization import sanitize_object, sanitize_query_string, sanitize_string

from tests.conf_tests import client, clear_db  # noqa: F401


def test_removes_sql_injection_keywords():
    result = sanitize_string("test'; DROP TABLE users; --")
    assert "DROP" not in result
    assert "--" not in result


def test_removes_sql_keywords_case_insensitively():
    inputs = [
        "SELECT * FROM users",
        "insert into table",
        "UPDATE users SET",
        "DELETE FROM users",
        "UNION SELECT",
    ]
    for value in inputs:
        result = sanitize_string(value).upper()
        for keyword in ("SELECT", "INSERT", "UPDATE", "DELETE", "UNION"):
            assert keyword not in result


def test_removes_block_comments():
    assert sanitize_string("a /* hidden */ b") == "a b"


def test_removes_script_tags_and_javascript():
    result = sanitize_string('<script>alert("xss")</script>')
    assert "<script>" not in result
    assert "alert" not in result

    result = sanitize_string('<a href="javascript:void(0)" onclick="x()">')
    assert "javascript:" not in result
    assert "onclick=" not in result


def test_removes_dom_access():
    result = sanitize_string("document.cookie and window.location and eval(code)")
    assert "document." not in result
    assert "window." not in result
    assert "eval(" not in result


def test_keeps_normal_text():
    assert sanitize_string("John Doe") == "John Doe"
    assert sanitize_string("john@example.com") == "john@example.com"


def test_trims_and_normalizes_whitespace():
    assert sanitize_string("  multiple   spaces   ") == "multiple spaces"
    assert sanitize_string("tabs\tand\nnewlines") == "tabs and newlines"


def test_non_strings_pass_through():
    assert sanitize_string(42) == 42
    assert sanitize_string(None) is None
    assert sanitize_object(True) is True


def test_sanitize_object_sanitizes_string_properties():
    result = sanitize_object({
        "name": "John",
        "email": "john@example.com",
        "malicious": "'; DROP TABLE users; --",
        "count": 3,
    })
    assert result["name"] == "John"
    assert result["email"] == "john@example.com"
    assert "DROP" not in result["malicious"]
    assert result["count"] == 3


def test_sanitize_object_handles_nesting_and_arrays():
    result = sanitize_object({
        "user": {"profile": {"bio": "'; SELECT * FROM secrets; --"}},
        "tags": ["normal", "'; DROP TABLE users; --", "another", None],
    })
    assert "SELECT" not in result["user"]["profile"]["bio"]
    assert result["tags"][0] == "normal"
    assert "DROP" not in result["tags"][1]
    assert result["tags"][2] == "another"
    assert result["tags"][3] is None


def test_sanitize_query_string():
    result = sanitize_query_string(b"q=drop%20me&empty=")
    assert result == b"q=me&empty="


def test_keywords_only_removed_as_whole_words():
    assert sanitize_string("select1") == "select1"
    assert sanitize_string("selection") == "selection"
    assert sanitize_string("select 12") == "12"


def test_request_body_is_sanitized_before_validation():
    # "select " is stripped from the password, leaving too few characters
    response = client.post(
        "/users/register",
        json={"email": "body@example.com", "password": "select 12", "fullName": "Body Test"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Error occured when registering user"


def test_sanitized_body_reaches_the_endpoint():
    response = client.post(
        "/users/register",
        json={"email": "body@example.com", "password": "Testpassword123", "fullName": "Body select Test"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["fullName"] == "Body Test"


def test_sanitize_query_string_keeps_utf8():
    assert sanitize_query_string("city=Jäms".encode("utf-8")) == b"city=J%C3%A4ms"
    assert sanitize_query_string(b"city=J%C3%A4ms") == b"city=J%C3%A4ms"
