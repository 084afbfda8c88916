from utils.validation import is_blank_code, normalize_email, sanitize_text, validate_email


def test_sanitize_text_strips_tags_and_whitespace():
    assert sanitize_text("<script>x</script>Bob") == "Bob"
    assert sanitize_text("<SCRIPT type='text/javascript'>alert(1)</SCRIPT> Bob") == "Bob"
    assert sanitize_text("  <b>Jane</b>  ") == "Jane"
    assert sanitize_text("<img src=x onerror=alert(1)>Ann") == "Ann"
    assert sanitize_text("a > b") == "a > b"


def test_sanitize_text_non_strings_become_empty():
    assert sanitize_text(None) == ""
    assert sanitize_text(42) == ""
    assert sanitize_text(["Bob"]) == ""


def test_sanitize_text_max_length():
    assert sanitize_text("abcdef", max_length=3) == "abc"


def test_normalize_email_lowercases():
    assert normalize_email("  Jane@Example.COM ") == "jane@example.com"


def test_validate_email():
    assert validate_email("jane@example.com")
    assert validate_email("a+b@sub.example.co")
    assert not validate_email("not-an-email")
    assert not validate_email("jane@example")
    assert not validate_email("jane doe@example.com")
    assert not validate_email("")


def test_is_blank_code():
    assert is_blank_code(None)
    assert is_blank_code("")
    assert is_blank_code("   ")
    assert is_blank_code("undefined")
    assert not is_blank_code("abc12345")
