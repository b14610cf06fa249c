"""Demonstrates deferred expectations.

Run with ``pytest examples/example_expectations.py``; both failing tests report
every failed check at once.
"""

from expecta import deferred, expect, let_fail


def simple_chatbot(prompt: str) -> str:
    """Simple chatbot that greets users."""
    return f"Hello, {prompt}! How can I help you today?"


def test_expect_failures():
    x = 4
    y = "is not"
    z = 5
    expect(2 + 2 == 5, "{} surely {} {}", x, y, z)
    expect(1 + 1 == 2)
    expect(3 - 7 == -4)
    expect(3 - 7 == -3)
    let_fail()


def test_expect_pass():
    expect(2 + 2 == 4, "{} surely {} {}", 4, "is", 4)
    expect(1 + 1 == 2)
    expect(3 - 7 == -4)
    let_fail()


# Plain asserts, deferred: every failing line is reported
@deferred
def test_greeting():
    response = simple_chatbot("Charlie")
    assert response.startswith("Hello")
    assert "Goodbye" in response, "Response does not contain 'Goodbye'"
    assert len(response) < 10
    assert "Charlie" in response
