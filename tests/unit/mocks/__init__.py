"""Mock classes for unit testing the harness."""

from .mock_page import MockDestroyButton, MockElement, MockNewTodoInput, MockTodoItem, MockTodoPage

__all__ = [
    "MockDestroyButton",
    "MockElement",
    "MockNewTodoInput",
    "MockTodoItem",
    "MockTodoPage",
]
