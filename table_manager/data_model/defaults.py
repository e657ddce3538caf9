from __future__ import annotations

from typing import List

from .base import Column, Row, TableModel


def default_columns() -> List[Column]:
    return [
        Column("name", "Name"),
        Column("email", "Email"),
        Column("age", "Age"),
        Column("role", "Role"),
    ]


def default_people_rows() -> List[Row]:
    return [
        {"name": "Alice", "email": "alice@example.com", "age": 22, "role": "Admin"},
        {"name": "Bob", "email": "bob@example.com", "age": 30, "role": "User"},
        {"name": "Charlie", "email": "charlie@example.com", "age": 27, "role": "User"},
        {"name": "Diana", "email": "diana@example.com", "age": 24, "role": "Owner"},
        {"name": "Evan", "email": "evan@example.com", "age": 21, "role": "User"},
        {"name": "Faith", "email": "faith@example.com", "age": 29, "role": "Admin"},
        {"name": "George", "email": "george@example.com", "age": 26, "role": "User"},
        {"name": "Helen", "email": "helen@example.com", "age": 25, "role": "User"},
        {"name": "Ivan", "email": "ivan@example.com", "age": 33, "role": "Owner"},
        {"name": "Jane", "email": "jane@example.com", "age": 32, "role": "User"},
        {"name": "Karl", "email": "karl@example.com", "age": 28, "role": "Admin"},
        {"name": "Linda", "email": "linda@example.com", "age": 23, "role": "User"},
        {"name": "Mark", "email": "mark@example.com", "age": 31, "role": "User"},
        {"name": "Nina", "email": "nina@example.com", "age": 27, "role": "Owner"},
        {"name": "Oscar", "email": "oscar@example.com", "age": 22, "role": "User"},
        {"name": "Paula", "email": "paula@example.com", "age": 30, "role": "Admin"},
        {"name": "Quinn", "email": "quinn@example.com", "age": 30, "role": "User"},
        {"name": "Rita", "email": "rita@example.com", "age": 28, "role": "User"},
        {"name": "Steve", "email": "steve@example.com", "age": 25, "role": "Admin"},
        {"name": "Tina", "email": "tina@example.com", "age": 24, "role": "User"},
    ]


class PeopleTableModel(TableModel):
    """Schema + seed rows a fresh table starts from."""

    def __init__(self) -> None:
        super().__init__("people", default_columns(), default_people_rows())
