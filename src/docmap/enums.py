# src/docmap/enums.py
from enum import Enum


class DuplicatePolicy(str, Enum):
    reject = "reject"
    last_wins = "last-wins"
    first_wins = "first-wins"


class OutputFormat(str, Enum):
    json = "json"
    yaml = "yaml"
    js = "js"
    text = "text"
