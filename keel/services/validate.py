"""
Input validation service
"""
import re
from typing import Any, Dict, List, Mapping

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Validate:
    """
    Rule-based validation of a flat mapping of fields

    Example:
        Validate().check({"email": "x"}, {"email": ["required", "email"]})
        # {"email": ["email must be a valid email address"]}
    """

    def __init__(self):
        self.messages: Dict[str, List[str]] = {}

    def check(self, data: Mapping[str, Any], rules: Mapping[str, List[str]]) -> Dict[str, List[str]]:
        """Validate data against rules, returns messages per failing field"""
        self.messages = {}
        for field_name, field_rules in rules.items():
            value = data.get(field_name)
            for rule in field_rules:
                message = self._apply(field_name, value, rule)
                if message:
                    self.messages.setdefault(field_name, []).append(message)
        return dict(self.messages)

    def is_valid(self) -> bool:
        return not self.messages

    def _apply(self, field_name: str, value: Any, rule: str):
        name, _, argument = rule.partition(":")
        if name == "required":
            if value is None or (isinstance(value, str) and not value.strip()):
                return f"{field_name} is required"
            return None

        # Remaining rules only apply to present values
        if value is None:
            return None
        if name == "email":
            if not _EMAIL_RE.match(str(value)):
                return f"{field_name} must be a valid email address"
        elif name == "min_length":
            if len(str(value)) < int(argument):
                return f"{field_name} must be at least {argument} characters"
        elif name == "max_length":
            if len(str(value)) > int(argument):
                return f"{field_name} must be at most {argument} characters"
        else:
            raise ValueError(f"Unknown validation rule '{rule}'")
        return None
