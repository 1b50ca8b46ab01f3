"""Message templates with a fixed set of student placeholders."""

import re
from decimal import Decimal
from typing import Callable, Dict, List

from pydantic import BaseModel

from library_desk.core.enums import TemplateCategory
from library_desk.core.schemas import StudentRecord


class MessageTemplate(BaseModel):
    id: str
    name: str
    content: str
    category: TemplateCategory = TemplateCategory.GENERAL

    class Config:
        frozen = True


def _number(value) -> str:
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return str(int(value))
    return str(value)


PLACEHOLDERS: Dict[str, Callable[[StudentRecord], str]] = {
    "name": lambda s: s.name,
    "fatherName": lambda s: s.father_name,
    "enrollmentNo": lambda s: s.enrollment_no,
    "contact": lambda s: s.contact,
    "monthlyFees": lambda s: _number(s.monthly_fees),
    "shift": lambda s: s.shift,
    "seatNumber": lambda s: s.seat_number,
}

_TOKEN = re.compile(r"\{(\w+)\}")


def render_template(template: str, student: StudentRecord) -> str:
    """Replace every known {placeholder}; unknown tokens are left untouched."""

    def substitute(match: "re.Match[str]") -> str:
        getter = PLACEHOLDERS.get(match.group(1))
        return getter(student) if getter else match.group(0)

    return _TOKEN.sub(substitute, template)


def placeholders_in(template: str) -> List[str]:
    """Known placeholders used by a template, in order of first appearance."""
    seen: List[str] = []
    for token in _TOKEN.findall(template):
        if token in PLACEHOLDERS and token not in seen:
            seen.append(token)
    return seen


DEFAULT_TEMPLATES: List[MessageTemplate] = [
    MessageTemplate(
        id="1",
        name="Fee Reminder",
        content="Dear {name}, your monthly fee of ₹{monthlyFees} is due. Please ensure timely payment. - PATCH Library",
        category=TemplateCategory.FEE,
    ),
    MessageTemplate(
        id="2",
        name="Welcome Message",
        content=(
            "Welcome to PATCH - The Smart Library, {name}! Your enrollment no. is {enrollmentNo}. "
            "We look forward to your learning journey."
        ),
        category=TemplateCategory.WELCOME,
    ),
    MessageTemplate(
        id="3",
        name="Payment Confirmation",
        content="Dear {name}, we have received your payment of ₹{monthlyFees}. Thank you for choosing PATCH Library.",
        category=TemplateCategory.FEE,
    ),
]
