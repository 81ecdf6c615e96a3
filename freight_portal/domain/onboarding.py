"""
Onboarding wizard state machine.

Carriers walk verification -> company profile -> operations -> documentation
-> agreement -> complete; shippers skip verification. Every move goes
through an explicit transition table, and the only way into ``complete`` is
a successful ``submit`` from ``agreement``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from freight_portal.domain.errors import PortalError, PortalValidationError
from freight_portal.domain.models import ProfileKind

logger = structlog.get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

Registrar = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


class OnboardingStep(str, enum.Enum):
    VERIFICATION = "verification"
    COMPANY_PROFILE = "company_profile"
    OPERATIONS = "operations"
    DOCUMENTATION = "documentation"
    AGREEMENT = "agreement"
    COMPLETE = "complete"


class InvalidTransitionError(Exception):
    """Raised for a move the transition table does not allow."""


@dataclass(frozen=True, slots=True)
class Transition:
    prev: OnboardingStep | None
    next: OnboardingStep | None


def _linear_table(steps: list[OnboardingStep]) -> dict[OnboardingStep, Transition]:
    table: dict[OnboardingStep, Transition] = {}
    for index, step in enumerate(steps):
        prev = steps[index - 1] if index > 0 else None
        nxt = steps[index + 1] if index + 1 < len(steps) else None
        table[step] = Transition(prev=prev, next=nxt)
    # agreement -> complete happens only through submit(); complete is terminal.
    table[OnboardingStep.AGREEMENT] = Transition(prev=table[OnboardingStep.AGREEMENT].prev, next=None)
    table[OnboardingStep.COMPLETE] = Transition(prev=None, next=None)
    return table


_CARRIER_STEPS = [
    OnboardingStep.VERIFICATION,
    OnboardingStep.COMPANY_PROFILE,
    OnboardingStep.OPERATIONS,
    OnboardingStep.DOCUMENTATION,
    OnboardingStep.AGREEMENT,
    OnboardingStep.COMPLETE,
]

TRANSITIONS: dict[ProfileKind, dict[OnboardingStep, Transition]] = {
    ProfileKind.CARRIER: _linear_table(_CARRIER_STEPS),
    ProfileKind.SHIPPER: _linear_table(_CARRIER_STEPS[1:]),
}

# Fields each step must have before moving forward.
STEP_REQUIRED_FIELDS: dict[OnboardingStep, tuple[tuple[str, str], ...]] = {
    OnboardingStep.VERIFICATION: (
        ("dotNumber", "DOT #"),
        ("mcNumber", "MC #"),
        ("authorityDate", "Authority grant date"),
    ),
    OnboardingStep.COMPANY_PROFILE: (
        ("legalName", "Legal Company Name"),
        ("contactEmail", "Contact Email"),
        ("contactPhone", "Contact Phone"),
        ("city", "City"),
        ("state", "State"),
        ("password", "Password"),
    ),
}


def _initial_data(kind: ProfileKind) -> dict[str, Any]:
    common: dict[str, Any] = {
        "legalName": "",
        "dbaName": "",
        "ein": "",
        "address": "",
        "city": "",
        "state": "",
        "zip": "",
        "contactName": "",
        "contactEmail": "",
        "contactPhone": "",
        "password": "",
        "documents": {key: None for key in kind.slot_keys},
    }
    if kind is ProfileKind.CARRIER:
        common.update(
            dotNumber="",
            mcNumber="",
            authorityDate="",
            equipmentTypes=[],
            preferredLanes=[],
        )
    else:
        common.update(
            commodityType="",
            monthlyVolume="",
            averageValue="",
            preferredEquipment=[],
        )
    return common


@dataclass
class OnboardingWizard:
    """Client-side collector for one onboarding submission."""

    kind: ProfileKind
    data: dict[str, Any] = field(default_factory=dict)
    step: OnboardingStep | None = None
    error: str | None = None
    result: dict[str, Any] | None = None
    submitting: bool = False

    def __post_init__(self) -> None:
        self.data = {**_initial_data(self.kind), **self.data}
        if self.step is None:
            self.step = self.steps[0]
        elif self.step not in self._table:
            raise InvalidTransitionError(f"{self.step.value} is not a {self.kind.value} step")

    @classmethod
    def for_carrier(cls) -> OnboardingWizard:
        return cls(kind=ProfileKind.CARRIER)

    @classmethod
    def for_shipper(cls) -> OnboardingWizard:
        return cls(kind=ProfileKind.SHIPPER)

    @property
    def _table(self) -> dict[OnboardingStep, Transition]:
        return TRANSITIONS[self.kind]

    @property
    def steps(self) -> list[OnboardingStep]:
        return list(self._table)

    @property
    def is_complete(self) -> bool:
        return self.step is OnboardingStep.COMPLETE

    @property
    def equipment_field(self) -> str:
        return "equipmentTypes" if self.kind is ProfileKind.CARRIER else "preferredEquipment"

    # -- data collection -------------------------------------------------

    def update(self, **fields: Any) -> None:
        self._ensure_open()
        unknown = sorted(set(fields) - set(self.data))
        if unknown:
            raise KeyError(f"Unknown onboarding field(s): {', '.join(unknown)}")
        self.data.update(fields)
        self.error = None

    def toggle_equipment(self, equipment: str) -> list[str]:
        self._ensure_open()
        current: list[str] = list(self.data[self.equipment_field])
        if equipment in current:
            current.remove(equipment)
        else:
            current.append(equipment)
        self.data[self.equipment_field] = current
        return current

    def attach_document(self, slot_key: str, url: str) -> None:
        self._ensure_open()
        if slot_key not in self.kind.slot_keys:
            raise KeyError(f"Unknown document slot: {slot_key}")
        self.data["documents"] = {**self.data["documents"], slot_key: url}
        self.error = None

    # -- navigation ------------------------------------------------------

    def next(self) -> OnboardingStep:
        target = self._table[self.step].next
        if target is None:
            raise InvalidTransitionError(f"No forward move from {self.step.value}")

        problem = self.validate_step(self.step)
        if problem:
            self.error = problem
            raise PortalValidationError(problem, error="Incomplete step")

        self.error = None
        self.step = target
        return self.step

    def back(self) -> OnboardingStep:
        target = self._table[self.step].prev
        if target is None:
            raise InvalidTransitionError(f"No backward move from {self.step.value}")
        self.error = None
        self.step = target
        return self.step

    def validate_step(self, step: OnboardingStep) -> str | None:
        """Return a message describing the first problem on ``step``, or None."""
        missing = [
            label
            for name, label in STEP_REQUIRED_FIELDS.get(step, ())
            if not str(self.data.get(name) or "").strip()
        ]
        if missing:
            return f"Required: {', '.join(missing)}"

        if step is OnboardingStep.COMPANY_PROFILE:
            if not EMAIL_RE.match(str(self.data["contactEmail"]).strip()):
                return "Please provide a valid email address"
            if len(self.data["password"]) < MIN_PASSWORD_LENGTH:
                return f"Please create a password (minimum {MIN_PASSWORD_LENGTH} characters)"
        return None

    # -- submission ------------------------------------------------------

    def payload(self) -> dict[str, Any]:
        data = dict(self.data)
        data["documents"] = {key: url for key, url in data["documents"].items() if url}
        return data

    async def submit(self, registrar: Registrar) -> bool:
        """
        Send the registration once. True on success (state becomes complete);
        False on rejection, with the state left at agreement and ``error`` set.
        """
        if self.step is not OnboardingStep.AGREEMENT:
            raise InvalidTransitionError(f"Cannot submit from {self.step.value}")
        if self.submitting:
            raise InvalidTransitionError("Submission already in progress")

        if len(self.data.get("password") or "") < MIN_PASSWORD_LENGTH:
            self.error = f"Please create a password (minimum {MIN_PASSWORD_LENGTH} characters)"
            return False

        self.submitting = True
        self.error = None
        try:
            response = await registrar(self.payload())
        except PortalError as exc:
            self.error = exc.message or exc.error
            await logger.ainfo(
                "onboarding_submit_rejected",
                kind=self.kind.value,
                error=exc.error,
            )
            return False
        finally:
            self.submitting = False

        self.result = response
        self.step = OnboardingStep.COMPLETE
        await logger.ainfo("onboarding_submit_succeeded", kind=self.kind.value)
        return True

    def _ensure_open(self) -> None:
        if self.is_complete:
            raise InvalidTransitionError("Onboarding is already complete")
