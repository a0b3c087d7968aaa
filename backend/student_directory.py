"""
Student Directory
=================
Holds the roster fetched from the teacher's Apps Script endpoint and
derives the grade -> class -> group views used to lay out student cards.

The roster is replaced wholesale on every successful refresh and is left
untouched when a refresh fails.
"""

import time
import logging
import threading
from collections import OrderedDict
from datetime import datetime
from typing import List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, TypeAdapter, ValidationError, field_validator

from backend.config import GRADES, REQUEST_TIMEOUT
from backend.errors import NotebookError, InvalidEndpoint, TransportError, FormatError

logger = logging.getLogger(__name__)


def _as_text(value):
    if value is None:
        return ""
    if isinstance(value, bool):
        raise ValueError("expected text")
    if isinstance(value, (int, float)):
        # Sheets hands back whole numbers as floats (10.0)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    if isinstance(value, str):
        return value.strip()
    raise ValueError("expected text")


class Student(BaseModel):
    """One roster row. Accepts both the JSON keys and the sheet's column keys."""

    model_config = ConfigDict(frozen=True)

    grade: str = Field(validation_alias=AliasChoices("grade", "khoi"))
    class_name: str = Field(validation_alias=AliasChoices("className", "class_name", "lop"))
    group_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("groupName", "group_name", "nhom"))
    full_name: str = Field(validation_alias=AliasChoices("fullName", "full_name", "tenHS"))

    @field_validator("grade", "class_name", "full_name", mode="before")
    @classmethod
    def _required_text(cls, value):
        text = _as_text(value)
        if not text:
            raise ValueError("must not be blank")
        return text

    @field_validator("group_name", mode="before")
    @classmethod
    def _group_or_none(cls, value):
        return _as_text(value) or None

    def to_dict(self):
        return {
            "grade": self.grade,
            "className": self.class_name,
            "groupName": self.group_name or "",
            "fullName": self.full_name,
        }


_ROSTER_ADAPTER = TypeAdapter(List[Student])


def parse_roster(payload) -> List[Student]:
    """Validate a decoded JSON payload into a list of students."""
    if not isinstance(payload, list):
        raise FormatError()
    try:
        return _ROSTER_ADAPTER.validate_python(payload)
    except ValidationError as e:
        logger.warning("Roster payload failed validation: %d error(s), first: %s",
                       e.error_count(), e.errors()[0].get("msg"))
        raise FormatError() from e


class _InFlightRefresh:
    def __init__(self, endpoint_url):
        self.endpoint_url = endpoint_url
        self.done = threading.Event()
        self.error = None


class StudentDirectory:
    """In-memory roster with grouping views."""

    def __init__(self, http=None, timeout: float = REQUEST_TIMEOUT):
        self.http = http or requests
        self.timeout = timeout
        self._students = ()
        self._last_refreshed = None
        self._lock = threading.Lock()
        self._inflight = None

    @property
    def students(self):
        return self._students

    @property
    def last_refreshed(self) -> Optional[datetime]:
        return self._last_refreshed

    def grades(self):
        return list(GRADES)

    def refresh(self, endpoint_url: str) -> int:
        """
        Fetch the roster and replace the in-memory copy.

        Only one fetch runs at a time. A caller arriving while a fetch for the
        same link is in flight waits for it and gets the same outcome. A caller
        with a different link waits for the running fetch to finish, then
        fetches its own.

        Returns the number of students loaded.
        """
        if not endpoint_url:
            raise InvalidEndpoint("No Apps Script link configured yet.")

        while True:
            with self._lock:
                inflight = self._inflight
                if inflight is None:
                    inflight = self._inflight = _InFlightRefresh(endpoint_url)
                    break
            if inflight.endpoint_url == endpoint_url:
                logger.info("Roster refresh already in flight, waiting for it")
                inflight.done.wait()
                if inflight.error is not None:
                    raise inflight.error
                return len(self._students)
            logger.info("Roster refresh for another link in flight, queueing behind it")
            inflight.done.wait()

        try:
            students = self._fetch(endpoint_url)
            with self._lock:
                self._students = tuple(students)
                self._last_refreshed = datetime.now()
            logger.info("Roster refreshed: %d students", len(students))
            return len(students)
        except NotebookError as e:
            inflight.error = e
            logger.warning("Roster refresh failed (%s), keeping %d cached students",
                           e.kind, len(self._students))
            raise
        except Exception as e:
            inflight.error = e
            logger.exception("Unexpected error during roster refresh")
            raise
        finally:
            with self._lock:
                self._inflight = None
            inflight.done.set()

    def _fetch(self, endpoint_url: str) -> List[Student]:
        params = {"action": "getStudents", "t": int(time.time() * 1000)}
        try:
            response = self.http.get(endpoint_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError() from e

        try:
            payload = response.json()
        except ValueError as e:
            raise FormatError() from e

        return parse_roster(payload)

    def classes_for_grade(self, grade: str) -> List[str]:
        """Distinct class names in a grade, sorted."""
        grade = str(grade)
        return sorted({s.class_name for s in self._students if s.grade == grade})

    def students_in_class(self, grade: str, class_name: str) -> List[Student]:
        grade = str(grade)
        return [s for s in self._students if s.grade == grade and s.class_name == class_name]

    def grouped_by_cohort(self, grade: str, class_name: str) -> "OrderedDict[Optional[str], List[Student]]":
        """
        Students of one class bucketed by group.

        Groups come out sorted by name; students keep roster order inside
        each group. Students without a group share one bucket keyed on None,
        placed after every named group, so a real group called "Other" stays
        separate from it.
        """
        groups = {}
        for student in self.students_in_class(grade, class_name):
            groups.setdefault(student.group_name, []).append(student)
        ordered = sorted(groups, key=lambda name: (name is None, name or ""))
        return OrderedDict((name, groups[name]) for name in ordered)

    def find_student(self, grade: str, class_name: str, full_name: str) -> Optional[Student]:
        for student in self.students_in_class(grade, class_name):
            if student.full_name == full_name:
                return student
        return None
