from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import pytest

from personnel_guard.models import Designation, Office, Officer
from personnel_guard.security.context import Actor


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 6, 15, 10, 0, tzinfo=dt_timezone.utc))


@pytest.fixture
def admin_actor():
    return Actor(user_id=1, role="admin", username="admin", client_ip="10.0.0.1")


@pytest.fixture
def hr_actor():
    return Actor(user_id=2, role="hr", username="hr.officer", client_ip="10.0.0.2")


@pytest.fixture
def manager_actor():
    return Actor(user_id=3, role="manager", username="manager")


@pytest.fixture
def user_actor():
    return Actor(user_id=4, role="user", username="staff", client_ip="not-an-ip")


@pytest.fixture
def offices(db):
    return {
        "office-1": Office.objects.create(
            id="office-1", office_name="Head Office", office_code="HO", office_type="head_office"
        ),
        "office-2": Office.objects.create(
            id="office-2", office_name="Chattogram Regional", office_code="CTG", office_type="regional_office"
        ),
    }


@pytest.fixture
def designations(db):
    return {
        "assistant": Designation.objects.create(
            id="designation-assistant", title="Assistant Director", grade_level=9
        ),
        "deputy": Designation.objects.create(
            id="designation-deputy", title="Deputy Director", grade_level=7
        ),
        "director": Designation.objects.create(
            id="designation-director", title="Director", grade_level=5
        ),
        "ungraded": Designation.objects.create(
            id="designation-ungraded", title="Consultant", grade_level=None
        ),
    }


@pytest.fixture
def officer(offices, designations):
    return Officer.objects.create(
        id="officer-1",
        full_name="Rahim Uddin",
        employee_id="EMP-001",
        office=offices["office-1"],
        designation=designations["assistant"],
        personal_mobile="01712345678",
        official_mobile="+8801812345678",
        personal_email="rahim@example.com",
        official_email="rahim.uddin@agency.gov.bd",
        nid_number="1234567890123",
        passport_number="BX0123456",
        tin_number="12345678",
        father_name="Karim Uddin",
        date_of_birth=datetime(1985, 3, 1).date(),
        present_address="House 12, Road 5, Dhaka",
        current_grade=3,
        current_scale="Scale-9",
        basic_salary=Decimal("35000.00"),
        bank_name="Sonali Bank",
        bank_account_number="0012345678901",
        notes="Transferred on request",
        profile_published=True,
        verification_status="verified",
    )
