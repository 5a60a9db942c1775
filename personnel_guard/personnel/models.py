"""
Personnel models: offices, designations, officers and their history.
"""

from typing import Any

from django.conf import settings
from django.db import models

from ..db.models import AppendOnlyModel, new_object_id
from ..security.roles import VisibilityLevel

VISIBILITY_CHOICES = [(level.value, level.value.title()) for level in VisibilityLevel]


class Office(models.Model):
    """Physical office or branch an officer is posted to."""

    OFFICE_TYPES = (
        ("head_office", "Head office"),
        ("regional_office", "Regional office"),
        ("branch_office", "Branch office"),
        ("site_office", "Site office"),
        ("project_office", "Project office"),
    )

    id = models.CharField(primary_key=True, max_length=64, default=new_object_id)
    office_name = models.CharField(max_length=200)
    office_name_bangla = models.CharField(max_length=200, blank=True)
    office_code = models.CharField(max_length=50, unique=True, null=True, blank=True)
    office_type = models.CharField(max_length=32, choices=OFFICE_TYPES, blank=True)
    district = models.CharField(max_length=100, blank=True)
    division = models.CharField(max_length=100, blank=True)
    parent_office = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="child_offices",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["office_name"]

    def __str__(self) -> str:
        return self.office_name


class Designation(models.Model):
    """Job title with a grade level; a lower grade level is a higher rank."""

    CATEGORIES = (
        ("officer", "Officer"),
        ("staff", "Staff"),
        ("management", "Management"),
        ("executive", "Executive"),
        ("support", "Support"),
    )

    id = models.CharField(primary_key=True, max_length=64, default=new_object_id)
    title = models.CharField(max_length=200, unique=True)
    title_bangla = models.CharField(max_length=200, blank=True)
    grade_level = models.PositiveSmallIntegerField(null=True, blank=True)
    category = models.CharField(max_length=32, choices=CATEGORIES, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["grade_level", "title"]

    def __str__(self) -> str:
        return self.title

    def outranks(self, other: "Designation") -> bool:
        """True when this designation is strictly higher in rank than ``other``."""
        if self.grade_level is None or other.grade_level is None:
            return False
        return self.grade_level < other.grade_level


class Officer(models.Model):
    """Personnel record with per-group visibility settings."""

    EMPLOYMENT_STATUSES = (
        ("active", "Active"),
        ("on_leave", "On leave"),
        ("suspended", "Suspended"),
        ("retired", "Retired"),
        ("terminated", "Terminated"),
        ("resigned", "Resigned"),
    )
    VERIFICATION_STATUSES = (
        ("pending", "Pending"),
        ("verified", "Verified"),
        ("rejected", "Rejected"),
        ("needs_update", "Needs update"),
    )

    id = models.CharField(primary_key=True, max_length=64, default=new_object_id)
    full_name = models.CharField(max_length=200)
    name_bangla = models.CharField(max_length=200, blank=True)
    employee_id = models.CharField(max_length=50, unique=True, null=True, blank=True)
    photo_url = models.CharField(max_length=500, blank=True)

    # Personal / demographic
    father_name = models.CharField(max_length=200, blank=True)
    mother_name = models.CharField(max_length=200, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    blood_group = models.CharField(max_length=8, blank=True)
    religion = models.CharField(max_length=50, blank=True)
    marital_status = models.CharField(max_length=20, blank=True)
    spouse_name = models.CharField(max_length=200, blank=True)
    children_count = models.PositiveSmallIntegerField(null=True, blank=True)
    emergency_contact_name = models.CharField(max_length=200, blank=True)
    emergency_contact_phone = models.CharField(max_length=30, blank=True)
    emergency_contact_relation = models.CharField(max_length=50, blank=True)
    present_address = models.TextField(blank=True)
    permanent_address = models.TextField(blank=True)
    district = models.CharField(max_length=100, blank=True)
    division = models.CharField(max_length=100, blank=True)
    post_code = models.CharField(max_length=20, blank=True)

    # Identification
    nid_number = models.CharField(max_length=32, unique=True, null=True, blank=True)
    passport_number = models.CharField(max_length=32, blank=True)
    tin_number = models.CharField(max_length=32, blank=True)

    # Contact
    personal_mobile = models.CharField(max_length=30, blank=True)
    official_mobile = models.CharField(max_length=30, blank=True)
    personal_email = models.EmailField(blank=True)
    official_email = models.EmailField(blank=True)

    # Employment
    designation = models.ForeignKey(
        Designation,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="officers",
    )
    office = models.ForeignKey(
        Office,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="officers",
    )
    department = models.CharField(max_length=200, blank=True)
    joining_date = models.DateField(null=True, blank=True)
    employment_status = models.CharField(
        max_length=20, choices=EMPLOYMENT_STATUSES, default="active"
    )

    # Financial
    current_grade = models.PositiveSmallIntegerField(null=True, blank=True)
    current_scale = models.CharField(max_length=50, blank=True)
    basic_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    current_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    performance_rating = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    last_appraisal_date = models.DateField(null=True, blank=True)
    bank_name = models.CharField(max_length=200, blank=True)
    bank_account_name = models.CharField(max_length=200, blank=True)
    bank_account_number = models.CharField(max_length=50, blank=True)
    bank_branch = models.CharField(max_length=200, blank=True)

    # Privacy settings
    phone_visibility = models.CharField(
        max_length=16, choices=VISIBILITY_CHOICES, default=VisibilityLevel.INTERNAL.value
    )
    email_visibility = models.CharField(
        max_length=16, choices=VISIBILITY_CHOICES, default=VisibilityLevel.INTERNAL.value
    )
    nid_visibility = models.CharField(
        max_length=16, choices=VISIBILITY_CHOICES, default=VisibilityLevel.RESTRICTED.value
    )
    profile_published = models.BooleanField(default=False)
    verification_status = models.CharField(
        max_length=20, choices=VERIFICATION_STATUSES, default="pending"
    )
    consent_record = models.JSONField(null=True, blank=True)

    # Internal metadata
    notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["full_name"]
        indexes = [
            models.Index(
                fields=["profile_published", "verification_status"],
                name="personnel_g_profile_9b1f3e_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.full_name

    def to_record(self) -> dict[str, Any]:
        """Plain record consumed by the record filter."""
        record: dict[str, Any] = {}
        for field in self._meta.concrete_fields:
            if field.is_relation:
                record[field.attname] = getattr(self, field.attname)
            else:
                record[field.name] = getattr(self, field.name)
        # Expose *_id relations under their short names as well
        record["created_by"] = record.pop("created_by_id", None)
        record["updated_by"] = record.pop("updated_by_id", None)
        record["office_name"] = self.office.office_name if self.office_id else None
        record["office_code"] = self.office.office_code if self.office_id else None
        record["designation_title"] = self.designation.title if self.designation_id else None
        record["grade_level"] = self.designation.grade_level if self.designation_id else None
        return record


class TransferEvent(AppendOnlyModel):
    """Immutable record of one office transfer."""

    TRANSFER_TYPES = (
        ("routine", "Routine"),
        ("promotion", "Promotion"),
        ("request", "Request"),
        ("administrative", "Administrative"),
        ("disciplinary", "Disciplinary"),
    )

    id = models.CharField(primary_key=True, max_length=64, default=new_object_id)
    officer = models.ForeignKey(Officer, on_delete=models.PROTECT, related_name="transfers")
    from_office = models.ForeignKey(
        Office, on_delete=models.PROTECT, null=True, blank=True, related_name="+"
    )
    to_office = models.ForeignKey(Office, on_delete=models.PROTECT, related_name="+")
    from_designation = models.ForeignKey(
        Designation, on_delete=models.PROTECT, null=True, blank=True, related_name="+"
    )
    to_designation = models.ForeignKey(
        Designation, on_delete=models.PROTECT, null=True, blank=True, related_name="+"
    )
    transfer_date = models.DateField(db_index=True)
    transfer_type = models.CharField(max_length=20, choices=TRANSFER_TYPES, default="routine")
    order_number = models.CharField(max_length=100, blank=True)
    order_date = models.DateField(null=True, blank=True)
    reason = models.TextField(blank=True)
    remarks = models.TextField(blank=True)
    created_by_id = models.IntegerField(null=True, blank=True)
    correlation_id = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["-transfer_date", "-created_at"]

    def __str__(self) -> str:
        return f"Transfer {self.officer_id} -> {self.to_office_id} @ {self.transfer_date}"


class PromotionEvent(AppendOnlyModel):
    """Immutable record of one promotion."""

    PROMOTION_TYPES = (
        ("regular", "Regular"),
        ("fast_track", "Fast track"),
        ("acting", "Acting"),
        ("special", "Special"),
    )

    id = models.CharField(primary_key=True, max_length=64, default=new_object_id)
    officer = models.ForeignKey(Officer, on_delete=models.PROTECT, related_name="promotions")
    from_designation = models.ForeignKey(Designation, on_delete=models.PROTECT, related_name="+")
    to_designation = models.ForeignKey(Designation, on_delete=models.PROTECT, related_name="+")
    from_grade = models.PositiveSmallIntegerField(null=True, blank=True)
    to_grade = models.PositiveSmallIntegerField(null=True, blank=True)
    from_scale = models.CharField(max_length=50, blank=True)
    to_scale = models.CharField(max_length=50, blank=True)
    from_basic_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    to_basic_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    promotion_date = models.DateField(db_index=True)
    promotion_type = models.CharField(max_length=20, choices=PROMOTION_TYPES, default="regular")
    order_number = models.CharField(max_length=100, blank=True)
    order_date = models.DateField(null=True, blank=True)
    reason = models.TextField(blank=True)
    remarks = models.TextField(blank=True)
    created_by_id = models.IntegerField(null=True, blank=True)
    correlation_id = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["-promotion_date", "-created_at"]

    def __str__(self) -> str:
        return f"Promotion {self.officer_id} -> {self.to_designation_id} @ {self.promotion_date}"


class ActivityLogEntry(AppendOnlyModel):
    """Who did what to which entity."""

    actor_id = models.IntegerField(null=True, blank=True)
    actor_username = models.CharField(max_length=150, blank=True)
    action = models.CharField(max_length=64, db_index=True)
    target_type = models.CharField(max_length=64)
    target_id = models.CharField(max_length=64)
    description = models.TextField(blank=True)
    details = models.JSONField(default=dict, blank=True)
    correlation_id = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["target_type", "target_id"], name="personnel_g_target__4c2a7d_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.target_type}:{self.target_id}"
