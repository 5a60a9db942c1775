"""
Field security database models.
"""

from django.db import models
from django.utils import timezone

from ..db.models import AppendOnlyModel, new_object_id


class FieldAccessPolicy(models.Model):
    """Per (role, field) override of the declared visibility level."""

    role = models.CharField(max_length=32)
    field_name = models.CharField(max_length=64)
    can_view = models.BooleanField(default=True)
    can_unmask = models.BooleanField(default=False)
    requires_mfa = models.BooleanField(default=True)
    requires_approval = models.BooleanField(default=False)
    max_requests_per_day = models.PositiveIntegerField(default=5)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "personnel_guard"
        verbose_name = "Field Access Policy"
        verbose_name_plural = "Field Access Policies"
        constraints = [
            models.UniqueConstraint(
                fields=["role", "field_name"], name="unique_field_policy_per_role"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.role}:{self.field_name}"


class UnmaskRequest(models.Model):
    """Request to see one field of one officer in full."""

    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("approved", "Approved"),
        ("rejected", "Rejected"),
        ("expired", "Expired"),
    )

    request_id = models.CharField(max_length=64, unique=True, default=new_object_id)
    user_id = models.IntegerField(null=True, blank=True)
    user_role = models.CharField(max_length=32)
    officer = models.ForeignKey(
        "personnel_guard.Officer",
        on_delete=models.PROTECT,
        related_name="unmask_requests",
    )
    field_name = models.CharField(max_length=64)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="pending")
    mfa_code = models.CharField(max_length=16, blank=True)
    mfa_code_expires_at = models.DateTimeField(null=True, blank=True)
    requires_mfa = models.BooleanField(default=True)
    requires_approval = models.BooleanField(default=False)
    mfa_verified = models.BooleanField(default=False)
    access_reason = models.TextField(blank=True)
    decided_by_id = models.IntegerField(null=True, blank=True)
    decided_at = models.DateTimeField(null=True, blank=True)
    decision_reason = models.TextField(blank=True)
    disclosed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        app_label = "personnel_guard"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["user_id", "field_name", "created_at"],
                name="personnel_g_user_id_7e5b21_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.request_id} ({self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


class AuditReadRecord(AppendOnlyModel):
    """One disclosure of a sensitive field; stores only the masked form."""

    ACCESS_TYPES = (
        ("view", "View (masked)"),
        ("view_full", "View (full)"),
        ("unmask", "Unmask"),
    )

    user_id = models.IntegerField(null=True, blank=True)
    user_role = models.CharField(max_length=32, blank=True)
    user_name = models.CharField(max_length=150, blank=True)
    officer_id = models.CharField(max_length=64, db_index=True)
    officer_name = models.CharField(max_length=200, blank=True)
    field_name = models.CharField(max_length=64)
    field_value_masked = models.CharField(max_length=255, null=True, blank=True)
    access_type = models.CharField(max_length=16, choices=ACCESS_TYPES)
    access_reason = models.TextField(blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    request_id = models.CharField(max_length=64, blank=True)
    mfa_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        app_label = "personnel_guard"
        verbose_name = "Audit Read Record"
        verbose_name_plural = "Audit Read Records"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "created_at"], name="personnel_g_user_id_3d90c4_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.access_type} {self.officer_id}.{self.field_name} by {self.user_id}"
